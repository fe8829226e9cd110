"""
HTTP tests for the escape room and system endpoints.

The submission service is swapped for one using the builtin analyzer and a
mocked event log, so responses are deterministic and nothing is written.
"""

from datetime import datetime
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from backend.app._version import __version__
from backend.app.main import app
from backend.app.models.event import GameEvent
from backend.app.services.submission_service import SubmissionService


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def event_store():
    return MagicMock()


@pytest.fixture
def deterministic_service(stage_store, linting_service, event_store):
    service = SubmissionService(
        stage_store=stage_store,
        linting_service=linting_service,
        event_store_factory=lambda: event_store,
    )
    with patch("backend.app.api.escape_room.submission_service", service):
        yield service


class TestCheckAnswer:
    def test_failing_answer(self, client, deterministic_service, event_store):
        response = client.post(
            "/api/escape-room/check-answer",
            json={"stageId": 1, "userCode": "# comment", "sessionId": "s-1"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["isCorrect"] is False
        assert data["stageId"] == 1
        assert data["points"] == 125
        assert data["difficulty"] == "easy"
        assert data["method"] == "linting"
        assert data["lintingDetails"]["score"] == 45
        assert data["lintingDetails"]["maxScore"] == 125
        assert len(data["lintingDetails"]["errors"]) == 4
        assert data["feedback"].startswith("Your code has some issues that need attention.")
        event_store.log_event.assert_called_once()

    def test_passing_answer(self, client, deterministic_service):
        response = client.post(
            "/api/escape-room/check-answer",
            json={"stageId": 7, "userCode": "word = 'hello'\nprint(word[::-1])"},
        )

        assert response.status_code == 200
        assert response.json()["isCorrect"] is True
        assert response.json()["lintingDetails"]["score"] == 100

    def test_missing_code(self, client, deterministic_service):
        response = client.post("/api/escape-room/check-answer", json={"stageId": 1})

        assert response.status_code == 400
        assert response.json()["detail"] == "Missing required fields: stageId and userCode"

    def test_unknown_stage(self, client, deterministic_service):
        response = client.post("/api/escape-room/check-answer", json={"stageId": 999, "userCode": "print(1)"})

        assert response.status_code == 404
        assert response.json()["detail"] == "Stage not found"

    def test_unexpected_failure(self, client):
        broken = MagicMock()
        broken.check_answer.side_effect = RuntimeError("boom")
        with patch("backend.app.api.escape_room.submission_service", broken):
            response = client.post("/api/escape-room/check-answer", json={"stageId": 1, "userCode": "x = 1"})

        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to check answer"


class TestStagesAndQuestions:
    def test_list_stages(self, client):
        response = client.get("/api/escape-room/stages")

        assert response.status_code == 200
        stages = response.json()
        assert len(stages) == 20
        assert stages[0]["id"] == 1
        assert "starterCode" in stages[0]
        assert "isActive" in stages[0]

    def test_balanced_questions(self, client):
        response = client.get("/api/escape-room/questions")

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 4
        assert data["difficulty"] == "balanced"
        assert data["distribution"] == {"easy": 2, "medium": 1, "hard": 1}
        assert data["maxPossibleScore"] == sum(s["points"] for s in data["stages"])

    def test_questions_by_difficulty(self, client):
        response = client.get("/api/escape-room/questions", params={"difficulty": "hard", "count": 2})

        data = response.json()
        assert data["difficulty"] == "hard"
        assert data["total"] == 2
        assert all(s["difficulty"] == "hard" for s in data["stages"])

    def test_unknown_difficulty_is_balanced(self, client):
        response = client.get("/api/escape-room/questions", params={"difficulty": "insane"})
        assert response.json()["difficulty"] == "balanced"


class TestSessionEvents:
    def test_events_for_session(self, client):
        store = MagicMock()
        store.get_events.return_value = [
            GameEvent(session_id="s-1", event_type="answer_attempt", payload={"stageId": 1}, created_at=datetime(2026, 1, 1))
        ]
        with patch("backend.app.api.escape_room.get_event_store", return_value=store):
            response = client.get("/api/escape-room/sessions/s-1/events")

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 1
        assert data["events"][0]["payload"] == {"stageId": 1}
        store.get_events.assert_called_once_with("s-1", event_type=None, limit=100)


class TestSystem:
    def test_version(self, client):
        response = client.get("/api/system/version")
        assert response.status_code == 200
        assert response.json()["version"] == __version__

    def test_root_and_health(self, client):
        assert client.get("/").json()["message"] == "Code Escape API"
        assert client.get("/health").json() == {"status": "healthy", "version": __version__}
