"""
Check-answer flow for escape room submissions.

Looks up the stage, validates the code with the stage's profile, records the
attempt in the event log (best-effort) and builds the API response.
"""

import logging
from typing import Callable, Optional

from ..models.event import EventType, truncate_code
from ..models.submission import CheckAnswerRequest, CheckAnswerResponse, LintingDetails
from .event_store import EventStore, get_event_store
from .linting_service import LintingService
from .normalizer import matches_solution
from .stage_store import StageStore

logger = logging.getLogger(__name__)


class SubmissionError(Exception):
    """A submission that cannot be validated; carries the HTTP status to answer with."""

    status_code = 400

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class StageNotFoundError(SubmissionError):
    """The submission names a stage that does not exist."""

    status_code = 404


class SubmissionService:
    """Service for judging escape room answers."""

    def __init__(
        self,
        stage_store: StageStore,
        linting_service: LintingService,
        event_store_factory: Callable[[], EventStore] = get_event_store,
    ):
        self.stage_store = stage_store
        self.linting_service = linting_service
        self._event_store_factory = event_store_factory

    def check_answer(self, request: CheckAnswerRequest) -> CheckAnswerResponse:
        """
        Judge one submission.

        Args:
            request: Stage id, code and optional session id

        Returns:
            CheckAnswerResponse with the verdict and linting details

        Raises:
            SubmissionError: If stage id or code is missing (400)
            StageNotFoundError: If the stage does not exist (404)
        """
        if not request.stage_id or not request.user_code:
            raise SubmissionError("Missing required fields: stageId and userCode")

        stage = self.stage_store.get_stage(request.stage_id)
        if stage is None:
            raise StageNotFoundError("Stage not found")

        result = self.linting_service.validate_stage(stage.id, request.user_code, stage.points)
        details = LintingDetails(
            errors=result.errors,
            warnings=result.warnings,
            score=result.score,
            max_score=stage.points,
        )
        solution_match = matches_solution(request.user_code, stage.solution)

        logger.info(
            f"{'✅' if result.is_valid else '❌'} Stage {stage.id} answer: "
            f"{len(result.errors)} error(s), {len(result.warnings)} warning(s), score {result.score}/{stage.points}"
        )

        if request.session_id:
            self._log_attempt(request, result.is_valid, details, solution_match)

        return CheckAnswerResponse(
            is_correct=result.is_valid,
            stage_id=stage.id,
            points=stage.points,
            difficulty=stage.difficulty.value,
            hint=stage.hint,
            feedback=result.feedback,
            linting_details=details,
            matches_solution=solution_match,
        )

    def _log_attempt(
        self,
        request: CheckAnswerRequest,
        is_correct: bool,
        details: LintingDetails,
        solution_match: bool,
    ) -> None:
        """Record the attempt; a failing event log never fails the submission."""
        payload = {
            "stageId": request.stage_id,
            "isCorrect": is_correct,
            "userCode": truncate_code(request.user_code),
            "lintingDetails": details.model_dump(by_alias=True),
            "matchesSolution": solution_match,
        }
        try:
            self._event_store_factory().log_event(request.session_id, EventType.ANSWER_ATTEMPT, payload)
        except Exception as e:
            logger.error(f"Failed to log answer attempt for session {request.session_id}: {e}")
