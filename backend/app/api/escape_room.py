"""
Escape room API endpoints.

Answer checking plus read-only access to stages, question sets and the
per-session event log.
"""

import logging
from typing import Dict, List, Optional

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ..models.event import GameEvent
from ..models.stage import Difficulty, Stage
from ..models.submission import CheckAnswerRequest, CheckAnswerResponse
from ..services.event_store import get_event_store
from ..services.shared import stage_store, submission_service
from ..services.submission_service import SubmissionError

logger = logging.getLogger(__name__)

router = APIRouter()


class QuestionSetResponse(BaseModel):
    """Response model for a selected set of stages."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    stages: List[Stage]
    total: int
    difficulty: str
    max_possible_score: int
    distribution: Dict[str, int]


class EventListResponse(BaseModel):
    """Response model for a session's events."""
    events: List[GameEvent]
    count: int


@router.post("/check-answer", response_model=CheckAnswerResponse)
def check_answer(request: CheckAnswerRequest) -> CheckAnswerResponse:
    """
    Validate a learner's code for one stage.

    The code is analysed statically and never executed. Runs in the threadpool
    so concurrent submissions are validated in parallel.
    """
    try:
        return submission_service.check_answer(request)
    except SubmissionError as e:
        logger.info(f"Rejected answer for stage {request.stage_id}: {e.message}")
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.error(f"Error checking answer for stage {request.stage_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to check answer")


@router.get("/stages", response_model=List[Stage])
async def list_stages() -> List[Stage]:
    """Get all active stages, ordered by id."""
    return stage_store.list_stages()


@router.get("/questions", response_model=QuestionSetResponse)
async def get_questions(
    count: int = Query(4, ge=1, le=20, description="Number of stages to select"),
    difficulty: Optional[str] = Query(None, description="Restrict to easy, medium or hard"),
) -> QuestionSetResponse:
    """
    Select stages for a game.

    With a known difficulty, a random set of that difficulty; anything else
    yields a balanced set (two easy, one medium, one hard).
    """
    level = Difficulty(difficulty) if difficulty in {d.value for d in Difficulty} else None
    stages = stage_store.select_questions(count=count, difficulty=level)

    return QuestionSetResponse(
        stages=stages,
        total=len(stages),
        difficulty=level.value if level else "balanced",
        max_possible_score=sum(s.points for s in stages),
        distribution={d.value: sum(1 for s in stages if s.difficulty == d) for d in Difficulty},
    )


@router.get("/sessions/{session_id}/events", response_model=EventListResponse)
async def get_session_events(
    session_id: str,
    event_type: Optional[str] = Query(None, description="Filter by event type"),
    limit: int = Query(100, ge=1, le=1000, description="Maximum number of events to return"),
) -> EventListResponse:
    """Get a session's logged events, newest first."""
    try:
        events = get_event_store().get_events(session_id, event_type=event_type, limit=limit)
        return EventListResponse(events=events, count=len(events))
    except Exception as e:
        logger.error(f"Error reading events for session {session_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to get events: {str(e)}")
