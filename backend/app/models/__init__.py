"""Data models for Code Escape."""

from .linting import CheckOutcome, LintingResult, LintSeverity, ValidationOptions
from .stage import Difficulty, Stage
from .submission import CheckAnswerRequest, CheckAnswerResponse, LintingDetails
from .event import EventType, GameEvent

__all__ = [
    "CheckOutcome",
    "LintingResult",
    "LintSeverity",
    "ValidationOptions",
    "Difficulty",
    "Stage",
    "CheckAnswerRequest",
    "CheckAnswerResponse",
    "LintingDetails",
    "EventType",
    "GameEvent",
]
