"""Services for Code Escape."""

from .linting_service import LintingService
from .stage_store import StageStore
from .submission_service import SubmissionService

__all__ = [
    "LintingService",
    "StageStore",
    "SubmissionService",
]
