"""
Shared service instances to ensure consistency across API endpoints.

This module provides singleton service instances that are shared
across all API endpoints, built from the configured paths and analyzer mode.
"""

from ..config import config
from .linting_service import LintingService
from .stage_store import StageStore
from .static_analysis import create_static_analyzer
from .submission_service import SubmissionService

# Initialize with configured paths and analyzer (ENV > config.json > default)
stage_store = StageStore(stages_file=config.get_stages_file())
linting_service = LintingService(
    analyzer=create_static_analyzer(config.get_analyzer_mode(), config.get_analyzer_timeout())
)
submission_service = SubmissionService(stage_store=stage_store, linting_service=linting_service)

__all__ = ["stage_store", "linting_service", "submission_service"]
