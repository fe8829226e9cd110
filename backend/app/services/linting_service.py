"""
Submission linting service (deterministic, offline, never executes code).

Design intent:
- Judge a learner's submission against a stage's expectations using static
  checks and required-pattern heuristics only.
- Diagnostics are data, not exceptions: every finding lands in
  LintingResult.errors/warnings and is simplified for display.
- Stateless between calls, so one instance can serve concurrent requests.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from ..models.linting import LintingResult, ValidationOptions
from .feedback import compose_feedback
from .pattern_matcher import matches_pattern
from .scoring import compute_score
from .stage_profiles import build_validation_options
from .static_analysis import NativeAnalyzer, StaticAnalyzer

logger = logging.getLogger(__name__)

DEFAULT_MAX_SCORE = 100


class LintingService:
    """Validates submissions: static checks, pattern checks, score and feedback."""

    def __init__(self, analyzer: Optional[StaticAnalyzer] = None):
        self.analyzer = analyzer or NativeAnalyzer()

    def validate_code(
        self,
        code: str,
        options: Optional[ValidationOptions] = None,
        max_score: int = DEFAULT_MAX_SCORE,
    ) -> LintingResult:
        """
        Validate a submission against explicit options.

        Args:
            code: Submitted Python source (only read, never run)
            options: Which checks to run and which patterns are required/forbidden
            max_score: Score awarded to a submission with no findings

        Returns:
            LintingResult (is_valid iff no errors)
        """
        options = options or ValidationOptions()
        errors: List[str] = []
        warnings: List[str] = []

        if options.check_syntax:
            outcome = self.analyzer.check_syntax(code)
            errors.extend(outcome.errors)
            warnings.extend(outcome.warnings)

        if options.check_style:
            outcome = self.analyzer.check_style(code)
            errors.extend(outcome.errors)
            warnings.extend(outcome.warnings)

        if options.check_logic:
            for pattern in options.required_patterns:
                if not matches_pattern(code, pattern):
                    errors.append(f"Missing required pattern: `{pattern}`")

            # Forbidden literals are checked verbatim on the raw code
            for pattern in options.forbidden_patterns:
                if pattern in code:
                    errors.append(f"Forbidden pattern found: `{pattern}`")

        score = compute_score(errors, warnings, max_score)
        logger.debug(f"Validated submission: {len(errors)} error(s), {len(warnings)} warning(s), score {score}/{max_score}")

        return LintingResult(
            is_valid=not errors,
            errors=errors,
            warnings=warnings,
            score=score,
            feedback=compose_feedback(errors, warnings),
        )

    def validate_stage(self, stage_id: int, user_code: str, max_score: int) -> LintingResult:
        """Validate a submission with the stage's profile (all checks on, stage patterns required)."""
        return self.validate_code(user_code, build_validation_options(stage_id), max_score)
