"""
Linting models (submission verdicts).

These models are intentionally small and stable: they are part of the API surface
between the submission validator and the escape room UI ("lintingDetails").
"""

from __future__ import annotations

from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class LintSeverity(str, Enum):
    """Severity level for a static-check finding."""

    ERROR = "error"
    WARNING = "warning"


class ValidationOptions(BaseModel):
    """Which checks run for one submission, and the stage's pattern requirements."""

    check_syntax: bool = True
    check_style: bool = True
    check_logic: bool = True

    required_patterns: List[str] = Field(default_factory=list)
    forbidden_patterns: List[str] = Field(default_factory=list)


class CheckOutcome(BaseModel):
    """Errors and warnings produced by a single static-check pass."""

    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)

    def add(self, severity: LintSeverity, message: str) -> None:
        if severity == LintSeverity.ERROR:
            self.errors.append(message)
        else:
            self.warnings.append(message)


class LintingResult(BaseModel):
    """Verdict for one submission: validity, diagnostics, score and learner feedback."""

    model_config = ConfigDict(frozen=True)

    is_valid: bool
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    score: int = Field(..., ge=0)
    feedback: str
