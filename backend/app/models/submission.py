"""
Submission models for the check-answer endpoint.

Field names are snake_case in Python and camelCase on the wire, matching what the
escape room front-end sends and reads.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CheckAnswerRequest(BaseModel):
    """
    A learner's submission for one stage.

    Both fields are optional at the schema level so that a missing field is
    reported as a 400 by the submission service rather than a schema error.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    stage_id: Optional[int] = None
    user_code: Optional[str] = None
    session_id: Optional[str] = None


class LintingDetails(BaseModel):
    """Diagnostic bundle returned with every verdict (and logged with each attempt)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    score: int
    max_score: int


class CheckAnswerResponse(BaseModel):
    """Verdict for a submission, enriched with stage metadata."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "isCorrect": False,
                "stageId": 1,
                "points": 125,
                "difficulty": "easy",
                "hint": "Add proper indentation (4 spaces)",
                "feedback": "Your code has some issues that need attention.",
                "lintingDetails": {
                    "errors": ["Missing required pattern: `return sum`"],
                    "warnings": [],
                    "score": 105,
                    "maxScore": 125
                },
                "method": "linting",
                "matchesSolution": False
            }
        },
    )

    is_correct: bool
    stage_id: int
    points: int
    difficulty: str
    hint: str
    feedback: str
    linting_details: LintingDetails
    method: str = "linting"
    matches_solution: bool = False

