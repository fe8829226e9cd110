"""
Stage models for the escape room.

A stage is one coding challenge. Stages are read from the YAML catalogue and
never modified by the validator.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Difficulty(str, Enum):
    """Stage difficulty level."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


DIFFICULTY_ORDER = {
    Difficulty.EASY: 1,
    Difficulty.MEDIUM: 2,
    Difficulty.HARD: 3,
}


class Stage(BaseModel):
    """One escape room coding challenge."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: int = Field(..., description="Stage identifier")
    title: str
    description: str = ""
    starter_code: str = ""
    solution: str = Field(..., description="Canonical solution text")
    hint: str = ""
    difficulty: Difficulty = Difficulty.EASY
    points: int = Field(..., gt=0, description="Maximum score for the stage")
    is_active: bool = True
