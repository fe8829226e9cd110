"""
Game event models for the escape room event log.

Every learner action worth keeping (currently: answer attempts) is stored as one
GameEvent per line in an append-only JSONL file.
"""

from datetime import datetime
from typing import Any, Dict, Optional
from uuid import uuid4

from pydantic import BaseModel, Field

# Submitted code is capped before it is written to the event log
MAX_LOGGED_CODE_LENGTH = 500


class EventType:
    """Known event types."""
    ANSWER_ATTEMPT = "answer_attempt"


class GameEvent(BaseModel):
    """A single logged learner action."""

    event_id: str = Field(default_factory=lambda: str(uuid4()))
    session_id: str
    event_type: str
    payload: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=datetime.now)


def truncate_code(code: Optional[str], max_length: int = MAX_LOGGED_CODE_LENGTH) -> Optional[str]:
    """
    Cap submitted code for storage.

    Args:
        code: Submitted source text (None passes through)
        max_length: Maximum number of characters kept

    Returns:
        The first max_length characters of the code
    """
    if code is None:
        return None
    return code[:max_length]
