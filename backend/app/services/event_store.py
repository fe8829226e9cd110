"""
Event Store Service for escape room game events.

Implements an append-only JSONL event log with:
- Persistent storage (survives restarts)
- Query by session_id and event_type
- Serialised appends so concurrent submissions never interleave lines
"""

import json
import logging
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..config import config
from ..models.event import GameEvent

logger = logging.getLogger(__name__)


class EventStore:
    """
    Append-only JSONL store for learner events.

    Storage layout:
        {workspace_root}/events/
            events.jsonl    # One GameEvent per line
    """

    _instance: Optional["EventStore"] = None
    _lock = threading.Lock()

    def __new__(cls) -> "EventStore":
        """Singleton pattern for event store."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self._events_dir = Path(config.get_workspace_root()) / "events"
        self._events_dir.mkdir(parents=True, exist_ok=True)
        self._events_file = self._events_dir / "events.jsonl"
        self._write_lock = threading.Lock()
        self._initialized = True

        logger.info(f"📊 EventStore initialized at {self._events_dir}")

    def log_event(self, session_id: str, event_type: str, payload: Optional[Dict[str, Any]] = None) -> GameEvent:
        """
        Append an event to the log.

        Args:
            session_id: Game session the event belongs to
            event_type: Event kind (see EventType)
            payload: JSON-serialisable event data

        Returns:
            The stored GameEvent

        Raises:
            OSError: If the log file cannot be written
        """
        event = GameEvent(session_id=session_id, event_type=event_type, payload=payload or {})
        line = event.model_dump_json() + "\n"

        with self._write_lock:
            with open(self._events_file, "a", encoding="utf-8") as f:
                f.write(line)

        logger.debug(f"📝 Event logged: {event_type} for session {session_id} ({event.event_id[:8]}...)")
        return event

    def get_events(
        self,
        session_id: str,
        event_type: Optional[str] = None,
        limit: int = 100,
    ) -> List[GameEvent]:
        """
        Events of one session, newest first.

        Malformed lines are skipped with a warning.
        """
        if not self._events_file.exists():
            return []

        events: List[GameEvent] = []
        with open(self._events_file, "r", encoding="utf-8") as f:
            for line in f:
                if not line.strip():
                    continue

                try:
                    data = json.loads(line)
                    if data.get("session_id") != session_id:
                        continue
                    if event_type and data.get("event_type") != event_type:
                        continue
                    events.append(GameEvent(**data))
                except (json.JSONDecodeError, ValueError) as e:
                    logger.warning(f"Skipping malformed event line: {e}")
                    continue

        events.sort(key=lambda e: e.created_at, reverse=True)
        return events[:limit]


# Singleton accessor
def get_event_store() -> EventStore:
    """Get the global EventStore instance."""
    return EventStore()
