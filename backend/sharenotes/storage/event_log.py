"""
Append-only audit trail of note lifecycle events.

One JSON object per line in <data>/events/events.log, fsynced per event, and
mirrored to the `sharenotes.audit` logger. Events identify notes by their
internal id only: view and edit identifiers are capabilities and are never
written here.
"""
import json
import logging
import os
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

NOTE_CREATED = "NOTE_CREATED"
NOTE_UPDATED = "NOTE_UPDATED"
NOTE_UPDATE_DENIED = "NOTE_UPDATE_DENIED"
EVENT_TYPES = frozenset({NOTE_CREATED, NOTE_UPDATED, NOTE_UPDATE_DENIED})

audit_logger = logging.getLogger("sharenotes.audit")


@dataclass(frozen=True)
class Event:
    event_type: str
    note_id: Optional[uuid.UUID] = None
    meta: dict[str, Any] = field(default_factory=dict)
    event_id: uuid.UUID = field(default_factory=uuid.uuid4)
    ts: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        if self.event_type not in EVENT_TYPES:
            raise ValueError(f"Unknown event type {self.event_type!r}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "event_id": str(self.event_id),
            "event_type": self.event_type,
            "ts": self.ts.isoformat(),
            "note_id": str(self.note_id) if self.note_id else None,
            "meta": self.meta,
        }


class EventLog:
    def __init__(self, base_dir: Path):
        self.path = base_dir / "events" / "events.log"

    def emit(self, event: Event) -> None:
        line = json.dumps(event.to_dict(), ensure_ascii=False)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as f:
            f.write(line + "\n")
            f.flush()
            os.fsync(f.fileno())
        audit_logger.info("%s note_id=%s", event.event_type, event.note_id)
