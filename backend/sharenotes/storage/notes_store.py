import hashlib
import json
import os
import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Optional

from sharenotes.utils.identifiers import is_well_formed

VIEW = "view"
EDIT = "edit"


class StorageError(Exception):
    """The data directory is unreachable or holds a record we cannot read."""


class IdentifierCollisionError(Exception):
    """An identifier is already claimed by some note (of either kind)."""


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _atomic_write_json(path: Path, data: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    # unique tmp per writer: concurrent updates of one note must not share it
    tmp_path = path.with_name(f".{path.name}.{uuid.uuid4().hex}.tmp")
    try:
        with tmp_path.open("w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
            f.flush()
            os.fsync(f.fileno())
        tmp_path.replace(path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink()


@dataclass(frozen=True)
class Note:
    id: uuid.UUID
    view_id: str
    edit_id: str
    content: str
    created_at: datetime
    updated_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "view_id": self.view_id,
            "edit_id": self.edit_id,
            "content": self.content,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    def to_public_dict(self) -> dict[str, Any]:
        # read/update projection: never carries the edit capability
        out = self.to_dict()
        del out["edit_id"]
        return out

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "Note":
        return cls(
            id=uuid.UUID(raw["id"]),
            view_id=raw["view_id"],
            edit_id=raw["edit_id"],
            content=raw["content"],
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw["updated_at"]),
        )


class NotesStore:
    """
    File-backed note store.

    Layout under `base_dir`:
      notes/<note_id>.json      the record
      ids/<sha256(identifier)>.json   {"note_id", "kind"} for every view and edit id

    `ids/` is a single namespace for both kinds, so a view id can never equal
    any edit id (or view id) already in use. Claims are made with O_EXCL,
    which makes each claim an atomic insert-if-absent. Index file names are
    lowercase hex digests, so case-insensitive filesystems cannot fold two
    identifiers that differ only in case onto one claim.
    """

    def __init__(self, base_dir: Path):
        self.base_dir = base_dir

    @property
    def notes_dir(self) -> Path:
        return self.base_dir / "notes"

    @property
    def ids_dir(self) -> Path:
        return self.base_dir / "ids"

    def _note_path(self, note_id: uuid.UUID) -> Path:
        return self.notes_dir / f"{note_id}.json"

    def _id_path(self, identifier: str) -> Path:
        digest = hashlib.sha256(identifier.encode("utf-8")).hexdigest()
        return self.ids_dir / f"{digest}.json"

    def _claim(self, identifier: str, kind: str, note_id: uuid.UUID) -> None:
        path = self._id_path(identifier)
        body = json.dumps({"note_id": str(note_id), "kind": kind}).encode("utf-8")
        try:
            self.ids_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            # e.g. ids/ exists but is a file: not a collision
            raise StorageError("Could not create identifier index") from exc
        try:
            fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
        except FileExistsError:
            raise IdentifierCollisionError(f"{kind} identifier already in use")
        except OSError as exc:
            raise StorageError("Could not claim identifier") from exc
        try:
            os.write(fd, body)
            os.fsync(fd)
        except OSError as exc:
            os.close(fd)
            self._release(identifier)
            raise StorageError("Could not claim identifier") from exc
        os.close(fd)

    def _release(self, identifier: str) -> None:
        try:
            self._id_path(identifier).unlink()
        except FileNotFoundError:
            pass

    def _resolve(self, identifier: str, kind: str) -> Optional[uuid.UUID]:
        if not is_well_formed(identifier):
            return None
        path = self._id_path(identifier)
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise StorageError("Could not read identifier index") from exc
        except ValueError as exc:
            raise StorageError("Corrupt identifier index entry") from exc
        if not isinstance(raw, dict):
            raise StorageError("Corrupt identifier index entry")
        if raw.get("kind") != kind:
            return None
        try:
            return uuid.UUID(raw["note_id"])
        except (KeyError, TypeError, ValueError) as exc:
            raise StorageError("Corrupt identifier index entry") from exc

    def _load(self, note_id: uuid.UUID) -> Optional[Note]:
        try:
            raw = json.loads(self._note_path(note_id).read_text(encoding="utf-8"))
        except FileNotFoundError:
            # claim rolled back between index read and record read
            return None
        except OSError as exc:
            raise StorageError("Could not read note") from exc
        except ValueError as exc:
            raise StorageError("Corrupt note record") from exc
        try:
            return Note.from_dict(raw)
        except (KeyError, TypeError, ValueError) as exc:
            raise StorageError("Corrupt note record") from exc

    def insert(self, view_id: str, edit_id: str, content: str) -> Note:
        """Persist a new note addressable by both identifiers.

        Raises IdentifierCollisionError (nothing persisted) if either identifier
        is already claimed, including view_id == edit_id.
        """
        if not is_well_formed(view_id) or not is_well_formed(edit_id):
            raise ValueError("Malformed identifier")
        if view_id == edit_id:
            raise IdentifierCollisionError("view and edit identifiers are equal")

        now = _utc_now()
        note = Note(
            id=uuid.uuid4(),
            view_id=view_id,
            edit_id=edit_id,
            content=content,
            created_at=now,
            updated_at=now,
        )
        path = self._note_path(note.id)
        try:
            # unreachable until both identifiers are claimed
            _atomic_write_json(path, note.to_dict())
        except OSError as exc:
            raise StorageError("Could not write note") from exc

        claimed: list[str] = []
        try:
            self._claim(view_id, VIEW, note.id)
            claimed.append(view_id)
            self._claim(edit_id, EDIT, note.id)
            claimed.append(edit_id)
        except (IdentifierCollisionError, StorageError):
            for identifier in claimed:
                self._release(identifier)
            try:
                path.unlink()
            except OSError:
                pass
            raise
        return note

    def get_by_view(self, view_id: str) -> Optional[Note]:
        note_id = self._resolve(view_id, VIEW)
        if note_id is None:
            return None
        note = self._load(note_id)
        # the record, not the index file name, is authoritative
        if note is None or note.view_id != view_id:
            return None
        return note

    def get_by_edit(self, edit_id: str) -> Optional[Note]:
        note_id = self._resolve(edit_id, EDIT)
        if note_id is None:
            return None
        note = self._load(note_id)
        if note is None or note.edit_id != edit_id:
            return None
        return note

    def update_content(self, view_id: str, content: str) -> Optional[Note]:
        """Replace content of the note addressed by `view_id`.

        The whole record is swapped in with one os.replace, so concurrent
        writers end up with the last committed version, never a mix.
        """
        existing = self.get_by_view(view_id)
        if existing is None:
            return None

        now = _utc_now()
        if now <= existing.updated_at:
            now = existing.updated_at + timedelta(microseconds=1)
        updated = replace(existing, content=content, updated_at=now)
        try:
            _atomic_write_json(self._note_path(updated.id), updated.to_dict())
        except OSError as exc:
            raise StorageError("Could not write note") from exc
        return updated
