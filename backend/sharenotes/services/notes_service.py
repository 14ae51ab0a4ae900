"""
Note access service: create, fetch by view identifier, update with the edit
capability.

The store handle is passed in; nothing here keeps shared mutable state, so
any number of service instances (or processes) can run against one store.
"""
from __future__ import annotations

import logging
from typing import Optional

from sharenotes.services.errors import (
    IdentifierExhaustion,
    InvalidInput,
    NotFound,
    StorageFailure,
    Unauthorized,
)
from sharenotes.storage.event_log import NOTE_CREATED, NOTE_UPDATE_DENIED, NOTE_UPDATED, Event, EventLog
from sharenotes.storage.notes_store import IdentifierCollisionError, Note, NotesStore, StorageError
from sharenotes.utils.capability import authorize_edit
from sharenotes.utils.identifiers import IdentifierGenerator, default_generator

logger = logging.getLogger(__name__)

DEFAULT_MAX_ID_ATTEMPTS = 3


def _require_str(name: str, value: object) -> None:
    if not isinstance(value, str):
        raise InvalidInput(detail=f"{name} must be a string")


class NoteService:
    def __init__(
        self,
        store: NotesStore,
        generator: IdentifierGenerator = default_generator,
        event_log: Optional[EventLog] = None,
        max_id_attempts: int = DEFAULT_MAX_ID_ATTEMPTS,
    ):
        if max_id_attempts < 1:
            raise ValueError("max_id_attempts must be >= 1")
        self.store = store
        self.generator = generator
        self.event_log = event_log
        self.max_id_attempts = max_id_attempts

    def _emit(self, event: Event) -> None:
        if self.event_log is None:
            return
        try:
            self.event_log.emit(event)
        except OSError:
            # the note operation already committed; losing an audit line must not undo it
            logger.exception("failed to write audit event %s", event.event_type)

    def create(self, content: str) -> Note:
        """Create a note. The returned Note is the only place its edit_id is ever exposed."""
        _require_str("content", content)

        for attempt in range(1, self.max_id_attempts + 1):
            view_id = self.generator.new_view_id()
            edit_id = self.generator.new_edit_id()
            try:
                note = self.store.insert(view_id=view_id, edit_id=edit_id, content=content)
            except IdentifierCollisionError:
                logger.warning("identifier collision on create (attempt %d/%d)", attempt, self.max_id_attempts)
                continue
            except StorageError:
                logger.exception("storage failure on create")
                raise StorageFailure()

            self._emit(Event(NOTE_CREATED, note_id=note.id, meta={"attempts": attempt}))
            return note

        logger.error("identifier generation exhausted after %d attempts", self.max_id_attempts)
        raise IdentifierExhaustion(self.max_id_attempts)

    def fetch_by_view(self, view_id: str) -> Note:
        _require_str("view_id", view_id)
        try:
            note = self.store.get_by_view(view_id)
        except StorageError:
            logger.exception("storage failure on fetch")
            raise StorageFailure()
        if note is None:
            raise NotFound()
        return note

    def update(self, view_id: str, edit_id: str, content: str) -> Note:
        """
        Replace the content of the note addressed by `view_id`.

        The record is looked up by `edit_id` first; the write is allowed only if
        that record's view identifier is `view_id`. The write itself is keyed by
        `view_id`.
        """
        _require_str("view_id", view_id)
        _require_str("edit_id", edit_id)
        _require_str("content", content)

        try:
            record = self.store.get_by_edit(edit_id)
        except StorageError:
            logger.exception("storage failure on update lookup")
            raise StorageFailure()

        if not authorize_edit(record, view_id):
            self._emit(Event(NOTE_UPDATE_DENIED))
            raise Unauthorized()

        try:
            updated = self.store.update_content(view_id=view_id, content=content)
        except StorageError:
            logger.exception("storage failure on update write")
            raise StorageFailure()
        if updated is None:
            raise NotFound()

        self._emit(Event(NOTE_UPDATED, note_id=updated.id))
        return updated
