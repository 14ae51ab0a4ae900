"""Identifier generation for notes.

Every note gets two identifiers drawn from ``secrets`` (the OS CSPRNG):

- a view identifier: 16 random bytes, url-safe base64 (22 chars, 128 bits)
- an edit identifier: 32 random bytes, url-safe base64 (43 chars, 256 bits)

The edit identifier is the write capability for its note, so it must never be
derived from counters, timestamps or the ``random`` module. The different
lengths make it harder to mistake one kind for the other in logs or UIs.

Uniqueness against the store is not guaranteed here; the store claims both
identifiers with insert-if-absent and the service retries on collision.
"""
from __future__ import annotations

import re
import secrets

VIEW_ID_BYTES = 16
EDIT_ID_BYTES = 32

_IDENTIFIER_RE = re.compile(r"[A-Za-z0-9_-]{1,128}")


def is_well_formed(identifier: object) -> bool:
    """True if `identifier` could have been produced by a generator.

    Also keeps identifiers safe to use as file names (no separators, no dots).
    """
    return isinstance(identifier, str) and bool(_IDENTIFIER_RE.fullmatch(identifier))


class IdentifierGenerator:
    def __init__(self, view_id_bytes: int = VIEW_ID_BYTES, edit_id_bytes: int = EDIT_ID_BYTES):
        if view_id_bytes < 16 or edit_id_bytes < 16:
            # 128 random bits minimum
            raise ValueError("Identifiers need at least 16 random bytes")
        self.view_id_bytes = view_id_bytes
        self.edit_id_bytes = edit_id_bytes

    def new_view_id(self) -> str:
        return secrets.token_urlsafe(self.view_id_bytes)

    def new_edit_id(self) -> str:
        return secrets.token_urlsafe(self.edit_id_bytes)


default_generator = IdentifierGenerator()


def new_view_id() -> str:
    return default_generator.new_view_id()


def new_edit_id() -> str:
    return default_generator.new_edit_id()
