from __future__ import annotations

import hmac
from typing import Optional

from sharenotes.storage.notes_store import Note


def authorize_edit(record: Optional[Note], presented_view_id: str) -> bool:
    """
    Capability check for a write.

    `record` is whatever the presented edit identifier resolved to (None if it
    resolved to nothing). The write is allowed only when that record is the
    note addressed by `presented_view_id`, so note B's edit id can never be
    used to modify note A.
    """
    if record is None or not isinstance(presented_view_id, str):
        return False
    # constant-time compare
    return hmac.compare_digest(record.view_id.encode("utf-8"), presented_view_id.encode("utf-8"))
