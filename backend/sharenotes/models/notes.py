import os
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, StrictStr

MAX_CONTENT_LENGTH = int(os.getenv("NOTE_MAX_CONTENT_LENGTH", "100000"))


class NoteCreate(BaseModel):
    content: StrictStr = Field(max_length=MAX_CONTENT_LENGTH)


class NoteUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    edit_id: StrictStr = Field(alias="editId", min_length=1, max_length=128)
    content: StrictStr = Field(max_length=MAX_CONTENT_LENGTH)


class NoteOut(BaseModel):
    """Public projection: what fetch and update return. No edit identifier."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    view_id: str = Field(alias="viewId")
    content: str
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")


class NoteCreatedOut(NoteOut):
    """Create response, the one time the edit identifier is handed out."""
    edit_id: str = Field(alias="editId")
