from pathlib import Path
import os

from fastapi import APIRouter, Path as PathParam

from sharenotes.models.notes import NoteCreate, NoteCreatedOut, NoteOut, NoteUpdate
from sharenotes.services.notes_service import DEFAULT_MAX_ID_ATTEMPTS, NoteService
from sharenotes.storage.event_log import EventLog
from sharenotes.storage.notes_store import NotesStore

router = APIRouter(prefix="/api/notes", tags=["notes"])

# Base data dir: repository_root/data (we are in backend/)
DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"
DATA_DIR = Path(os.getenv("APP_DATA_DIR", str(DEFAULT_DATA_DIR)))

MAX_ID_ATTEMPTS = int(os.getenv("NOTE_ID_MAX_ATTEMPTS", str(DEFAULT_MAX_ID_ATTEMPTS)))

store = NotesStore(DATA_DIR)
event_log = EventLog(DATA_DIR)
service = NoteService(store, event_log=event_log, max_id_attempts=MAX_ID_ATTEMPTS)


# Service errors (NoteServiceError) are turned into responses in main.py
@router.post("", response_model=NoteCreatedOut, status_code=201)
def create_note(payload: NoteCreate) -> NoteCreatedOut:
    note = service.create(payload.content)
    return NoteCreatedOut(**note.to_dict())


@router.get("/{view_id}", response_model=NoteOut)
def get_note(view_id: str = PathParam(min_length=1, max_length=128)) -> NoteOut:
    note = service.fetch_by_view(view_id)
    return NoteOut(**note.to_public_dict())


@router.put("/{view_id}", response_model=NoteOut)
def update_note(payload: NoteUpdate, view_id: str = PathParam(min_length=1, max_length=128)) -> NoteOut:
    note = service.update(view_id=view_id, edit_id=payload.edit_id, content=payload.content)
    return NoteOut(**note.to_public_dict())
