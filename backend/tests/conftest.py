import importlib
import pytest
from fastapi.testclient import TestClient


@pytest.fixture()
def client(tmp_path, monkeypatch):
    # isolate data dir per test
    monkeypatch.setenv("APP_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("NOTE_ID_MAX_ATTEMPTS", "3")

    # reload modules so that api/notes.py picks up new env vars
    import sharenotes.api.notes
    import sharenotes.main
    importlib.reload(sharenotes.api.notes)
    importlib.reload(sharenotes.main)

    return TestClient(sharenotes.main.app)


class FixedGenerator:
    """Hands out identifiers from queues so collisions can be forced."""

    def __init__(self, view_ids, edit_ids):
        self.view_ids = list(view_ids)
        self.edit_ids = list(edit_ids)

    def new_view_id(self) -> str:
        return self.view_ids.pop(0)

    def new_edit_id(self) -> str:
        return self.edit_ids.pop(0)


@pytest.fixture()
def fixed_generator():
    return FixedGenerator
