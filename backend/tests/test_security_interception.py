"""
Security tests for capability misuse.

These tests ensure that:
1. One note's edit identifier cannot modify another note
2. A view identifier is never accepted as an edit identifier
3. Denials do not reveal whether the presented edit identifier exists
4. Edit identifiers are not written to the audit log
"""

from pathlib import Path


def _create(client, content):
    r = client.post("/api/notes", json={"content": content})
    assert r.status_code == 201
    return r.json()


def test_cross_note_edit_id_is_rejected(client):
    """
    Abuse Frame: Tampering.
    Holder of note B's edit id tries to rewrite note A.
    """
    a = _create(client, "Original A")
    b = _create(client, "Original B")

    r = client.put(f"/api/notes/{a['viewId']}", json={"editId": b["editId"], "content": "Hacked"})
    assert r.status_code == 403

    assert client.get(f"/api/notes/{a['viewId']}").json()["content"] == "Original A"
    assert client.get(f"/api/notes/{b['viewId']}").json()["content"] == "Original B"


def test_view_id_is_not_an_edit_capability(client):
    """
    Abuse Frame: Privilege escalation.
    Anyone who was given the share link (view id) tries to edit with it.
    """
    a = _create(client, "Read only for you")

    r = client.put(f"/api/notes/{a['viewId']}", json={"editId": a["viewId"], "content": "Hacked"})
    assert r.status_code == 403
    assert client.get(f"/api/notes/{a['viewId']}").json()["content"] == "Read only for you"


def test_denials_look_the_same(client):
    """
    Abuse Frame: Probing.
    An existing but mismatched edit id and a made-up one get the same answer.
    """
    a = _create(client, "A")
    b = _create(client, "B")

    r1 = client.put(f"/api/notes/{a['viewId']}", json={"editId": b["editId"], "content": "x"})
    r2 = client.put(f"/api/notes/{a['viewId']}", json={"editId": "made-up-edit-id", "content": "x"})
    assert r1.status_code == r2.status_code == 403
    assert r1.json() == r2.json()
    assert b["editId"] not in r1.text


def test_path_traversal_view_id(client):
    """
    Abuse Frame: Interception.
    Identifiers are file names in the store; dotted or encoded paths must not resolve.
    """
    r = client.get("/api/notes/..%2F..%2Fetc%2Fpasswd")
    assert r.status_code == 404

    r = client.get("/api/notes/" + "a" * 129)
    assert r.status_code == 422


def test_audit_log_has_no_capabilities(client, tmp_path):
    a = _create(client, "A")
    client.put(f"/api/notes/{a['viewId']}", json={"editId": a["editId"], "content": "B"})
    client.put(f"/api/notes/{a['viewId']}", json={"editId": "wrong", "content": "C"})

    p = Path(tmp_path) / "events" / "events.log"
    assert p.exists()
    text = p.read_text(encoding="utf-8")
    assert "NOTE_CREATED" in text
    assert "NOTE_UPDATED" in text
    assert "NOTE_UPDATE_DENIED" in text
    assert a["editId"] not in text
    assert a["viewId"] not in text
