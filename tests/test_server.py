from fastapi.testclient import TestClient

from neuronote.server.api import create_app


def test_data_file_is_created_empty(tmp_path):
    path = tmp_path / "data" / "notes.json"
    client = TestClient(create_app(path))

    assert path.read_text(encoding="utf-8") == "[]"
    response = client.get("/api/notes")
    assert response.status_code == 200
    assert response.json() == []


def test_post_replaces_the_note_set(tmp_path):
    client = TestClient(create_app(tmp_path / "notes.json"))
    notes = [
        {"id": "1", "title": "A", "content": "[[B]]", "tags": [], "createdAt": 1, "updatedAt": 2},
        {"id": "2", "title": "B", "content": "", "tags": [], "createdAt": 1, "updatedAt": 2},
    ]

    response = client.post("/api/notes", json=notes)
    assert response.status_code == 200
    assert response.json()["success"] is True

    assert client.get("/api/notes").json() == notes

    client.post("/api/notes", json=notes[:1])
    assert client.get("/api/notes").json() == notes[:1]


def test_unreadable_store_returns_500(tmp_path):
    path = tmp_path / "notes.json"
    client = TestClient(create_app(path))
    path.write_text("{broken", encoding="utf-8")

    response = client.get("/api/notes")
    assert response.status_code == 500
    assert "error" in response.json()
