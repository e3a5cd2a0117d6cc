import json

from neuronote.vault.repo import NoteRepository, atomic_write_text


def test_save_and_load(tmp_path, make_note):
    repo = NoteRepository(tmp_path / "data" / "notes.json")
    notes = [make_note("A", "[[B]]"), make_note("B")]

    assert repo.save_all(notes) is True
    assert repo.load_all() == notes
    assert not list((tmp_path / "data").glob(".*tmp*"))


def test_missing_file_is_empty(tmp_path):
    assert NoteRepository(tmp_path / "nope.json").load_all() == []


def test_corrupt_file_loads_as_empty(tmp_path):
    path = tmp_path / "notes.json"
    path.write_text("{not json", encoding="utf-8")
    assert NoteRepository(path).load_all() == []

    path.write_text(json.dumps({"not": "a list"}), encoding="utf-8")
    assert NoteRepository(path).load_all() == []


def test_save_failure_returns_false(tmp_path, make_note):
    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")
    repo = NoteRepository(blocker / "notes.json")
    assert repo.save_all([make_note("A")]) is False


def test_atomic_write_replaces_content(tmp_path):
    path = tmp_path / "f.txt"
    atomic_write_text(path, "one")
    atomic_write_text(path, "two")
    assert path.read_text(encoding="utf-8") == "two"
