import pytest

from neuronote.core.models import Note
from neuronote.errors import LastNoteError, NoteNotFoundError
from neuronote.vault.collection import NoteCollection


def test_create_uses_unique_default_titles():
    notes = NoteCollection()
    first = notes.create()
    second = notes.create()
    third = notes.create()
    assert [first.title, second.title, third.title] == ["Untitled Note", "Untitled Note 2", "Untitled Note 3"]
    # newest first
    assert [n.id for n in notes] == [third.id, second.id, first.id]


def test_find_by_title_prefers_collection_order(make_note):
    notes = NoteCollection([make_note("Twin", note_id="t1"), make_note("Twin", note_id="t2")])
    assert notes.find_by_title("Twin").id == "t1"
    assert notes.find_by_title("twin") is None


def test_update_bumps_timestamp(make_note):
    note = make_note("A", "old")
    notes = NoteCollection([note])
    updated = notes.update(note.id, content="new")
    assert updated.content == "new"
    assert updated.title == "A"
    assert updated.updated_at >= note.updated_at
    assert notes.get(note.id) is updated


def test_unknown_ids_raise(make_note):
    notes = NoteCollection([make_note("A")])
    with pytest.raises(NoteNotFoundError):
        notes.get("nope")
    with pytest.raises(NoteNotFoundError):
        notes.update("nope", title="x")
    assert notes.find("nope") is None


def test_last_note_cannot_be_deleted(make_note):
    a, b = make_note("A"), make_note("B")
    notes = NoteCollection([a, b])
    notes.delete(a.id)
    with pytest.raises(LastNoteError) as exc:
        notes.delete(b.id)
    assert str(exc.value) == "Cannot delete the last note."
    assert [n.id for n in notes] == [b.id]


def test_search(make_note):
    notes = NoteCollection([make_note("beta", "x"), make_note("Alpha", "about BETA"), make_note("gamma")])
    assert [n.title for n in notes.search("")] == ["Alpha", "beta", "gamma"]
    assert [n.title for n in notes.search("beta")] == ["beta", "Alpha"]


def test_note_wire_format():
    note = Note(id="1", title="T", content="c", tags=frozenset({"b", "a"}), created_at=5, updated_at=6)
    data = note.to_dict()
    assert data == {"id": "1", "title": "T", "content": "c", "tags": ["a", "b"], "createdAt": 5, "updatedAt": 6}
    assert Note.from_dict(data) == note
