import pytest

from neuronote.errors import LastNoteError
from neuronote.graph.service import GraphService
from neuronote.services.suggestions import SuggestionService
from neuronote.services.workspace import Workspace
from neuronote.settings import WELCOME_TITLE


class MemoryStore:
    def __init__(self, notes=()):
        self.notes = list(notes)
        self.saves = []

    def load_all(self):
        return list(self.notes)

    def save_all(self, notes):
        self.saves.append(list(notes))
        return True


class FixedSuggestions(SuggestionService):
    def __init__(self, titles):
        self.titles = titles

    def suggest_connections(self, note, notes):
        return list(self.titles)


@pytest.fixture
def workspace(qtbot):
    def _make(notes=(), **kwargs):
        store = MemoryStore(notes)
        ws = Workspace(store=store, graph=GraphService(debounce_ms=20), autosave_ms=20, **kwargs)
        ws.load()
        return ws, store
    return _make


def test_empty_store_gets_a_welcome_note(workspace):
    ws, store = workspace()
    assert [n.title for n in ws.notes] == [WELCOME_TITLE]
    assert ws.active_note.title == WELCOME_TITLE
    assert len(store.saves) == 1


def test_create_note_becomes_active(workspace):
    ws, _ = workspace()
    first = ws.create_note()
    second = ws.create_note()
    assert (first.title, second.title) == ("Untitled Note", "Untitled Note 2")
    assert ws.active_id == second.id


def test_content_updates_are_autosaved(workspace, qtbot):
    ws, store = workspace()
    ws.update_active(content="fresh [[Idea]]")
    qtbot.waitUntil(lambda: len(store.saves) == 2, timeout=2000)
    assert store.saves[-1][0].content == "fresh [[Idea]]"


def test_active_content_is_announced(workspace):
    ws, _ = workspace()
    seen = []
    ws.activeContentChanged.connect(lambda note_id, md: seen.append((note_id, md)))
    ws.update_active(content="typed")
    assert seen == [(ws.active_id, "typed")]


def test_delete_last_note_is_refused(workspace):
    ws, _ = workspace()
    with pytest.raises(LastNoteError):
        ws.delete_note(ws.active_id)
    assert len(ws.notes) == 1


def test_deleting_the_active_note_moves_on(workspace, make_note):
    ws, _ = workspace([make_note("A"), make_note("B")])
    ws.set_active("a")
    ws.delete_note("a")
    assert ws.active_id == "b"


def test_open_link_navigates_or_creates(workspace, make_note):
    ws, _ = workspace([make_note("A", "[[B]] [[C]]"), make_note("B")])
    ws.set_active("a")

    assert ws.open_link("B").id == "b"
    assert ws.active_id == "b"

    ws.set_active("a")
    assert ws.open_link("C", confirm=lambda title: False) is None
    assert ws.notes.find_by_title("C") is None

    created = ws.open_link("C", confirm=lambda title: True)
    assert created.title == "C"
    assert created.content == "Linked from [[A]]"
    assert ws.active_id == created.id


def test_backlinks_follow_the_active_note(workspace, make_note):
    ws, _ = workspace([make_note("A", "see [[B]]"), make_note("B")])
    got = []
    ws.backlinksChanged.connect(got.append)
    ws.set_active("b")
    assert [n.id for n in got[-1]] == ["a"]


def test_filtered_notes(workspace, make_note):
    ws, _ = workspace([make_note("beta"), make_note("Alpha", "mentions beta")])
    assert [n.title for n in ws.filtered_notes()] == ["Alpha", "beta"]
    ws.set_search_query("BETA")
    assert [n.title for n in ws.filtered_notes()] == ["beta", "Alpha"]


def test_suggestions_clear_once_the_note_links(workspace, make_note):
    ws, _ = workspace([make_note("A", "plain"), make_note("Moon")], suggestions=FixedSuggestions(["Moon"]))
    ws.set_active("a")

    assert ws.analyze_links() == ["Moon"]
    ws.accept_suggestion("Moon")
    assert ws.active_note.content == "plain [[Moon]] "
    assert ws.suggestions == []


def test_dismiss_suggestions(workspace, make_note):
    ws, _ = workspace([make_note("A")], suggestions=FixedSuggestions(["X"]))
    ws.analyze_links()
    ws.dismiss_suggestions()
    assert ws.suggestions == []


def test_default_suggestions_are_empty(workspace):
    ws, _ = workspace()
    assert ws.analyze_links() == []
    assert SuggestionService().summarize_note("text")


def test_graph_follows_link_changes(workspace, make_note, qtbot):
    ws, _ = workspace([make_note("A"), make_note("B")])
    with qtbot.waitSignal(ws.graphChanged, timeout=2000) as blocker:
        ws.set_active("a")
        ws.update_active(content="[[B]]")
    assert [(e.source, e.target) for e in blocker.args[0].edges] == [("a", "b")]


class RejectingStore(MemoryStore):
    def save_all(self, notes):
        self.saves.append(list(notes))
        return False


def test_failed_saves_keep_editing_in_memory(qtbot, make_note):
    store = RejectingStore([make_note("A", "draft")])
    ws = Workspace(store=store, graph=GraphService(debounce_ms=20), autosave_ms=20)
    ws.load()

    ws.update_active(content="first edit")
    assert ws.save_now() is False
    assert ws.active_note.content == "first edit"

    ws.update_active(content="second edit")
    qtbot.waitUntil(lambda: len(store.saves) == 2, timeout=2000)
    assert ws.notes.get("a").content == "second edit"
    assert store.saves[-1][0].content == "second edit"
