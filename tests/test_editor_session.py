import pytest

from neuronote.core.document import LinkChip, Position
from neuronote.core.editor import EditorSession, SyncState
from neuronote.core.markdown_codec import encode
from neuronote.core.menus import FORMAT_COMMANDS, LinkCandidate
from neuronote.core.triggers import MenuKind
from neuronote.core.wikilinks import extract_link_titles


def make_session(notes=(), **kwargs):
    emitted = []
    session = EditorSession(notes=lambda: list(notes), on_change=emitted.append, **kwargs)
    return session, emitted


def test_load_places_caret_at_end():
    session, _ = make_session()
    session.load("n1", "Hello")
    assert session.state is SyncState.IDLE
    assert session.document == encode("Hello")
    assert session.caret == Position(0, 5)


def test_echo_of_own_typing_preserves_document():
    session, emitted = make_session()
    session.load("n1", "Hello")
    session.type_text(" world")
    assert emitted == ["Hello world"]
    assert session.state is SyncState.EDITING

    doc = session.document
    assert session.sync("n1", "Hello world") is False
    assert session.document is doc
    assert session.caret == Position(0, 11)
    assert session.state is SyncState.IDLE


def test_external_markdown_rebuilds():
    session, _ = make_session()
    session.load("n1", "Hello")
    session.move_caret(-3)

    assert session.sync("n1", "Hello [[Moon]] ") is True
    assert LinkChip("Moon") in session.document.blocks[0].children
    assert session.caret == Position(0, 8)
    assert session.state is SyncState.IDLE


def test_switching_notes_always_rebuilds():
    session, _ = make_session()
    session.load("n1", "same")
    assert session.sync("n2", "same") is True
    assert session.note_id == "n2"


def test_slash_as_first_character_opens_command_menu():
    session, emitted = make_session()
    session.load("n1", "")
    session.type_text("/")
    assert session.menu is not None
    assert session.menu.kind is MenuKind.COMMAND
    assert emitted == ["/"]


def test_escape_closes_without_touching_the_document():
    session, emitted = make_session()
    session.load("n1", "")
    session.type_text("/")
    doc = session.document

    assert session.handle_key("Escape") is True
    assert session.menu is None
    assert session.document is doc
    assert emitted == ["/"]


def test_backspace_on_empty_query_removes_the_trigger():
    session, emitted = make_session()
    session.load("n1", "")
    session.type_text("/")
    session.backspace()
    assert session.menu is None
    assert emitted == ["/", ""]


def test_deleting_after_a_trigger_does_not_reopen():
    session, emitted = make_session()
    session.load("n1", "a/b")
    session.backspace()
    assert emitted == ["a/"]
    assert session.menu is None


def test_typing_goes_to_query_and_enter_commits(make_note):
    session, emitted = make_session([make_note("Moon")])
    session.load("n1", "")
    session.type_text("@")
    session.type_text("Mo")

    assert session.menu.query == "Mo"
    assert [c.title for c in session.menu.candidates] == ["Moon", "Mo"]

    session.handle_key("Enter")
    assert session.menu is None
    assert emitted[-1] == "[[Moon]] "


def test_arrow_keys_navigate_the_menu():
    session, _ = make_session()
    session.load("n1", "")
    session.type_text("/")
    session.handle_key("ArrowDown")
    session.handle_key("ArrowDown")
    session.handle_key("ArrowUp")
    assert session.menu.current() is FORMAT_COMMANDS[1]


def test_external_sync_closes_menus():
    session, _ = make_session()
    session.load("n1", "")
    session.type_text("/")
    session.sync("n1", "changed elsewhere")
    assert session.menu is None


def test_stale_menu_commit_leaves_document_alone():
    session, emitted = make_session()
    session.load("n1", "")
    session.type_text("/")
    # simulate the document moving on underneath an open menu
    session.document = encode("something else")

    session.commit(FORMAT_COMMANDS[0])
    assert session.menu is None
    assert session.document == encode("something else")
    assert emitted == ["/"]


def test_no_menu_inside_code_blocks():
    session, _ = make_session()
    session.load("n1", "```\ncode\n```")
    session.type_text("/")
    assert session.menu is None


def test_typing_replaces_the_selection():
    session, emitted = make_session()
    session.load("n1", "Hello world")
    session.select(Position(0, 0), Position(0, 5))
    session.type_text("Bye")
    assert emitted == ["Bye world"]


def test_clicking_a_chip_follows_the_link():
    followed = []
    session, _ = make_session(on_link_activated=followed.append)
    session.load("n1", "see [[Moon]]")
    session.click(Position(0, 4), LinkChip("Moon"))
    assert followed == ["Moon"]
    assert session.caret == Position(0, 4)


def test_enter_splits_blocks():
    session, emitted = make_session()
    session.load("n1", "ab")
    session.move_caret(-1)
    session.press_enter()
    assert emitted == ["a\n\nb"]


@pytest.mark.parametrize("title", ["Meeting [2024]", "a]"])
def test_bracketed_note_titles_are_never_linked(make_note, title):
    session, emitted = make_session([make_note(title, note_id="target"), make_note("a")])
    session.load("n1", "")
    session.type_text("see @")
    assert "target" not in [c.note_id for c in session.menu.candidates]

    session.commit(LinkCandidate(title, "target"))
    assert session.menu is None
    assert session.document == encode("see @")
    assert emitted == ["see @"]
    assert extract_link_titles(emitted[-1]) == []


def test_delete_home_and_end_keys():
    session, emitted = make_session()
    session.load("n1", "Hello")
    session.handle_key("Home")
    assert session.caret == Position(0, 0)

    session.handle_key("Delete")
    assert emitted == ["ello"]
    assert session.caret == Position(0, 0)

    session.handle_key("End")
    assert session.caret == Position(0, 4)
    session.handle_key("Delete")
    assert emitted == ["ello"]
