from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Callable, Iterable, Sequence

from neuronote.core.models import Note
from neuronote.core.wikilinks import is_linkable_title
from neuronote.core.triggers import Anchor, CapturedRange, MenuKind


class CommandKind(enum.Enum):
    BLOCK = "block"
    INLINE = "inline"
    DIVIDER = "divider"


@dataclass(frozen=True)
class FormatCommand:
    id: str
    label: str
    description: str
    prefix: str
    suffix: str = ""
    placeholder: str = ""
    kind: CommandKind = CommandKind.BLOCK


FORMAT_COMMANDS: tuple[FormatCommand, ...] = (
    FormatCommand("h1", "Heading 1", "Large heading", "# ", placeholder="Heading 1"),
    FormatCommand("h2", "Heading 2", "Medium heading", "## ", placeholder="Heading 2"),
    FormatCommand("h3", "Heading 3", "Small heading", "### ", placeholder="Heading 3"),
    FormatCommand("bold", "Bold", "Bold text", "**", "**", "text", CommandKind.INLINE),
    FormatCommand("italic", "Italic", "Italic text", "*", "*", "text", CommandKind.INLINE),
    FormatCommand("code", "Inline Code", "Inline code", "`", "`", "text", CommandKind.INLINE),
    FormatCommand("codeblock", "Code Block", "Code block", "```", "```", "code"),
    FormatCommand("bullet", "Bullet List", "Bullet list", "- ", placeholder="List item"),
    FormatCommand("numbered", "Numbered List", "Numbered list", "1. ", placeholder="List item"),
    FormatCommand("quote", "Quote", "Block quote", "> ", placeholder="Quote"),
    FormatCommand("divider", "Divider", "Horizontal rule", "---", kind=CommandKind.DIVIDER),
)


@dataclass(frozen=True)
class LinkCandidate:
    title: str
    note_id: str | None = None

    @property
    def is_create(self) -> bool:
        return self.note_id is None


# ───────────────────────── filtering ─────────────────────────

def link_candidates(notes: Iterable[Note], query: str) -> list[LinkCandidate]:
    """
    Notes whose title contains the query (case-insensitive), in collection
    order, plus a "create" entry when nothing matches the query exactly.
    Titles that cannot be written as a wiki-link are never offered.
    """
    query = query or ""
    q = query.lower()
    found = [
        LinkCandidate(n.title, n.id)
        for n in notes
        if q in n.title.lower() and is_linkable_title(n.title)
    ]
    if is_linkable_title(query) and not any(c.title.lower() == q for c in found):
        found.append(LinkCandidate(query))
    return found


def command_candidates(query: str, commands: Sequence[FormatCommand] = FORMAT_COMMANDS) -> list[FormatCommand]:
    q = (query or "").lower()
    return [c for c in commands if q in c.label.lower() or q in c.description.lower()]


# ───────────────────────── menu state ─────────────────────────

class CommandMenu:
    """
    Filterable, keyboard-navigable candidate list.

    Listeners registered with on_highlight_changed() are told the new index
    every time it changes so the view can scroll that entry into view.
    """

    def __init__(
        self,
        *,
        kind: MenuKind,
        anchor: Anchor,
        captured: CapturedRange,
        source: Callable[[str], list],
    ):
        self.kind = kind
        self.anchor = anchor
        self.captured = captured
        self._source = source
        self._listeners: list[Callable[[int], None]] = []

        self.query = ""
        self.highlighted = 0
        self.candidates: list = source("")

    @classmethod
    def for_links(cls, notes: Callable[[], Sequence[Note]], *, anchor: Anchor, captured: CapturedRange) -> "CommandMenu":
        return cls(
            kind=MenuKind.LINK,
            anchor=anchor,
            captured=captured,
            source=lambda q: link_candidates(notes(), q),
        )

    @classmethod
    def for_commands(cls, *, anchor: Anchor, captured: CapturedRange) -> "CommandMenu":
        return cls(kind=MenuKind.COMMAND, anchor=anchor, captured=captured, source=command_candidates)

    # ───────────────────────── public API ─────────────────────────

    def on_highlight_changed(self, callback: Callable[[int], None]) -> None:
        self._listeners.append(callback)

    def set_query(self, query: str) -> None:
        self.query = query
        self.candidates = self._source(query)
        self._set_highlighted(0, force=True)

    def move(self, delta: int) -> None:
        last = max(len(self.candidates) - 1, 0)
        self._set_highlighted(min(max(self.highlighted + delta, 0), last))

    def hover(self, index: int) -> None:
        if 0 <= index < len(self.candidates):
            self._set_highlighted(index)

    def current(self):
        if 0 <= self.highlighted < len(self.candidates):
            return self.candidates[self.highlighted]
        return None

    # ───────────────────────── internals ─────────────────────────

    def _set_highlighted(self, index: int, *, force: bool = False) -> None:
        if index == self.highlighted and not force:
            return
        self.highlighted = index
        for callback in list(self._listeners):
            callback(index)
