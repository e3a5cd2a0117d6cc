from __future__ import annotations

import enum
from dataclasses import dataclass

from neuronote.core.document import CodeBlock, Document, Position, unit_before
from neuronote.settings import MENU_ANCHOR_OFFSET


class MenuKind(enum.Enum):
    LINK = "@"
    COMMAND = "/"

    @property
    def trigger(self) -> str:
        return self.value


_TRIGGERS = {kind.trigger: kind for kind in MenuKind}


@dataclass(frozen=True)
class Rect:
    left: float
    top: float
    right: float
    bottom: float


@dataclass(frozen=True)
class Anchor:
    top: float
    left: float


@dataclass(frozen=True)
class CaretGeometry:
    """Caret and editor rectangles in the same coordinate space, plus scroll offset."""
    caret: Rect
    editor: Rect
    scroll_top: float = 0.0


@dataclass(frozen=True)
class CapturedRange:
    """
    Caret position captured when a trigger fired.

    Holds a snapshot of the block so the range can be revalidated against
    a later document: it stays valid only while that block is unchanged and
    the trigger character is still right before the caret.
    """
    position: Position
    block: object
    trigger: str

    def is_valid(self, doc: Document) -> bool:
        index = self.position.block
        if index >= len(doc.blocks) or doc.blocks[index] != self.block:
            return False
        return unit_before(doc, self.position) == self.trigger


def detect_trigger(char_before) -> MenuKind | None:
    if not isinstance(char_before, str):
        return None
    return _TRIGGERS.get(char_before)


def compute_anchor(geometry: CaretGeometry | None, *, offset: float = MENU_ANCHOR_OFFSET) -> Anchor:
    """Menu position relative to the editor viewport, just below the caret line."""
    if geometry is None:
        return Anchor(0.0, 0.0)
    caret, editor = geometry.caret, geometry.editor
    return Anchor(
        top=caret.bottom - editor.top + offset + geometry.scroll_top,
        left=caret.left - editor.left,
    )


class TriggerDetector:
    """
    Recognizes `@` / `/` right before the caret after a text insertion.

    Deletions never open a menu, and code blocks never trigger one.
    """

    def detect(self, doc: Document, pos: Position) -> MenuKind | None:
        if pos.block >= len(doc.blocks) or isinstance(doc.blocks[pos.block], CodeBlock):
            return None
        return detect_trigger(unit_before(doc, pos))

    def capture(self, doc: Document, pos: Position, kind: MenuKind) -> CapturedRange:
        return CapturedRange(position=pos, block=doc.blocks[pos.block], trigger=kind.trigger)
