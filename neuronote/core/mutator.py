from __future__ import annotations

import logging
from dataclasses import dataclass

from neuronote.core import markdown_codec
from neuronote.core.document import (
    BulletItem,
    CodeBlock,
    Document,
    Heading,
    LinkChip,
    NumberedItem,
    Paragraph,
    Position,
    Quote,
    Rule,
    Selection,
    Text,
    delete_range,
    insert_blocks,
    insert_blocks_at,
    insert_inline,
    insert_text,
)
from neuronote.core.menus import CommandKind, FormatCommand
from neuronote.core.triggers import CapturedRange
from neuronote.core.wikilinks import is_linkable_title
from neuronote.errors import StaleRangeError, UnlinkableTitleError

log = logging.getLogger(__name__)

_BLOCK_FACTORIES = {
    "h1": lambda text: Heading(1, (Text(text),)),
    "h2": lambda text: Heading(2, (Text(text),)),
    "h3": lambda text: Heading(3, (Text(text),)),
    "bullet": lambda text: BulletItem((Text(text),)),
    "numbered": lambda text: NumberedItem((Text(text),)),
    "quote": lambda text: Quote((Text(text),)),
    "codeblock": lambda text: CodeBlock(text=text),
}


@dataclass(frozen=True)
class EditResult:
    document: Document
    selection: Selection
    markdown: str


class DocumentMutator:
    """
    Applies a committed menu entry at the range captured when the menu
    opened. Every commit starts by removing the trigger character; a range
    that no longer points at its trigger raises StaleRangeError and leaves
    the document alone.
    """

    # ───────────────────────── public API ─────────────────────────

    def commit_link(self, doc: Document, captured: CapturedRange, title: str) -> EditResult:
        if not is_linkable_title(title):
            raise UnlinkableTitleError(title)
        doc, pos = self._remove_trigger(doc, captured)
        doc, pos = insert_inline(doc, pos, LinkChip(title))
        doc, pos = insert_text(doc, pos, markdown_codec.NBSP)
        log.debug("Link committed: title=%r at=%s", title, pos)
        return self._result(doc, Selection.caret(pos))

    def commit_command(self, doc: Document, captured: CapturedRange, command: FormatCommand) -> EditResult:
        doc, pos = self._remove_trigger(doc, captured)

        if command.kind is CommandKind.INLINE:
            doc, end = insert_text(doc, pos, command.prefix + command.placeholder + command.suffix)
            stop = end.offset - len(command.suffix)
            selection = Selection(
                Position(end.block, stop - len(command.placeholder)),
                Position(end.block, stop),
            )

        elif command.kind is CommandKind.DIVIDER:
            doc, first, tail = insert_blocks_at(doc, pos, [Rule()])
            if tail is None:
                doc = insert_blocks(doc, first + 1, [Paragraph()])
            selection = Selection.caret(Position(first + 1, 0))

        else:
            factory = _BLOCK_FACTORIES.get(command.id)
            if factory is None:
                raise ValueError(f"Unknown block command: {command.id}")
            doc, first, _ = insert_blocks_at(doc, pos, [factory(command.placeholder)])
            selection = Selection(Position(first, 0), Position(first, len(command.placeholder)))

        log.debug("Command committed: id=%s selection=%s", command.id, selection)
        return self._result(doc, selection)

    # ───────────────────────── internals ─────────────────────────

    @staticmethod
    def _remove_trigger(doc: Document, captured: CapturedRange) -> tuple[Document, Position]:
        if not captured.is_valid(doc):
            raise StaleRangeError(f"Captured range {captured.position} no longer precedes {captured.trigger!r}")
        end = captured.position
        start = Position(end.block, end.offset - 1)
        return delete_range(doc, start, end), start

    @staticmethod
    def _result(doc: Document, selection: Selection) -> EditResult:
        return EditResult(document=doc, selection=selection, markdown=markdown_codec.decode(doc))
