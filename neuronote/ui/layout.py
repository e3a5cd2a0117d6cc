"""
Plain-text layout of document blocks for the editor widget.

Each document block becomes one text block. A lead-in ("• ", "2. ") is
drawn before list items and quotes, chips are drawn as their title, and
code-block line breaks use U+2028 so the block stays a single text block.
The layout maps caret units to characters and back.
"""
from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass

from neuronote.core.document import (
    Bold,
    BulletItem,
    CodeBlock,
    Document,
    Heading,
    InlineCode,
    Italic,
    LinkChip,
    NumberedItem,
    Quote,
    Rule,
)

LINE_SEPARATOR = "\u2028"
RULE_TEXT = "―" * 24


@dataclass(frozen=True)
class Segment:
    text: str
    style: str   # lead | text | bold | italic | code | chip | rule | codeblock


@dataclass(frozen=True)
class BlockLayout:
    kind: str
    level: int
    segments: tuple[Segment, ...]
    # unit_chars[u] = character offset of caret unit u
    unit_chars: tuple[int, ...]
    chips: tuple[tuple[int, int, LinkChip], ...] = ()

    @property
    def text(self) -> str:
        return "".join(s.text for s in self.segments)

    def char_for(self, offset: int) -> int:
        offset = min(max(offset, 0), len(self.unit_chars) - 1)
        return self.unit_chars[offset]

    def locate(self, char: int) -> tuple[int, LinkChip | None]:
        """Caret unit nearest to a character offset, plus the chip under it."""
        for start, end, chip in self.chips:
            if start <= char < end:
                unit = self.unit_chars.index(start)
                return (unit + 1 if char - start >= (end - start) / 2 else unit), chip
        unit = bisect_right(self.unit_chars, char) - 1
        return max(unit, 0), None


def _inline_style(node) -> str:
    if isinstance(node, Bold):
        return "bold"
    if isinstance(node, Italic):
        return "italic"
    if isinstance(node, InlineCode):
        return "code"
    return "text"


def layout_block(block, number: int = 1) -> BlockLayout:
    if isinstance(block, Rule):
        return BlockLayout("rule", 0, (Segment(RULE_TEXT, "rule"),), (0,))
    if isinstance(block, CodeBlock):
        text = block.text.replace("\n", LINE_SEPARATOR)
        return BlockLayout("codeblock", 0, (Segment(text, "codeblock"),), tuple(range(len(text) + 1)))

    level = 0
    lead = ""
    if isinstance(block, Heading):
        kind, level = "heading", block.level
    elif isinstance(block, BulletItem):
        kind, lead = "bullet", "• "
    elif isinstance(block, NumberedItem):
        kind, lead = "numbered", f"{number}. "
    elif isinstance(block, Quote):
        kind, lead = "quote", "┃ "
    else:
        kind = "paragraph"

    segments: list[Segment] = [Segment(lead, "lead")] if lead else []
    chars = [len(lead)]
    chips: list[tuple[int, int, LinkChip]] = []
    pos = len(lead)
    for node in block.children:
        if isinstance(node, LinkChip):
            segments.append(Segment(node.title, "chip"))
            chips.append((pos, pos + len(node.title), node))
            pos += len(node.title)
            chars.append(pos)
        else:
            segments.append(Segment(node.text, _inline_style(node)))
            for _ in node.text:
                pos += 1
                chars.append(pos)

    return BlockLayout(kind, level, tuple(segments), tuple(chars), tuple(chips))


def layout_document(doc: Document) -> list[BlockLayout]:
    out: list[BlockLayout] = []
    prev = None
    number = 0
    for block in doc.blocks:
        if isinstance(block, NumberedItem):
            number = number + 1 if isinstance(prev, NumberedItem) else 1
        out.append(layout_block(block, number))
        prev = block
    return out
