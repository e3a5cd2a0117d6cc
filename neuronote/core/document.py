"""
Structured rich-text document.

The document is an immutable value: every edit function takes a document
and returns a new one, so the editor can compare snapshots, revalidate
captured positions and hand the previous value to undo without copying.

Caret offsets count *units*: one per character of a text span and one per
LinkChip. A chip is atomic, the caret can sit before or after it but never
inside it.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Union


# ───────────────────────── inline nodes ─────────────────────────

@dataclass(frozen=True)
class Text:
    text: str


@dataclass(frozen=True)
class Bold:
    text: str


@dataclass(frozen=True)
class Italic:
    text: str


@dataclass(frozen=True)
class InlineCode:
    text: str


@dataclass(frozen=True)
class LinkChip:
    title: str


Inline = Union[Text, Bold, Italic, InlineCode, LinkChip]
TEXT_SPANS = (Text, Bold, Italic, InlineCode)


# ───────────────────────── block nodes ─────────────────────────

@dataclass(frozen=True)
class Paragraph:
    children: tuple = ()


@dataclass(frozen=True)
class Heading:
    level: int
    children: tuple = ()


@dataclass(frozen=True)
class BulletItem:
    children: tuple = ()


@dataclass(frozen=True)
class NumberedItem:
    children: tuple = ()


@dataclass(frozen=True)
class Quote:
    children: tuple = ()


@dataclass(frozen=True)
class Rule:
    pass


@dataclass(frozen=True)
class CodeBlock:
    text: str = ""
    lang: str = ""


Block = Union[Paragraph, Heading, BulletItem, NumberedItem, Quote, Rule, CodeBlock]
INLINE_BLOCKS = (Paragraph, Heading, BulletItem, NumberedItem, Quote)
# Enter inside these continues the same block type
CONTINUED_BLOCKS = (BulletItem, NumberedItem, Quote)


@dataclass(frozen=True)
class Document:
    blocks: tuple = ()

    def __len__(self) -> int:
        return len(self.blocks)

    def block(self, index: int) -> Block:
        return self.blocks[index]


@dataclass(frozen=True, order=True)
class Position:
    block: int
    offset: int


@dataclass(frozen=True)
class Selection:
    start: Position
    end: Position

    @classmethod
    def caret(cls, pos: Position) -> "Selection":
        return cls(pos, pos)

    @property
    def is_collapsed(self) -> bool:
        return self.start == self.end


# ───────────────────────── measuring ─────────────────────────

def unit_length(node: Inline) -> int:
    return 1 if isinstance(node, LinkChip) else len(node.text)


def block_length(block: Block) -> int:
    if isinstance(block, CodeBlock):
        return len(block.text)
    if isinstance(block, Rule):
        return 0
    return sum(unit_length(n) for n in block.children)


def plain_text(block: Block) -> str:
    """Visible text of a block; chips contribute their title."""
    if isinstance(block, CodeBlock):
        return block.text
    if isinstance(block, Rule):
        return ""
    return "".join(n.title if isinstance(n, LinkChip) else n.text for n in block.children)


def end_position(doc: Document) -> Position:
    if not doc.blocks:
        return Position(0, 0)
    last = len(doc.blocks) - 1
    return Position(last, block_length(doc.blocks[last]))


def clamp_position(doc: Document, pos: Position) -> Position:
    if not doc.blocks:
        return Position(0, 0)
    index = min(max(pos.block, 0), len(doc.blocks) - 1)
    offset = min(max(pos.offset, 0), block_length(doc.blocks[index]))
    return Position(index, offset)


def unit_before(doc: Document, pos: Position) -> str | LinkChip | None:
    """The character (or chip) immediately before the caret, within its block."""
    if pos.offset <= 0 or pos.block >= len(doc.blocks):
        return None
    block = doc.blocks[pos.block]
    if isinstance(block, Rule):
        return None
    if isinstance(block, CodeBlock):
        return block.text[pos.offset - 1] if pos.offset <= len(block.text) else None

    start = 0
    for node in block.children:
        size = unit_length(node)
        if start < pos.offset <= start + size:
            if isinstance(node, LinkChip):
                return node
            return node.text[pos.offset - start - 1]
        start += size
    return None


def move_position(doc: Document, pos: Position, delta: int) -> Position:
    """Move the caret by delta units, wrapping across block boundaries."""
    pos = clamp_position(doc, pos)
    index, offset = pos.block, pos.offset + delta
    while offset < 0 and index > 0:
        index -= 1
        offset += block_length(doc.blocks[index]) + 1
    while index < len(doc.blocks) - 1 and offset > block_length(doc.blocks[index]):
        offset -= block_length(doc.blocks[index]) + 1
        index += 1
    return clamp_position(doc, Position(index, offset))


# ───────────────────────── inline helpers ─────────────────────────

def normalize_inlines(nodes) -> tuple:
    """Drop empty text spans and merge neighbouring spans of the same kind."""
    out: list = []
    for node in nodes:
        if isinstance(node, LinkChip):
            out.append(node)
            continue
        if not node.text:
            continue
        if out and type(out[-1]) is type(node):
            out[-1] = type(node)(out[-1].text + node.text)
        else:
            out.append(node)
    return tuple(out)


def split_inlines(nodes, offset: int) -> tuple[tuple, tuple]:
    left: list = []
    right: list = []
    start = 0
    for node in nodes:
        size = unit_length(node)
        if start + size <= offset:
            left.append(node)
        elif start >= offset:
            right.append(node)
        else:
            # strictly inside a text span; chips have size 1 and never land here
            cut = offset - start
            left.append(type(node)(node.text[:cut]))
            right.append(type(node)(node.text[cut:]))
        start += size
    return tuple(left), tuple(right)


def _insert_text_inlines(nodes, offset: int, text: str) -> tuple:
    left, right = split_inlines(nodes, offset)
    if left and isinstance(left[-1], TEXT_SPANS):
        tail = left[-1]
        left = left[:-1] + (type(tail)(tail.text + text),)
    elif right and isinstance(right[0], Text):
        right = (Text(text + right[0].text),) + right[1:]
    else:
        left = left + (Text(text),)
    return normalize_inlines(left + right)


# ───────────────────────── block-level edits ─────────────────────────

def replace_block(doc: Document, index: int, block: Block) -> Document:
    blocks = list(doc.blocks)
    blocks[index] = block
    return Document(tuple(blocks))


def insert_blocks(doc: Document, index: int, blocks) -> Document:
    return Document(doc.blocks[:index] + tuple(blocks) + doc.blocks[index:])


def remove_block(doc: Document, index: int) -> Document:
    return Document(doc.blocks[:index] + doc.blocks[index + 1:])


def _ensure_block(doc: Document) -> Document:
    return doc if doc.blocks else Document((Paragraph(),))


def split_block_at(block: Block, offset: int) -> tuple[Block, Block | None]:
    """Split a block into (head, tail); a Rule has no tail."""
    if isinstance(block, Rule):
        return block, None
    if isinstance(block, CodeBlock):
        return replace(block, text=block.text[:offset]), replace(block, text=block.text[offset:])
    left, right = split_inlines(block.children, offset)
    return replace(block, children=left), replace(block, children=right)


# ───────────────────────── caret edits ─────────────────────────

def insert_text(doc: Document, pos: Position, text: str) -> tuple[Document, Position]:
    doc = _ensure_block(doc)
    pos = clamp_position(doc, pos)
    block = doc.blocks[pos.block]

    if isinstance(block, CodeBlock):
        new_text = block.text[:pos.offset] + text + block.text[pos.offset:]
        return replace_block(doc, pos.block, replace(block, text=new_text)), Position(pos.block, pos.offset + len(text))

    if isinstance(block, Rule):
        doc = insert_blocks(doc, pos.block + 1, [Paragraph((Text(text),))])
        return doc, Position(pos.block + 1, len(text))

    children = _insert_text_inlines(block.children, pos.offset, text)
    return replace_block(doc, pos.block, replace(block, children=children)), Position(pos.block, pos.offset + len(text))


def insert_inline(doc: Document, pos: Position, node: Inline) -> tuple[Document, Position]:
    doc = _ensure_block(doc)
    pos = clamp_position(doc, pos)
    block = doc.blocks[pos.block]

    if not isinstance(block, INLINE_BLOCKS):
        doc = insert_blocks(doc, pos.block + 1, [Paragraph((node,))])
        return doc, Position(pos.block + 1, unit_length(node))

    left, right = split_inlines(block.children, pos.offset)
    children = normalize_inlines(left + (node,) + right)
    return replace_block(doc, pos.block, replace(block, children=children)), Position(pos.block, pos.offset + unit_length(node))


def delete_range(doc: Document, start: Position, end: Position) -> Document:
    """Delete units between two positions of the same block."""
    if start.block != end.block:
        raise ValueError("delete_range spans a single block")
    if end.offset < start.offset:
        start, end = end, start
    block = doc.blocks[start.block]
    if isinstance(block, Rule) or start.offset == end.offset:
        return doc
    if isinstance(block, CodeBlock):
        text = block.text[:start.offset] + block.text[end.offset:]
        return replace_block(doc, start.block, replace(block, text=text))

    head, rest = split_inlines(block.children, end.offset)
    left, _ = split_inlines(head, start.offset)
    return replace_block(doc, start.block, replace(block, children=normalize_inlines(left + rest)))


def delete_selection(doc: Document, start: Position, end: Position) -> tuple[Document, Position]:
    """Delete a range that may span blocks; the end block's remainder joins the start block."""
    start, end = clamp_position(doc, min(start, end)), clamp_position(doc, max(start, end))
    if start.block == end.block:
        return delete_range(doc, start, end), start

    head, _ = split_block_at(doc.blocks[start.block], start.offset)
    _, tail = split_block_at(doc.blocks[end.block], end.offset)
    if isinstance(head, INLINE_BLOCKS) and isinstance(tail, INLINE_BLOCKS):
        kept = [replace(head, children=normalize_inlines(head.children + tail.children))]
    else:
        kept = [b for b in (head, tail) if b is not None and (isinstance(b, Rule) or block_length(b) > 0)]
    blocks = doc.blocks[:start.block] + tuple(kept) + doc.blocks[end.block + 1:]
    doc = _ensure_block(Document(blocks))
    return doc, clamp_position(doc, start if kept else Position(start.block, 0))


def delete_backward(doc: Document, pos: Position) -> tuple[Document, Position]:
    """Backspace: remove one unit before the caret, or join with the previous block."""
    if not doc.blocks:
        return doc, Position(0, 0)
    pos = clamp_position(doc, pos)

    if pos.offset > 0:
        prev = Position(pos.block, pos.offset - 1)
        return delete_range(doc, prev, pos), prev

    if pos.block == 0:
        return doc, pos

    cur = doc.blocks[pos.block]
    prev_block = doc.blocks[pos.block - 1]
    prev_end = Position(pos.block - 1, block_length(prev_block))

    if isinstance(prev_block, Rule):
        return remove_block(doc, pos.block - 1), Position(pos.block - 1, 0)
    if isinstance(cur, Rule) or block_length(cur) == 0:
        return remove_block(doc, pos.block), prev_end
    if isinstance(prev_block, INLINE_BLOCKS) and isinstance(cur, INLINE_BLOCKS):
        merged = replace(prev_block, children=normalize_inlines(prev_block.children + cur.children))
        doc = remove_block(replace_block(doc, pos.block - 1, merged), pos.block)
        return doc, prev_end
    # code blocks are not merged into their neighbours
    return doc, prev_end


def delete_forward(doc: Document, pos: Position) -> tuple[Document, Position]:
    """Delete key: remove one unit after the caret, or pull the next block up."""
    if not doc.blocks:
        return doc, Position(0, 0)
    pos = clamp_position(doc, pos)

    if pos.offset < block_length(doc.blocks[pos.block]):
        return delete_range(doc, pos, Position(pos.block, pos.offset + 1)), pos
    if pos.block == len(doc.blocks) - 1:
        return doc, pos
    # joining with the next block is a backspace at its start
    return delete_backward(doc, Position(pos.block + 1, 0))


def split_block(doc: Document, pos: Position) -> tuple[Document, Position]:
    """Enter key."""
    doc = _ensure_block(doc)
    pos = clamp_position(doc, pos)
    block = doc.blocks[pos.block]

    if isinstance(block, CodeBlock):
        return insert_text(doc, pos, "\n")

    if isinstance(block, Rule):
        return insert_blocks(doc, pos.block + 1, [Paragraph()]), Position(pos.block + 1, 0)

    if isinstance(block, CONTINUED_BLOCKS) and block_length(block) == 0:
        # Enter on an empty list item leaves the list
        return replace_block(doc, pos.block, Paragraph()), pos

    head, tail = split_block_at(block, pos.offset)
    if not isinstance(block, CONTINUED_BLOCKS):
        tail = Paragraph(tail.children)
    doc = replace_block(doc, pos.block, head)
    return insert_blocks(doc, pos.block + 1, [tail]), Position(pos.block + 1, 0)


def insert_blocks_at(doc: Document, pos: Position, blocks) -> tuple[Document, int, int | None]:
    """
    Insert blocks at the caret, splitting the block under it.

    Empty halves of the split block are dropped. Returns the new document,
    the index of the first inserted block and the index of the remaining
    tail (None when nothing follows on the split line).
    """
    doc = _ensure_block(doc)
    pos = clamp_position(doc, pos)
    head, tail = split_block_at(doc.blocks[pos.block], pos.offset)

    before = [head] if isinstance(head, Rule) or block_length(head) > 0 else []
    after = [tail] if tail is not None and block_length(tail) > 0 else []

    new = tuple(blocks)
    merged = doc.blocks[:pos.block] + tuple(before) + new + tuple(after) + doc.blocks[pos.block + 1:]
    first = pos.block + len(before)
    tail_index = first + len(new) if after else None
    return Document(merged), first, tail_index
