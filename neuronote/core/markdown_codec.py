"""
Markdown <-> structured document.

encode() never raises: anything it cannot read as a marker is kept as
literal text. decode(encode(m)) keeps every wiki-link and block type of m,
and encode(decode(encode(m))) == encode(m).
"""
from __future__ import annotations

import re

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
    Paragraph,
    Quote,
    Rule,
    Text,
    normalize_inlines,
)
from neuronote.core.wikilinks import WIKILINK_RE, format_wikilink, is_link_title

NBSP = "\u00a0"
FENCE = "```"

_HEADING_RE = re.compile(r"^(#{1,3})[ \t]+(.*)$")
_BULLET_RE = re.compile(r"^-[ \t]+(.*)$")
_NUMBERED_RE = re.compile(r"^\d+\.[ \t]+(.*)$")
_QUOTE_RE = re.compile(r"^>[ \t]?(.*)$")
_RULE_RE = re.compile(r"^-{3,}[ \t]*$")

# blocks of these kinds stay on consecutive lines when they follow each other
_TIGHT_RUNS = (BulletItem, NumberedItem, Quote)


# ───────────────────────── encode ─────────────────────────

def encode(markdown: str) -> Document:
    lines = (markdown or "").replace("\r\n", "\n").replace("\r", "\n").replace(NBSP, " ").split("\n")
    blocks: list = []
    i = 0
    while i < len(lines):
        line = lines[i]

        if line.startswith(FENCE):
            close = _find_fence_close(lines, i + 1)
            if close is not None:
                lang = line[len(FENCE):].strip()
                blocks.append(CodeBlock(text="\n".join(lines[i + 1:close]), lang=lang))
                i = close + 1
                continue
            # unterminated fence: the opening line is plain text

        if line.strip():
            blocks.append(_encode_line(line))
        i += 1

    return Document(tuple(blocks))


def _find_fence_close(lines: list[str], start: int) -> int | None:
    for j in range(start, len(lines)):
        if lines[j].strip() == FENCE:
            return j
    return None


def _encode_line(line: str):
    if _RULE_RE.match(line):
        return Rule()
    m = _HEADING_RE.match(line)
    if m:
        return Heading(level=len(m.group(1)), children=encode_inlines(m.group(2)))
    m = _BULLET_RE.match(line)
    if m:
        return BulletItem(encode_inlines(m.group(1)))
    m = _NUMBERED_RE.match(line)
    if m:
        return NumberedItem(encode_inlines(m.group(1)))
    m = _QUOTE_RE.match(line)
    if m:
        return Quote(encode_inlines(m.group(1)))
    return Paragraph(encode_inlines(line))


def encode_inlines(text: str) -> tuple:
    """
    Single left-to-right scan. At each position the first matching marker
    wins: wiki-link, inline code, bold, italic. Unmatched markers are text.
    """
    nodes: list = []
    buf: list[str] = []
    i = 0
    n = len(text)

    def flush():
        if buf:
            nodes.append(Text("".join(buf)))
            buf.clear()

    while i < n:
        ch = text[i]

        if text.startswith("[[", i):
            m = WIKILINK_RE.match(text, i)
            if m and is_link_title(m.group(1)):
                flush()
                nodes.append(LinkChip(m.group(1)))
                i = m.end()
                continue

        elif ch == "`":
            end = text.find("`", i + 1)
            if end > i + 1:
                flush()
                nodes.append(InlineCode(text[i + 1:end]))
                i = end + 1
                continue

        elif text.startswith("**", i):
            span = _emphasis(text, i, "**")
            if span is not None:
                flush()
                nodes.append(Bold(span))
                i += len(span) + 4
                continue

        if ch == "*":
            span = _emphasis(text, i, "*")
            if span is not None:
                flush()
                nodes.append(Italic(span))
                i += len(span) + 2
                continue

        buf.append(ch)
        i += 1

    flush()
    return normalize_inlines(nodes)


def _emphasis(text: str, i: int, marker: str) -> str | None:
    start = i + len(marker)
    end = text.find(marker, start)
    if end <= start:
        return None
    inner = text[start:end]
    # a link inside emphasis stays a chip; the markers become literal text
    if any(is_link_title(m.group(1)) for m in WIKILINK_RE.finditer(inner)):
        return None
    return inner


# ───────────────────────── decode ─────────────────────────

def decode(doc: Document) -> str:
    parts: list[str] = []
    prev = None
    number = 0
    for block in doc.blocks:
        if isinstance(block, NumberedItem):
            number = number + 1 if isinstance(prev, NumberedItem) else 1
        text = _decode_block(block, number)
        if text is None:
            continue
        if parts:
            tight = isinstance(block, _TIGHT_RUNS) and type(block) is type(prev)
            parts.append("\n" if tight else "\n\n")
        parts.append(text)
        prev = block
    return "".join(parts)


def _decode_block(block, number: int) -> str | None:
    if isinstance(block, Rule):
        return "---"
    if isinstance(block, CodeBlock):
        return f"{FENCE}{block.lang}\n{block.text}\n{FENCE}"
    inline = decode_inlines(block.children)
    if isinstance(block, Heading):
        return "#" * block.level + " " + inline
    if isinstance(block, BulletItem):
        return "- " + inline
    if isinstance(block, NumberedItem):
        return f"{number}. " + inline
    if isinstance(block, Quote):
        return "> " + inline
    # empty paragraphs only exist while typing
    return inline or None


def decode_inlines(nodes) -> str:
    out: list[str] = []
    for node in nodes:
        if isinstance(node, LinkChip):
            out.append(format_wikilink(node.title))
        elif isinstance(node, Bold):
            out.append(f"**{node.text}**")
        elif isinstance(node, Italic):
            out.append(f"*{node.text}*")
        elif isinstance(node, InlineCode):
            out.append(f"`{node.text}`")
        else:
            out.append(node.text)
    return "".join(out).replace(NBSP, " ")
