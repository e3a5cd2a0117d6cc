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
)
from neuronote.core.markdown_codec import decode, encode
from neuronote.core.wikilinks import extract_link_titles

EVERYTHING = "\n\n".join([
    "# Heading one",
    "## Heading two",
    "### Heading three",
    "Some **bold**, *italic* and `code` about [[Moon]].",
    "```python\nprint('hi')\n\n# not a heading\n```",
    "- first\n- second [[Earth]]",
    "1. one\n2. two",
    "> quoted [[Sun]]",
    "---",
    "Last line",
])

SAMPLES = [
    EVERYTHING,
    "",
    "plain",
    "**see [[A]]**",
    "```\nunterminated",
    "- a\n\n- b",
    "1. x\n7. y",
    "***both***",
    "a *b **c** d* e",
    "[[ ]] and [[]]",
    "line one\nline two",
    "> q1\n> q2\n\n---\n---",
]


def _block_types(doc):
    return [type(b) for b in doc.blocks]


def test_encode_blocks_and_inlines():
    doc = encode("# Title\n\nSome **bold** and [[Moon]].")
    assert doc.blocks == (
        Heading(1, (Text("Title"),)),
        Paragraph((Text("Some "), Bold("bold"), Text(" and "), LinkChip("Moon"), Text("."))),
    )


def test_encode_inline_styles():
    doc = encode("*it* `co de`")
    assert doc.blocks[0].children == (Italic("it"), Text(" "), InlineCode("co de"))


def test_roundtrip_keeps_links_and_block_types():
    doc = encode(EVERYTHING)
    out = decode(doc)

    assert extract_link_titles(out) == extract_link_titles(EVERYTHING)
    assert _block_types(encode(out)) == _block_types(doc)
    assert _block_types(doc) == [
        Heading, Heading, Heading, Paragraph, CodeBlock,
        BulletItem, BulletItem, NumberedItem, NumberedItem, Quote, Rule, Paragraph,
    ]


def test_canonical_markdown_roundtrips_exactly():
    assert decode(encode(EVERYTHING)) == EVERYTHING


def test_encode_is_idempotent_through_decode():
    for m in SAMPLES:
        once = encode(m)
        assert encode(decode(once)) == once, m


def test_code_block_keeps_content_verbatim():
    doc = encode("```py\nx = 1\n\n# not heading\n```")
    assert doc.blocks == (CodeBlock(text="x = 1\n\n# not heading", lang="py"),)


def test_unterminated_fence_is_text():
    doc = encode("```\ncode")
    assert doc.blocks == (Paragraph((Text("```"),)), Paragraph((Text("code"),)))


def test_link_inside_emphasis_stays_a_chip():
    doc = encode("**see [[A]]**")
    assert LinkChip("A") in doc.blocks[0].children
    assert decode(doc) == "**see [[A]]**"


def test_numbered_items_are_renumbered():
    assert decode(encode("1. x\n7. y")) == "1. x\n2. y"


def test_nbsp_becomes_space():
    assert encode("a\u00a0b").blocks == (Paragraph((Text("a b"),)),)
    assert decode(Document((Paragraph((LinkChip("A"), Text("\u00a0"))),))) == "[[A]] "


def test_blank_and_empty_input():
    assert encode("").blocks == ()
    assert encode("\n\n  \n").blocks == ()
    assert decode(Document()) == ""


def test_malformed_markers_degrade_to_text():
    doc = encode("[[ ]] and **open")
    assert decode(doc) == "[[ ]] and **open"
    assert not any(isinstance(n, (LinkChip, Bold)) for n in doc.blocks[0].children)
