from neuronote.core.document import CodeBlock, Document, Paragraph, Position, Text, insert_text
from neuronote.core.triggers import CaretGeometry, MenuKind, Rect, TriggerDetector, compute_anchor


def doc_of(*texts):
    return Document(tuple(Paragraph((Text(t),)) for t in texts))


def test_detects_both_triggers():
    detector = TriggerDetector()
    assert detector.detect(doc_of("/"), Position(0, 1)) is MenuKind.COMMAND
    assert detector.detect(doc_of("see @"), Position(0, 5)) is MenuKind.LINK


def test_no_trigger_elsewhere():
    detector = TriggerDetector()
    assert detector.detect(doc_of("a"), Position(0, 1)) is None
    assert detector.detect(doc_of("/"), Position(0, 0)) is None


def test_code_blocks_never_trigger():
    doc = Document((CodeBlock(text="a/"),))
    assert TriggerDetector().detect(doc, Position(0, 2)) is None


def test_anchor_sits_below_the_caret_line():
    geometry = CaretGeometry(
        caret=Rect(100, 40, 102, 58),
        editor=Rect(20, 10, 500, 400),
        scroll_top=30,
    )
    anchor = compute_anchor(geometry)
    assert anchor.top == 58 - 10 + 24 + 30
    assert anchor.left == 80


def test_captured_range_revalidation():
    detector = TriggerDetector()
    doc = doc_of("/", "other")
    captured = detector.capture(doc, Position(0, 1), MenuKind.COMMAND)
    assert captured.is_valid(doc)

    edited_elsewhere, _ = insert_text(doc, Position(1, 0), "x")
    assert captured.is_valid(edited_elsewhere)

    edited_here, _ = insert_text(doc, Position(0, 0), "x")
    assert not captured.is_valid(edited_here)
    assert not captured.is_valid(Document())
