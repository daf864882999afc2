import pytest

from notesplus.models.document import Document, split_logical_lines
from notesplus.models.line import LogicalLine, is_fence


def test_fenced_block_is_one_logical_line():
    raw = "intro\n```python\nx = 1\ny = 2\n```\noutro"
    assert split_logical_lines(raw) == ["intro", "```python\nx = 1\ny = 2\n```", "outro"]


def test_unterminated_fence_is_flushed_at_end():
    assert split_logical_lines("a\n```\ncode\nmore") == ["a", "```\ncode\nmore"]


def test_indented_fence_marker_counts():
    assert is_fence("   ```js")
    assert not is_fence("text ```")


def test_round_trip_is_exact():
    raw = "# Title\n\n- item\n```\nblock\n```\n\ntrailing\n"
    doc = Document.from_text(raw)
    assert len(doc) == 7
    assert doc.to_text() == raw


def test_carriage_returns_are_kept_in_line_text():
    raw = "one\r\ntwo"
    doc = Document.from_text(raw)
    assert [line.raw_text for line in doc] == ["one\r", "two"]
    assert doc.to_text() == raw


def test_empty_text_gives_one_blank_line():
    doc = Document.from_text("")
    assert len(doc) == 1
    assert doc[0].raw_text == ""
    assert Document().to_text() == ""


def test_last_line_cannot_be_removed():
    doc = Document.from_text("only")
    assert doc.remove_at(0) is False
    assert len(doc) == 1


def test_remove_and_insert():
    doc = Document.from_text("a\nb")
    assert doc.remove_at(0) is True
    assert doc.to_text() == "b"
    doc.insert_after(-1, LogicalLine("first"))
    doc.insert_after(1, LogicalLine("last"))
    assert doc.to_text() == "first\nb\nlast"
    with pytest.raises(IndexError):
        doc.insert_after(3, LogicalLine("x"))


def test_index_of_uses_identity():
    doc = Document.from_text("same\nsame")
    second = doc[1]
    assert doc.index_of(second) == 1
    assert doc.index_of(LogicalLine("same")) == -1
    doc.remove_at(0)
    assert doc.index_of(second) == 0


def test_serialization_uses_editing_buffer():
    doc = Document.from_text("a\nb")
    line = doc[1]
    line.editing = True
    line.buffer = "b changed"
    assert doc.to_text() == "a\nb changed"
    assert line.multi_line is False
    line.buffer = "```\nx\n```"
    assert line.multi_line is True
    assert line.line_count == 3
