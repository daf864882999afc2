from __future__ import annotations
from typing import Iterable, Iterator, List, Optional

from notesplus.models.line import LogicalLine, is_fence

LINE_SEPARATOR = "\n"


def split_logical_lines(raw_text: str) -> List[str]:
    """Split note text into logical line texts.

    Lines between a fence marker and the next fence marker (inclusive) are
    merged into one entry. A fence left open at end of input is flushed as
    the last entry.
    """
    result: List[str] = []
    block: Optional[List[str]] = None
    for line in raw_text.split(LINE_SEPARATOR):
        if is_fence(line):
            if block is None:
                block = [line]
            else:
                block.append(line)
                result.append(LINE_SEPARATOR.join(block))
                block = None
        elif block is not None:
            block.append(line)
        else:
            result.append(line)
    if block is not None:
        result.append(LINE_SEPARATOR.join(block))
    return result


class Document:
    """Ordered, never-empty sequence of logical lines.

    Position is the only identity of a line; callers look up the current index
    with :meth:`index_of` whenever they need it.
    """

    def __init__(self, lines: Optional[Iterable[LogicalLine]] = None) -> None:
        self._lines: List[LogicalLine] = list(lines or [])
        if not self._lines:
            self._lines.append(LogicalLine(""))

    @classmethod
    def from_text(cls, raw_text: str) -> "Document":
        return cls(LogicalLine(text) for text in split_logical_lines(raw_text))

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[LogicalLine]:
        return iter(self._lines)

    def __getitem__(self, index: int) -> LogicalLine:
        return self._lines[index]

    @property
    def lines(self) -> List[LogicalLine]:
        return list(self._lines)

    def index_of(self, line: LogicalLine) -> int:
        """Current position of ``line`` by identity, or -1 if it was removed."""
        for idx, candidate in enumerate(self._lines):
            if candidate is line:
                return idx
        return -1

    def insert_after(self, index: int, line: LogicalLine) -> LogicalLine:
        if not -1 <= index < len(self._lines):
            raise IndexError(f"line index out of range: {index}")
        self._lines.insert(index + 1, line)
        return line

    def remove_at(self, index: int) -> bool:
        """Remove the line at ``index``. Refuses to remove the last line."""
        if len(self._lines) <= 1:
            return False
        if not 0 <= index < len(self._lines):
            raise IndexError(f"line index out of range: {index}")
        del self._lines[index]
        return True

    def to_text(self) -> str:
        return LINE_SEPARATOR.join(line.current_text for line in self._lines)
