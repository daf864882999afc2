from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

FENCE_MARKER = "```"


def is_fence(text: str) -> bool:
    """True when the trimmed text opens (or closes) a fenced code block."""
    return text.strip().startswith(FENCE_MARKER)


@dataclass(eq=False)
class LogicalLine:
    """One editable unit of a note.

    Normally a single source line; a fenced code block is kept as one logical
    line spanning several source lines.

    Attributes:
        raw_text: Committed markdown text.
        editing: Whether the line currently shows its raw editing buffer.
        buffer: In-progress text while editing, ``None`` otherwise.
        cursor: Caret offset into ``buffer`` while editing.
        html: Last successfully rendered fragment (``None`` until first render).
        rendered_height: Layout hint in pixels for the row showing this line.

    Equality is identity: two lines with the same text are still different
    positions in a document.
    """

    raw_text: str = ""
    editing: bool = False
    buffer: Optional[str] = None
    cursor: int = 0
    html: Optional[str] = None
    rendered_height: int = 0

    @property
    def current_text(self) -> str:
        """Buffer text while editing, committed text otherwise."""
        if self.editing and self.buffer is not None:
            return self.buffer
        return self.raw_text

    @property
    def multi_line(self) -> bool:
        return is_fence(self.current_text)

    @property
    def line_count(self) -> int:
        return self.current_text.count("\n") + 1
