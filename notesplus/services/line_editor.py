from __future__ import annotations
import logging
from enum import Enum
from typing import Iterable, Optional, Tuple

from notesplus.models.line import LogicalLine
from notesplus.services.layout_metrics import LayoutMetrics
from notesplus.services.markdown_service import BLANK_PLACEHOLDER, MarkdownService

_LOG = logging.getLogger(__name__)

SPLIT_MODIFIERS = frozenset({"Control", "Alt"})


class EditState(Enum):
    RENDERED = "rendered"
    EDITING = "editing"


class EditMode(Enum):
    SINGLE = "single"
    MULTI = "multi"


class KeyAction(Enum):
    NONE = "none"
    SPLIT = "split"
    MERGE = "merge"
    COMMIT = "commit"
    CANCEL = "cancel"
    FOCUS_PREVIOUS = "focus_previous"
    FOCUS_NEXT = "focus_next"


class LineEditor:
    """Rendered/editing state machine for one logical line.

    The editing mode is never stored: it follows the buffer content, so typing
    a fence marker switches to multi-line editing and removing it switches back.
    """

    def __init__(
        self,
        line: LogicalLine,
        markdown: Optional[MarkdownService] = None,
        metrics: Optional[LayoutMetrics] = None,
    ) -> None:
        self.line = line
        self.markdown = markdown or MarkdownService()
        self.metrics = metrics or LayoutMetrics()
        self._committed = line.raw_text

    @property
    def state(self) -> EditState:
        return EditState.EDITING if self.line.editing else EditState.RENDERED

    @property
    def mode(self) -> EditMode:
        return EditMode.MULTI if self.line.multi_line else EditMode.SINGLE

    def _clamp(self, cursor: int, text: str) -> int:
        return max(0, min(cursor, len(text)))

    # ---------- Transitions ----------
    def activate(self, cursor: Optional[int] = None) -> bool:
        """Enter editing with the committed text; cursor defaults to the end.

        Returns False if the line was already editing (only the cursor moves).
        """
        line = self.line
        if line.editing:
            if cursor is not None:
                line.cursor = self._clamp(cursor, line.current_text)
            return False
        self._committed = line.raw_text
        line.buffer = line.raw_text
        line.editing = True
        line.cursor = len(line.buffer) if cursor is None else self._clamp(cursor, line.buffer)
        self.relayout()
        return True

    def edit(self, text: str, cursor: Optional[int] = None) -> bool:
        """Replace the buffer after a keystroke. Returns True if the mode switched."""
        line = self.line
        if not line.editing:
            raise RuntimeError("line is not being edited")
        before = self.mode
        line.buffer = text
        line.cursor = len(text) if cursor is None else self._clamp(cursor, text)
        switched = self.mode is not before
        if switched:
            _LOG.debug("Line switched to %s editing", self.mode.value)
            self.relayout()
        elif self.mode is EditMode.MULTI:
            # Block height follows its line count while typing
            self.relayout()
        return switched

    def commit(self) -> bool:
        """Take the buffer as the new raw text. Returns True if the text changed."""
        line = self.line
        if not line.editing:
            return False
        text = line.buffer if line.buffer is not None else line.raw_text
        line.raw_text = text
        line.editing = False
        line.buffer = None
        line.cursor = 0
        changed = text != self._committed
        self._committed = text
        self.render()
        return changed

    def cancel(self) -> bool:
        """Leave editing and restore the text committed before activation."""
        line = self.line
        if not line.editing:
            return False
        line.raw_text = self._committed
        line.editing = False
        line.buffer = None
        line.cursor = 0
        self.relayout()
        return True

    def split(self) -> Tuple[str, str]:
        """Cut the buffer at the cursor and commit the part before it."""
        line = self.line
        if not line.editing:
            raise RuntimeError("line is not being edited")
        text = line.current_text
        before, after = text[: line.cursor], text[line.cursor :]
        line.buffer = before
        self.commit()
        return before, after

    # ---------- Rendering ----------
    def render(self) -> str:
        try:
            html = self.markdown.render_line(self.line.raw_text)
        except Exception:
            _LOG.exception("Failed to render line %r", self.line.raw_text[:80])
            return self.line.html or BLANK_PLACEHOLDER
        self.line.html = html
        self.relayout()
        return html

    def rendered_html(self) -> str:
        """Rendered fragment, rendering lazily on first use."""
        if self.line.html is None:
            return self.render()
        return self.line.html

    def relayout(self, natural_height: int = 0) -> int:
        line = self.line
        if line.editing:
            height = self.metrics.editing_height(line.multi_line, line.line_count)
        else:
            height = self.metrics.rendered_height(natural_height, line.line_count)
        line.rendered_height = height
        return height

    # ---------- Keys ----------
    def action_for(self, key: str, modifiers: Iterable[str] = ()) -> KeyAction:
        """Map a Tk keysym (plus held modifiers) to an editing action."""
        if not self.line.editing:
            return KeyAction.NONE
        mods = set(modifiers)
        if key in ("Return", "KP_Enter"):
            if self.mode is EditMode.MULTI and not mods & SPLIT_MODIFIERS:
                return KeyAction.NONE
            return KeyAction.SPLIT
        if key == "BackSpace":
            return KeyAction.MERGE if self.line.cursor == 0 else KeyAction.NONE
        if key == "Escape":
            return KeyAction.CANCEL if "Shift" in mods else KeyAction.COMMIT
        if self.mode is EditMode.SINGLE:
            if key == "Up":
                return KeyAction.FOCUS_PREVIOUS
            if key == "Down":
                return KeyAction.FOCUS_NEXT
        return KeyAction.NONE
