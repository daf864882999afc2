from __future__ import annotations
import logging
from typing import Callable, Dict, Iterable, List, Optional

from notesplus.models.document import Document
from notesplus.models.line import LogicalLine
from notesplus.services.layout_metrics import LayoutMetrics
from notesplus.services.line_editor import KeyAction, LineEditor
from notesplus.services.markdown_service import MarkdownService

_LOG = logging.getLogger(__name__)

ChangeListener = Callable[[str], None]


class DocumentController:
    """Owns the document of a note and drives line editing across lines.

    Lines are addressed by their current index; the index of a given line is
    looked up again on every call because splits and merges shift positions.
    Listeners receive the serialized note whenever its content changes, except
    while :meth:`load` populates a new document.
    """

    def __init__(
        self,
        markdown: Optional[MarkdownService] = None,
        metrics: Optional[LayoutMetrics] = None,
        on_change: Optional[ChangeListener] = None,
    ) -> None:
        self.markdown = markdown or MarkdownService()
        self.metrics = metrics or LayoutMetrics()
        self._listeners: List[ChangeListener] = []
        if on_change is not None:
            self._listeners.append(on_change)
        self._loading = False
        self._editors: Dict[LogicalLine, LineEditor] = {}
        self.document = Document()

    # ---------- Document ----------
    def add_listener(self, listener: ChangeListener) -> None:
        self._listeners.append(listener)

    @property
    def lines(self) -> List[LogicalLine]:
        return self.document.lines

    def __len__(self) -> int:
        return len(self.document)

    def load(self, raw_text: str) -> None:
        """Replace the document with ``raw_text`` without notifying listeners."""
        self._loading = True
        try:
            self.document = Document.from_text(raw_text)
            self._editors = {}
        finally:
            self._loading = False
        _LOG.debug("Loaded document with %d logical lines", len(self.document))

    def serialize(self) -> str:
        return self.document.to_text()

    def index_of(self, line: LogicalLine) -> int:
        return self.document.index_of(line)

    def editor_for(self, line: LogicalLine) -> LineEditor:
        editor = self._editors.get(line)
        if editor is None:
            editor = LineEditor(line, self.markdown, self.metrics)
            self._editors[line] = editor
        return editor

    def editor_at(self, index: int) -> LineEditor:
        return self.editor_for(self.document[index])

    @property
    def active_index(self) -> Optional[int]:
        for idx, line in enumerate(self.document):
            if line.editing:
                return idx
        return None

    @property
    def active_line(self) -> Optional[LogicalLine]:
        idx = self.active_index
        return None if idx is None else self.document[idx]

    def insert_after(self, index: int, text: str = "") -> LogicalLine:
        return self.document.insert_after(index, LogicalLine(text))

    def remove_at(self, index: int) -> bool:
        line = self.document[index]
        if not self.document.remove_at(index):
            return False
        self._editors.pop(line, None)
        return True

    def _notify(self) -> None:
        if self._loading:
            return
        content = self.serialize()
        for listener in list(self._listeners):
            listener(content)

    # ---------- Editing ----------
    def activate(self, index: int, cursor: Optional[int] = None) -> LogicalLine:
        """Start editing the line at ``index``, committing any other editing line."""
        target = self.document[index]
        for idx, line in enumerate(self.document):
            if line is not target and line.editing:
                self.commit(idx)
        self.editor_for(target).activate(cursor)
        return target

    def edit(self, index: int, text: str, cursor: Optional[int] = None) -> bool:
        """Apply a keystroke's buffer. Returns True if the editing mode switched."""
        line = self.document[index]
        previous = line.current_text
        switched = self.editor_for(line).edit(text, cursor)
        if text != previous:
            self._notify()
        return switched

    def commit(self, index: int) -> bool:
        changed = self.editor_at(index).commit()
        if changed:
            self._notify()
        return changed

    def commit_active(self) -> bool:
        idx = self.active_index
        return False if idx is None else self.commit(idx)

    def cancel(self, index: int) -> bool:
        line = self.document[index]
        shown = line.current_text
        cancelled = self.editor_for(line).cancel()
        if cancelled and line.raw_text != shown:
            self._notify()
        return cancelled

    def split(self, index: int) -> int:
        """Split the editing line at its cursor; returns the new line's index."""
        line = self.document[index]
        editor = self.editor_for(line)
        if not line.editing:
            editor.activate()
        _, after = editor.split()
        new_line = self.insert_after(index, after)
        self.editor_for(new_line).activate(0)
        self._notify()
        return index + 1

    def merge_with_previous(self, index: int) -> bool:
        """Join the line at ``index`` onto the previous one and edit at the seam."""
        if index <= 0 or index >= len(self.document):
            return False
        line = self.document[index]
        previous = self.document[index - 1]
        text = line.current_text
        # Joining text onto a fenced block (or a block onto text) would leave
        # newlines in a line that no longer opens a fence
        if text and previous.raw_text and (line.multi_line or previous.multi_line):
            return False
        line.editing = False
        line.buffer = None
        if not self.remove_at(index):
            return False
        boundary = len(previous.raw_text)
        previous.raw_text = previous.raw_text + text
        previous.html = None
        self.editor_for(previous).activate(boundary)
        self._notify()
        return True

    def move_focus(self, index: int, delta: int) -> Optional[int]:
        target = index + delta
        if not 0 <= target < len(self.document):
            return None
        self.commit(index)
        self.activate(target)
        return target

    def handle_key(
        self, index: int, key: str, modifiers: Iterable[str] = ()
    ) -> bool:
        """Apply the editing action bound to ``key``. Returns True if handled."""
        action = self.editor_at(index).action_for(key, modifiers)
        if action is KeyAction.SPLIT:
            self.split(index)
            return True
        if action is KeyAction.MERGE:
            return self.merge_with_previous(index)
        if action is KeyAction.COMMIT:
            self.commit(index)
            return True
        if action is KeyAction.CANCEL:
            self.cancel(index)
            return True
        if action is KeyAction.FOCUS_PREVIOUS:
            return self.move_focus(index, -1) is not None
        if action is KeyAction.FOCUS_NEXT:
            return self.move_focus(index, 1) is not None
        return False

    # ---------- Rendering ----------
    def rendered_html(self, index: int) -> str:
        return self.editor_at(index).rendered_html()

    def rendered_page(self, index: int) -> str:
        return self.markdown.page(self.rendered_html(index))

    def relayout(self, index: int, natural_height: int = 0) -> int:
        return self.editor_at(index).relayout(natural_height)
