from __future__ import annotations
import contextlib
import logging
import tkinter as tk
from typing import Any, Callable, Dict, List, Optional, Tuple

from notesplus.models.line import LogicalLine
from notesplus.services.document_controller import DocumentController
from notesplus.ui.html_view import HtmlLineView
from notesplus.ui.theme import LIGHT_THEME, ThemeColors

_LOG = logging.getLogger(__name__)

EDIT_FONT = ("Consolas", 11)
ACTION_KEYS = {"Return", "KP_Enter", "BackSpace", "Escape", "Up", "Down"}

# Tk event.state bits
_SHIFT_MASK = 0x0001
_CONTROL_MASK = 0x0004
_ALT_MASKS = (0x0008, 0x20000)


def event_modifiers(state: int) -> Tuple[str, ...]:
    """Names of the modifier keys held according to a Tk ``event.state``."""
    mods: List[str] = []
    if state & _SHIFT_MASK:
        mods.append("Shift")
    if state & _CONTROL_MASK:
        mods.append("Control")
    if any(state & mask for mask in _ALT_MASKS):
        mods.append("Alt")
    return tuple(mods)


class LineRowView:
    """Widgets for one logical line: a rendered view and one editing buffer."""

    def __init__(self, panel: "MarkdownEditorPanel", line: LogicalLine) -> None:
        self.panel = panel
        self.line = line
        theme = panel.theme
        self._showing: Optional[str] = None

        self.frame = tk.Frame(
            panel.lines_frame,
            bg=theme.background,
            height=panel.metrics.min_height,
            highlightthickness=1,
            highlightbackground=theme.background,
        )
        self.frame.pack_propagate(False)

        self.rendered: HtmlLineView = panel.view_factory(self.frame)
        # Editing starts on release so a drag can select rendered text for copying
        self.rendered.bind("<ButtonRelease-1>", self._on_rendered_release)
        self.rendered.bind("<Control-a>", self._on_select_all)
        self.rendered.bind("<Enter>", lambda e: self._set_outline(theme.hover_border))
        self.rendered.bind("<Leave>", lambda e: self._set_outline(theme.background))

        self.editor = tk.Text(
            self.frame,
            height=1,
            wrap="none",
            bd=0,
            highlightthickness=2,
            highlightcolor=theme.edit_border,
            highlightbackground=theme.edit_border,
            padx=6,
            pady=3,
            bg=theme.edit_bg,
            fg=theme.edit_fg,
            insertbackground=theme.caret,
            selectbackground=theme.selection_bg,
            selectforeground=theme.selection_fg,
            font=EDIT_FONT,
            undo=True,
        )
        self.editor.bind("<KeyPress>", self._on_key_press)
        self.editor.bind("<KeyRelease>", self._on_key_release)
        self.editor.bind("<FocusOut>", self._on_focus_out)

    # ---------- Event handlers ----------
    def _set_outline(self, color: str) -> None:
        with contextlib.suppress(Exception):
            self.frame.configure(highlightbackground=color)

    def _on_rendered_release(self, _event=None) -> None:
        if self.rendered.selected_text():
            return
        self.panel.activate_line(self.line)

    def _on_select_all(self, _event=None) -> str:
        self.rendered.select_all()
        return "break"

    def _on_key_press(self, event) -> Optional[str]:
        key = event.keysym
        if key not in ACTION_KEYS:
            return None
        if key == "BackSpace" and self.editor.tag_ranges("sel"):
            return None
        self.panel.sync_buffer(self)
        if self.panel.handle_key(self, key, event_modifiers(event.state)):
            return "break"
        return None

    def _on_key_release(self, _event=None) -> None:
        if self.line.editing:
            self.panel.sync_buffer(self)

    def _on_focus_out(self, _event=None) -> None:
        self.panel.on_editor_focus_out(self)

    # ---------- Buffer ----------
    def buffer_text(self) -> str:
        return self.editor.get("1.0", "end-1c")

    def buffer_cursor(self) -> int:
        return len(self.editor.get("1.0", "insert"))

    def apply_mode(self) -> None:
        """Resize the editing buffer for single-line or fenced-block editing."""
        if self.line.multi_line:
            self.editor.configure(wrap="word", height=max(1, self.line.line_count))
        else:
            self.editor.configure(wrap="none", height=1)
        self.frame.configure(height=self.line.rendered_height)

    # ---------- View state ----------
    def update_view(self) -> None:
        if self.line.editing:
            self._show_editor()
        else:
            self._show_rendered()

    def _show_editor(self) -> None:
        if self._showing != "editing":
            self.rendered.pack_forget()
            self.editor.delete("1.0", tk.END)
            self.editor.insert("1.0", self.line.current_text)
            with contextlib.suppress(Exception):
                self.editor.edit_reset()
            self.editor.pack(fill=tk.BOTH, expand=True)
            self._showing = "editing"
        self.apply_mode()
        self.focus_editor()

    def focus_editor(self) -> None:
        self.editor.focus_set()
        self.editor.mark_set("insert", f"1.0+{self.line.cursor}c")
        self.editor.see("insert")

    def _show_rendered(self) -> None:
        editor = self.panel.controller.editor_for(self.line)
        html = editor.rendered_html()
        if self._showing != "rendered":
            self.editor.pack_forget()
            self.rendered.pack(fill=tk.BOTH, expand=True)
            self._showing = "rendered"
        try:
            self.rendered.show(self.panel.controller.markdown.page(html))
        except Exception:
            _LOG.exception("Failed to display rendered line")
        self.frame.configure(height=self.line.rendered_height)
        self.panel.schedule_measure(self)

    def measure(self) -> None:
        """Size the row from the rendered widget's natural height."""
        if self.line.editing or not self.frame.winfo_exists():
            return
        natural = 0
        with contextlib.suppress(Exception):
            natural = self.rendered.natural_height()
        editor = self.panel.controller.editor_for(self.line)
        height = editor.relayout(natural)
        self.frame.configure(height=height)

    def destroy(self) -> None:
        with contextlib.suppress(Exception):
            self.frame.destroy()


class MarkdownEditorPanel(tk.Frame):
    """Scrollable column of line rows editing one note, line by line."""

    def __init__(
        self,
        master,
        controller: Optional[DocumentController] = None,
        on_change: Optional[Callable[[str], None]] = None,
        theme: ThemeColors = LIGHT_THEME,
        view_factory: Callable[[Any], HtmlLineView] = HtmlLineView,
    ) -> None:
        super().__init__(master, bg=theme.background)
        self.theme = theme
        self.controller = controller or DocumentController()
        self.metrics = self.controller.metrics
        self.view_factory = view_factory
        if on_change is not None:
            self.controller.add_listener(on_change)
        self._rows: Dict[LogicalLine, LineRowView] = {}
        self._order: List[LogicalLine] = []

        self.canvas = tk.Canvas(self, bg=theme.background, highlightthickness=0, bd=0)
        self.scrollbar = tk.Scrollbar(self, orient=tk.VERTICAL, command=self.canvas.yview)
        self.canvas.configure(yscrollcommand=self.scrollbar.set)
        self.scrollbar.pack(side=tk.RIGHT, fill=tk.Y)
        self.canvas.pack(side=tk.LEFT, fill=tk.BOTH, expand=True)

        self.lines_frame = tk.Frame(self.canvas, bg=theme.background, padx=20, pady=16)
        self._window_id = self.canvas.create_window(
            (0, 0), window=self.lines_frame, anchor="nw"
        )
        self.lines_frame.bind(
            "<Configure>",
            lambda e: self.canvas.configure(scrollregion=self.canvas.bbox("all")),
        )
        self.canvas.bind(
            "<Configure>",
            lambda e: self.canvas.itemconfigure(self._window_id, width=e.width),
        )
        # Clicking below the last line edits the last line
        self.canvas.bind("<Button-1>", self._on_background_click)
        self.lines_frame.bind("<Button-1>", self._on_background_click)

        self.refresh()
        self.after_idle(self.request_focus)

    # ---------- Content ----------
    def set_content(self, markdown: str) -> None:
        self.controller.load(markdown)
        self.refresh()

    def get_content(self) -> str:
        return self.controller.serialize()

    def request_focus(self) -> None:
        if self.controller.active_line is None:
            self.controller.activate(0)
        self.refresh()

    # ---------- Row bookkeeping ----------
    def refresh(self) -> None:
        """Bring the row widgets in line with the controller's lines."""
        lines = self.controller.lines
        live = set(lines)
        for line, row in list(self._rows.items()):
            if line not in live:
                row.destroy()
                del self._rows[line]
        for line in lines:
            if line not in self._rows:
                self._rows[line] = LineRowView(self, line)
        if lines != self._order:
            for line in self._order:
                row = self._rows.get(line)
                if row is not None:
                    row.frame.pack_forget()
            for line in lines:
                self._rows[line].frame.pack(fill=tk.X, anchor="w")
            self._order = lines
        for line in lines:
            self._rows[line].update_view()
        if self.controller.active_line is None:
            with contextlib.suppress(Exception):
                self.canvas.focus_set()

    def row_for(self, line: LogicalLine) -> Optional[LineRowView]:
        return self._rows.get(line)

    def schedule_measure(self, row: LineRowView) -> None:
        # Natural size is known only after Tk has laid the row out
        self.after_idle(row.measure)

    # ---------- Row callbacks ----------
    def activate_line(self, line: LogicalLine, cursor: Optional[int] = None) -> None:
        idx = self.controller.index_of(line)
        if idx < 0:
            return
        self.controller.activate(idx, cursor)
        self.refresh()

    def sync_buffer(self, row: LineRowView) -> None:
        idx = self.controller.index_of(row.line)
        if idx < 0 or not row.line.editing:
            return
        text = row.buffer_text()
        cursor = row.buffer_cursor()
        if text == row.line.current_text and cursor == row.line.cursor:
            return
        if self.controller.edit(idx, text, cursor) or row.line.multi_line:
            row.apply_mode()

    def handle_key(self, row: LineRowView, key: str, modifiers: Tuple[str, ...]) -> bool:
        idx = self.controller.index_of(row.line)
        if idx < 0:
            return False
        handled = self.controller.handle_key(idx, key, modifiers)
        if handled:
            self.refresh()
        return handled

    def on_editor_focus_out(self, row: LineRowView) -> None:
        # Focus may come straight back while rows are re-packed; decide once idle
        self.after_idle(lambda: self._commit_if_unfocused(row))

    def _commit_if_unfocused(self, row: LineRowView) -> None:
        if not row.line.editing:
            return
        with contextlib.suppress(Exception):
            if self.focus_get() is row.editor:
                return
        idx = self.controller.index_of(row.line)
        if idx < 0:
            return
        self.sync_buffer(row)
        self.controller.commit(idx)
        row.update_view()

    def _on_background_click(self, event=None) -> None:
        if event is not None and event.widget not in (self.canvas, self.lines_frame):
            return
        self.activate_line(self.controller.lines[-1])
