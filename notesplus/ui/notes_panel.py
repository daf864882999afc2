from __future__ import annotations
import logging
import tkinter as tk
from tkinter import messagebox, simpledialog
from typing import Optional

from notesplus.config import NotesConfig
from notesplus.services.autosave import AutoSaver
from notesplus.services.document_controller import DocumentController
from notesplus.services.markdown_service import MarkdownService, ParagraphUnwrapPolicy
from notesplus.services.note_store import NoteStore, NoteStoreError, sanitize_name
from notesplus.ui.editor_panel import MarkdownEditorPanel
from notesplus.ui.theme import LIGHT_THEME, ThemeColors

_LOG = logging.getLogger(__name__)

UI_FONT = ("Segoe UI", 11)


class NotesPanel(tk.Frame):
    """Notes list on the left, line editor for the selected note on the right."""

    def __init__(
        self,
        master,
        store: Optional[NoteStore] = None,
        config: Optional[NotesConfig] = None,
        theme: ThemeColors = LIGHT_THEME,
    ) -> None:
        super().__init__(master, bg=theme.background)
        self.settings = config or NotesConfig()
        self.theme = theme
        self.store = store or NoteStore(self.settings.notes_dir)
        self.current_note: Optional[str] = None

        markdown = MarkdownService(
            theme=theme, unwrap_policy=ParagraphUnwrapPolicy(self.settings.unwrap_policy)
        )
        self.controller = DocumentController(markdown=markdown)
        self.autosaver = AutoSaver(self, self.save_current_note, self.settings.autosave_ms)

        self.paned = tk.PanedWindow(self, orient=tk.HORIZONTAL, sashwidth=4, bd=0)
        self.paned.pack(fill=tk.BOTH, expand=True)
        self._build_sidebar()
        self.editor = MarkdownEditorPanel(
            self.paned,
            controller=self.controller,
            on_change=self._on_content_changed,
            theme=theme,
        )
        self.paned.add(self.sidebar, minsize=150, width=200)
        self.paned.add(self.editor, stretch="always")

        self.load_notes_list()

    def _build_sidebar(self) -> None:
        t = self.theme
        self.sidebar = tk.Frame(self.paned, bg=t.sidebar_bg, padx=10, pady=10)

        header = tk.Label(
            self.sidebar,
            text="Notes",
            bg=t.sidebar_bg,
            fg=t.foreground,
            font=(UI_FONT[0], 14, "bold"),
            anchor="w",
        )
        header.pack(side=tk.TOP, fill=tk.X)

        buttons = tk.Frame(self.sidebar, bg=t.sidebar_bg)
        buttons.pack(side=tk.BOTTOM, fill=tk.X)
        tk.Button(buttons, text="+ New", font=UI_FONT, command=self.create_new_note).pack(
            side=tk.LEFT, expand=True, padx=2
        )
        tk.Button(
            buttons, text="Delete", font=UI_FONT, command=self.delete_current_note
        ).pack(side=tk.LEFT, expand=True, padx=2)

        list_frame = tk.Frame(self.sidebar, bg=t.sidebar_bg, pady=10)
        list_frame.pack(side=tk.TOP, fill=tk.BOTH, expand=True)
        self.notes_list = tk.Listbox(
            list_frame,
            selectmode=tk.SINGLE,
            exportselection=False,
            font=UI_FONT,
            bd=0,
            highlightthickness=0,
            activestyle="none",
            selectbackground=t.selection_bg,
            selectforeground=t.selection_fg,
        )
        scroll = tk.Scrollbar(list_frame, command=self.notes_list.yview)
        self.notes_list.configure(yscrollcommand=scroll.set)
        scroll.pack(side=tk.RIGHT, fill=tk.Y)
        self.notes_list.pack(side=tk.LEFT, fill=tk.BOTH, expand=True)
        self.notes_list.bind("<<ListboxSelect>>", lambda e: self.on_note_selected())

    # ---------- Notes list ----------
    def load_notes_list(self) -> None:
        self.notes_list.delete(0, tk.END)
        for name in self.store.list_notes():
            self.notes_list.insert(tk.END, name)

    def _select(self, name: str) -> None:
        names = list(self.notes_list.get(0, tk.END))
        if name not in names:
            return
        idx = names.index(name)
        self.notes_list.selection_clear(0, tk.END)
        self.notes_list.selection_set(idx)
        self.notes_list.see(idx)
        self.on_note_selected()

    def on_note_selected(self) -> None:
        selection = self.notes_list.curselection()
        if not selection:
            return
        selected = self.notes_list.get(selection[0])
        if selected == self.current_note:
            return
        if self.current_note is not None:
            self.autosaver.cancel()
            self.save_current_note()
        try:
            content = self.store.load(selected)
        except OSError:
            _LOG.exception("Could not read note %s", selected)
            return
        self.current_note = selected
        self.editor.set_content(content)

    # ---------- Actions ----------
    def create_new_note(self) -> None:
        name = simpledialog.askstring(
            "New Note", "Note name:", initialvalue="Untitled", parent=self
        )
        if not name or not name.strip():
            return
        try:
            created = self.store.create(name)
        except ValueError as exc:
            messagebox.showwarning("Invalid Name", str(exc), parent=self)
            return
        except NoteStoreError as exc:
            messagebox.showerror("Error", f"Error creating note:\n{exc}", parent=self)
            return
        self.load_notes_list()
        # An existing note with the same name is selected instead of overwritten
        self._select(created or sanitize_name(name))

    def delete_current_note(self) -> None:
        if self.current_note is None:
            messagebox.showinfo("Info", "No note selected", parent=self)
            return
        if not messagebox.askyesno(
            "Confirm", f"Delete note: {self.current_note}?", parent=self
        ):
            return
        try:
            self.store.delete(self.current_note)
        except NoteStoreError as exc:
            messagebox.showerror("Error", f"Error deleting note:\n{exc}", parent=self)
            return
        self.autosaver.cancel()
        self.current_note = None
        self.editor.set_content("")
        self.load_notes_list()

    def save_current_note(self) -> None:
        if self.current_note:
            self.store.save(self.current_note, self.editor.get_content())

    def _on_content_changed(self, _content: str) -> None:
        if self.current_note:
            self.autosaver.schedule()

    def close(self) -> None:
        """Write any unsaved edits before the panel goes away."""
        self.autosaver.cancel()
        self.save_current_note()
