from __future__ import annotations
import logging
import tkinter as tk
from tkinter import ttk
from typing import Any, Callable, List

from notesplus.ui.theme import LIGHT_THEME, ThemeColors, apply_theme_to_root

_LOG = logging.getLogger(__name__)


class StandaloneHost(tk.Tk):
    """Minimal host window: a notebook of suite tabs, like the embedding tool."""

    def __init__(self, theme: ThemeColors = LIGHT_THEME) -> None:
        super().__init__()
        self.title("Notes")
        self.geometry("1000x650")
        apply_theme_to_root(self, theme)

        self.notebook = ttk.Notebook(self)
        self.notebook.pack(fill=tk.BOTH, expand=True)
        self._tabs: List[Any] = []

        self.protocol("WM_DELETE_WINDOW", self._on_close)

    # ---------- Host API ----------
    def set_extension_name(self, name: str) -> None:
        self.title(name)

    def invoke_later(self, func: Callable[[], Any]) -> None:
        self.after(0, func)

    def tab_parent(self) -> Any:
        return self.notebook

    def register_suite_tab(self, title: str, component: Any) -> None:
        self.notebook.add(component, text=title)
        self._tabs.append(component)

    def _on_close(self) -> None:
        for tab in self._tabs:
            close = getattr(tab, "close", None)
            if close is not None:
                try:
                    close()
                except Exception:
                    _LOG.exception("Failed to close tab %r", tab)
        self.destroy()
