from __future__ import annotations
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ThemeColors:
    """Defines a set of colors for the editor rows, the sidebar and markdown styles."""

    # Panel and rows
    background: str
    foreground: str
    caret: str
    selection_bg: str
    selection_fg: str
    hover_border: str
    edit_bg: str
    edit_fg: str
    edit_border: str
    sidebar_bg: str

    # Markdown page
    heading_fg: str
    strong_fg: str
    em_fg: str
    strike_fg: str
    inline_code_bg: str
    code_fg: str
    code_block_bg: str
    code_border: str
    blockquote_bg: str
    blockquote_fg: str
    blockquote_border: str
    link_fg: str
    rule_fg: str
    table_border: str
    table_header_bg: str
    mark_bg: str


LIGHT_THEME = ThemeColors(
    background="#ffffff",
    foreground="#3d3d3d",
    caret="#0064fa",
    selection_bg="#cce0ff",
    selection_fg="#000000",
    hover_border="#cce0ff",
    edit_bg="#fafaff",
    edit_fg="#323232",
    edit_border="#6496ff",
    sidebar_bg="#f0f0f0",
    heading_fg="#0056b3",
    strong_fg="#000000",
    em_fg="#555555",
    strike_fg="#888888",
    inline_code_bg="#f6f8fa",
    code_fg="#333333",
    code_block_bg="#f6f8fa",
    code_border="#eaeaea",
    blockquote_bg="#f6f6f6",
    blockquote_fg="#555555",
    blockquote_border="#dc143c",
    link_fg="#0366d6",
    rule_fg="#dddddd",
    table_border="#dddddd",
    table_header_bg="#f6f8fa",
    mark_bg="#fff3cd",
)


def apply_theme_to_root(root: Any, theme: ThemeColors) -> None:
    """Apply base colors to the Tk root and menu defaults."""
    try:
        root.configure(bg=theme.background)
        root.option_add("*Menu.background", theme.sidebar_bg)
        root.option_add("*Menu.foreground", theme.foreground)
        root.option_add("*Menu.activeBackground", theme.selection_bg)
        root.option_add("*Menu.activeForeground", theme.selection_fg)
        root.option_add("*Menu.relief", "flat")
    except Exception:
        # Best-effort; on some platforms option db keys may vary
        pass
