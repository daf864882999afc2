from __future__ import annotations
from typing import Any, Callable, Optional

from tkinterweb import HtmlFrame


class HtmlLineView:
    """Read-only HTML view of one rendered line.

    The page handed to :meth:`show` carries its own ``<style>`` block, so the
    stylesheet built by the markdown service is what the user sees. The frame
    shrinks to its document, which makes its requested height the row's
    natural height.
    """

    def __init__(self, master: Any = None, widget: Optional[Any] = None) -> None:
        self.widget = widget or HtmlFrame(
            master,
            messages_enabled=False,
            vertical_scrollbar=False,
            horizontal_scrollbar=False,
            shrink=True,
        )
        self._page: Optional[str] = None

    def show(self, page: str) -> bool:
        """Load ``page`` unless it is already shown. Returns True if loaded."""
        if page == self._page:
            return False
        self.widget.load_html(page)
        self._page = page
        return True

    def natural_height(self) -> int:
        return int(self.widget.winfo_reqheight() or 0)

    def selected_text(self) -> str:
        return self.widget.get_currently_selected_text() or ""

    def select_all(self) -> None:
        self.widget.select_all()

    def bind(self, sequence: str, func: Callable[..., Any]) -> None:
        self.widget.bind(sequence, func)

    def pack(self, **kwargs: Any) -> None:
        self.widget.pack(**kwargs)

    def pack_forget(self) -> None:
        self.widget.pack_forget()
