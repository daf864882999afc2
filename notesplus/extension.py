"""Registration of the notes panel with a host application."""

from __future__ import annotations
import logging
from typing import Any, Callable, Optional, Protocol

from notesplus.config import EXTENSION_NAME, NotesConfig
from notesplus.ui.notes_panel import NotesPanel

_LOG = logging.getLogger(__name__)


class HostApi(Protocol):
    """What the extension needs from its host's extension API."""

    def set_extension_name(self, name: str) -> None: ...

    def invoke_later(self, func: Callable[[], Any]) -> None: ...

    def tab_parent(self) -> Any: ...

    def register_suite_tab(self, title: str, component: Any) -> None: ...


def _default_panel_factory(parent: Any, config: NotesConfig) -> Any:
    return NotesPanel(parent, config=config)


class NotesPlusExtension:
    """Builds the notes panel on the host's UI thread and registers it as a tab."""

    def __init__(
        self,
        config: Optional[NotesConfig] = None,
        panel_factory: Callable[[Any, NotesConfig], Any] = _default_panel_factory,
    ) -> None:
        self.config = config or NotesConfig()
        self.panel_factory = panel_factory
        self.panel: Any = None

    def initialize(self, api: HostApi) -> None:
        api.set_extension_name(EXTENSION_NAME)
        api.invoke_later(lambda: self._register(api))

    def _register(self, api: HostApi) -> None:
        self.panel = self.panel_factory(api.tab_parent(), self.config)
        api.register_suite_tab(EXTENSION_NAME, self.panel)
        _LOG.info("Registered %s tab (notes in %s)", EXTENSION_NAME, self.config.notes_dir)
