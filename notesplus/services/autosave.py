from __future__ import annotations
import contextlib
import logging
from typing import Any, Callable, Optional, Protocol

from notesplus.config import DEFAULT_AUTOSAVE_MS

_LOG = logging.getLogger(__name__)


class Scheduler(Protocol):
    """The slice of a Tk widget used for single-shot timers."""

    def after(self, ms: int, func: Callable[[], Any]) -> str: ...

    def after_cancel(self, id: str) -> None: ...


class AutoSaver:
    """Debounced save: runs ``save`` once the edits have been quiet for ``delay_ms``.

    At most one timer is pending; each :meth:`schedule` cancels the previous one.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        save: Callable[[], Any],
        delay_ms: int = DEFAULT_AUTOSAVE_MS,
    ) -> None:
        self.scheduler = scheduler
        self.save = save
        self.delay_ms = delay_ms
        self._after_id: Optional[str] = None

    @property
    def pending(self) -> bool:
        return self._after_id is not None

    def schedule(self) -> None:
        self.cancel()
        self._after_id = self.scheduler.after(self.delay_ms, self._fire)

    def cancel(self) -> None:
        if self._after_id is not None:
            with contextlib.suppress(Exception):
                self.scheduler.after_cancel(self._after_id)
        self._after_id = None

    def flush(self) -> None:
        """Run a pending save immediately."""
        if self._after_id is None:
            return
        self.cancel()
        self._run()

    def _fire(self) -> None:
        self._after_id = None
        self._run()

    def _run(self) -> None:
        try:
            self.save()
        except Exception:
            _LOG.exception("Auto-save failed")
