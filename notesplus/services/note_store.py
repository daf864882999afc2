from __future__ import annotations
import logging
import re
from pathlib import Path
from typing import List, Optional

from notesplus.config import NOTE_EXTENSION, default_notes_dir

_LOG = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_\-]")


class NoteStoreError(Exception):
    """A user-initiated note operation failed on disk."""


def sanitize_name(name: str) -> str:
    cleaned = _UNSAFE_CHARS.sub("_", name.strip())
    if not cleaned:
        raise ValueError("note name must not be empty")
    return cleaned


class NoteStore:
    """Reads and writes markdown notes as files in one directory.

    Background operations (directory setup, listing, saving) log failures and
    carry on; create and delete raise :class:`NoteStoreError` so the UI can
    tell the user.
    """

    def __init__(
        self, directory: Optional[Path] = None, extension: str = NOTE_EXTENSION
    ) -> None:
        self.directory = directory or default_notes_dir()
        self.extension = extension
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError:
            _LOG.exception("Could not create notes directory %s", self.directory)

    def path_for(self, name: str) -> Path:
        return self.directory / f"{name}{self.extension}"

    def list_notes(self) -> List[str]:
        try:
            return sorted(
                p.stem
                for p in self.directory.iterdir()
                if p.is_file() and p.name.endswith(self.extension)
            )
        except OSError:
            _LOG.exception("Could not list notes in %s", self.directory)
            return []

    def exists(self, name: str) -> bool:
        return self.path_for(name).exists()

    def create(self, name: str) -> Optional[str]:
        """Create an empty note. Returns its sanitized name, or None if taken."""
        safe = sanitize_name(name)
        path = self.path_for(safe)
        try:
            with path.open("x", encoding="utf-8"):
                pass
        except FileExistsError:
            _LOG.info("Note %s already exists; not overwriting", safe)
            return None
        except OSError as exc:
            raise NoteStoreError(f"Could not create note {safe}: {exc}") from exc
        _LOG.info("Created note %s", safe)
        return safe

    def load(self, name: str) -> str:
        return self.path_for(name).read_text(encoding="utf-8")

    def save(self, name: str, text: str) -> bool:
        try:
            self.path_for(name).write_bytes(text.encode("utf-8"))
        except OSError:
            _LOG.exception("Could not save note %s", name)
            return False
        _LOG.debug("Saved note %s (%d chars)", name, len(text))
        return True

    def delete(self, name: str) -> None:
        try:
            self.path_for(name).unlink()
        except OSError as exc:
            raise NoteStoreError(f"Could not delete note {name}: {exc}") from exc
        _LOG.info("Deleted note %s", name)
