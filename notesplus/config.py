"""Runtime configuration read from the environment."""

from __future__ import annotations
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

_LOG = logging.getLogger(__name__)

EXTENSION_NAME = "Notes++"
NOTE_EXTENSION = ".md"
DEFAULT_AUTOSAVE_MS = 2000
UNWRAP_POLICIES = ("strict", "single-line", "never")


def default_notes_dir() -> Path:
    return Path.home() / ".burp_notes_plus"


@dataclass
class NotesConfig:
    notes_dir: Path = field(default_factory=default_notes_dir)
    autosave_ms: int = DEFAULT_AUTOSAVE_MS
    unwrap_policy: str = "strict"
    log_dir: Optional[Path] = None
    log_level: str = "INFO"

    @property
    def resolved_log_dir(self) -> Path:
        return self.log_dir or (self.notes_dir / "logs")


def load_env_config(environ: Optional[Mapping[str, str]] = None) -> NotesConfig:
    env = os.environ if environ is None else environ
    config = NotesConfig()

    notes_dir = env.get("NOTESPLUS_DIR", "").strip()
    if notes_dir:
        config.notes_dir = Path(notes_dir).expanduser()

    autosave = env.get("NOTESPLUS_AUTOSAVE_MS", "").strip()
    if autosave:
        try:
            value = int(autosave)
            if value <= 0:
                raise ValueError(autosave)
            config.autosave_ms = value
        except ValueError:
            _LOG.warning("Ignoring invalid NOTESPLUS_AUTOSAVE_MS=%r", autosave)

    policy = env.get("NOTESPLUS_UNWRAP_POLICY", "").strip().lower()
    if policy:
        if policy in UNWRAP_POLICIES:
            config.unwrap_policy = policy
        else:
            _LOG.warning("Ignoring unknown NOTESPLUS_UNWRAP_POLICY=%r", policy)

    log_dir = env.get("NOTESPLUS_LOG_DIR", "").strip()
    if log_dir:
        config.log_dir = Path(log_dir).expanduser()

    level = env.get("NOTESPLUS_LOG_LEVEL", "").strip().upper()
    if level:
        config.log_level = level
    return config
