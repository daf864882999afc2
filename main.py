from __future__ import annotations
import argparse
import sys
from pathlib import Path

from notesplus.config import load_env_config
from notesplus.extension import NotesPlusExtension
from notesplus.logger import configure_logging
from notesplus.ui.host_window import StandaloneHost


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Line-by-line markdown notes")
    parser.add_argument("--notes-dir", type=Path, help="directory holding the notes")
    args = parser.parse_args(argv)

    config = load_env_config()
    if args.notes_dir:
        config.notes_dir = args.notes_dir.expanduser()
    configure_logging(config.resolved_log_dir, config.log_level)

    host = StandaloneHost()
    NotesPlusExtension(config).initialize(host)
    host.mainloop()
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
