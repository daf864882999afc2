"""Application logging utilities."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

_LOG_FILE_NAME = "notesplus.log"
_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(
    log_directory: Optional[Path] = None, level: str = "INFO"
) -> logging.Logger:
    """Configure the ``notesplus`` logger once: rotating file plus stderr."""
    logger = logging.getLogger("notesplus")
    if logger.handlers:
        return logger

    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    formatter = logging.Formatter(fmt=_FORMAT, datefmt=_DATE_FORMAT)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    if log_directory is None:
        return logger
    try:
        log_directory.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            log_directory / _LOG_FILE_NAME,
            maxBytes=1_048_576,
            backupCount=5,
            encoding="utf-8",
        )
    except OSError:
        logger.exception("Could not open log file in %s", log_directory)
        return logger
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    logger.info("Logger initialised; logs available at %s", handler.baseFilename)
    return logger
