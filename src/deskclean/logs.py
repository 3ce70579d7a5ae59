"""Logging setup for the command-line entry points."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from deskclean.config.models import LoggingSettings

_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(
    settings: LoggingSettings,
    log_path: Path | None = None,
    *,
    console: Console | None = None,
) -> logging.Logger:
    """Attach console and rotating file handlers to the ``deskclean`` logger.

    Calling this again replaces previously installed handlers.

    Args:
        settings: Level and rotation settings.
        log_path: Log file location; file logging is skipped when omitted.
        console: Rich console used for terminal output.

    Returns:
        logging.Logger: The configured package logger.
    """
    level = logging.getLevelName(settings.level.upper())
    if not isinstance(level, int):
        level = logging.WARNING

    logger = logging.getLogger("deskclean")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    console_handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    console_handler.setLevel(level)
    logger.addHandler(console_handler)

    if log_path is not None:
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                log_path,
                maxBytes=max(1, settings.max_size_mb) * 1024 * 1024,
                backupCount=max(0, settings.backup_count),
                encoding="utf-8",
            )
        except OSError as exc:
            logger.warning("File logging disabled: %s", exc)
        else:
            file_handler.setLevel(min(level, logging.INFO))
            file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
            logger.addHandler(file_handler)

    return logger


__all__ = ["configure_logging"]
