"""Logging setup: rich console output plus an optional plain log file."""

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from wpdev_backup.config.models import LoggingSettings

FILE_FORMAT = "[%(asctime)s] %(levelname)s: %(message)s"
FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"

_HANDLER_MARK = "_wpdev_backup_handler"


def configure_logging(
    settings: LoggingSettings, console: Console | None = None
) -> logging.Logger:
    """Configure the ``wpdev_backup`` logger.

    Safe to call more than once; handlers installed by a previous call
    are replaced.

    Args:
        settings: Level and optional log file.
        console: Console for the rich handler (default: stderr).

    Returns:
        The package logger.
    """
    logger = logging.getLogger("wpdev_backup")
    logger.setLevel(settings.level)

    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_MARK, False):
            logger.removeHandler(handler)
            handler.close()

    console_handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        markup=False,
    )
    console_handler.setLevel(settings.level)
    setattr(console_handler, _HANDLER_MARK, True)
    logger.addHandler(console_handler)

    if settings.log_file is not None:
        log_file = Path(settings.log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=FILE_DATEFMT))
        setattr(file_handler, _HANDLER_MARK, True)
        logger.addHandler(file_handler)
        # File keeps debug detail even when the console is quieter
        logger.setLevel(logging.DEBUG)

    return logger
