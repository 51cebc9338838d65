"""Logging configuration for appsweep."""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from rich.logging import RichHandler

from appsweep.utils.formatting import err_console

FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FILE_MAX_BYTES = 5 * 1024 * 1024
FILE_BACKUP_COUNT = 3


def setup_logging(verbose: bool = False, log_file: Path | None = None) -> None:
    """Configure application logging.

    Sets up two log targets:
    1. Console: Rich handler on stderr, INFO (DEBUG when verbose)
    2. File (optional): Rotating file handler with DEBUG level

    Args:
        verbose: If True, also show DEBUG records on the console.
        log_file: Optional path of a rotating debug log.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    console_handler = RichHandler(
        console=err_console,
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    root_logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=FILE_MAX_BYTES,
            backupCount=FILE_BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        root_logger.addHandler(file_handler)
