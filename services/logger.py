"""
Logger setup.

Console plus rotating file output. Called once from main(); library
modules only create module-level loggers.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
MAX_BYTES = 5 * 1024 * 1024  # 5MB
BACKUP_COUNT = 3


def init_logging(log_file: Optional[Path] = None,
                 level: Union[int, str] = logging.INFO) -> logging.Logger:
    """
    Configure the root logger.

    Args:
        log_file: Path of the rotating log file; console only if None
        level: Console level; the file always records DEBUG

    Returns:
        The configured root logger
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper())

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # Capture all, filter at handler level
    root_logger.handlers = []

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file is not None:
        root_logger.addHandler(_create_file_handler(Path(log_file), formatter))

    return root_logger


def _create_file_handler(log_file: Path, formatter: logging.Formatter) -> logging.Handler:
    """Create rotating file handler."""
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = RotatingFileHandler(
            log_file,
            maxBytes=MAX_BYTES,
            backupCount=BACKUP_COUNT,
        )
    except OSError:
        # Don't fail hard if the filesystem isn't writable
        handler = logging.StreamHandler(sys.stderr)

    handler.setLevel(logging.DEBUG)
    handler.setFormatter(formatter)
    return handler
