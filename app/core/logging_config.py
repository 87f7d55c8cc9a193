"""Application log handlers.

Everything at INFO and above goes to ``info.log``, errors are duplicated
into ``error.log``, and the console gets a shorter format.
"""

import logging
import sys
from pathlib import Path

from app.core.config import Settings, get_settings

FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Libraries that are chatty at INFO
QUIET_LOGGERS = ("httpx", "httpcore", "openai", "aiosqlite")


def _file_handler(path: Path, level: int) -> logging.Handler:
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=FILE_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(settings: Settings | None = None) -> logging.Logger:
    """Install the file and console handlers on the root logger.

    Existing root handlers are replaced, so calling this twice does not
    duplicate output.

    Args:
        settings: Optional settings. If None, uses global settings.

    Returns:
        The root logger.
    """
    settings = settings or get_settings()
    settings.log_dir.mkdir(parents=True, exist_ok=True)

    level = logging.DEBUG if settings.log_level == "DEBUG" else logging.INFO

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    console.setFormatter(logging.Formatter(fmt=CONSOLE_FORMAT, datefmt=DATE_FORMAT))

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(_file_handler(settings.log_dir / "info.log", logging.INFO))
    root.addHandler(_file_handler(settings.log_dir / "error.log", logging.ERROR))
    root.addHandler(console)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return root
