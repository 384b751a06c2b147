import logging
import os
import sys
from typing import Optional

from dairyops.core.configs import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

QUIET_LOGGERS = ("sqlalchemy.engine", "alembic", "httpx", "passlib", "multipart")


class LevelTintFormatter(logging.Formatter):
    """Colours the level name only, leaving the message readable in any pager."""

    TINTS = {
        logging.DEBUG: "\033[36m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record):
        tint = self.TINTS.get(record.levelno)
        if tint is None:
            return super().format(record)
        original = record.levelname
        record.levelname = f"{tint}{original}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = original


def wants_color(stream=sys.stdout) -> bool:
    if os.getenv("FORCE_COLOR"):
        return True
    if os.getenv("NO_COLOR") or os.getenv("CI"):
        return False
    return bool(getattr(stream, "isatty", None) and stream.isatty())


def setup_logging(
    level: str = "INFO", log_file: Optional[str] = None, use_colors: Optional[bool] = None
) -> None:
    """
    Install the application handlers on the root logger.

    Console output goes to stdout (tinted when attached to a terminal); when
    `log_file` is set every record is also appended there without colour.
    """
    if use_colors is None:
        use_colors = wants_color()

    console = logging.StreamHandler(sys.stdout)
    formatter_cls = LevelTintFormatter if use_colors else logging.Formatter
    console.setFormatter(formatter_cls(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    handlers: list[logging.Handler] = [console]

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        handlers.append(file_handler)

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers = handlers

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name)


setup_logging(settings.log_level, settings.log_file)
