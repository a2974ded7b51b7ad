"""Logging setup for the notifier CLI."""

import logging
import sys

from . import config

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Libraries whose INFO output drowns out delivery logs.
_QUIET_LOGGERS = ("urllib3", "requests")


def _resolve_level(level_name: str | None) -> int:
    name = (level_name or config.settings.LOG_LEVEL).upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def setup_logging(level_name: str | None = None) -> None:
    """Send records to stderr at ``level_name`` (default ``LOG_LEVEL``).

    A handler is only attached when the root logger has none, so calling
    this twice, or under a test runner, does not duplicate output.
    """
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        root.addHandler(handler)
    root.setLevel(_resolve_level(level_name))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


__all__ = ["setup_logging"]
