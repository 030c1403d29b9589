"""Logger namespace for splitscan.

Every module logs under ``splitscan.*``. A single stderr handler is
installed on first use; SPLITSCAN_LOG_LEVEL picks its level (INFO when
unset or unrecognized). ``splitscan --debug`` switches to DEBUG at runtime.
"""

import logging
import os
import sys

DEFAULT_LOG_LEVEL = logging.INFO

LOG_FORMAT = "%(levelname)s [%(name)s] %(message)s"
LOG_FORMAT_DEBUG = "%(levelname)s [%(name)s:%(lineno)d] %(message)s"

ROOT_LOGGER_NAME = "splitscan"

_console_handler: logging.Handler | None = None


def _level_from_env() -> int:
    name = os.environ.get("SPLITSCAN_LOG_LEVEL", "").strip().upper()
    if name == "WARN":
        name = "WARNING"
    level = logging.getLevelName(name) if name else None
    return level if isinstance(level, int) else DEFAULT_LOG_LEVEL


def _formatter_for(level: int) -> logging.Formatter:
    return logging.Formatter(LOG_FORMAT_DEBUG if level <= logging.DEBUG else LOG_FORMAT)


def configure_logging(level: int | None = None) -> None:
    """Install the stderr handler on the ``splitscan`` logger once."""
    global _console_handler

    if _console_handler is not None:
        return

    if level is None:
        level = _level_from_env()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_formatter_for(level))

    namespace = logging.getLogger(ROOT_LOGGER_NAME)
    namespace.setLevel(level)
    namespace.addHandler(handler)
    namespace.propagate = False
    _console_handler = handler


def get_logger(name: str) -> logging.Logger:
    """Logger for `name` (usually ``__name__``) inside the splitscan namespace."""
    configure_logging()

    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def set_log_level(level: int) -> None:
    configure_logging(level)
    logging.getLogger(ROOT_LOGGER_NAME).setLevel(level)
    if _console_handler is not None:
        _console_handler.setFormatter(_formatter_for(level))
