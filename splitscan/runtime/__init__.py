"""Runtime infrastructure for splitscan.

This package provides process/runtime services including:
- Logging setup via get_logger()
- Path resolution via get_paths(), ProjectPaths
- Parser configuration loading via load_parser_config()

Usage:
    from splitscan.runtime import get_logger, load_parser_config

    logger = get_logger(__name__)
    config = load_parser_config()
"""

from splitscan.runtime.logging import (
    DEFAULT_LOG_LEVEL,
    LOG_FORMAT,
    LOG_FORMAT_DEBUG,
    configure_logging,
    get_logger,
    set_log_level,
)
from splitscan.runtime.parser_rules import load_parser_config, reset_parser_config_cache
from splitscan.runtime.paths import ProjectPaths, get_paths

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    "set_log_level",
    "DEFAULT_LOG_LEVEL",
    "LOG_FORMAT",
    "LOG_FORMAT_DEBUG",
    # Config
    "load_parser_config",
    "reset_parser_config_cache",
    # Paths
    "get_paths",
    "ProjectPaths",
]
