"""Runtime loader for line-item parser configuration."""

from __future__ import annotations

import os
import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any

from splitscan.receipt.parser_config import ParserConfig, build_parser_config
from splitscan.runtime.logging import get_logger
from splitscan.runtime.paths import get_paths

logger = get_logger(__name__)


def _load_toml(path: Path) -> dict[str, Any]:
    """Load TOML file and return parsed dict; missing files map to empty dict."""
    if not path.exists():
        return {}

    with open(path, "rb") as f:
        data = tomllib.load(f)
    return data if isinstance(data, dict) else {}


def default_parser_config_path() -> Path:
    env_path = os.environ.get("SPLITSCAN_PARSER_CONFIG")
    if env_path:
        return Path(env_path)
    return get_paths().parser_config


@lru_cache(maxsize=8)
def _load_parser_config_cached(path: str) -> ParserConfig:
    data = _load_toml(Path(path))
    if data:
        logger.info("Loaded parser config from %s", path)
    return build_parser_config(data)


def load_parser_config(path: str | Path | None = None) -> ParserConfig:
    """
    Load parser configuration from TOML.

    Args:
        path: Explicit file. Defaults to SPLITSCAN_PARSER_CONFIG or
              config/parser.toml under the project root.

    Returns:
        Validated config; defaults when the file does not exist.

    Raises:
        tomllib.TOMLDecodeError: File exists but is not valid TOML
        ValueError: Values are out of range
    """
    resolved = Path(path) if path is not None else default_parser_config_path()
    return _load_parser_config_cached(str(resolved.resolve()))


def reset_parser_config_cache() -> None:
    _load_parser_config_cached.cache_clear()
