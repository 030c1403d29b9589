"""Centralized path management for splitscan.

The project root is taken from SPLITSCAN_HOME when set, otherwise the
current working directory.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


def _get_project_root() -> Path:
    env_root = os.environ.get("SPLITSCAN_HOME")
    if env_root:
        return Path(env_root)
    return Path.cwd()


@dataclass
class ProjectPaths:
    """Container for project-relative paths."""

    root: Path = field(default_factory=_get_project_root)

    def __post_init__(self) -> None:
        self.root = self.root.resolve()

    @property
    def config(self) -> Path:
        """Configuration directory (config/)."""
        return self.root / "config"

    @property
    def parser_config(self) -> Path:
        """Parser tolerances/weights TOML file."""
        return self.config / "parser.toml"

    @property
    def receipts(self) -> Path:
        """Uploaded receipt images."""
        return self.root / "receipts"

    @property
    def receipts_ocr_json(self) -> Path:
        """Raw OCR service responses saved for re-parsing."""
        return self.receipts / "ocr_json"


def get_paths(root: Path | None = None) -> ProjectPaths:
    """Return paths for `root`, or for the environment-derived project root."""
    if root is None:
        return ProjectPaths()
    return ProjectPaths(root=root)
