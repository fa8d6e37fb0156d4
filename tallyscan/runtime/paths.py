"""Centralized path management for tallyscan.

All runtime files (user config, saved OCR payloads) live under one project
root: ``$TALLYSCAN_HOME`` when set, otherwise the current directory.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

HOME_ENV_VAR = "TALLYSCAN_HOME"


def _get_project_root() -> Path:
    """Determine the project root directory."""
    env_root = os.environ.get(HOME_ENV_VAR, "").strip()
    if env_root:
        return Path(env_root).expanduser()
    return Path.cwd()


@dataclass
class ProjectPaths:
    """Container for all project-related paths.

    All paths are computed relative to the project root, ensuring consistency
    across all modules regardless of where they are called from.
    """

    root: Path = field(default_factory=_get_project_root)

    def __post_init__(self) -> None:
        self.root = self.root.resolve()

    # --- Configuration paths ---
    @property
    def config(self) -> Path:
        """Configuration directory (config/)."""
        return self.root / "config"

    @property
    def parser_config(self) -> Path:
        """Parser threshold overrides TOML file."""
        return self.config / "parser.toml"

    @property
    def category_rules(self) -> Path:
        """Project-level spending category taxonomy TOML file."""
        return self.config / "categories.toml"

    # --- Receipt paths ---
    @property
    def receipts(self) -> Path:
        """Root receipts directory."""
        return self.root / "receipts"

    @property
    def receipts_ocr_json(self) -> Path:
        """Raw OCR results (JSON)."""
        return self.receipts / "ocr_json"


# Module-level singleton
_paths: ProjectPaths | None = None


def get_paths() -> ProjectPaths:
    """Get the singleton ProjectPaths instance.

    Returns:
        The global ProjectPaths instance.
    """
    global _paths
    if _paths is None:
        _paths = ProjectPaths()
    return _paths


def reset_paths() -> None:
    """Forget the cached ProjectPaths (used after changing TALLYSCAN_HOME)."""
    global _paths
    _paths = None
