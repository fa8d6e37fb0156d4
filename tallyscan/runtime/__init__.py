"""Runtime infrastructure for tallyscan.

This package provides process/runtime services including:
- Logging setup via get_logger()
- Path resolution via get_paths(), ProjectPaths
- Config loading via load_parser_config(), load_category_taxonomy()

Usage:
    from tallyscan.runtime import get_logger, load_parser_config

    logger = get_logger(__name__)
    config = load_parser_config()
"""

from tallyscan.runtime.logging import (
    DEFAULT_LOG_LEVEL,
    LOG_FORMAT,
    LOG_FORMAT_DEBUG,
    LOG_NAMESPACE,
    configure_logging,
    get_logger,
    level_from_env,
    set_log_level,
)
from tallyscan.runtime.paths import (
    ProjectPaths,
    get_paths,
    reset_paths,
)
from tallyscan.runtime.category_rules import load_category_taxonomy
from tallyscan.runtime.parser_config import load_parser_config

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    "set_log_level",
    "level_from_env",
    "LOG_NAMESPACE",
    "DEFAULT_LOG_LEVEL",
    "LOG_FORMAT",
    "LOG_FORMAT_DEBUG",
    # Config
    "load_category_taxonomy",
    "load_parser_config",
    # Paths
    "get_paths",
    "reset_paths",
    "ProjectPaths",
]
