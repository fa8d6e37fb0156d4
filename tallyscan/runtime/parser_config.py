"""Runtime loader for parser heuristic thresholds."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from tallyscan.receipt.ocr_parser.common import ParserConfig
from tallyscan.runtime.category_rules import _load_toml
from tallyscan.runtime.logging import get_logger
from tallyscan.runtime.paths import get_paths

logger = get_logger(__name__)


@lru_cache(maxsize=4)
def load_parser_config(config_path: str | None = None) -> ParserConfig:
    """
    Load parser thresholds from the ``[parser]`` table of parser.toml.

    Args:
        config_path: Optional TOML path override. If None, uses config/parser.toml.

    Returns:
        ParserConfig; defaults for anything the file does not set.

    Raises:
        ValueError: If the table holds an unknown key or a mistyped value.
    """
    path = Path(config_path) if config_path is not None else get_paths().parser_config
    table = _load_toml(path).get("parser", {})
    if not isinstance(table, dict):
        raise ValueError(f"[parser] in {path} must be a table")
    if table:
        logger.debug("Parser overrides from %s: %s", path, sorted(table))
    return ParserConfig.from_mapping(table)
