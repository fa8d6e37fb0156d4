"""Runtime loader for spending category taxonomy rules."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

from tallyscan.receipt.categories import CategoryTaxonomy, build_category_taxonomy, read_default_taxonomy_config
from tallyscan.runtime.paths import get_paths


def _load_toml(path: Path) -> dict[str, Any]:
    """Load TOML file and return parsed dict; missing files map to empty dict."""
    try:
        import tomllib
    except ImportError:
        import tomli as tomllib  # type: ignore[no-redef]

    if not path.exists():
        return {}

    with open(path, "rb") as f:
        data = tomllib.load(f)
    return data if isinstance(data, dict) else {}


@lru_cache(maxsize=8)
def load_category_taxonomy(category_paths: tuple[str, ...] | None = None) -> CategoryTaxonomy:
    """
    Load the category taxonomy: built-in table first, then project layers.

    Args:
        category_paths: Optional TOML path overrides. If None, uses config/categories.toml.

    Returns:
        Merged taxonomy; built-in categories keep their order.
    """
    if category_paths is None:
        category_files = [get_paths().category_rules]
    else:
        category_files = [Path(path) for path in category_paths]

    configs = [read_default_taxonomy_config()]
    configs.extend(_load_toml(path) for path in category_files)
    return build_category_taxonomy(configs)
