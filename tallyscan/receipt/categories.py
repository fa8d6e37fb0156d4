"""Spending category classification for scanned receipts.

A receipt is classified by plain substring matching against an ordered
taxonomy of category -> keywords. The first category (in table order) with
any keyword present wins, so the order of the table is the tie-break.

The built-in table lives in ``receipt/rules/default_categories.toml``.
To add keywords or categories for a project, put a ``config/categories.toml``
next to the data (see ``tallyscan.runtime.load_category_taxonomy``):

    [[categories]]
    name = "Groceries"      # existing name: keywords are added, order kept
    keywords = ["sabzi"]

    [[categories]]
    name = "Pets"           # new name: appended after the built-in ones
    keywords = ["pet", "vet"]
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from functools import lru_cache
from importlib import resources
from typing import Any

from tallyscan.domain.receipt import LineItem

DEFAULT_TAXONOMY_RESOURCE = "default_categories.toml"

CategoryEntry = tuple[str, tuple[str, ...]]


@dataclass(frozen=True)
class CategoryTaxonomy:
    """Ordered category -> keywords table."""

    categories: tuple[CategoryEntry, ...]

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(name for name, _ in self.categories)


def _normalize_keywords(raw: Any) -> tuple[str, ...]:
    """Normalize keywords value from TOML into a lowercase tuple."""
    if isinstance(raw, str):
        value = raw.strip().lower()
        return (value,) if value else tuple()
    if isinstance(raw, list):
        return tuple(str(v).strip().lower() for v in raw if str(v).strip())
    return tuple()


def build_category_taxonomy(configs: Sequence[Mapping[str, Any]] | None = None) -> CategoryTaxonomy:
    """Merge category tables in order into one taxonomy.

    Later layers extend the keywords of categories they name again and
    append categories that are new.
    """
    merged: dict[str, list[str]] = {}
    for config in configs or ():
        for entry in config.get("categories", []):
            if not isinstance(entry, Mapping):
                continue
            name = str(entry.get("name") or "").strip()
            if not name:
                continue
            keywords = merged.setdefault(name, [])
            for kw in _normalize_keywords(entry.get("keywords")):
                if kw not in keywords:
                    keywords.append(kw)

    return CategoryTaxonomy(categories=tuple((name, tuple(kws)) for name, kws in merged.items()))


def read_default_taxonomy_config() -> dict[str, Any]:
    """Parse the packaged default taxonomy TOML."""
    try:
        import tomllib
    except ImportError:
        import tomli as tomllib  # type: ignore[no-redef]

    resource = resources.files("tallyscan.receipt").joinpath("rules").joinpath(DEFAULT_TAXONOMY_RESOURCE)
    return tomllib.loads(resource.read_text("utf-8"))


@lru_cache(maxsize=1)
def _get_default_taxonomy() -> CategoryTaxonomy:
    """Built-in taxonomy only (no project overrides)."""
    return build_category_taxonomy([read_default_taxonomy_config()])


def _classification_text(raw_text: str, merchant: str | None, items: Iterable[LineItem]) -> str:
    return " ".join([raw_text, merchant or "", " ".join(item.name for item in items)]).lower()


def classify_category(
    raw_text: str,
    merchant: str | None = None,
    items: Iterable[LineItem] = (),
    taxonomy: CategoryTaxonomy | None = None,
) -> str | None:
    """
    Return the spending category for a receipt, or None if nothing matches.

    Args:
        raw_text: Full OCR text of the receipt
        merchant: Extracted merchant name, if any
        items: Extracted line items (their names are searched too)
        taxonomy: Preloaded taxonomy (typically from the runtime loader).
            When omitted, only the built-in table applies.
    """
    layers = taxonomy or _get_default_taxonomy()
    haystack = _classification_text(raw_text, merchant, items)

    for name, keywords in layers.categories:
        if any(kw in haystack for kw in keywords):
            return name
    return None


def classify_category_debug(
    raw_text: str,
    merchant: str | None = None,
    items: Iterable[LineItem] = (),
    taxonomy: CategoryTaxonomy | None = None,
) -> list[tuple[str, str]]:
    """Debug version returning every (category, keyword) hit in table order.

    The first entry is the category ``classify_category`` would pick.
    """
    layers = taxonomy or _get_default_taxonomy()
    haystack = _classification_text(raw_text, merchant, items)
    return [(name, kw) for name, keywords in layers.categories for kw in keywords if kw in haystack]
