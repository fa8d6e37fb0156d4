"""Shared constants and helpers for OCR receipt parsing."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, fields
from decimal import Decimal, InvalidOperation
from typing import Any

CENT = Decimal("0.01")

# Keywords marking a row as stating the receipt total
TOTAL_KEYWORDS = ("total", "payable", "net amount", "balance", "amount due")
# Labels specific enough to override the running maximum
GRAND_TOTAL_KEYWORDS = ("grand total", "net payable")
TAX_KEYWORDS = ("tax", "gst", "vat")

# Rows containing any of these are metadata, never items
ITEM_NOISE_KEYWORDS = (
    "total",
    "subtotal",
    "sub total",
    "amount",
    "payable",
    "balance",
    "due",
    "cash",
    "card",
    "change",
    "visa",
    "mastercard",
    "amex",
    "upi",
    "date",
    "time",
    "tax",
    "gst",
    "vat",
    "discount",
    "round",
    "rounding",
    "tel",
    "ph:",
    "item",
    "price",
    "rate",
    "qty",
    "quantity",
    "desc",
    "description",
)

MERCHANT_SKIP_PATTERN = re.compile(r"date|phone|gst|tax|inv", re.IGNORECASE)

# Two-decimal amounts, optionally with thousands separators: "1,234.56", "45.00"
AMOUNT_PATTERN = re.compile(r"\d{1,3}(?:,\d{3})+\.\d{2}|\d+\.\d{2}")
# Same, but skipping rates such as "2.50%" on split tax lines
TAX_AMOUNT_PATTERN = re.compile(r"(?:\d{1,3}(?:,\d{3})+\.\d{2}|\d+\.\d{2})(?![\d%])(?!\s+%)")
PLAIN_PRICE_PATTERN = re.compile(r"^\d+(?:\.\d+)?$")
PRICE_JUNK_PATTERN = re.compile(r"[^0-9.]")

# "2 x Coffee", "3pcs Soap", "1 pc Towel"
QUANTITY_PREFIX_PATTERN = re.compile(r"^(\d+)\s*(x|pcs|pc)\b", re.IGNORECASE)
# "Milk 1kg", "Oil 0.5 ltr", "Eggs 2 box"
UNIT_PATTERN = re.compile(r"\b\d*\.?\d+\s*(kg|gm|g|ml|ltr|l|box|pkt)\b", re.IGNORECASE)

DATE_PATTERN = re.compile(r"\d{1,2}[-./]\d{1,2}[-./]\d{2,4}")


@dataclass(frozen=True)
class ParserConfig:
    """Tunable heuristics for the receipt pipeline.

    Defaults reproduce the stock behavior; every value can be overridden
    from ``config/parser.toml`` (see ``tallyscan.runtime.load_parser_config``).
    """

    # Row reconstruction
    row_y_tolerance: float = 15.0

    # Totals: bottom-region window, whichever of the two is larger
    total_window_rows: int = 8
    total_window_fraction: float = 0.4
    # Item prices equal to the keyword total are dropped above this row count
    total_dedupe_min_rows: int = 5

    # Items
    item_stop_fraction: float = 0.6
    min_item_row_length: int = 5
    max_item_price: Decimal = Decimal("100000")
    max_quantity: int = 100
    min_item_name_length: int = 3

    # Merchant
    merchant_scan_rows: int = 6
    merchant_min_length: int = 4

    total_keywords: tuple[str, ...] = TOTAL_KEYWORDS
    grand_total_keywords: tuple[str, ...] = GRAND_TOTAL_KEYWORDS
    tax_keywords: tuple[str, ...] = TAX_KEYWORDS
    item_noise_keywords: tuple[str, ...] = ITEM_NOISE_KEYWORDS

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> ParserConfig:
        """Build a config from a TOML table, rejecting unknown keys and bad types."""
        defaults = cls()
        known = {f.name for f in fields(cls)}
        values: dict[str, Any] = {}
        for key, raw in mapping.items():
            if key not in known:
                raise ValueError(f"Unknown parser config key: {key}")
            values[key] = _coerce_config_value(key, raw, getattr(defaults, key))
        return cls(**values)


def _coerce_config_value(key: str, raw: Any, default: Any) -> Any:
    """Coerce a raw TOML value to the type of the field default."""
    if isinstance(raw, bool):
        raise ValueError(f"Invalid value for {key}: {raw!r}")
    if isinstance(default, tuple):
        if not isinstance(raw, list) or not all(isinstance(v, str) for v in raw):
            raise ValueError(f"{key} must be a list of strings")
        return tuple(v.strip().lower() for v in raw if v.strip())
    if isinstance(default, Decimal):
        if not isinstance(raw, (int, float, str)):
            raise ValueError(f"Invalid value for {key}: {raw!r}")
        try:
            return Decimal(str(raw))
        except InvalidOperation as e:
            raise ValueError(f"Invalid value for {key}: {raw!r}") from e
    if isinstance(default, int):
        if not isinstance(raw, int):
            raise ValueError(f"{key} must be an integer")
        return raw
    if isinstance(default, float):
        if not isinstance(raw, (int, float)):
            raise ValueError(f"{key} must be a number")
        return float(raw)
    return raw


DEFAULT_CONFIG = ParserConfig()


def _to_amount(text: str) -> Decimal | None:
    """Parse an amount like "1,234.5" into a two-place Decimal."""
    try:
        return Decimal(text.replace(",", "")).quantize(CENT)
    except InvalidOperation:
        return None


def _find_amounts(text: str) -> list[Decimal]:
    """Return every two-decimal amount found in text, in order."""
    amounts = []
    for match in AMOUNT_PATTERN.finditer(text):
        amount = _to_amount(match.group(0))
        if amount is not None:
            amounts.append(amount)
    return amounts


def _first_tax_amount(text: str) -> Decimal | None:
    """Return the first two-decimal amount on a tax line, ignoring rates."""
    match = TAX_AMOUNT_PATTERN.search(text)
    if match is None:
        return None
    return _to_amount(match.group(0))


def _contains_any(text: str, keywords: tuple[str, ...]) -> bool:
    return any(keyword in text for keyword in keywords)
