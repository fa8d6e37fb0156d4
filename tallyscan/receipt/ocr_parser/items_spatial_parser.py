"""Spatial (row-based) extraction of totals, tax and line items."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal

from tallyscan.domain.receipt import LineItem, TextRow

from .common import (
    DEFAULT_CONFIG,
    PLAIN_PRICE_PATTERN,
    PRICE_JUNK_PATTERN,
    QUANTITY_PREFIX_PATTERN,
    UNIT_PATTERN,
    ParserConfig,
    _contains_any,
    _find_amounts,
    _first_tax_amount,
    _to_amount,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReceiptBody:
    """Totals, tax and items recovered from the rows of one receipt."""

    items: tuple[LineItem, ...] = ()
    total: Decimal | None = None
    tax: Decimal | None = None


@dataclass
class _TotalTracker:
    """Running best guess for the grand total.

    The largest candidate wins until a "grand total"/"net payable" row is
    seen; from then on only another such row can replace it.
    """

    total: Decimal | None = None
    pinned: bool = False
    source_rows: list[int] = field(default_factory=list)

    def offer(self, index: int, row_max: Decimal, specific: bool = False) -> None:
        if specific:
            self.total = row_max
            self.pinned = True
            self.source_rows.append(index)
            return
        if self.pinned:
            return
        if self.total is None or row_max > self.total:
            self.total = row_max
            self.source_rows.append(index)


def _bottom_region_start(row_count: int, config: ParserConfig) -> int:
    """First row index of the region where an unlabeled total may appear."""
    by_rows = row_count - config.total_window_rows
    by_fraction = int(row_count * (1 - config.total_window_fraction))
    return max(0, min(by_rows, by_fraction))


def _is_total_row(lower: str, config: ParserConfig) -> bool:
    return _contains_any(lower, config.total_keywords) or _contains_any(lower, config.grand_total_keywords)


def _is_tax_row(lower: str, config: ParserConfig) -> bool:
    return _contains_any(lower, config.tax_keywords)


def _split_quantity(name: str, config: ParserConfig) -> tuple[int, str]:
    """Strip a leading "2 x" / "3 pcs" quantity from an item name."""
    match = QUANTITY_PREFIX_PATTERN.match(name)
    if not match:
        return 1, name
    quantity = int(match.group(1))
    if not 1 <= quantity < config.max_quantity:
        return 1, name
    return quantity, name[match.end() :].strip()


def _find_unit(name: str) -> str | None:
    """Return the unit of a "1kg" / "500 ml" size token; the name keeps it."""
    match = UNIT_PATTERN.search(name)
    if match:
        return match.group(1).lower()
    return None


def _parse_item_row(row: TextRow, config: ParserConfig) -> LineItem | None:
    """
    Build a line item from a row ending in a price, or return None.

    The price is the right-most fragment; every fragment to its left forms
    the name. Rows are expected to be pre-filtered for noise keywords.
    """
    if len(row.fragments) < 2:
        return None

    clean_price = PRICE_JUNK_PATTERN.sub("", row.fragments[-1].text)
    if not PLAIN_PRICE_PATTERN.match(clean_price):
        return None
    price = _to_amount(clean_price)
    if price is None:
        return None

    if not (Decimal("0") < price < config.max_item_price):
        logger.debug("Skipping implausible item price %s: %r", price, row.combined_text)
        return None

    name = " ".join(f.text for f in row.fragments[:-1]).strip()
    if not name or name.replace(" ", "").isdigit():
        return None

    quantity, name = _split_quantity(name, config)
    unit = _find_unit(name)

    if len(name) < config.min_item_name_length or name.replace(" ", "").isdigit():
        return None

    return LineItem(name=name, amount=price, quantity=quantity, unit=unit)


def _extract_receipt_body(rows: list[TextRow], config: ParserConfig = DEFAULT_CONFIG) -> ReceiptBody:
    """
    Extract grand total, tax and line items from reconstructed rows.

    Strategy:
    1. Keyword pass: rows naming a total feed the running maximum; tax rows
       add their first amount to the tax sum
    2. Item candidates from the remaining rows, stopping once the totals
       section starts past ``item_stop_fraction`` of the receipt
    3. Bottom-region rows also feed the running maximum. On short receipts
       (``total_dedupe_min_rows`` rows or fewer) item candidates are left out
    4. On longer receipts a candidate priced exactly at the total is the
       total line itself and is dropped
    5. Without any total, fall back to the sum of item amounts
    """
    row_count = len(rows)
    long_receipt = row_count > config.total_dedupe_min_rows
    tracker = _TotalTracker()
    tax: Decimal | None = None
    summary_rows: set[int] = set()

    # Pass 1: labeled totals and tax
    for i, row in enumerate(rows):
        lower = row.combined_text.lower()

        if _is_total_row(lower, config):
            summary_rows.add(i)
            amounts = _find_amounts(row.combined_text)
            if amounts:
                tracker.offer(i, max(amounts), specific=_contains_any(lower, config.grand_total_keywords))

        if _is_tax_row(lower, config):
            summary_rows.add(i)
            amount = _first_tax_amount(row.combined_text)
            if amount is not None:
                tax = (tax or Decimal("0.00")) + amount

    # Pass 2: item candidates
    candidates: dict[int, LineItem] = {}
    for i, row in enumerate(rows):
        lower = row.combined_text.lower()
        stripped = lower.strip()

        if i >= row_count * config.item_stop_fraction and (
            stripped.startswith("total") or stripped.startswith("sub")
        ):
            logger.debug("Item section ends at row %d of %d", i, row_count)
            break
        if i in summary_rows:
            continue
        if _contains_any(lower, config.item_noise_keywords):
            continue
        if len(row.combined_text) < config.min_item_row_length or row.combined_text.strip().isdigit():
            continue

        item = _parse_item_row(row, config)
        if item is not None:
            candidates[i] = item

    # Pass 3: amounts near the bottom
    for i in range(_bottom_region_start(row_count, config), row_count):
        if i in summary_rows or (not long_receipt and i in candidates):
            continue
        amounts = _find_amounts(rows[i].combined_text)
        if amounts:
            tracker.offer(i, max(amounts))

    total = tracker.total

    # Pass 4: drop the unlabeled total line from the items
    items: list[LineItem] = []
    for i, item in candidates.items():
        if long_receipt and total is not None and item.amount == total:
            logger.debug("Skipping item price equal to total: %r", rows[i].combined_text)
            continue
        items.append(item)

    if total is None and items:
        total = sum((item.amount for item in items), Decimal("0.00"))
        logger.debug("No total row found; using item sum %s", total)
    elif total is not None:
        logger.debug("Total %s taken from rows %s", total, tracker.source_rows)

    return ReceiptBody(items=tuple(items), total=total, tax=tax)
