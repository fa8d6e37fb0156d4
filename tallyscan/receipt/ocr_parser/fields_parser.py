"""Merchant/date extraction helpers."""

from tallyscan.domain.receipt import TextRow

from .common import DATE_PATTERN, DEFAULT_CONFIG, MERCHANT_SKIP_PATTERN, ParserConfig


def _extract_merchant(rows: list[TextRow], config: ParserConfig = DEFAULT_CONFIG) -> str | None:
    """
    Extract merchant name from the top of the receipt.

    Takes the first of the leading rows that is long enough, not a bare
    number, and not a metadata line (date, phone, GST/tax id, invoice).
    """
    for row in rows[: config.merchant_scan_rows]:
        text = row.combined_text.strip()
        if len(text) < config.merchant_min_length:
            continue
        if text.isdigit():
            continue
        if MERCHANT_SKIP_PATTERN.search(text):
            continue
        return text
    return None


def _extract_date(full_text: str) -> str | None:
    """Return the first date-like token ("12/03/2024", "1-2-24") verbatim.

    Day/month order varies by locale, so no conversion is attempted here.
    """
    match = DATE_PATTERN.search(full_text)
    if match:
        return match.group(0)
    return None
