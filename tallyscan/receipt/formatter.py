"""Format ScanResult data for terminal review."""

from decimal import Decimal

from tallyscan.domain.receipt import LineItem, ScanResult

NOT_FOUND = "-"


def _format_amount(amount: Decimal | None) -> str:
    return NOT_FOUND if amount is None else f"{amount:.2f}"


def _format_item_lines(items: tuple[LineItem, ...], indent: str = "  ") -> list[str]:
    """
    Format item lines with names padded so amounts line up.

    Args:
        items: Extracted items
        indent: Indentation prefix for each line

    Returns:
        One line per item, e.g. "  1. 2 x Coffee      80.00"
    """
    if not items:
        return []

    labels = []
    for i, item in enumerate(items, 1):
        qty_str = f"{item.quantity} x " if item.quantity > 1 else ""
        unit_str = f" [{item.unit}]" if item.unit else ""
        labels.append(f"{i}. {qty_str}{item.name}{unit_str}")

    amounts = [f"{item.amount:.2f}" for item in items]
    max_label_len = max(len(label) for label in labels)
    max_amount_len = max(len(amount) for amount in amounts)
    return [
        f"{indent}{label.ljust(max_label_len)}  {amount.rjust(max_amount_len)}"
        for label, amount in zip(labels, amounts)
    ]


def format_scan_result(result: ScanResult, show_layout: bool = False) -> str:
    """
    Render a ScanResult as a readable summary block.

    Fields that were not found print as "-" so they are never mistaken
    for a zero amount.
    """
    rule = "=" * 60
    lines = [
        rule,
        "SCANNED RECEIPT",
        rule,
        f"Merchant: {result.merchant or NOT_FOUND}",
        f"Date:     {result.date or NOT_FOUND}",
        f"Category: {result.category or NOT_FOUND}",
        f"Total:    {_format_amount(result.total_amount)}",
        f"Tax:      {_format_amount(result.tax_amount)}",
        "",
        f"Items ({len(result.items)}):",
    ]
    lines.extend(_format_item_lines(result.items))

    if show_layout:
        lines.extend(["", "Layout:", result.reconstructed_text])

    lines.append(rule)
    return "\n".join(lines)
