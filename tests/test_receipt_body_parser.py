"""Tests for total, tax and line item extraction from receipt rows."""

from decimal import Decimal

import pytest
from tallyscan.domain.receipt import LineItem, TextFragment, TextRow
from tallyscan.receipt.ocr_parser import DEFAULT_CONFIG, ParserConfig, _extract_receipt_body
from tallyscan.receipt.row_reconstruction import reconstruct_rows


def _rows(*lines: list[str]) -> list[TextRow]:
    """Lay out each list of texts as one receipt line, 40px apart."""
    fragments = [
        TextFragment(text=text, x=10 + col * 200, y=20 + row * 40, width=150, height=20)
        for row, texts in enumerate(lines)
        for col, text in enumerate(texts)
    ]
    return reconstruct_rows(fragments)


def test_grand_total_overrides_earlier_total() -> None:
    rows = _rows(["Corner Shop"], ["Total:", "50.00"], ["Grand Total:", "45.00"])

    body = _extract_receipt_body(rows)

    assert body.total == Decimal("45.00")


def test_grand_total_is_not_replaced_by_larger_unlabeled_amount() -> None:
    rows = _rows(["Corner Shop"], ["Grand Total", "45.00"], ["Cash", "100.00"])

    body = _extract_receipt_body(rows)

    assert body.total == Decimal("45.00")


def test_largest_labeled_total_wins_without_grand_total() -> None:
    rows = _rows(["Corner Shop"], ["Total", "40.00"], ["Amount Due", "42.00"])

    body = _extract_receipt_body(rows)

    assert body.total == Decimal("42.00")


def test_total_row_is_not_an_item() -> None:
    rows = _rows(["Corner Shop"], ["Apples", "40.00"], ["Bananas", "80.00"], ["Total", "120.00"])

    body = _extract_receipt_body(rows)

    assert [item.name for item in body.items] == ["Apples", "Bananas"]
    assert body.total == Decimal("120.00")


def test_total_falls_back_to_item_sum() -> None:
    rows = _rows(["Apples", "10.00"], ["Pears", "20.00"], ["Plums", "15.00"])

    body = _extract_receipt_body(rows)

    assert len(body.items) == 3
    assert body.total == Decimal("45.00")


def test_unlabeled_amount_at_bottom_is_total() -> None:
    rows = _rows(["Corner Shop"], ["Apples", "10.00"], ["Pears", "20.00"], ["30.00"])

    body = _extract_receipt_body(rows)

    assert body.total == Decimal("30.00")
    assert len(body.items) == 2


def test_total_with_thousands_separator() -> None:
    rows = _rows(["Corner Shop"], ["Total", "1,234.50"])

    body = _extract_receipt_body(rows)

    assert body.total == Decimal("1234.50")


def test_zero_total_is_kept() -> None:
    rows = _rows(["Total", "0.00"])

    body = _extract_receipt_body(rows)

    assert body.total is not None
    assert body.total == Decimal("0")


def test_split_tax_rows_are_summed_and_rates_ignored() -> None:
    rows = _rows(
        ["Cafe"],
        ["Sandwich", "100.00"],
        ["CGST 2.50%", "2.50"],
        ["SGST 2.50%", "2.50"],
        ["Total", "105.00"],
    )

    body = _extract_receipt_body(rows)

    assert body.tax == Decimal("5.00")
    assert body.total == Decimal("105.00")
    assert body.items == (LineItem(name="Sandwich", amount=Decimal("100.00")),)


def test_no_tax_row_means_no_tax() -> None:
    rows = _rows(["Corner Shop"], ["Apples", "10.00"], ["Total", "10.00"])

    assert _extract_receipt_body(rows).tax is None


def test_quantity_prefix_is_split_from_name() -> None:
    body = _extract_receipt_body(_rows(["2 x Coffee", "80.00"]))

    assert body.items == (LineItem(name="Coffee", amount=Decimal("80.00"), quantity=2),)


def test_quantity_prefix_in_pieces() -> None:
    body = _extract_receipt_body(_rows(["3pcs Soap Bar", "45.00"]))

    assert body.items[0].quantity == 3
    assert body.items[0].name == "Soap Bar"


def test_implausible_quantity_stays_in_name() -> None:
    body = _extract_receipt_body(_rows(["150 x Nails", "30.00"]))

    assert body.items[0].quantity == 1
    assert body.items[0].name == "150 x Nails"


@pytest.mark.parametrize(
    ("name", "unit"),
    [
        ("Milk 1kg", "kg"),
        ("Juice 500 ML", "ml"),
        ("Rice 5 Kg", "kg"),
        ("Bread", None),
    ],
)
def test_unit_is_recorded_without_touching_name(name: str, unit: str | None) -> None:
    body = _extract_receipt_body(_rows([name, "60.00"]))

    assert body.items[0].name == name
    assert body.items[0].unit == unit


def test_price_at_or_above_ceiling_is_rejected() -> None:
    rows = _rows(["Corner Shop"], ["TV Stand", "250000.00"], ["Lamp", "50.00"])

    body = _extract_receipt_body(rows)

    assert [item.name for item in body.items] == ["Lamp"]


def test_noise_rows_are_not_items() -> None:
    rows = _rows(
        ["Corner Shop"],
        ["Visa Card", "120.00"],
        ["Change", "5.00"],
        ["Discount", "3.00"],
        ["Butter", "55.00"],
    )

    body = _extract_receipt_body(rows)

    assert [item.name for item in body.items] == ["Butter"]


def test_short_and_numeric_names_are_rejected() -> None:
    rows = _rows(["AB", "12.00"], ["12345", "99.00"], ["Tea Cup", "20.00"])

    body = _extract_receipt_body(rows)

    assert [item.name for item in body.items] == ["Tea Cup"]


def test_item_priced_like_total_is_dropped_on_long_receipts() -> None:
    rows = _rows(
        ["Best Store"],
        ["Bread", "30.00"],
        ["Butter", "45.00"],
        ["Net", "75.00"],
        ["Thank you"],
        ["Total", "75.00"],
        ["Visit again"],
    )

    body = _extract_receipt_body(rows)

    assert [item.name for item in body.items] == ["Bread", "Butter"]
    assert body.total == Decimal("75.00")


def test_item_priced_like_total_is_kept_on_short_receipts() -> None:
    rows = _rows(["Best Store"], ["Bread", "30.00"], ["Butter", "45.00"], ["Net", "75.00"], ["Total", "75.00"])

    body = _extract_receipt_body(rows)

    assert [item.name for item in body.items] == ["Bread", "Butter", "Net"]


def test_unlabeled_total_line_is_not_counted_as_item() -> None:
    rows = _rows(
        ["Best Store"],
        ["Bread", "30.00"],
        ["Butter", "45.00"],
        ["Thank you"],
        ["Visit again"],
        ["Net", "75.00"],
    )

    body = _extract_receipt_body(rows)

    assert [item.name for item in body.items] == ["Bread", "Butter"]
    assert body.total == Decimal("75.00")


def test_items_stop_at_subtotal_in_lower_part() -> None:
    rows = _rows(["Corner Shop"], ["Apples", "10.00"], ["Pears", "20.00"], ["Sub Total", "30.00"], ["Gift Wrap", "5.00"])

    body = _extract_receipt_body(rows)

    assert [item.name for item in body.items] == ["Apples", "Pears"]
    assert body.total == Decimal("30.00")


def test_single_fragment_row_is_not_an_item() -> None:
    body = _extract_receipt_body(_rows(["Corner Shop"], ["Bread 30.00"]))

    assert body.items == ()


def test_item_amounts_are_positive_and_below_ceiling() -> None:
    rows = _rows(["Freebie", "0.00"], ["Cheese", "99999.99"], ["Yacht", "100000.00"])

    body = _extract_receipt_body(rows)

    assert [item.name for item in body.items] == ["Cheese"]
    assert all(Decimal("0") < item.amount < DEFAULT_CONFIG.max_item_price for item in body.items)


def test_custom_price_ceiling() -> None:
    config = ParserConfig(max_item_price=Decimal("50"))
    rows = _rows(["Corner Shop"], ["Cheese", "60.00"], ["Bread", "30.00"])

    body = _extract_receipt_body(rows, config)

    assert [item.name for item in body.items] == ["Bread"]


def test_empty_rows() -> None:
    body = _extract_receipt_body([])

    assert body.items == ()
    assert body.total is None
    assert body.tax is None
