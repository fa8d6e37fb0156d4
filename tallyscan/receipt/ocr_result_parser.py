"""Parse raw OCR output into a structured ScanResult."""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from tallyscan.domain.receipt import ScanResult, TextFragment

from .categories import CategoryTaxonomy, classify_category
from .detection_normalization import normalize_ocr_result
from .ocr_parser import DEFAULT_CONFIG, ParserConfig, _extract_date, _extract_merchant, _extract_receipt_body
from .row_reconstruction import reconstruct_rows, rows_to_text

logger = logging.getLogger(__name__)


def parse_fragments(
    fragments: Iterable[TextFragment],
    raw_text: str | None = None,
    *,
    config: ParserConfig = DEFAULT_CONFIG,
    taxonomy: CategoryTaxonomy | None = None,
) -> ScanResult:
    """
    Run the extraction pipeline over canonical fragments.

    Stages run strictly forward: rows -> fields -> category -> result.
    Nothing here raises on odd text; unmatched fields are left as None.

    Args:
        fragments: OCR fragments in any order
        raw_text: Recognizer's full text; defaults to fragment texts joined by newlines
        config: Heuristic thresholds
        taxonomy: Category table; built-in table when omitted

    Returns:
        ScanResult with all fields found
    """
    fragments = list(fragments)
    if raw_text is None:
        raw_text = "\n".join(f.text for f in fragments)

    rows = reconstruct_rows(fragments, y_tolerance=config.row_y_tolerance)

    merchant = _extract_merchant(rows, config)
    body = _extract_receipt_body(rows, config)
    receipt_date = _extract_date(raw_text)
    category = classify_category(raw_text, merchant, body.items, taxonomy=taxonomy)

    logger.debug(
        "Parsed receipt: merchant=%r date=%r total=%s tax=%s items=%d category=%r",
        merchant,
        receipt_date,
        body.total,
        body.tax,
        len(body.items),
        category,
    )

    return ScanResult(
        raw_text=raw_text,
        reconstructed_text=rows_to_text(rows),
        items=body.items,
        total_amount=body.total,
        tax_amount=body.tax,
        date=receipt_date,
        merchant=merchant,
        category=category,
    )


def parse_receipt(
    ocr_result: Mapping[str, Any],
    *,
    config: ParserConfig = DEFAULT_CONFIG,
    taxonomy: CategoryTaxonomy | None = None,
) -> ScanResult:
    """
    Parse an OCR service payload into a ScanResult.

    This is a best-effort parser - results should be reviewed by the user.

    Args:
        ocr_result: Decoded OCR payload (block/line or detections shape)
        config: Heuristic thresholds
        taxonomy: Category table loaded by runtime components

    Returns:
        ScanResult with parsed data
    """
    normalized = normalize_ocr_result(ocr_result)
    return parse_fragments(normalized.fragments, normalized.raw_text, config=config, taxonomy=taxonomy)
