"""Receipt scan workflow orchestration."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

from tallyscan.domain.receipt import ScanResult
from tallyscan.receipt.categories import CategoryTaxonomy
from tallyscan.receipt.ocr_parser.common import DEFAULT_CONFIG, ParserConfig
from tallyscan.receipt.ocr_result_parser import parse_receipt
from tallyscan.runtime import get_logger, load_category_taxonomy, load_parser_config
from tallyscan.runtime.receipt_pipeline import RecognitionFailed, recognize_receipt, save_ocr_json

logger = get_logger(__name__)

Recognizer = Callable[[Path], Awaitable[Mapping[str, Any]]]

ScanStatus = Literal[
    "file_not_found",
    "config_invalid",
    "ocr_unavailable",
    "scanned",
]


@dataclass(frozen=True)
class ReceiptScanRequest:
    """Inputs for running receipt scan workflow."""

    image_path: Path
    ocr_url: str
    save_ocr_json: bool = False


@dataclass(frozen=True)
class ReceiptScanOutcome:
    """Outcome from receipt scan workflow."""

    status: ScanStatus
    result: ScanResult | None = None
    ocr_json_path: Path | None = None
    error: str | None = None


async def scan_receipt(
    image_path: Path,
    recognizer: Recognizer,
    *,
    config: ParserConfig = DEFAULT_CONFIG,
    taxonomy: CategoryTaxonomy | None = None,
) -> ScanResult:
    """
    Recognize a receipt image, then run the extraction pipeline on the result.

    The recognizer call is the only suspension point; parsing is synchronous
    and keeps no state between calls, so scans may run concurrently.

    Raises:
        RecognitionFailed: If the recognizer fails for any reason.
    """
    try:
        payload = await recognizer(image_path)
    except RecognitionFailed:
        raise
    except Exception as e:
        raise RecognitionFailed(f"Text recognition failed for {image_path}: {e}") from e

    return parse_receipt(payload, config=config, taxonomy=taxonomy)


def run_receipt_scan(request: ReceiptScanRequest) -> ReceiptScanOutcome:
    """Run scan flow: OCR service -> parse -> optional raw payload dump."""
    if not request.image_path.exists():
        return ReceiptScanOutcome(
            status="file_not_found",
            error=f"Receipt file not found: {request.image_path}",
        )

    try:
        config = load_parser_config()
        taxonomy = load_category_taxonomy()
    except ValueError as exc:
        logger.error("Invalid configuration: %s", exc)
        return ReceiptScanOutcome(
            status="config_invalid",
            error=str(exc),
        )

    payloads: list[Mapping[str, Any]] = []

    async def _recognize(path: Path) -> Mapping[str, Any]:
        payload = await recognize_receipt(path, request.ocr_url)
        payloads.append(payload)
        return payload

    try:
        result = asyncio.run(
            scan_receipt(
                request.image_path,
                _recognize,
                config=config,
                taxonomy=taxonomy,
            )
        )
    except RecognitionFailed as exc:
        return ReceiptScanOutcome(
            status="ocr_unavailable",
            error=str(exc),
        )

    ocr_json_path = None
    if request.save_ocr_json and payloads:
        ocr_json_path = save_ocr_json(dict(payloads[0]), request.image_path)

    return ReceiptScanOutcome(
        status="scanned",
        result=result,
        ocr_json_path=ocr_json_path,
    )
