"""Receipt command handlers used by the CLI."""

import argparse
import json
import sys
from pathlib import Path

from tallyscan.domain.receipt import ScanResult
from tallyscan.receipt.formatter import format_scan_result
from tallyscan.runtime import get_logger

logger = get_logger(__name__)


def _print_result(result: ScanResult, as_json: bool) -> None:
    if as_json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print(format_scan_result(result, show_layout=True))


def cmd_scan(args: argparse.Namespace) -> None:
    """Scan a receipt image through the OCR service and print the result."""
    from tallyscan.application.receipts.scan import ReceiptScanRequest, run_receipt_scan

    outcome = run_receipt_scan(
        ReceiptScanRequest(
            image_path=Path(args.image),
            ocr_url=args.ocr_url,
            save_ocr_json=args.save_ocr_json,
        )
    )

    if outcome.status == "file_not_found":
        logger.error("%s", outcome.error)
        print(f"Error: {outcome.error}")
        sys.exit(1)

    if outcome.status == "config_invalid":
        logger.error("%s", outcome.error)
        print(f"Error: invalid configuration: {outcome.error}")
        sys.exit(1)

    if outcome.status == "ocr_unavailable":
        logger.error("%s", outcome.error)
        print(f"Text recognition failed: {outcome.error}")
        print("Make sure the OCR service is running before scanning receipts.")
        sys.exit(1)

    if outcome.result is None:
        print("Scan failed: missing result.")
        sys.exit(1)

    _print_result(outcome.result, args.json)
    if outcome.ocr_json_path is not None:
        print(f"\nSaved OCR JSON to: {outcome.ocr_json_path}")


def cmd_parse(args: argparse.Namespace) -> None:
    """Parse a previously saved OCR payload (no network)."""
    from tallyscan.receipt.ocr_result_parser import parse_receipt
    from tallyscan.runtime import load_category_taxonomy, load_parser_config

    path = Path(args.ocr_json)
    try:
        payload = json.loads(path.read_text())
    except (OSError, ValueError) as e:
        logger.error("Cannot read OCR JSON %s: %s", path, e)
        print(f"Error: cannot read OCR JSON {path}: {e}")
        sys.exit(1)

    if not isinstance(payload, dict):
        print(f"Error: {path} does not hold an OCR result object")
        sys.exit(1)

    try:
        config = load_parser_config()
        taxonomy = load_category_taxonomy()
    except ValueError as e:
        logger.error("Invalid configuration: %s", e)
        print(f"Error: invalid configuration: {e}")
        sys.exit(1)

    result = parse_receipt(payload, config=config, taxonomy=taxonomy)
    _print_result(result, args.json)
