"""Receipt workflows."""

from tallyscan.application.receipts.scan import (
    ReceiptScanOutcome,
    ReceiptScanRequest,
    Recognizer,
    run_receipt_scan,
    scan_receipt,
)

__all__ = [
    "ReceiptScanOutcome",
    "ReceiptScanRequest",
    "Recognizer",
    "run_receipt_scan",
    "scan_receipt",
]
