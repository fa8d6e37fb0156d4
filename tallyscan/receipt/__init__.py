"""Receipt OCR extraction pipeline.

Usage:
    from tallyscan.receipt import parse_receipt
    result = parse_receipt(ocr_payload)
"""

from tallyscan.receipt.ocr_result_parser import parse_fragments, parse_receipt

__all__ = [
    "parse_fragments",
    "parse_receipt",
]
