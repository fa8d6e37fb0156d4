"""Composable OCR receipt parser components."""

from .common import DEFAULT_CONFIG, ParserConfig
from .fields_parser import _extract_date, _extract_merchant
from .items_spatial_parser import ReceiptBody, _extract_receipt_body

__all__ = [
    "DEFAULT_CONFIG",
    "ParserConfig",
    "ReceiptBody",
    "_extract_date",
    "_extract_merchant",
    "_extract_receipt_body",
]
