"""Core domain models for receipt scanning.

This module provides the data models shared by the extraction pipeline:
- TextFragment, TextRow: OCR layout models
- LineItem, ScanResult: extraction results

Usage:
    from tallyscan.domain import ScanResult, LineItem
"""

from tallyscan.domain.receipt import LineItem, ScanResult, TextFragment, TextRow

__all__ = [
    "LineItem",
    "ScanResult",
    "TextFragment",
    "TextRow",
]
