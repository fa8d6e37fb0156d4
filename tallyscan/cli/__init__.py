"""Command-line interface for tallyscan.

Usage:
    tallyscan scan <image> [--ocr-url URL] [--json] [--save-ocr-json]
    tallyscan parse <ocr.json> [--json]
"""
