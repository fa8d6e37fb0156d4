"""End-to-end tests for receipt processing from cached OCR payloads.

Each test case consists of files in tests/receipts_e2e/:
  - OCR JSON as returned by the service: <name>.ocr.json
  - Expected results: <name>.expected.json
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, cast

import pytest
from tallyscan.receipt.formatter import format_scan_result
from tallyscan.receipt.ocr_result_parser import parse_receipt
from tallyscan.runtime import load_category_taxonomy

RECEIPTS_DIR = Path(__file__).parent / "receipts_e2e"


@dataclass(frozen=True)
class E2ECase:
    name: str
    expected_path: Path
    ocr_path: Path


def find_e2e_test_cases() -> list[E2ECase]:
    """Find test cases by <name>.expected.json with a matching OCR payload."""
    test_cases: list[E2ECase] = []
    for expected_path in RECEIPTS_DIR.glob("*.expected.json"):
        name = expected_path.name.removesuffix(".expected.json")
        ocr_path = RECEIPTS_DIR / f"{name}.ocr.json"
        if ocr_path.exists():
            test_cases.append(E2ECase(name=name, expected_path=expected_path, ocr_path=ocr_path))
    return sorted(test_cases, key=lambda c: c.name)


def load_json(path: Path) -> dict[str, Any]:
    with open(path) as f:
        return cast(dict[str, Any], json.load(f))


def test_e2e_cases_present() -> None:
    assert [case.name for case in find_e2e_test_cases()] == ["cafe_luna", "supermart"]


@pytest.mark.parametrize("case", find_e2e_test_cases(), ids=lambda c: c.name)
def test_receipt_from_cached_ocr(case: E2ECase) -> None:
    expected = load_json(case.expected_path)

    result = parse_receipt(load_json(case.ocr_path), taxonomy=load_category_taxonomy(()))
    actual = result.to_dict()

    for key in ("merchant", "date", "category", "total_amount", "tax_amount", "items"):
        assert actual[key] == expected[key], f"{case.name}: {key}\n{format_scan_result(result, show_layout=True)}"
