"""Tests for OCR payload normalization into text fragments."""

from tallyscan.domain.receipt import TextFragment
from tallyscan.receipt.detection_normalization import (
    fragment_from_frame,
    fragment_from_polygon,
    normalize_ocr_result,
)


def test_both_frame_naming_conventions_give_the_same_fragment() -> None:
    xy = fragment_from_frame("Milk", {"x": 10, "y": 20, "width": 80, "height": 18})
    left_top = fragment_from_frame("Milk", {"left": 10, "top": 20, "width": 80, "height": 18})

    assert xy == left_top == TextFragment(text="Milk", x=10.0, y=20.0, width=80.0, height=18.0)


def test_missing_or_malformed_coordinates_become_zero() -> None:
    assert fragment_from_frame("A", None) == TextFragment(text="A")
    assert fragment_from_frame("A", {"x": "abc", "y": "12", "width": float("nan"), "height": True}) == TextFragment(
        text="A", y=12.0
    )


def test_polygon_becomes_bounding_box() -> None:
    fragment = fragment_from_polygon("Bread", [[10, 50], [110, 52], [110, 72], [10, 70]])

    assert fragment == TextFragment(text="Bread", x=10.0, y=50.0, width=100.0, height=22.0)


def test_bad_polygon_gives_zero_geometry() -> None:
    assert fragment_from_polygon("Bread", "not a polygon") == TextFragment(text="Bread")


def test_normalize_block_payload() -> None:
    payload = {
        "text": "SuperMart\nBread",
        "blocks": [
            {
                "lines": [
                    {"text": "SuperMart", "frame": {"x": 50, "y": 10, "width": 200, "height": 30}},
                    {"text": "   ", "frame": {"x": 50, "y": 30, "width": 10, "height": 10}},
                ]
            },
            {"lines": [{"text": "Bread", "frame": {"left": 10, "top": 60, "width": 80, "height": 20}}]},
        ],
    }

    normalized = normalize_ocr_result(payload)

    assert [f.text for f in normalized.fragments] == ["SuperMart", "Bread"]
    assert normalized.fragments[1].y == 60.0
    assert normalized.raw_text == "SuperMart\nBread"


def test_normalize_detection_payload_uses_full_text() -> None:
    payload = {
        "full_text": "Bread 30.00",
        "detections": [
            [[[10, 50], [90, 50], [90, 70], [10, 70]], ["Bread", 0.98]],
            [[[300, 51], [360, 51], [360, 71], [300, 71]], ["30.00", 0.95]],
        ],
    }

    normalized = normalize_ocr_result(payload)

    assert [(f.text, f.x) for f in normalized.fragments] == [("Bread", 10.0), ("30.00", 300.0)]
    assert normalized.raw_text == "Bread 30.00"


def test_raw_text_falls_back_to_fragment_texts() -> None:
    payload = {"blocks": [{"lines": [{"text": "A shop"}, {"text": "Tea"}]}]}

    assert normalize_ocr_result(payload).raw_text == "A shop\nTea"


def test_empty_payload() -> None:
    normalized = normalize_ocr_result({})

    assert normalized.fragments == ()
    assert normalized.raw_text == ""


def test_operations_run_in_order_after_empty_text_is_dropped() -> None:
    payload = {"blocks": [{"lines": [{"text": "a"}, {"text": ""}, {"text": "b"}]}]}
    seen: list[int] = []

    def record(fragments: list[TextFragment]) -> list[TextFragment]:
        seen.append(len(fragments))
        return fragments

    def upper(fragments: list[TextFragment]) -> list[TextFragment]:
        return [TextFragment(text=f.text.upper(), x=f.x, y=f.y) for f in fragments]

    normalized = normalize_ocr_result(payload, operations=[record, upper])

    assert seen == [2]
    assert [f.text for f in normalized.fragments] == ["A", "B"]
