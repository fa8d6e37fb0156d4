"""Normalization of OCR service payloads into canonical text fragments.

This stage runs once at ingestion so the rest of the pipeline only ever sees
``TextFragment``. Two payload shapes are understood:

- block/line results, where each line carries a ``frame`` named either
  ``{x, y, width, height}`` or ``{left, top, width, height}``
- PaddleOCR-style ``detections``: ``[polygon, [text, confidence]]`` pairs

Missing or malformed coordinates become 0 instead of failing the scan.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from tallyscan.domain.receipt import TextFragment

logger = logging.getLogger(__name__)

FragmentNormalizationOp = Callable[[list[TextFragment]], list[TextFragment]]


@dataclass(frozen=True)
class NormalizedOCRResult:
    """Canonical fragments plus the recognizer's own full text."""

    fragments: tuple[TextFragment, ...]
    raw_text: str


def _coord(value: Any) -> float:
    """Coerce a coordinate to float; anything unusable becomes 0."""
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value)
        except ValueError:
            return 0.0
    else:
        return 0.0
    return number if math.isfinite(number) else 0.0


def _first_present(frame: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = frame.get(key)
        if value is not None:
            return value
    return None


def fragment_from_frame(text: str, frame: Any) -> TextFragment:
    """Build a fragment from a line frame using either naming convention."""
    if not isinstance(frame, Mapping):
        frame = {}
    return TextFragment(
        text=text,
        x=_coord(_first_present(frame, "x", "left")),
        y=_coord(_first_present(frame, "y", "top")),
        width=_coord(frame.get("width")),
        height=_coord(frame.get("height")),
    )


def fragment_from_polygon(text: str, polygon: Any) -> TextFragment:
    """Build a fragment from a ``[[x, y], ...]`` polygon (its bounding box)."""
    points: list[tuple[float, float]] = []
    if isinstance(polygon, Sequence) and not isinstance(polygon, str):
        for point in polygon:
            if isinstance(point, Sequence) and not isinstance(point, str) and len(point) >= 2:
                points.append((_coord(point[0]), _coord(point[1])))
    if not points:
        return TextFragment(text=text)

    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    return TextFragment(
        text=text,
        x=min(xs),
        y=min(ys),
        width=max(xs) - min(xs),
        height=max(ys) - min(ys),
    )


def _fragments_from_blocks(blocks: Iterable[Any]) -> list[TextFragment]:
    fragments: list[TextFragment] = []
    for block in blocks:
        if not isinstance(block, Mapping):
            continue
        for line in block.get("lines") or []:
            if not isinstance(line, Mapping):
                continue
            fragments.append(fragment_from_frame(str(line.get("text") or ""), line.get("frame")))
    return fragments


def _fragments_from_detections(detections: Iterable[Any]) -> list[TextFragment]:
    fragments: list[TextFragment] = []
    for detection in detections:
        if not isinstance(detection, Sequence) or len(detection) < 2:
            continue
        polygon, recognized = detection[0], detection[1]
        if isinstance(recognized, Sequence) and not isinstance(recognized, str) and recognized:
            text = recognized[0]
        else:
            text = recognized
        fragments.append(fragment_from_polygon(str(text or ""), polygon))
    return fragments


def normalize_ocr_result(
    payload: Mapping[str, Any],
    *,
    operations: Sequence[FragmentNormalizationOp] | None = None,
) -> NormalizedOCRResult:
    """
    Convert an OCR payload into canonical fragments and raw text.

    Args:
        payload: Decoded OCR service response (block/line or detections shape)
        operations: Optional extra fragment transforms, run in order after
            fragments with empty text are dropped

    Returns:
        NormalizedOCRResult; raw_text falls back to the fragment texts joined
        by newlines when the payload carries no full text of its own
    """
    if "blocks" in payload:
        fragments = _fragments_from_blocks(payload.get("blocks") or [])
    else:
        fragments = _fragments_from_detections(payload.get("detections") or [])

    fragments = [f for f in fragments if f.text.strip()]
    for operation in operations or ():
        fragments = operation(fragments)

    raw_text = payload.get("text")
    if not isinstance(raw_text, str):
        raw_text = payload.get("full_text")
    if not isinstance(raw_text, str):
        raw_text = "\n".join(f.text for f in fragments)

    logger.debug("Normalized %d OCR fragments", len(fragments))
    return NormalizedOCRResult(fragments=tuple(fragments), raw_text=raw_text)
