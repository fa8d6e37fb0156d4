"""Cluster OCR fragments into physical receipt rows."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from tallyscan.domain.receipt import TextFragment, TextRow

from .ocr_parser.common import DEFAULT_CONFIG

logger = logging.getLogger(__name__)

Y_TOLERANCE = DEFAULT_CONFIG.row_y_tolerance


def _row_accepts(row: TextRow, fragment: TextFragment, tolerance: float) -> bool:
    """Return True if fragment sits on the same line as row.

    Compares both top edges and vertical centers, so mixed font sizes on one
    printed line still cluster together.
    """
    if abs(row.y_position - fragment.y) < tolerance:
        return True
    return abs(row.center_y - fragment.center_y) < tolerance


def _row_mean_center(row: TextRow) -> float:
    return sum(f.center_y for f in row.fragments) / len(row.fragments)


def reconstruct_rows(fragments: Iterable[TextFragment], y_tolerance: float = Y_TOLERANCE) -> list[TextRow]:
    """
    Group fragments into rows ordered top to bottom.

    Fragments are visited by ascending y; each joins the first existing row
    within ``y_tolerance`` or seeds a new one. A row keeps the position and
    height of its seed fragment.

    Args:
        fragments: OCR fragments in any order
        y_tolerance: Max vertical distance (exclusive) for two fragments to share a row

    Returns:
        Rows sorted by the mean vertical center of their fragments
    """
    ordered = sorted(fragments, key=lambda f: f.y)
    rows: list[TextRow] = []

    for fragment in ordered:
        match = next((row for row in rows if _row_accepts(row, fragment, y_tolerance)), None)
        if match is not None:
            match.add(fragment)
        else:
            rows.append(TextRow.seeded_with(fragment))

    # Order by merged geometry, not creation order.
    rows.sort(key=_row_mean_center)

    logger.debug("Reconstructed %d rows from %d fragments", len(rows), len(ordered))
    return rows


def rows_to_text(rows: Iterable[TextRow]) -> str:
    """Render rows as newline-separated text, one physical line each."""
    return "\n".join(row.combined_text for row in rows)
