"""Data models for receipt scanning."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any


@dataclass(frozen=True)
class TextFragment:
    """One OCR-recognized line of text with its position on the source image."""

    text: str
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2


@dataclass
class TextRow:
    """A reconstructed physical line of the receipt.

    Fragments are kept sorted left to right and ``combined_text`` always
    mirrors them. Rows are only mutated while they are being clustered.
    """

    y_position: float
    height: float
    fragments: list[TextFragment] = field(default_factory=list)
    combined_text: str = ""

    @classmethod
    def seeded_with(cls, fragment: TextFragment) -> TextRow:
        return cls(
            y_position=fragment.y,
            height=fragment.height,
            fragments=[fragment],
            combined_text=fragment.text,
        )

    @property
    def center_y(self) -> float:
        return self.y_position + self.height / 2

    def add(self, fragment: TextFragment) -> None:
        self.fragments.append(fragment)
        self.fragments.sort(key=lambda f: f.x)
        self.combined_text = " ".join(f.text for f in self.fragments)


@dataclass(frozen=True)
class LineItem:
    """A single purchased line on a receipt."""

    name: str
    amount: Decimal
    quantity: int = 1
    unit: str | None = None  # e.g. "kg", "ml", "pkt"

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "amount": f"{self.amount:.2f}",
            "quantity": self.quantity,
            "unit": self.unit,
        }


@dataclass(frozen=True)
class ScanResult:
    """Structured data recovered from one receipt scan.

    Every optional field uses ``None`` for "not found". A zero total is a
    real value and is never used to mean absence.
    """

    raw_text: str
    reconstructed_text: str
    items: tuple[LineItem, ...] = ()
    total_amount: Decimal | None = None
    tax_amount: Decimal | None = None
    date: str | None = None  # Raw match, e.g. "12/03/2024"; never reinterpreted
    merchant: str | None = None
    category: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-friendly mapping (amounts as two-decimal strings)."""
        return {
            "total_amount": None if self.total_amount is None else f"{self.total_amount:.2f}",
            "tax_amount": None if self.tax_amount is None else f"{self.tax_amount:.2f}",
            "date": self.date,
            "merchant": self.merchant,
            "category": self.category,
            "items": [item.to_dict() for item in self.items],
            "raw_text": self.raw_text,
            "reconstructed_text": self.reconstructed_text,
        }
