"""Data models for receipt line-item reconstruction."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class NormalizedRect:
    """A unit-square rectangle in the detector's native orientation.

    `primary` runs along the receipt's vertical axis and `secondary` along its
    horizontal axis, but only after the fixed rotation in
    `splitscan.receipt.geometry` is applied. Row/column reasoning compares
    these raw values directly.
    """

    primary: float
    secondary: float
    primary_size: float = 0.0
    secondary_size: float = 0.0


@dataclass(frozen=True)
class PixelRect:
    """A rectangle in displayed-image pixel space (origin top-left)."""

    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class TextFragment:
    """One run of recognized text from the detection engine."""

    text: str
    confidence: float
    box: NormalizedRect

    @property
    def vertical(self) -> float:
        return self.box.primary

    @property
    def horizontal(self) -> float:
        return self.box.secondary


@dataclass(frozen=True)
class PriceCandidate:
    """A price-shaped fragment considered during column clustering."""

    fragment: TextFragment
    value: Decimal
    horizontal_position: float


@dataclass(frozen=True)
class ReceiptLineItem:
    """A single purchased line item reconstructed from the receipt."""

    id: str
    name: str
    price: Decimal
    source_box: NormalizedRect
    quantity: int = 1
    weight: Decimal | None = None
    price_per_weight: Decimal | None = None
    price_per_count: Decimal | None = None
    is_taxed: bool = False

    @property
    def total(self) -> Decimal:
        # Price is the authoritative line total from the receipt.
        # Quantity and unit prices are informational only.
        return self.price


@dataclass(frozen=True)
class ParseWarning:
    """Diagnostic for a column price that produced no line item."""

    message: str
    price: Decimal
