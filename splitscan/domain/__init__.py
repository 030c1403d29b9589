"""Pure data models shared across splitscan layers."""

from .receipt import (
    NormalizedRect,
    ParseWarning,
    PixelRect,
    PriceCandidate,
    ReceiptLineItem,
    TextFragment,
)

__all__ = [
    "NormalizedRect",
    "ParseWarning",
    "PixelRect",
    "PriceCandidate",
    "ReceiptLineItem",
    "TextFragment",
]
