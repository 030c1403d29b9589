"""Shared pytest fixtures for splitscan tests."""

from __future__ import annotations

import pytest
from splitscan.domain.receipt import NormalizedRect, TextFragment
from splitscan.receipt.line_item_parser import ReceiptLineItemParser
from splitscan.receipt.parser_config import ParserConfig


@pytest.fixture
def parser() -> ReceiptLineItemParser:
    return ReceiptLineItemParser(ParserConfig())


@pytest.fixture
def grocery_fragments() -> list[TextFragment]:
    """A small single-column receipt: header, three items, totals, footer."""

    def frag(text: str, y: float, x: float) -> TextFragment:
        return TextFragment(text=text, confidence=0.95, box=NormalizedRect(y, x, 0.01, 0.1))

    return [
        frag("FRESH MART STORE #12", 0.02, 0.15),
        frag("DATE: 2026-03-01", 0.04, 0.10),
        frag("MILK 2% 4L", 0.10, 0.10),
        frag("5.49", 0.10, 0.45),
        frag("BANANAS", 0.14, 0.10),
        frag("6 @ $0.25", 0.16, 0.15),
        frag("1.50", 0.16, 0.46),
        frag("APPLES GALA", 0.20, 0.10),
        frag("0.543 kg", 0.22, 0.10),
        frag("@ $3.00/kg", 0.22, 0.22),
        frag("1.63", 0.22, 0.45),
        frag("(2) 62843020000 DOUGHNUTS", 0.26, 0.10),
        frag("HMRJ", 0.26, 0.38),
        frag("12.00", 0.26, 0.45),
        frag("SUBTOTAL", 0.32, 0.10),
        frag("20.62", 0.32, 0.45),
        frag("VISA", 0.36, 0.10),
        frag("22.18", 0.36, 0.45),
        frag("THANK YOU", 0.42, 0.20),
    ]
