"""Tests for candidate scoring and selection."""

import pytest
from splitscan.domain.receipt import NormalizedRect, TextFragment
from splitscan.receipt.item_parser import RowCandidate, RowKind, score_candidate, select_best_candidate
from splitscan.receipt.parser_config import ParserConfig

PRICE = TextFragment(text="2.99", confidence=0.99, box=NormalizedRect(0.50, 0.45))


def _candidate(text: str, y: float = 0.50, x: float = 0.10, line_offset: int = 0) -> RowCandidate:
    return RowCandidate(TextFragment(text=text, confidence=0.99, box=NormalizedRect(y, x)), line_offset)


def test_regular_row_score_components() -> None:
    # offset 1.0, alignment 1.0, length 10/20, letters 1.0, position 1 - 0.1/0.5
    score = score_candidate(_candidate("CHEDDARCHZ"), PRICE, RowKind.REGULAR, ParserConfig())
    assert score == pytest.approx(0.35 + 0.25 + 0.5 * 0.15 + 0.15 + 0.8 * 0.10)


def test_regular_row_alignment_falls_with_vertical_offset() -> None:
    config = ParserConfig()
    aligned = score_candidate(_candidate("BREAD"), PRICE, RowKind.REGULAR, config)
    drifted = score_candidate(_candidate("BREAD", y=0.505), PRICE, RowKind.REGULAR, config)
    assert aligned - drifted == pytest.approx(0.5 * 0.25)


def test_multi_line_score_uses_line_proximity() -> None:
    # offset 1.0, proximity 1 - 0.1 * 2, length 6/20, letters 1.0, position 0.8
    score = score_candidate(_candidate("APPLES", y=0.46, line_offset=2), PRICE, RowKind.WEIGHT, ParserConfig())
    assert score == pytest.approx(0.30 + 0.8 * 0.30 + 0.3 * 0.15 + 0.15 + 0.8 * 0.10)


@pytest.mark.parametrize("text", ["HMRJ", "mrj", "SUBTOTAL", "Visa Debit"])
def test_non_item_text_gets_fixed_low_score(text: str) -> None:
    score = score_candidate(_candidate(text), PRICE, RowKind.REGULAR, ParserConfig())
    assert score == pytest.approx(0.1)


def test_longer_letter_heavy_left_text_wins() -> None:
    candidates = [
        _candidate("4011", x=0.05),
        _candidate("ORGANIC BANANAS", x=0.12),
        _candidate("HMRJ", x=0.38),
    ]

    best = select_best_candidate(candidates, PRICE, RowKind.REGULAR, ParserConfig())

    assert best is not None
    assert best.fragment.text == "ORGANIC BANANAS"


def test_ties_resolve_to_first_candidate() -> None:
    first = _candidate("ABCD")
    second = _candidate("WXYZ")

    best = select_best_candidate([first, second], PRICE, RowKind.REGULAR, ParserConfig())

    assert best is first


def test_empty_candidates_select_nothing() -> None:
    assert select_best_candidate([], PRICE, RowKind.REGULAR, ParserConfig()) is None
