"""Score candidate name fragments and pick the best one for a price."""

from collections.abc import Sequence

from splitscan.domain.receipt import TextFragment
from splitscan.receipt.parser_config import ParserConfig

from .common import _is_non_item_text, _letter_ratio
from .rows import RowCandidate, RowKind


def score_candidate(
    candidate: RowCandidate,
    price_fragment: TextFragment,
    kind: RowKind,
    config: ParserConfig,
) -> float:
    """
    Weighted plausibility that `candidate` is the item name for `price_fragment`.

    Factors, in weight order:
    1. offset: 1.0 if the candidate lies left of the price
    2. alignment (regular rows) or line proximity (weight/count rows)
    3. length, saturating at `config.length_target` characters
    4. share of alphabetic characters
    5. closeness to the receipt's left margin

    Totals, payment lines and bare tax codes get `config.non_item_score`.
    """
    fragment = candidate.fragment
    text = fragment.text.strip()
    if _is_non_item_text(text, config):
        return config.non_item_score

    offset_score = 1.0 if fragment.horizontal < price_fragment.horizontal else 0.0
    if kind.is_multi_line:
        weights = config.multi_line_weights
        alignment_score = max(0.0, 1.0 - config.line_offset_penalty * candidate.line_offset)
    else:
        weights = config.regular_weights
        alignment_score = 1.0 - abs(fragment.vertical - price_fragment.vertical) / config.row_tolerance
    length_score = min(len(text) / config.length_target, 1.0)
    letter_score = _letter_ratio(text)
    position_score = 1.0 - fragment.horizontal / config.left_position_span

    return (
        offset_score * weights.offset
        + alignment_score * weights.alignment
        + length_score * weights.length
        + letter_score * weights.letter_ratio
        + position_score * weights.position
    )


def select_best_candidate(
    candidates: Sequence[RowCandidate],
    price_fragment: TextFragment,
    kind: RowKind,
    config: ParserConfig,
) -> RowCandidate | None:
    """Highest-scoring candidate; the first one wins ties. None if empty."""
    best: RowCandidate | None = None
    best_score = float("-inf")
    for candidate in candidates:
        score = score_candidate(candidate, price_fragment, kind, config)
        if score > best_score:
            best = candidate
            best_score = score
    return best
