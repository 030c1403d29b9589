"""Row composition: which fragments share a receipt line with a price."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from splitscan.domain.receipt import TextFragment
from splitscan.receipt.parser_config import ParserConfig

from .common import _fragment_price, _is_denylisted


class RowKind(Enum):
    WEIGHT = "weight"
    COUNT = "count"
    REGULAR = "regular"

    @property
    def is_multi_line(self) -> bool:
        return self is not RowKind.REGULAR


@dataclass(frozen=True)
class RowCandidate:
    """A possible name fragment for a price, with its line offset above the price row.

    `line_offset` is 0 for fragments on the price's own row.
    """

    fragment: TextFragment
    line_offset: int = 0


def _scan_order(fragments: Sequence[TextFragment]) -> list[TextFragment]:
    # Top of the receipt first; ties keep input order.
    return sorted(fragments, key=lambda f: f.vertical)


def column_price_fragments(
    fragments: Sequence[TextFragment],
    column: float,
    config: ParserConfig,
) -> list[TextFragment]:
    """Price fragments lying in the price column, top of receipt first."""
    return [
        fragment
        for fragment in _scan_order(fragments)
        if abs(fragment.horizontal - column) < config.column_tolerance and _fragment_price(fragment) is not None
    ]


def same_row_fragments(
    fragments: Sequence[TextFragment],
    price_fragment: TextFragment,
    config: ParserConfig,
) -> list[TextFragment]:
    """Non-header fragments left of the price on the same printed line."""
    return [
        fragment
        for fragment in _scan_order(fragments)
        if abs(fragment.vertical - price_fragment.vertical) < config.row_tolerance
        and fragment.horizontal < price_fragment.horizontal
        and not _is_denylisted(fragment.text.strip(), config)
    ]


def classify_row(same_row: Sequence[TextFragment]) -> RowKind:
    """
    Classify a price row by its unit annotations.

    "0.543 kg  @ $3.00/kg" marks a weighed item, "2 @ $1.50" a counted one.
    """
    lowered = [fragment.text.lower() for fragment in same_row]
    if any("kg" in text and "@" in text and "/kg" in text for text in lowered):
        return RowKind.WEIGHT
    if any("@" in text and "kg" not in text and "/kg" not in text for text in lowered):
        return RowKind.COUNT
    return RowKind.REGULAR


def lines_above(
    fragments: Sequence[TextFragment],
    price_fragment: TextFragment,
    config: ParserConfig,
) -> list[RowCandidate]:
    """
    Collect possible item names printed on the lines above a weight/count row.

    Looks at `config.multi_line_depth` lines spaced `config.line_spacing`
    apart, each matched within `config.row_tolerance`.
    """
    candidates: list[RowCandidate] = []
    for fragment in _scan_order(fragments):
        if fragment.horizontal >= price_fragment.horizontal:
            continue
        text = fragment.text.strip()
        if _fragment_price(fragment) is not None or _is_denylisted(text, config):
            continue
        for offset in range(1, config.multi_line_depth + 1):
            target = price_fragment.vertical - offset * config.line_spacing
            if abs(fragment.vertical - target) < config.row_tolerance:
                candidates.append(RowCandidate(fragment=fragment, line_offset=offset))
                break
    return candidates


def row_candidates(
    fragments: Sequence[TextFragment],
    price_fragment: TextFragment,
    same_row: Sequence[TextFragment],
    kind: RowKind,
    config: ParserConfig,
) -> list[RowCandidate]:
    """
    Name candidates for a price.

    Regular rows use the same row only. Weight/count rows use the same row
    (line_offset 0) plus the lines above.
    """
    candidates = [RowCandidate(fragment=fragment) for fragment in same_row]
    if kind.is_multi_line:
        candidates.extend(lines_above(fragments, price_fragment, config))
    return candidates
