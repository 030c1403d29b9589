"""Composable line-item parser stages."""

from .common import normalize_item_name, parse_price
from .fields import RowFields, extract_row_fields, is_taxed_row
from .price_column import find_price_column
from .rows import (
    RowCandidate,
    RowKind,
    classify_row,
    column_price_fragments,
    lines_above,
    row_candidates,
    same_row_fragments,
)
from .scoring import score_candidate, select_best_candidate

__all__ = [
    "RowCandidate",
    "RowFields",
    "RowKind",
    "classify_row",
    "column_price_fragments",
    "extract_row_fields",
    "find_price_column",
    "is_taxed_row",
    "lines_above",
    "normalize_item_name",
    "parse_price",
    "row_candidates",
    "same_row_fragments",
    "score_candidate",
    "select_best_candidate",
]
