"""Tunable tolerances, weights and keyword tables for the line-item parser.

Defaults are calibrated against the detector's un-rotated normalized
coordinates (see `splitscan.receipt.geometry`). Runtime overrides are read
from TOML by `splitscan.runtime.parser_rules`; this module only turns an
already-parsed mapping into a validated `ParserConfig`.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any

# Header/footer keywords; matched as lowercase substrings.
DEFAULT_DENYLIST: tuple[str, ...] = (
    "total",
    "subtotal",
    "tax",
    "cash",
    "change",
    "credit",
    "debit",
    "visa",
    "mastercard",
    "amex",
    "thank you",
    "receipt",
    "date:",
    "time:",
    "store",
    "register",
)

# Tax-code token -> whether it marks the item as taxed.
# MRJ is a recognized marker on the same receipt format but means untaxed.
DEFAULT_TAX_CODES: tuple[tuple[str, bool], ...] = (
    ("HMRJ", True),
    ("MRJ", False),
)


@dataclass(frozen=True)
class ScoringWeights:
    """Weights for (offset, alignment/proximity, length, letter ratio, position)."""

    offset: float
    alignment: float
    length: float
    letter_ratio: float
    position: float

    def validate(self) -> None:
        for name in ("offset", "alignment", "length", "letter_ratio", "position"):
            if getattr(self, name) < 0:
                raise ValueError(f"scoring weight {name} must be >= 0")


REGULAR_ROW_WEIGHTS = ScoringWeights(offset=0.35, alignment=0.25, length=0.15, letter_ratio=0.15, position=0.10)
MULTI_LINE_WEIGHTS = ScoringWeights(offset=0.30, alignment=0.30, length=0.15, letter_ratio=0.15, position=0.10)


@dataclass(frozen=True)
class ParserConfig:
    """Line-item parser parameters.

    All distances are fractions of the detector's unit square.
    """

    column_tolerance: float = 0.05
    row_tolerance: float = 0.01
    multi_line_depth: int = 5
    line_spacing: float = 0.02
    # 0.0 keeps every fragment the detector returned.
    min_confidence: float = 0.0

    length_target: int = 20
    left_position_span: float = 0.5
    line_offset_penalty: float = 0.1
    non_item_score: float = 0.1

    denylist: tuple[str, ...] = DEFAULT_DENYLIST
    tax_codes: tuple[tuple[str, bool], ...] = DEFAULT_TAX_CODES
    regular_weights: ScoringWeights = field(default=REGULAR_ROW_WEIGHTS)
    multi_line_weights: ScoringWeights = field(default=MULTI_LINE_WEIGHTS)

    def validate(self) -> None:
        if not (0.0 < self.column_tolerance <= 1.0):
            raise ValueError("column_tolerance must be within (0, 1]")
        if not (0.0 < self.row_tolerance <= 1.0):
            raise ValueError("row_tolerance must be within (0, 1]")
        if self.multi_line_depth < 0:
            raise ValueError("multi_line_depth must be >= 0")
        if self.line_spacing <= 0:
            raise ValueError("line_spacing must be > 0")
        if not (0.0 <= self.min_confidence <= 1.0):
            raise ValueError("min_confidence must be within [0, 1]")
        if self.length_target <= 0:
            raise ValueError("length_target must be > 0")
        if self.left_position_span <= 0:
            raise ValueError("left_position_span must be > 0")
        if any(not token.strip() for token, _ in self.tax_codes):
            raise ValueError("tax code tokens must be non-empty")
        self.regular_weights.validate()
        self.multi_line_weights.validate()

    @property
    def taxed_codes(self) -> frozenset[str]:
        return frozenset(token.upper() for token, taxed in self.tax_codes if taxed)


def _weights_from_mapping(base: ScoringWeights, data: Mapping[str, Any]) -> ScoringWeights:
    known = {k: _number(data, k) for k in data if k in ScoringWeights.__dataclass_fields__}
    return replace(base, **known)


def _table(data: Mapping[str, Any], name: str, parent: str = "") -> Mapping[str, Any]:
    value = data.get(name, {})
    if not isinstance(value, Mapping):
        raise ValueError(f"[{parent}{name}] must be a table")
    return value


def _number(table: Mapping[str, Any], key: str, cast: type = float) -> Any:
    value = table[key]
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise ValueError(f"{key} must be a number, got {value!r}")
    return cast(value)


def build_parser_config(data: Mapping[str, Any] | None = None) -> ParserConfig:
    """
    Build a validated `ParserConfig` from a parsed TOML document.

    Recognized tables::

        [tolerances]   column, row, line_spacing, multi_line_depth, min_confidence
        [scoring]      length_target, left_position_span, line_offset_penalty, non_item_score
        [scoring.regular] / [scoring.multi_line]
                       offset, alignment, length, letter_ratio, position
        [denylist]     keywords = [...], extend = true|false
        [tax_codes]    TOKEN = true|false

    Unknown keys are ignored. Missing tables keep defaults.
    """
    config = ParserConfig()
    if not data:
        return config

    tolerances = _table(data, "tolerances")
    scoring = _table(data, "scoring")
    overrides: dict[str, Any] = {}

    if "column" in tolerances:
        overrides["column_tolerance"] = _number(tolerances, "column")
    if "row" in tolerances:
        overrides["row_tolerance"] = _number(tolerances, "row")
    if "line_spacing" in tolerances:
        overrides["line_spacing"] = _number(tolerances, "line_spacing")
    if "multi_line_depth" in tolerances:
        overrides["multi_line_depth"] = _number(tolerances, "multi_line_depth", int)
    if "min_confidence" in tolerances:
        overrides["min_confidence"] = _number(tolerances, "min_confidence")

    if "length_target" in scoring:
        overrides["length_target"] = _number(scoring, "length_target", int)
    for key in ("left_position_span", "line_offset_penalty", "non_item_score"):
        if key in scoring:
            overrides[key] = _number(scoring, key)
    if "regular" in scoring:
        overrides["regular_weights"] = _weights_from_mapping(
            config.regular_weights, _table(scoring, "regular", "scoring.")
        )
    if "multi_line" in scoring:
        overrides["multi_line_weights"] = _weights_from_mapping(
            config.multi_line_weights, _table(scoring, "multi_line", "scoring.")
        )

    denylist = _table(data, "denylist")
    keywords = denylist.get("keywords")
    if keywords is not None:
        if not isinstance(keywords, list):
            raise ValueError("[denylist] keywords must be a list of strings")
        cleaned = tuple(str(k).strip().lower() for k in keywords if str(k).strip())
        if denylist.get("extend", True):
            cleaned = config.denylist + tuple(k for k in cleaned if k not in config.denylist)
        overrides["denylist"] = cleaned

    tax_codes = _table(data, "tax_codes")
    if tax_codes:
        overrides["tax_codes"] = tuple((str(token).strip().upper(), bool(taxed)) for token, taxed in tax_codes.items())

    config = replace(config, **overrides)
    config.validate()
    return config
