"""Extract weight, unit-price, quantity and tax signals from a price row."""

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from splitscan.domain.receipt import TextFragment
from splitscan.receipt.parser_config import ParserConfig

from .common import _tax_code_pattern
from .rows import RowKind

_NUMBER = r"(\d+(?:\.\d+)?)(?![\d.])"

# "0.543 kg", "1.2kg"
WEIGHT_PATTERN = re.compile(_NUMBER + r"\s*kg", re.IGNORECASE)
# "@ $3.00/kg"
PRICE_PER_WEIGHT_PATTERN = re.compile(r"@\s*\$\s*" + _NUMBER + r"\s*/\s*kg", re.IGNORECASE)
# "2 @ $1.50"
QUANTITY_PATTERN = re.compile(r"(\d+)\s*@")
PRICE_PER_COUNT_PATTERN = re.compile(r"@\s*\$\s*" + _NUMBER + r"(?!\s*/\s*kg)", re.IGNORECASE)


@dataclass(frozen=True)
class RowFields:
    """Optional sub-fields read from a price row's annotations."""

    quantity: int = 1
    weight: Decimal | None = None
    price_per_weight: Decimal | None = None
    price_per_count: Decimal | None = None


def _first_decimal(pattern: re.Pattern[str], texts: Iterable[str]) -> Decimal | None:
    for text in texts:
        match = pattern.search(text)
        if match is None:
            continue
        try:
            return Decimal(match.group(1))
        except InvalidOperation:
            continue
    return None


def _first_quantity(texts: Iterable[str]) -> int | None:
    for text in texts:
        match = QUANTITY_PATTERN.search(text)
        if match is None:
            continue
        quantity = int(match.group(1))
        if quantity >= 1:
            return quantity
    return None


def extract_row_fields(same_row: Sequence[TextFragment], kind: RowKind) -> RowFields:
    """
    Read unit annotations for a weight or count row.

    Regular rows carry no sub-fields. The first same-row fragment that
    matches wins for each field.
    """
    texts = [fragment.text for fragment in same_row]
    if kind is RowKind.WEIGHT:
        return RowFields(
            weight=_first_decimal(WEIGHT_PATTERN, texts),
            price_per_weight=_first_decimal(PRICE_PER_WEIGHT_PATTERN, texts),
        )
    if kind is RowKind.COUNT:
        return RowFields(
            quantity=_first_quantity(texts) or 1,
            price_per_count=_first_decimal(PRICE_PER_COUNT_PATTERN, texts),
        )
    return RowFields()


def is_taxed_row(texts: Iterable[str], config: ParserConfig) -> bool:
    """
    Return True if any text carries a tax code configured as taxed.

    With the default table "HMRJ" is taxed while a bare "MRJ" is only an
    untaxed marker.
    """
    if not config.tax_codes:
        return False
    pattern = _tax_code_pattern(config)
    taxed = config.taxed_codes
    for text in texts:
        for match in pattern.finditer(text):
            if match.group(0).upper() in taxed:
                return True
    return False
