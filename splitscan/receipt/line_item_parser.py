"""Reconstruct receipt line items from positioned text fragments.

Pipeline per receipt:
1. Tag price-shaped fragments and find the dominant price column
2. For each price in the column (top first), gather same-row fragments
3. Classify the row (weight / count / regular) and gather name candidates
4. Score candidates, read unit annotations and tax codes, clean the name
"""

from __future__ import annotations

import hashlib
from collections.abc import Iterable

from splitscan.domain.receipt import ParseWarning, ReceiptLineItem, TextFragment
from splitscan.runtime.logging import get_logger

from .item_parser import (
    classify_row,
    column_price_fragments,
    extract_row_fields,
    find_price_column,
    is_taxed_row,
    normalize_item_name,
    parse_price,
    row_candidates,
    same_row_fragments,
    select_best_candidate,
)
from .parser_config import ParserConfig

logger = get_logger(__name__)


def _line_item_id(index: int, price_fragment: TextFragment, name_fragment: TextFragment) -> str:
    """Stable id derived from the source fragments, so re-parsing gives equal output."""
    key = "|".join(
        [
            str(index),
            price_fragment.text,
            repr(price_fragment.box),
            name_fragment.text,
            repr(name_fragment.box),
        ]
    )
    return hashlib.sha256(key.encode("utf-8")).hexdigest()[:16]


class ReceiptLineItemParser:
    """Stateless line-item parser; one instance may serve any number of receipts."""

    def __init__(self, config: ParserConfig | None = None) -> None:
        config = config or ParserConfig()
        config.validate()
        self._config = config

    @property
    def config(self) -> ParserConfig:
        return self._config

    def parse(
        self,
        fragments: Iterable[TextFragment],
        warning_sink: list[ParseWarning] | None = None,
    ) -> list[ReceiptLineItem]:
        """
        Build line items from one recognition pass.

        Args:
            fragments: Detector output for a single receipt image
            warning_sink: Optional list that receives a warning for every
                column price that produced no item

        Returns:
            Items ordered by their price's vertical position, top first.
            Never raises for noisy input; unusable prices are skipped.
        """
        config = self._config
        usable = [f for f in fragments if f.confidence >= config.min_confidence and f.text.strip()]
        logger.debug("Processing %d text fragments", len(usable))

        column = find_price_column(usable, config)
        if column is None:
            return []
        logger.debug("Price column at %.4f", column)

        items: list[ReceiptLineItem] = []
        for price_fragment in column_price_fragments(usable, column, config):
            item = self._build_item(usable, price_fragment, index=len(items))
            if item is not None:
                items.append(item)
                continue
            price = parse_price(price_fragment.text)
            if warning_sink is not None and price is not None:
                warning_sink.append(
                    ParseWarning(message=f"maybe missed item near price {price:.2f}", price=price)
                )

        logger.debug("Total items found: %d", len(items))
        return items

    def _build_item(
        self,
        fragments: list[TextFragment],
        price_fragment: TextFragment,
        *,
        index: int,
    ) -> ReceiptLineItem | None:
        config = self._config
        price = parse_price(price_fragment.text)
        if price is None:
            return None

        same_row = same_row_fragments(fragments, price_fragment, config)
        kind = classify_row(same_row)
        candidates = row_candidates(fragments, price_fragment, same_row, kind, config)
        logger.debug(
            "Price %s at %.4f: %s row, %d candidates",
            price,
            price_fragment.vertical,
            kind.value,
            len(candidates),
        )

        best = select_best_candidate(candidates, price_fragment, kind, config)
        if best is None:
            logger.debug("No item name found for price %s", price)
            return None

        name_fragment = best.fragment
        name = normalize_item_name(name_fragment.text, config)
        fields = extract_row_fields(same_row, kind)
        is_taxed = is_taxed_row([name_fragment.text, *(f.text for f in same_row)], config)
        logger.debug("Found %s item: %r - %s", kind.value, name, price)

        return ReceiptLineItem(
            id=_line_item_id(index, price_fragment, name_fragment),
            name=name,
            price=price,
            source_box=name_fragment.box,
            quantity=fields.quantity,
            weight=fields.weight,
            price_per_weight=fields.price_per_weight,
            price_per_count=fields.price_per_count,
            is_taxed=is_taxed,
        )


def parse_line_items(
    fragments: Iterable[TextFragment],
    config: ParserConfig | None = None,
    warning_sink: list[ParseWarning] | None = None,
) -> list[ReceiptLineItem]:
    """Convenience wrapper: parse one receipt with a fresh parser."""
    return ReceiptLineItemParser(config).parse(fragments, warning_sink=warning_sink)
