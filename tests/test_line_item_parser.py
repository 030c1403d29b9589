"""End-to-end tests for reconstructing line items from fragments."""

from __future__ import annotations

from decimal import Decimal

from splitscan.domain.receipt import NormalizedRect, ParseWarning, TextFragment
from splitscan.receipt.item_parser import parse_price
from splitscan.receipt.line_item_parser import ReceiptLineItemParser, parse_line_items
from splitscan.receipt.parser_config import ParserConfig


def _frag(text: str, y: float, x: float, confidence: float = 0.99) -> TextFragment:
    return TextFragment(text=text, confidence=confidence, box=NormalizedRect(y, x, 0.01, 0.1))


def test_empty_input_gives_no_items(parser: ReceiptLineItemParser) -> None:
    assert parser.parse([]) == []


def test_no_price_shaped_fragments_gives_no_items(parser: ReceiptLineItemParser) -> None:
    fragments = [
        _frag("MILK", 0.10, 0.20),
        _frag("2.9", 0.10, 0.45),
        _frag("3.999", 0.12, 0.45),
        _frag("BREAD", 0.14, 0.20),
    ]
    assert parser.parse(fragments) == []


def test_single_regular_row(parser: ReceiptLineItemParser) -> None:
    items = parser.parse([_frag("MILK", 0.10, 0.20), _frag("2.99", 0.10, 0.45)])

    assert len(items) == 1
    item = items[0]
    assert item.name == "MILK"
    assert item.price == Decimal("2.99")
    assert item.quantity == 1
    assert item.is_taxed is False
    assert item.weight is None
    assert item.price_per_weight is None
    assert item.price_per_count is None
    assert item.source_box == NormalizedRect(0.10, 0.20, 0.01, 0.1)


def test_weight_row_takes_name_from_line_above(parser: ReceiptLineItemParser) -> None:
    fragments = [
        _frag("APPLES", 0.08, 0.10),
        _frag("0.543 kg", 0.10, 0.10),
        _frag("@ $3.00/kg", 0.10, 0.20),
        _frag("1.63", 0.10, 0.45),
    ]

    items = parser.parse(fragments)

    assert len(items) == 1
    item = items[0]
    assert item.name == "APPLES"
    assert item.price == Decimal("1.63")
    assert item.weight == Decimal("0.543")
    assert item.price_per_weight == Decimal("3.00")
    assert item.quantity == 1


def test_count_row_reads_quantity_and_unit_price(parser: ReceiptLineItemParser) -> None:
    fragments = [
        _frag("BANANAS", 0.20, 0.10),
        _frag("3 @ $0.50", 0.22, 0.15),
        _frag("1.50", 0.22, 0.45),
    ]

    items = parser.parse(fragments)

    assert len(items) == 1
    assert items[0].name == "BANANAS"
    assert items[0].quantity == 3
    assert items[0].price_per_count == Decimal("0.50")
    # Row price is authoritative, never recomputed.
    assert items[0].price == Decimal("1.50")
    assert items[0].total == Decimal("1.50")


def test_price_is_not_recomputed_from_unit_fields(parser: ReceiptLineItemParser) -> None:
    fragments = [
        _frag("LIMES", 0.20, 0.10),
        _frag("4 @ $0.50", 0.22, 0.15),
        _frag("1.75", 0.22, 0.45),
    ]

    items = parser.parse(fragments)

    assert items[0].price == Decimal("1.75")
    assert items[0].quantity * items[0].price_per_count == Decimal("2.00")


def test_subtotal_row_never_becomes_an_item(parser: ReceiptLineItemParser) -> None:
    fragments = [
        _frag("MILK", 0.10, 0.20),
        _frag("2.99", 0.10, 0.45),
        _frag("SUBTOTAL", 0.20, 0.20),
        _frag("2.99", 0.20, 0.45),
        # Header text sitting at the price column itself.
        _frag("SUBTOTAL", 0.30, 0.44),
        _frag("2.99", 0.30, 0.46),
    ]

    items = parser.parse(fragments)

    assert [item.name for item in items] == ["MILK"]


def test_hmrj_marks_item_taxed_but_mrj_does_not(parser: ReceiptLineItemParser) -> None:
    taxed = parser.parse([_frag("SOAP", 0.10, 0.10), _frag("HMRJ", 0.10, 0.35), _frag("3.49", 0.10, 0.45)])
    untaxed = parser.parse([_frag("BREAD", 0.10, 0.10), _frag("MRJ", 0.10, 0.35), _frag("2.49", 0.10, 0.45)])

    assert taxed[0].name == "SOAP"
    assert taxed[0].is_taxed is True
    assert untaxed[0].name == "BREAD"
    assert untaxed[0].is_taxed is False


def test_tax_code_inside_name_sets_flag_and_is_stripped(parser: ReceiptLineItemParser) -> None:
    items = parser.parse([_frag("62843020000 DOUGHNUTS HMRJ", 0.10, 0.10), _frag("12.00", 0.10, 0.45)])

    assert items[0].name == "DOUGHNUTS"
    assert items[0].is_taxed is True


def test_sample_receipt(parser: ReceiptLineItemParser, grocery_fragments: list[TextFragment]) -> None:
    warnings: list[ParseWarning] = []

    items = parser.parse(grocery_fragments, warning_sink=warnings)

    assert [(item.name, item.price) for item in items] == [
        ("MILK 2% 4L", Decimal("5.49")),
        ("BANANAS", Decimal("1.50")),
        ("APPLES GALA", Decimal("1.63")),
        ("DOUGHNUTS", Decimal("12.00")),
    ]
    bananas, apples, doughnuts = items[1], items[2], items[3]
    assert bananas.quantity == 6
    assert bananas.price_per_count == Decimal("0.25")
    assert apples.weight == Decimal("0.543")
    assert apples.price_per_weight == Decimal("3.00")
    assert doughnuts.is_taxed is True
    assert [w.price for w in warnings] == [Decimal("20.62"), Decimal("22.18")]
    assert warnings[0].message == "maybe missed item near price 20.62"


def test_items_are_ordered_top_to_bottom(parser: ReceiptLineItemParser) -> None:
    fragments = [
        _frag("CHEESE", 0.30, 0.10),
        _frag("7.00", 0.30, 0.45),
        _frag("BREAD", 0.10, 0.10),
        _frag("3.00", 0.10, 0.45),
        _frag("EGGS", 0.20, 0.10),
        _frag("4.00", 0.20, 0.45),
    ]

    items = parser.parse(fragments)

    assert [item.name for item in items] == ["BREAD", "EGGS", "CHEESE"]


def test_prices_off_column_are_ignored(parser: ReceiptLineItemParser) -> None:
    fragments = [
        _frag("BREAD", 0.10, 0.10),
        _frag("3.00", 0.10, 0.45),
        _frag("EGGS", 0.20, 0.10),
        _frag("4.00", 0.20, 0.45),
        _frag("SAVED", 0.30, 0.05),
        _frag("1.00", 0.30, 0.25),
    ]

    items = parser.parse(fragments)

    assert [item.price for item in items] == [Decimal("3.00"), Decimal("4.00")]


def test_every_price_comes_from_an_input_fragment(
    parser: ReceiptLineItemParser, grocery_fragments: list[TextFragment]
) -> None:
    source_prices = {parse_price(f.text) for f in grocery_fragments} - {None}

    items = parser.parse(grocery_fragments)

    assert items
    assert all(item.price in source_prices for item in items)


def test_parsing_twice_gives_identical_output(
    parser: ReceiptLineItemParser, grocery_fragments: list[TextFragment]
) -> None:
    first = parser.parse(grocery_fragments)
    second = parser.parse(grocery_fragments)
    third = parse_line_items(grocery_fragments)

    assert first == second == third
    assert len({item.id for item in first}) == len(first)


def test_low_confidence_fragments_dropped_when_configured() -> None:
    fragments = [
        _frag("MILK", 0.10, 0.20, confidence=0.9),
        _frag("2.99", 0.10, 0.45, confidence=0.9),
        _frag("GARBLE", 0.20, 0.20, confidence=0.2),
        _frag("1.00", 0.20, 0.45, confidence=0.9),
    ]

    default_items = parse_line_items(fragments)
    strict_items = parse_line_items(fragments, ParserConfig(min_confidence=0.5))

    assert [item.name for item in default_items] == ["MILK", "GARBLE"]
    assert [item.name for item in strict_items] == ["MILK"]


def test_name_fragment_can_be_shared_by_two_prices(parser: ReceiptLineItemParser) -> None:
    # Two count rows whose upward windows both reach the same name line.
    fragments = [
        _frag("ORANGES", 0.10, 0.10),
        _frag("2 @ $1.00", 0.12, 0.45),
        _frag("2.00", 0.12, 0.50),
        _frag("3 @ $1.00", 0.14, 0.45),
        _frag("3.00", 0.14, 0.50),
    ]

    items = parser.parse(fragments)

    assert [item.name for item in items] == ["ORANGES", "ORANGES"]
    assert [item.quantity for item in items] == [2, 3]


def test_weight_row_name_on_same_line(parser: ReceiptLineItemParser) -> None:
    fragments = [
        _frag("BANANAS", 0.10, 0.05),
        _frag("1.2 kg @ $1.00/kg", 0.10, 0.20),
        _frag("1.20", 0.10, 0.45),
    ]

    items = parser.parse(fragments)

    assert [item.name for item in items] == ["BANANAS"]
    assert items[0].weight == Decimal("1.2")
    assert items[0].price_per_weight == Decimal("1.00")


def test_count_row_name_on_same_line(parser: ReceiptLineItemParser) -> None:
    fragments = [
        _frag("LEMONS", 0.10, 0.05),
        _frag("3 @ $0.60", 0.10, 0.25),
        _frag("1.80", 0.10, 0.45),
    ]

    items = parser.parse(fragments)

    assert [item.name for item in items] == ["LEMONS"]
    assert items[0].quantity == 3
    assert items[0].price_per_count == Decimal("0.60")


def test_name_that_cleans_to_nothing_keeps_fragment_text(parser: ReceiptLineItemParser) -> None:
    items = parser.parse([_frag(" (2) 4011 ", 0.10, 0.10), _frag("0.99", 0.10, 0.45)])

    assert [item.name for item in items] == [" (2) 4011 "]
