"""Format reconstructed line items for display and JSON output."""

from collections.abc import Sequence
from dataclasses import asdict
from decimal import Decimal
from typing import Any

from splitscan.domain.receipt import ReceiptLineItem

from .geometry import to_image_rect


def _decimal_or_none(value: Decimal | None) -> str | None:
    return None if value is None else str(value)


def line_item_to_dict(item: ReceiptLineItem, image_size: tuple[float, float] | None = None) -> dict[str, Any]:
    """
    Serialize a line item to JSON-ready primitives.

    Decimals become strings so no precision is lost. When `image_size`
    (width, height) is given, a `display_box` in image pixels is added for
    highlighting.
    """
    data: dict[str, Any] = {
        "id": item.id,
        "name": item.name,
        "price": str(item.price),
        "quantity": item.quantity,
        "weight": _decimal_or_none(item.weight),
        "price_per_weight": _decimal_or_none(item.price_per_weight),
        "price_per_count": _decimal_or_none(item.price_per_count),
        "is_taxed": item.is_taxed,
        "source_box": asdict(item.source_box),
    }
    if image_size is not None:
        width, height = image_size
        data["display_box"] = asdict(to_image_rect(item.source_box, width, height))
    return data


def _item_detail(item: ReceiptLineItem) -> str:
    if item.weight is not None:
        detail = f"{item.weight} kg"
        if item.price_per_weight is not None:
            detail += f" @ ${item.price_per_weight}/kg"
        return detail
    if item.price_per_count is not None:
        return f"{item.quantity} @ ${item.price_per_count}"
    if item.quantity > 1:
        return f"x{item.quantity}"
    return ""


def format_line_items(items: Sequence[ReceiptLineItem]) -> str:
    """
    Render items as an aligned plain-text table.

    Taxed items are marked with "T". The total is the sum of row prices as
    printed on the receipt.
    """
    if not items:
        return "No items found."

    rows = [(item.name, _item_detail(item), f"{item.price:.2f}", "T" if item.is_taxed else "") for item in items]
    name_width = max(len(name) for name, _, _, _ in rows)
    detail_width = max(len(detail) for _, detail, _, _ in rows)
    total = sum((item.price for item in items), Decimal("0"))
    amount_width = max(max(len(amount) for _, _, amount, _ in rows), len(f"{total:.2f}"))

    lines = []
    for i, (name, detail, amount, tax_flag) in enumerate(rows, 1):
        line = f"{i:>3}. {name.ljust(name_width)}  {detail.ljust(detail_width)}  {amount.rjust(amount_width)}"
        if tax_flag:
            line += f" {tax_flag}"
        lines.append(line.rstrip())

    prefix_width = 5 + name_width + 2 + detail_width + 2
    total_amount = f"{total:.2f}"
    lines.append("-" * (prefix_width + amount_width))
    lines.append(f"{'TOTAL'.ljust(prefix_width)}{total_amount.rjust(amount_width)}")
    return "\n".join(lines)
