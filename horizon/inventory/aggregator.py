"""
Consumption Aggregator - fold raw export rows into a SKU inventory.
"""

import logging
import math
import re
from collections.abc import Iterable, Sequence

from horizon.config.settings import DEFAULT_LAYOUT, ColumnLayout
from horizon.exceptions import InvalidInputError
from horizon.inventory.models import InventoryItem

logger = logging.getLogger(__name__)

# Longest leading decimal number, e.g. "12.5 GB" -> "12.5", "1e3x" -> "1e3"
_NUMBER_PREFIX = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


def parse_number(value) -> float:
    """
    Lenient float parsing for export cells.

    Leading whitespace is skipped and the longest numeric prefix is used.
    Anything without a numeric prefix, or non-finite, counts as 0.
    """
    if value is None:
        return 0.0
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value) if math.isfinite(value) else 0.0

    match = _NUMBER_PREFIX.match(str(value).lstrip())
    if not match:
        return 0.0
    number = float(match.group(0))
    return number if math.isfinite(number) else 0.0


def split_sku(cell: str, separator: str = DEFAULT_LAYOUT.separator) -> tuple[str, str]:
    """Split "B91214 - Compute - E4" into ("B91214", "Compute - E4")."""
    head, sep, tail = cell.partition(separator)
    if not sep:
        text = cell.strip()
        return text, text
    return head.strip(), tail.strip()


def _check_rows(rows) -> list:
    if isinstance(rows, (str, bytes)) or not isinstance(rows, Iterable):
        raise InvalidInputError(
            f"rows must be a sequence of rows, got {type(rows).__name__}"
        )
    rows = list(rows)
    for index, row in enumerate(rows):
        if row is None:
            continue
        if isinstance(row, (str, bytes)) or not isinstance(row, Sequence):
            raise InvalidInputError(
                f"row {index} must be a sequence of cells, got {type(row).__name__}"
            )
    return rows


def _cell(row: Sequence, position: int) -> str:
    value = row[position]
    return "" if value is None else str(value)


def aggregate(rows, layout: ColumnLayout = DEFAULT_LAYOUT) -> list[InventoryItem]:
    """
    Aggregate raw export rows into inventory items sorted by amount.

    Rows that are too short or have an empty description are skipped.
    Unparsable quantities and amounts count as 0. The first row is dropped
    only when its first cell is exactly the header sentinel.

    Raises:
        InvalidInputError: if rows is not a sequence of sequences.
    """
    rows = _check_rows(rows)
    if not rows:
        return []

    first = rows[0]
    if first and _cell(first, 0) == layout.header_sentinel:
        rows = rows[1:]

    totals: dict[str, dict] = {}
    skipped = 0

    for row in rows:
        if not row or len(row) < layout.min_columns:
            skipped += 1
            continue

        composite = _cell(row, layout.description)
        if not composite.strip():
            skipped += 1
            continue

        sku, description = split_sku(composite, layout.separator)
        quantity = parse_number(row[layout.quantity])
        amount = parse_number(row[layout.amount])

        if sku in totals:
            totals[sku]["quantity"] += quantity
            totals[sku]["amount"] += amount
        else:
            totals[sku] = {
                "description": description,
                "unit": _cell(row, layout.unit),
                "quantity": quantity,
                "amount": amount,
            }

    if skipped:
        logger.debug("Skipped %d malformed rows", skipped)

    items = [
        InventoryItem(
            id=sku,
            description=data["description"],
            unit=data["unit"],
            quantity=data["quantity"],
            amount=data["amount"],
        )
        for sku, data in totals.items()
    ]
    items.sort(key=lambda i: i.amount, reverse=True)
    return items
