"""
CSV reader for billing exports.
"""

import csv
import io
import logging
from pathlib import Path
from typing import Union

from horizon.config.settings import DEFAULT_LAYOUT, ColumnLayout
from horizon.inventory.aggregator import aggregate
from horizon.inventory.models import InventoryItem

logger = logging.getLogger(__name__)

Source = Union[str, Path, bytes, io.IOBase]


def _decode(data: bytes) -> str:
    # Exports saved from spreadsheet tools often carry a BOM
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        return data.decode("latin-1")


def read_rows(source: Source) -> list[list[str]]:
    """
    Decode a delimited export into raw rows.

    Accepts a path, raw bytes, or an open text/binary stream. Blank lines
    are dropped; cells are returned untouched otherwise.
    """
    if isinstance(source, bytes):
        text = _decode(source)
    elif isinstance(source, (str, Path)):
        text = _decode(Path(source).read_bytes())
    else:
        data = source.read()
        text = _decode(data) if isinstance(data, bytes) else data.lstrip("\ufeff")

    rows = [row for row in csv.reader(io.StringIO(text)) if row]
    logger.debug("Read %d rows from export", len(rows))
    return rows


def load_inventory(source: Source, layout: ColumnLayout = DEFAULT_LAYOUT) -> list[InventoryItem]:
    """Read an export and aggregate it in one step."""
    return aggregate(read_rows(source), layout)
