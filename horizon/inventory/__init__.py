"""
Inventory Module - SKU aggregation of billing exports

Turn a raw consumption export into a deduplicated, amount-sorted inventory.
"""

from horizon.inventory.aggregator import aggregate, parse_number, split_sku
from horizon.inventory.models import (
    SAMPLE_INVENTORY,
    InventoryItem,
    service_keywords,
    top_items,
    total_amount,
)
from horizon.inventory.reader import load_inventory, read_rows

__all__ = [
    "aggregate",
    "parse_number",
    "split_sku",
    "InventoryItem",
    "SAMPLE_INVENTORY",
    "service_keywords",
    "top_items",
    "total_amount",
    "load_inventory",
    "read_rows",
]
