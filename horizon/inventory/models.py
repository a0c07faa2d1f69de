"""
Data models for the SKU inventory.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class InventoryItem:
    """One billed SKU with quantity and amount summed across the export."""
    id: str
    description: str
    unit: str
    quantity: float
    amount: float

    @property
    def service(self) -> str:
        """Service family, e.g. "Compute" for "Compute - Standard - E4"."""
        return self.description.split(" - ", 1)[0].strip()

    def to_dict(self) -> dict:
        return {
            "sku": self.id,
            "description": self.description,
            "unit": self.unit,
            "quantity": round(self.quantity, 4),
            "amount": round(self.amount, 2),
        }


# Shown by "Load Sample Portfolio" before any export is uploaded
SAMPLE_INVENTORY: tuple[InventoryItem, ...] = (
    InventoryItem("B91214", "Compute - Standard - E4 - OCPU", "OCPU/Hour", 450, 1250.50),
    InventoryItem("B88317", "Block Storage - Performance", "GB/Month", 5000, 840.00),
    InventoryItem("B92322", "Object Storage - Standard", "GB/Month", 12000, 315.20),
    InventoryItem("B93111", "Network - Outbound Data Transfer", "GB/Month", 2500, 120.00),
)


def total_amount(items) -> float:
    return sum(i.amount for i in items)


def top_items(items, n: int) -> list[InventoryItem]:
    """First n items; callers pass the aggregator's amount-sorted output."""
    return list(items)[:n]


def service_keywords(items) -> list[str]:
    """Distinct service families, in order of first appearance."""
    seen = []
    for item in items:
        if item.service and item.service not in seen:
            seen.append(item.service)
    return seen
