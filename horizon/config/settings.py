"""
Runtime settings and export layout.

Column positions follow the OCI consumption export:
    0  Subscription Plan Number
    2  "<SKU> - <product description>"
    3  unit of measure
    4  quantity
    8  computed amount
Every position can be overridden from the environment since the layout is
not a published format.
"""

import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

HEADER_SENTINEL = "Subscription Plan Number"
SKU_SEPARATOR = " - "

DEFAULT_SEARCH_MODEL = "gemini-3-pro-preview"
DEFAULT_STRUCT_MODEL = "gemini-3-flash-preview"
GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

# Only the top items take part in matching; more adds latency and noise
MATCH_TOP_SKUS = 10
INSIGHT_TOP_ITEMS = 5
INSIGHT_COUNT = 4
RELEVANCE_THRESHOLD = 50.0

RELEASE_NOTES_URL = "https://docs.oracle.com/en-us/iaas/releasenotes/"
DEFAULT_CUSTOMER = "Cloud Enterprise Lead"


@dataclass(frozen=True)
class ColumnLayout:
    """Positions of the fields the aggregator reads from each raw row."""
    description: int = 2
    unit: int = 3
    quantity: int = 4
    amount: int = 8
    header_sentinel: str = HEADER_SENTINEL
    separator: str = SKU_SEPARATOR

    @property
    def min_columns(self) -> int:
        return max(self.description, self.unit, self.quantity, self.amount) + 1


DEFAULT_LAYOUT = ColumnLayout()


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}")


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {value!r}")


def layout_from_env() -> ColumnLayout:
    """Build a column layout, applying any HORIZON_COL_* overrides."""
    return ColumnLayout(
        description=_env_int("HORIZON_COL_DESCRIPTION", DEFAULT_LAYOUT.description),
        unit=_env_int("HORIZON_COL_UNIT", DEFAULT_LAYOUT.unit),
        quantity=_env_int("HORIZON_COL_QUANTITY", DEFAULT_LAYOUT.quantity),
        amount=_env_int("HORIZON_COL_AMOUNT", DEFAULT_LAYOUT.amount),
        header_sentinel=os.getenv("HORIZON_HEADER_SENTINEL", HEADER_SENTINEL),
    )


@dataclass
class Settings:
    """Settings resolved from the environment (and .env, if present)."""
    api_key: Optional[str] = None
    search_model: str = DEFAULT_SEARCH_MODEL
    struct_model: str = DEFAULT_STRUCT_MODEL
    base_url: str = GEMINI_BASE_URL
    timeout: float = 60.0
    max_retries: int = 3
    layout: ColumnLayout = field(default_factory=ColumnLayout)

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            api_key=os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY"),
            search_model=os.getenv("HORIZON_SEARCH_MODEL", DEFAULT_SEARCH_MODEL),
            struct_model=os.getenv("HORIZON_STRUCT_MODEL", DEFAULT_STRUCT_MODEL),
            base_url=os.getenv("HORIZON_GEMINI_URL", GEMINI_BASE_URL),
            timeout=_env_float("HORIZON_TIMEOUT", 60.0),
            max_retries=_env_int("HORIZON_MAX_RETRIES", 3),
            layout=layout_from_env(),
        )
