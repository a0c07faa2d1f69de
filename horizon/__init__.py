"""
Horizon - Cloud Release Radar

Aggregate a cloud billing export and match it against vendor release notes.
"""

__version__ = "0.1.0"
__author__ = "Yoshi Kondo"

from horizon.ai import GeminiClient
from horizon.inventory import aggregate, load_inventory
from horizon.radar import Analyzer

__all__ = [
    "GeminiClient",
    "aggregate",
    "load_inventory",
    "Analyzer",
]
