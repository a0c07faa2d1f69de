"""
Configuration module for Horizon.
"""

from horizon.config.settings import DEFAULT_LAYOUT, ColumnLayout, Settings, layout_from_env

__all__ = ["DEFAULT_LAYOUT", "ColumnLayout", "Settings", "layout_from_env"]
