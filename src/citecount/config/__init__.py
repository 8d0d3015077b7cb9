"""
citecount configuration module.
"""

from .base import (
    CitecountSettings,
    get_settings,
    setup_logging,
)

__all__ = [
    "CitecountSettings",
    "get_settings",
    "setup_logging",
]
