"""
Venue adapters.

Each venue lives in its own subpackage and implements
``lcx_connector.interfaces.TradingVenue``.
"""

from lcx_connector.adapters.lcx import LCXAdapter

__all__ = ["LCXAdapter"]
