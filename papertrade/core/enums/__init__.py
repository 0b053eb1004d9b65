"""
Core enumerations for the market simulator.

This module provides centralized enumerations for domain concepts
like transaction sides, order states, news scopes and settings presets.
"""

from .market_settings import EventFrequency, MarketVolatility
from .news_types import NewsPolarity, NewsScope, NewsSource
from .order_status import OrderStatus
from .transaction_types import TransactionType

__all__ = [
    "TransactionType",
    "OrderStatus",
    "NewsScope",
    "NewsPolarity",
    "NewsSource",
    "MarketVolatility",
    "EventFrequency",
]
