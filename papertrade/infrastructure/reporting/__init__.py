"""
Reporting infrastructure.

This module provides pandas views of transactions, price histories and
holdings.
"""

from .frames import price_history_to_frame, summarize_holdings, transactions_to_frame

__all__ = ["price_history_to_frame", "summarize_holdings", "transactions_to_frame"]
