"""
Transaction and order side enumerations.

This module defines the allowed trade sides for ledger transactions
and limit orders.
"""

from enum import StrEnum


class TransactionType(StrEnum):
    """
    Allowed transaction sides.

    Buys debit cash and re-average the holding; sells credit cash.
    """

    BUY = "BUY"
    SELL = "SELL"

    @property
    def is_buy(self) -> bool:
        """Check if the side is a buy."""
        return self == self.BUY

    @property
    def is_sell(self) -> bool:
        """Check if the side is a sell."""
        return self == self.SELL

    @classmethod
    def from_string(cls, value: str) -> "TransactionType":
        """
        Convert string to TransactionType, with case-insensitive matching.

        Args:
            value: String representation of the side

        Returns:
            Corresponding TransactionType

        Raises:
            ValueError: If the side is not supported
        """
        value_upper = str(value).strip().upper()
        for side in cls:
            if side.value == value_upper:
                return side
        raise ValueError(
            f"Unsupported transaction type: {value}. "
            f"Supported types: {', '.join([s.value for s in cls])}"
        )
