"""
Limit order status enumeration.

This module defines the lifecycle states of a limit order.
"""

from enum import StrEnum


class OrderStatus(StrEnum):
    """
    Limit order lifecycle states.

    Orders start ACTIVE; the other four states are terminal.
    """

    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    EXPIRED = "expired"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        """Check if no further transitions are allowed."""
        return self != self.ACTIVE

    @classmethod
    def terminal_states(cls) -> list["OrderStatus"]:
        """Get all terminal states."""
        return [status for status in cls if status.is_terminal]
