"""
Core type definitions and utilities.
"""

# Re-export financial utilities for easy access
from .financial import (
    FINANCIAL_DECIMALS,
    ONE,
    PERCENTAGE_DECIMALS,
    PRICE_DECIMALS,
    ZERO,
    calculate_average_cost,
    calculate_notional_value,
    calculate_realized_pnl,
    clamp,
    is_finite_number,
    round_amount,
    round_percentage,
    round_price,
    safe_float_comparison,
    to_float,
)

__all__ = [
    # Utility functions
    "to_float",
    "round_price",
    "round_amount",
    "round_percentage",
    "calculate_notional_value",
    "calculate_average_cost",
    "calculate_realized_pnl",
    "clamp",
    "is_finite_number",
    "safe_float_comparison",
    # Constants
    "FINANCIAL_DECIMALS",
    "PERCENTAGE_DECIMALS",
    "PRICE_DECIMALS",
    "ZERO",
    "ONE",
]
