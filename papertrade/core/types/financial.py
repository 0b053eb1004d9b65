"""
Financial helpers for the simulated ledger.

The simulator works in plain floats. Prices are displayed to the cent, but
stored unrounded so the stochastic model is not biased by repeated rounding;
the ledger rounds cash amounts to FINANCIAL_DECIMALS to keep sums stable.
"""

import math

# Financial calculation precision (number of decimal places)
FINANCIAL_DECIMALS = 8
PERCENTAGE_DECIMALS = 4
PRICE_DECIMALS = 2  # USD prices

# Common financial values as float constants
ZERO = 0.0
ONE = 1.0
HUNDRED = 100.0


def to_float(value: str | int | float) -> float:
    """Convert various numeric types to float.

    Args:
        value: Numeric value to convert

    Returns:
        Float representation of the value

    Examples:
        >>> to_float(150)
        150.0
        >>> to_float('1.5')
        1.5
    """
    if isinstance(value, float):
        return value
    return float(value)


def round_price(price: float) -> float:
    """Round price to cent precision."""
    return round(price, PRICE_DECIMALS)


def round_amount(amount: float) -> float:
    """Round cash amount to ledger precision."""
    return round(amount, FINANCIAL_DECIMALS)


def round_percentage(percentage: float) -> float:
    """Round percentage to display precision."""
    return round(percentage, PERCENTAGE_DECIMALS)


def calculate_notional_value(quantity: float, price: float) -> float:
    """Calculate quantity x price with ledger precision.

    Args:
        quantity: Number of shares
        price: Price per share

    Returns:
        Notional value as float
    """
    return round_amount(quantity * price)


def calculate_average_cost(
    held_quantity: int, held_average: float, added_quantity: int, added_price: float
) -> float:
    """Calculate the weighted-average cost after adding shares.

    Args:
        held_quantity: Shares already held
        held_average: Current average cost per share
        added_quantity: Shares being bought
        added_price: Price paid for the new shares

    Returns:
        New weighted average cost per share
    """
    total_quantity = held_quantity + added_quantity
    if total_quantity <= 0:
        raise ValueError(f"Total quantity must be positive, got {total_quantity}")
    total_cost = held_quantity * held_average + added_quantity * added_price
    return total_cost / total_quantity


def calculate_realized_pnl(average_cost: float, sale_price: float, quantity: int) -> float:
    """Calculate realized gain or loss on a sale.

    Args:
        average_cost: Average cost basis of the holding
        sale_price: Price the shares were sold at
        quantity: Shares sold

    Returns:
        Realized PnL as float
    """
    return round_amount((sale_price - average_cost) * quantity)


def clamp(value: float, lower: float, upper: float) -> float:
    """Clamp value into the closed range [lower, upper]."""
    return max(lower, min(upper, value))


def is_finite_number(value: float) -> bool:
    """Check that value is a real, finite number."""
    return isinstance(value, int | float) and not isinstance(value, bool) and math.isfinite(value)


def safe_float_comparison(a: float, b: float, tolerance: float = 1e-9) -> bool:
    """Compare floats with tolerance for precision issues.

    Examples:
        >>> safe_float_comparison(0.1 + 0.2, 0.3)
        True
    """
    return abs(a - b) < tolerance
