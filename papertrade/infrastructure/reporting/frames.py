"""
Tabular reports over ledger and market state.

Provides pandas views of transactions, price histories and holdings for
analysis and CLI output.
"""

from collections.abc import Iterable
from typing import Any

import pandas as pd

from papertrade.core.models.instrument import Instrument
from papertrade.core.models.portfolio import Portfolio
from papertrade.core.models.transaction import Transaction
from papertrade.core.protocols import PriceLookup

TRANSACTION_COLUMNS = [
    "id",
    "timestamp",
    "type",
    "symbol",
    "quantity",
    "price_per_unit",
    "total_value",
    "realized_pnl",
]

HOLDING_COLUMNS = [
    "symbol",
    "quantity",
    "average_cost_basis",
    "total_cost_basis",
    "current_price",
    "current_value",
    "unrealized_pnl",
    "percent_change",
]


def transactions_to_frame(transactions: Iterable[Transaction]) -> pd.DataFrame:
    """Build a DataFrame with one row per transaction, in execution order.

    Args:
        transactions: Transactions to tabulate

    Returns:
        DataFrame with TRANSACTION_COLUMNS and a UTC timestamp column
    """
    rows = [t.to_dict() for t in transactions]
    if not rows:
        return pd.DataFrame(columns=TRANSACTION_COLUMNS)

    df = pd.DataFrame(rows, columns=TRANSACTION_COLUMNS)
    df["timestamp"] = pd.to_datetime(df["timestamp"], utc=True)
    return df


def price_history_to_frame(instruments: Iterable[Instrument]) -> pd.DataFrame:
    """Build a wide frame of price histories, one column per symbol.

    Histories of different lengths are aligned on their most recent price,
    so the last row holds every instrument's current price.
    """
    series = {
        instrument.symbol: pd.Series(list(instrument.price_history), dtype="float64")
        for instrument in instruments
    }
    if not series:
        return pd.DataFrame()

    length = max(len(s) for s in series.values())
    aligned = {
        symbol: s.set_axis(range(length - len(s), length)) for symbol, s in series.items()
    }
    df = pd.DataFrame(aligned, index=range(length))
    df.index.name = "step"
    return df


def summarize_holdings(portfolio: Portfolio, price_lookup: PriceLookup) -> dict[str, Any]:
    """Summarize a portfolio's holdings at current prices.

    Returns:
        Dictionary with a "holdings" DataFrame and aggregate totals
    """
    rows = portfolio.holding_details(price_lookup)
    holdings = pd.DataFrame(rows, columns=HOLDING_COLUMNS)
    valuation = portfolio.valuate(price_lookup)

    summary: dict[str, Any] = {
        "holdings": holdings,
        "positions": len(holdings),
        "total_cost_basis": float(holdings["total_cost_basis"].sum()) if rows else 0.0,
        "market_value": float(holdings["current_value"].sum()) if rows else 0.0,
        "unrealized_pnl": valuation.unrealized_pnl,
        "realized_pnl": valuation.realized_pnl,
        "cash_balance": valuation.cash_balance,
        "total_assets_value": valuation.total_assets_value,
        "earnings": valuation.earnings,
    }
    if rows:
        total = summary["market_value"]
        weights = (holdings["current_value"] / total).round(4) if total else holdings["current_value"] * 0.0
        summary["largest_position"] = str(holdings.loc[holdings["current_value"].idxmax(), "symbol"])
        summary["weights"] = dict(zip(holdings["symbol"].tolist(), weights.tolist(), strict=True))
    return summary
