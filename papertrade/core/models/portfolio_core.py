"""
Portfolio core state management.

This module holds the fundamental ledger state: cash, holdings and the
transaction log, guarded by one lock per portfolio.
"""

import threading
from dataclasses import dataclass, field

from papertrade.core.enums import TransactionType
from papertrade.core.models.holding import Holding
from papertrade.core.models.transaction import Transaction
from papertrade.core.types.financial import ZERO

from .portfolio_helpers import PortfolioValidator


@dataclass
class PortfolioCore:
    """Core ledger state.

    Thread Safety:
        All state-modifying operations must hold ``_lock``. The lock is an
        RLock so a limit-order execution can hold it across its trigger check
        and the nested buy/sell call.
    """

    portfolio_id: str
    initial_balance: float
    cash_balance: float
    holdings: dict[str, Holding] = field(default_factory=dict)
    transactions: list[Transaction] = field(default_factory=list)
    _lock: threading.RLock = field(default_factory=threading.RLock, init=False, repr=False)

    def __post_init__(self) -> None:
        """Validate opening balances."""
        PortfolioValidator.validate_initial_balance(self.initial_balance)
        PortfolioValidator.validate_cash_balance(self.cash_balance)

    def held_quantity(self, symbol: str) -> int:
        """Get shares held for symbol, 0 when there is no holding."""
        holding = self.holdings.get(symbol)
        return holding.quantity if holding else 0

    def realized_pnl(self) -> float:
        """Sum realized PnL over all sell transactions."""
        return sum(
            (txn.realized_pnl for txn in self.transactions if txn.type == TransactionType.SELL),
            ZERO,
        )

    def clear(self, new_initial_balance: float) -> None:
        """Drop holdings and history and restart from new_initial_balance."""
        PortfolioValidator.validate_initial_balance(new_initial_balance)
        with self._lock:
            self.holdings.clear()
            self.transactions.clear()
            self.initial_balance = new_initial_balance
            self.cash_balance = new_initial_balance
