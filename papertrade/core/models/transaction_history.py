"""
Filterable, restartable view over a transaction log.
"""

from collections.abc import Callable, Iterator

from papertrade.core.enums import TransactionType

from .transaction import Transaction


class TransactionHistory:
    """Lazy view over a portfolio's transactions.

    Each iteration takes a fresh copy of the log and filters it lazily, so
    the view can be iterated any number of times and always reflects the
    ledger as of the start of that iteration.
    """

    def __init__(
        self,
        source: Callable[[], list[Transaction]],
        symbol: str | None = None,
        transaction_type: TransactionType | None = None,
    ) -> None:
        self._source = source
        self.symbol = symbol.upper() if symbol else None
        self.transaction_type = transaction_type

    def _matches(self, transaction: Transaction) -> bool:
        if self.symbol is not None and transaction.symbol != self.symbol:
            return False
        if self.transaction_type is not None and transaction.type != self.transaction_type:
            return False
        return True

    def __iter__(self) -> Iterator[Transaction]:
        return (txn for txn in self._source() if self._matches(txn))

    def filter(
        self, symbol: str | None = None, transaction_type: TransactionType | None = None
    ) -> "TransactionHistory":
        """Narrow the view further; unspecified filters are kept."""
        return TransactionHistory(
            self._source,
            symbol=symbol or self.symbol,
            transaction_type=transaction_type or self.transaction_type,
        )
