"""
In-memory ledger store.
"""

import copy
from threading import RLock

from loguru import logger

from papertrade.core.exceptions.simulation import PersistenceError
from papertrade.core.interfaces.collaborators import ILedgerStore
from papertrade.core.models.snapshot import LedgerSnapshot


class InMemoryLedgerStore(ILedgerStore):
    """Keeps deep copies of snapshots in a dict. Used by tests and the API default."""

    def __init__(self) -> None:
        self._snapshots: dict[str, LedgerSnapshot] = {}
        self._lock = RLock()
        self.fail_next_save = False

    def load(self, user_key: str) -> LedgerSnapshot | None:
        with self._lock:
            snapshot = self._snapshots.get(user_key)
            return copy.deepcopy(snapshot) if snapshot is not None else None

    def save(self, user_key: str, snapshot: LedgerSnapshot) -> None:
        with self._lock:
            if self.fail_next_save:
                self.fail_next_save = False
                raise PersistenceError(user_key, "save", "store unavailable")
            self._snapshots[user_key] = copy.deepcopy(snapshot)
        logger.debug(f"Stored ledger snapshot for {user_key}")

    def keys(self) -> list[str]:
        """Get all stored user keys."""
        with self._lock:
            return sorted(self._snapshots)
