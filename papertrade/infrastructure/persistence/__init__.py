"""
Ledger persistence infrastructure.

This module provides the stores that load and save user ledger snapshots.
"""

from .json_store import JsonLedgerStore
from .memory_store import InMemoryLedgerStore

__all__ = ["InMemoryLedgerStore", "JsonLedgerStore"]
