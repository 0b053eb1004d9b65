"""
Interfaces for the collaborators the engine consumes.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from papertrade.core.models.snapshot import LedgerSnapshot


@dataclass(frozen=True)
class GeneratedHeadline:
    """A headline produced by an external text generator."""

    headline: str
    target_symbol: str
    impact: float


class ILedgerStore(ABC):
    """Abstract interface for ledger persistence.

    Implementations raise PersistenceError on failure; they never swallow it.
    """

    @abstractmethod
    def load(self, user_key: str) -> LedgerSnapshot | None:
        """Load a user's ledger, None when nothing is stored."""
        pass

    @abstractmethod
    def save(self, user_key: str, snapshot: LedgerSnapshot) -> None:
        """Persist a user's ledger."""
        pass


class ITextGenerator(ABC):
    """Abstract interface for an external headline generator."""

    @abstractmethod
    def generate(self) -> GeneratedHeadline:
        """Produce one headline.

        Raises:
            ExternalServiceError: When the service fails or returns garbage
        """
        pass
