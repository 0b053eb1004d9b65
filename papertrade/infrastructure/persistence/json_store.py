"""
JSON file ledger store.

One file per user under a base directory. Writes go to a temporary file
that is then renamed, so a failed save never leaves a half-written ledger.
"""

import json
import os
import re
from pathlib import Path

from loguru import logger

from papertrade.core.exceptions.simulation import PersistenceError
from papertrade.core.interfaces.collaborators import ILedgerStore
from papertrade.core.models.snapshot import LedgerSnapshot

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.@-]+$")


class JsonLedgerStore(ILedgerStore):
    """Persists ledger snapshots as JSON files."""

    def __init__(self, base_dir: str | Path):
        """Initialize the store, creating base_dir if needed."""
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _path_for(self, user_key: str, operation: str) -> Path:
        if not user_key or not _SAFE_KEY.match(user_key) or user_key.startswith("."):
            raise PersistenceError(user_key, operation, "invalid user key")
        return self.base_dir / f"{user_key}.json"

    def load(self, user_key: str) -> LedgerSnapshot | None:
        path = self._path_for(user_key, "load")
        if not path.exists():
            return None

        try:
            with path.open(encoding="utf-8") as f:
                data = json.load(f)
            return LedgerSnapshot.from_dict(data)
        except OSError as e:
            logger.error(f"File system error loading {path.name}: {e}")
            raise PersistenceError(user_key, "load", str(e)) from e
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            logger.error(f"Corrupt ledger file {path.name}: {e}")
            raise PersistenceError(user_key, "load", f"corrupt ledger file: {e}") from e

    def save(self, user_key: str, snapshot: LedgerSnapshot) -> None:
        path = self._path_for(user_key, "save")
        tmp_path = path.with_suffix(".json.tmp")

        try:
            with tmp_path.open("w", encoding="utf-8") as f:
                json.dump(snapshot.to_dict(), f, indent=2)
            os.replace(tmp_path, path)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to write {path.name}: {e}")
            tmp_path.unlink(missing_ok=True)
            raise PersistenceError(user_key, "save", str(e)) from e

        logger.debug(f"Wrote ledger snapshot {path}")
