"""Client-local persistent key-value storage for the session token."""

import sqlite3
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, Optional

from ..config.defaults import StorageParams
from ..errors import PersistenceError
from ..logging.config import get_logger


class KeyValueStore(ABC):
    """String key-value storage that survives process restarts."""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Return the stored value, None if absent."""

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one."""

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Delete a key; removing an absent key is a no-op."""


class MemoryKeyValueStore(KeyValueStore):
    """Process-local store, used when persistence is disabled and in tests."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._items


class SqliteKeyValueStore(KeyValueStore):
    """SQLite-backed key-value store."""

    def __init__(self, db_path: str = "predict_client.db"):
        self.db_path = Path(db_path)
        self.logger = get_logger("predict.storage")
        self._lock = threading.Lock()

        self._init_database()

    def _init_database(self) -> None:
        """Initialize database schema."""
        with self._get_connection("init") as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS local_storage (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            conn.commit()

    @contextmanager
    def _get_connection(self, operation: str) -> Iterator[sqlite3.Connection]:
        """Get a database connection, mapping sqlite failures to PersistenceError."""
        if self.db_path.parent and not self.db_path.parent.exists():
            self.db_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            conn = sqlite3.connect(str(self.db_path))
        except sqlite3.Error as e:
            raise PersistenceError(
                f"Cannot open token storage: {e}",
                operation=operation,
                target=str(self.db_path)
            ) from e

        try:
            yield conn
        except sqlite3.Error as e:
            self.logger.error(
                "Token storage failure",
                operation=operation,
                db_path=str(self.db_path),
                error=str(e)
            )
            raise PersistenceError(
                f"Token storage {operation} failed: {e}",
                operation=operation,
                target=str(self.db_path)
            ) from e
        finally:
            conn.close()

    def get_item(self, key: str) -> Optional[str]:
        with self._lock, self._get_connection("get") as conn:
            row = conn.execute(
                "SELECT value FROM local_storage WHERE key = ?", (key,)
            ).fetchone()
        return row[0] if row else None

    def set_item(self, key: str, value: str) -> None:
        now = datetime.now(timezone.utc).isoformat()
        with self._lock, self._get_connection("set") as conn:
            conn.execute(
                """
                INSERT INTO local_storage (key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value,
                                               updated_at = excluded.updated_at
                """,
                (key, value, now)
            )
            conn.commit()

    def remove_item(self, key: str) -> None:
        with self._lock, self._get_connection("remove") as conn:
            conn.execute("DELETE FROM local_storage WHERE key = ?", (key,))
            conn.commit()


class TokenStorage:
    """The single persisted session-token slot."""

    def __init__(self, store: KeyValueStore, key: str = "token"):
        self.store = store
        self.key = key

    def load(self) -> Optional[str]:
        token = self.store.get_item(self.key)
        return token or None

    def save(self, token: str) -> None:
        self.store.set_item(self.key, token)

    def clear(self) -> None:
        self.store.remove_item(self.key)


def create_store(params: StorageParams) -> KeyValueStore:
    """Build the configured key-value backend."""
    if params.backend == "memory":
        return MemoryKeyValueStore()
    if params.backend == "sqlite":
        return SqliteKeyValueStore(params.path)
    raise ValueError(f"Unknown storage backend: {params.backend}")
