"""Favorites persistence for dictionary entries."""

from __future__ import annotations

import json
import os
import sqlite3
import threading
from contextlib import contextmanager
from typing import Any, Callable, Generator, List, Optional, Protocol

from alabama_dictionary.core import LexiconEntry
from alabama_dictionary.utils.observability import get_logger

FavoritesListener = Callable[[int], None]


class FavoritesStore(Protocol):
    """Key-value store of entry snapshots keyed by headword.

    ``version`` increases on every change so views can tell whether a list
    they rendered earlier is out of date.
    """

    @property
    def version(self) -> int: ...

    def add(self, entry: LexiconEntry) -> bool: ...

    def remove(self, headword: str) -> bool: ...

    def get(self, headword: str) -> Optional[LexiconEntry]: ...

    def contains(self, headword: str) -> bool: ...

    def list(self) -> List[LexiconEntry]: ...

    def add_listener(self, listener: FavoritesListener) -> None: ...


def _ensure_parent_directory(path: str) -> None:
    directory = os.path.dirname(os.path.abspath(path))
    if directory and not os.path.exists(directory):
        os.makedirs(directory, exist_ok=True)


class SQLiteFavoritesStore:
    """Favorites kept in a local SQLite file.

    Each favorite is a full JSON copy of the entry taken when it was added,
    so it does not follow later changes to the lexicon. A store that cannot
    be opened or read behaves as an empty one; the failure is logged and the
    rest of the application keeps working.
    """

    def __init__(self, db_path: str) -> None:
        self.db_path = db_path
        self._lock = threading.RLock()
        self._version = 0
        self._listeners: List[FavoritesListener] = []
        self._available = True
        self._logger = get_logger(__name__).bind(component="favorites_store", db_path=db_path)
        self._ensure_schema()

    @contextmanager
    def _connect(self) -> Generator[sqlite3.Connection, None, None]:
        connection = sqlite3.connect(self.db_path)
        try:
            yield connection
            if connection.in_transaction:
                connection.commit()
        except Exception:
            if connection.in_transaction:
                connection.rollback()
            raise
        finally:
            connection.close()

    def _ensure_schema(self) -> None:
        try:
            _ensure_parent_directory(self.db_path)
            with self._connect() as conn:
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS favorites (
                        position INTEGER PRIMARY KEY AUTOINCREMENT,
                        headword TEXT NOT NULL UNIQUE,
                        snapshot TEXT NOT NULL
                    )
                    """
                )
        except (OSError, sqlite3.Error) as exc:
            self._available = False
            self._logger.warning(
                "Favorites store unavailable; continuing without favorites",
                context={"error": str(exc)},
            )

    @property
    def available(self) -> bool:
        return self._available

    @property
    def version(self) -> int:
        with self._lock:
            return self._version

    def _changed(self) -> None:
        with self._lock:
            self._version += 1
            version = self._version
            listeners = tuple(self._listeners)
        for listener in listeners:
            listener(version)

    def _decode(self, headword: str, snapshot: str) -> Optional[LexiconEntry]:
        try:
            return LexiconEntry.from_dict(json.loads(snapshot))
        except (TypeError, ValueError) as exc:
            self._logger.warning(
                "Skipping unreadable favorite",
                context={"headword": headword, "error": str(exc)},
            )
            return None

    def add(self, entry: LexiconEntry) -> bool:
        """Store a snapshot of ``entry``; returns ``False`` if already present."""

        if not self._available:
            return False
        snapshot = json.dumps(entry.to_dict(), ensure_ascii=False)
        try:
            with self._lock, self._connect() as conn:
                cursor = conn.execute(
                    "INSERT OR IGNORE INTO favorites (headword, snapshot) VALUES (?, ?)",
                    (entry.headword, snapshot),
                )
                added = cursor.rowcount > 0
        except sqlite3.Error as exc:
            self._logger.warning(
                "Could not save favorite",
                context={"headword": entry.headword, "error": str(exc)},
            )
            return False
        if added:
            self._logger.info("Favorite added", context={"headword": entry.headword})
            self._changed()
        return added

    def remove(self, headword: str) -> bool:
        if not self._available:
            return False
        try:
            with self._lock, self._connect() as conn:
                cursor = conn.execute("DELETE FROM favorites WHERE headword = ?", (headword,))
                removed = cursor.rowcount > 0
        except sqlite3.Error as exc:
            self._logger.warning(
                "Could not remove favorite",
                context={"headword": headword, "error": str(exc)},
            )
            return False
        if removed:
            self._logger.info("Favorite removed", context={"headword": headword})
            self._changed()
        return removed

    def _query(self, sql: str, params: tuple = ()) -> List[Any]:
        if not self._available:
            return []
        try:
            with self._connect() as conn:
                return conn.execute(sql, params).fetchall()
        except sqlite3.Error as exc:
            self._logger.warning(
                "Favorites could not be read; treating as empty",
                context={"error": str(exc)},
            )
            return []

    def get(self, headword: str) -> Optional[LexiconEntry]:
        rows = self._query("SELECT headword, snapshot FROM favorites WHERE headword = ?", (headword,))
        if not rows:
            return None
        return self._decode(*rows[0])

    def contains(self, headword: str) -> bool:
        return bool(self._query("SELECT 1 FROM favorites WHERE headword = ?", (headword,)))

    def list(self) -> List[LexiconEntry]:
        """Favorites in the order they were added."""

        rows = self._query("SELECT headword, snapshot FROM favorites ORDER BY position")
        entries = (self._decode(headword, snapshot) for headword, snapshot in rows)
        return [entry for entry in entries if entry is not None]

    def add_listener(self, listener: FavoritesListener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def remove_listener(self, listener: FavoritesListener) -> None:
        with self._lock:
            self._listeners = [entry for entry in self._listeners if entry is not listener]


__all__ = ["FavoritesListener", "FavoritesStore", "SQLiteFavoritesStore"]
