"""Per-thread SQLite connections for the gate run, snapshot and report stores."""
from __future__ import annotations

import logging
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from src.shared.constants import DB_BUSY_TIMEOUT_MS

logger = logging.getLogger(__name__)

_PRAGMAS: tuple[str, ...] = (
    "PRAGMA journal_mode=WAL",
    f"PRAGMA busy_timeout={DB_BUSY_TIMEOUT_MS}",
    "PRAGMA foreign_keys=ON",
)


class ConnectionPool:
    """Hands every thread its own SQLite connection to one database file.

    Router handlers reach the stores through ``asyncio.to_thread`` and the
    evaluator may run on a worker pool, so connections are never shared
    between threads.  Every connection runs in WAL mode with a busy timeout
    and returns :class:`sqlite3.Row` rows.
    """

    def __init__(self, db_path: str | Path, timeout: float = 30.0) -> None:
        self._db_path = Path(db_path)
        self._timeout = timeout
        self._local = threading.local()
        self._lock = threading.Lock()
        self._open: list[sqlite3.Connection] = []

        self._db_path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def db_path(self) -> Path:
        return self._db_path

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(
            str(self._db_path),
            timeout=self._timeout,
            check_same_thread=False,
        )
        for pragma in _PRAGMAS:
            conn.execute(pragma)
        conn.row_factory = sqlite3.Row
        return conn

    def get(self) -> sqlite3.Connection:
        """Return the calling thread's connection, opening it on first use."""
        conn: sqlite3.Connection | None = getattr(self._local, "conn", None)
        if conn is None:
            conn = self._connect()
            self._local.conn = conn
            with self._lock:
                self._open.append(conn)
        return conn

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Commit on normal exit; roll back and re-raise on any exception."""
        conn = self.get()
        try:
            yield conn
        except BaseException:
            conn.rollback()
            raise
        conn.commit()

    @property
    def open_connections(self) -> int:
        with self._lock:
            return len(self._open)

    def close(self) -> None:
        """Close every connection opened through this pool."""
        with self._lock:
            connections, self._open = self._open, []
        for conn in connections:
            try:
                conn.close()
            except sqlite3.Error as exc:
                logger.warning("Failed to close SQLite connection: %s", exc)
        self._local.conn = None
