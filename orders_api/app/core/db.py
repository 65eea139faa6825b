"""
SQLite connection pool and simple migration system.

This module provides a small fixed-size pool of ``sqlite3``
connections (``ConnectionPool``) and the migration runner applied when
the durable repository starts (``apply_migrations``).

Migrations are plain ``.sql`` files in the ``migrations`` directory
named ``<version>_<description>.sql``.  Applied versions are recorded
in the ``migrations`` table and new files are executed in version
order.  Every statement in a migration must be idempotent
(``CREATE TABLE IF NOT EXISTS`` and friends) so running the migrator
on every startup, from several processes at once, is safe.
"""

import logging
import os
import sqlite3
import threading
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parent / "migrations"

SQLITE_SCHEME = "sqlite://"


class PoolTimeout(sqlite3.OperationalError):
    """No pooled connection became available within the configured timeout."""


def resolve_database(url: str) -> Tuple[str, bool]:
    """Translate a database URL into ``sqlite3.connect`` arguments.

    Accepts ``sqlite://relative.db``, ``sqlite:///absolute/path.db``, a
    bare filesystem path or ``:memory:``.  Returns ``(database, uri)``
    where ``uri`` tells ``sqlite3.connect`` to treat ``database`` as a
    URI.  An in-memory database is mapped to a named shared-cache
    database so every pooled connection sees the same data.
    """
    target = url[len(SQLITE_SCHEME):] if url.startswith(SQLITE_SCHEME) else url
    # Options such as ``?mode=rwc`` are accepted for compatibility and ignored.
    target = target.split("?", 1)[0]
    if not target:
        raise ValueError(f"database URL {url!r} does not name a database")
    if target in {":memory:", "memory"}:
        return f"file:orders-{uuid.uuid4().hex}?mode=memory&cache=shared", True
    parent = Path(target).expanduser().resolve().parent
    if not parent.exists():
        os.makedirs(parent, exist_ok=True)
    return str(Path(target).expanduser()), False


class ConnectionPool:
    """Fixed-size pool of SQLite connections.

    Connections are opened lazily and reused.  Each caller holds one
    connection for the duration of a ``with pool.connection()`` block;
    the block commits on success, rolls back on error and always hands
    the connection back.  Waiting for a free connection is bounded by
    ``timeout`` seconds, after which :class:`PoolTimeout` is raised.
    """

    def __init__(self, database: str, *, size: int = 5, timeout: float = 5.0, uri: bool = False) -> None:
        if size < 1:
            raise ValueError("pool size must be at least 1")
        self.database = database
        self.size = size
        self.timeout = timeout
        self.uri = uri
        self._slots = threading.BoundedSemaphore(size)
        self._idle: List[sqlite3.Connection] = []
        self._lock = threading.Lock()
        self._closed = False

    def _open(self) -> sqlite3.Connection:
        # Connections are handed between threadpool workers, but a given
        # connection is only ever used by one thread at a time.
        conn = sqlite3.connect(
            self.database,
            timeout=self.timeout,
            uri=self.uri,
            check_same_thread=False,
        )
        conn.row_factory = sqlite3.Row
        return conn

    def acquire(self) -> sqlite3.Connection:
        if self._closed:
            raise sqlite3.ProgrammingError("connection pool is closed")
        if not self._slots.acquire(timeout=self.timeout):
            raise PoolTimeout(f"no database connection available after {self.timeout}s")
        try:
            with self._lock:
                if self._idle:
                    return self._idle.pop()
            return self._open()
        except BaseException:
            self._slots.release()
            raise

    def release(self, conn: sqlite3.Connection, *, discard: bool = False) -> None:
        try:
            with self._lock:
                if discard or self._closed:
                    conn.close()
                else:
                    self._idle.append(conn)
        finally:
            self._slots.release()

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        """Yield a pooled connection wrapped in a transaction."""
        conn = self.acquire()
        discard = False
        try:
            yield conn
            conn.commit()
        except BaseException:
            try:
                conn.rollback()
            except sqlite3.Error:
                # A connection that cannot roll back is not safe to reuse.
                discard = True
            raise
        finally:
            self.release(conn, discard=discard)

    def close(self) -> None:
        with self._lock:
            self._closed = True
            idle, self._idle = self._idle, []
        for conn in idle:
            conn.close()


def load_migrations(directory: Optional[Path] = None) -> List[Tuple[int, str]]:
    """Return ``(version, sql)`` pairs for every migration file, sorted by version."""
    directory = directory or MIGRATIONS_DIR
    migrations: List[Tuple[int, str]] = []
    for path in directory.glob("*.sql"):
        version = int(path.name.split("_", 1)[0])
        migrations.append((version, path.read_text(encoding="utf-8")))
    migrations.sort(key=lambda item: item[0])
    return migrations


def apply_migrations(pool: ConnectionPool, directory: Optional[Path] = None) -> int:
    """Apply pending migrations and return the resulting schema version."""
    with pool.connection() as conn:
        conn.execute("CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)")
        row = conn.execute("SELECT MAX(version) AS version FROM migrations").fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in load_migrations(directory):
            if version > current_version:
                conn.executescript(sql)
                conn.execute("INSERT OR IGNORE INTO migrations (version) VALUES (?)", (version,))
                logger.info("Applied migration %04d", version)
                current_version = version
    return current_version
