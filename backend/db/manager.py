"""Connection lifecycle for the blog's embedded SQLite database.

One DatabaseManager owns the single process-wide connection. It is
opened lazily on first use; concurrent first callers block on the same
initialization attempt instead of opening duplicate connections.
"""

import logging
import sqlite3
import threading
import time
from typing import Callable, Optional

from db.backoff import INIT_POLICY, BackoffPolicy
from db.errors import StorageUnavailableError
from db.paths import (
    ensure_writable_directory,
    migrate_legacy_database,
    resolve_database_path,
)
from db.schema import bootstrap_schema
from db.utils import dict_factory, unicode_lower, utc_now_iso

logger = logging.getLogger(__name__)

DEFAULT_BUSY_TIMEOUT_MS = 5000
CACHE_SIZE_KIB = 8000
# Unicode-aware lower() for case-insensitive matching in repositories
LOWER_FUNCTION = 'py_lower'


class DatabaseManager:
    """Owns the live sqlite3 connection for the process."""

    def __init__(self,
                 path_resolver: Optional[Callable[[], str]] = None,
                 legacy_path: Optional[str] = None,
                 busy_timeout_ms: int = DEFAULT_BUSY_TIMEOUT_MS,
                 init_policy: BackoffPolicy = INIT_POLICY,
                 sleep: Callable[[float], None] = time.sleep):
        self._path_resolver = path_resolver or resolve_database_path
        self._legacy_path = legacy_path
        self._busy_timeout_ms = busy_timeout_ms
        self._init_policy = init_policy
        self._sleep = sleep

        self._lock = threading.Lock()
        self._conn: Optional[sqlite3.Connection] = None
        self._path: Optional[str] = None

    @property
    def is_initialized(self) -> bool:
        return self._conn is not None

    @property
    def path(self) -> Optional[str]:
        """Path of the open database file, None until initialized."""
        return self._path

    def initialize(self) -> sqlite3.Connection:
        """Open, configure, verify and bootstrap the database once.

        Returns the cached connection on every later call. Raises
        StorageUnavailableError when every attempt fails.
        """
        conn = self._conn
        if conn is not None:
            return conn

        with self._lock:
            # another thread may have finished while we waited
            if self._conn is not None:
                return self._conn

            last_error = None
            for attempt in self._init_policy.attempts():
                logger.info("Database initialization attempt %d/%d",
                            attempt, self._init_policy.max_attempts)
                try:
                    self._conn = self._open()
                    return self._conn
                except Exception as e:
                    last_error = e
                    logger.error("Database initialization attempt %d failed: %s", attempt, e)
                    if not self._init_policy.is_last(attempt):
                        delay = self._init_policy.delay(attempt)
                        logger.info("Retrying database initialization in %.1fs", delay)
                        self._sleep(delay)

            raise StorageUnavailableError(
                f"Failed to initialize database after {self._init_policy.max_attempts} "
                f"attempts: {last_error}",
                cause=last_error
            ) from last_error

    def get_connection(self) -> sqlite3.Connection:
        return self.initialize()

    def close(self) -> None:
        """Close the connection and forget all cached state."""
        with self._lock:
            conn, self._conn = self._conn, None
            path, self._path = self._path, None
            if conn is None:
                return
            try:
                conn.close()
                logger.info("Database connection closed (%s)", path)
            except sqlite3.Error as e:
                logger.error("Error closing database connection: %s", e)

    def _open(self) -> sqlite3.Connection:
        path = ensure_writable_directory(self._path_resolver())
        migrate_legacy_database(self._legacy_path, path)

        conn = sqlite3.connect(
            path,
            timeout=self._busy_timeout_ms / 1000.0,
            check_same_thread=False,
            isolation_level=None,
        )
        try:
            conn.row_factory = dict_factory
            conn.create_function(LOWER_FUNCTION, 1, unicode_lower, deterministic=True)
            self._configure(conn)
            self._check_write(conn)
            bootstrap_schema(conn, utc_now_iso())
        except Exception:
            conn.close()
            raise

        self._path = path
        logger.info("SQLite database ready at: %s", path)
        return conn

    def _configure(self, conn: sqlite3.Connection) -> None:
        journal = conn.execute("PRAGMA journal_mode=WAL").fetchone()
        mode = next(iter(journal.values())) if journal else None
        if str(mode).lower() != 'wal':
            logger.warning("WAL journal mode unavailable, using %s", mode)
        conn.execute(f"PRAGMA busy_timeout={int(self._busy_timeout_ms)}")
        conn.execute("PRAGMA synchronous=NORMAL")
        conn.execute(f"PRAGMA cache_size=-{CACHE_SIZE_KIB}")
        conn.execute("PRAGMA foreign_keys=ON")
        conn.execute("PRAGMA temp_store=MEMORY")

    def _check_write(self, conn: sqlite3.Connection) -> None:
        conn.execute("CREATE TABLE IF NOT EXISTS _write_check (id INTEGER PRIMARY KEY, written_at TEXT)")
        conn.execute("INSERT INTO _write_check (written_at) VALUES (?)", (utc_now_iso(),))
        conn.execute("DELETE FROM _write_check")
        conn.execute("DROP TABLE _write_check")
