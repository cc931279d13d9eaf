import logging
import sqlite3
import time
from typing import Callable, TypeVar

from db.backoff import QUERY_POLICY, BackoffPolicy
from db.errors import LockContentionError

logger = logging.getLogger(__name__)

T = TypeVar('T')

_SQLITE_BUSY_CODES = tuple(
    code
    for code in (
        getattr(sqlite3, 'SQLITE_BUSY', None),
        getattr(sqlite3, 'SQLITE_LOCKED', None),
    )
    if isinstance(code, int)
)

_BUSY_SUBSTRINGS = (
    'database is locked',
    'database table is locked',
    'database schema is locked',
    'database is busy',
)


def is_busy_error(exc: BaseException) -> bool:
    """True for SQLite's transient busy/locked conditions."""
    if not isinstance(exc, sqlite3.OperationalError):
        return False
    code = getattr(exc, 'sqlite_errorcode', None)
    if isinstance(code, int) and (code & 0xFF) in _SQLITE_BUSY_CODES:
        return True
    message = str(exc).lower()
    return any(fragment in message for fragment in _BUSY_SUBSTRINGS)


class RetryingExecutor:
    """Runs repository operations against the live connection.

    This is the only place retry-on-lock policy lives; every repository
    goes through execute_with_retry().
    """

    def __init__(self, manager, policy: BackoffPolicy = QUERY_POLICY,
                 sleep: Callable[[float], None] = time.sleep):
        self._manager = manager
        self._policy = policy
        self._sleep = sleep

    @property
    def manager(self):
        return self._manager

    def execute_with_retry(self, operation: Callable[[sqlite3.Connection], T]) -> T:
        """Call operation(conn), retrying on busy/locked with backoff.

        Any other error propagates immediately. Initialization failures
        surface as StorageUnavailableError from the manager.
        """
        for attempt in self._policy.attempts():
            conn = self._manager.get_connection()
            try:
                return operation(conn)
            except sqlite3.OperationalError as e:
                if not is_busy_error(e):
                    raise
                if self._policy.is_last(attempt):
                    raise LockContentionError(
                        f"Database still locked after {self._policy.max_attempts} attempts: {e}",
                        cause=e
                    ) from e
                delay = self._policy.delay(attempt)
                logger.warning("Database busy (attempt %d/%d), retrying in %.3fs",
                               attempt, self._policy.max_attempts, delay)
                self._sleep(delay)

        raise LockContentionError("Retry loop exited without a result")
