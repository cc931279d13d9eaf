"""SQLite persistence: path resolution, connection lifecycle, retry policy."""

from db.errors import (
    DuplicateKeyError,
    LockContentionError,
    StorageError,
    StorageUnavailableError,
    ValidationError,
)
from db.manager import DatabaseManager
from db.executor import RetryingExecutor

__all__ = [
    'DuplicateKeyError',
    'LockContentionError',
    'StorageError',
    'StorageUnavailableError',
    'ValidationError',
    'DatabaseManager',
    'RetryingExecutor'
]
