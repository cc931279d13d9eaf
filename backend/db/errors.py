"""Error types raised by the persistence layer.

Route handlers map these to HTTP responses (see app.py); the data layer
itself knows nothing about status codes.
"""

from typing import Optional


class StorageError(RuntimeError):
    """Base class for persistence errors."""


class StorageUnavailableError(StorageError):
    """The database file could not be opened, written, or bootstrapped."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class LockContentionError(StorageUnavailableError):
    """Busy/locked retries were exhausted.

    Subclasses StorageUnavailableError because callers cannot tell the
    two apart once retries are spent.
    """


class DuplicateKeyError(StorageError):
    """An insert or update collided with an existing unique slug."""

    def __init__(self, entity: str, slug: str):
        super().__init__(f"{entity.capitalize()} with slug '{slug}' already exists")
        self.entity = entity
        self.slug = slug


class ValidationError(StorageError, ValueError):
    """A payload is missing mandatory fields or carries malformed values."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field
