from datetime import datetime, timezone


def dict_factory(cursor, row):
    """Convert row to dictionary"""
    fields = [column[0] for column in cursor.description]
    return {key: value for key, value in zip(fields, row)}


def utc_now_iso():
    """Current UTC time as ISO-8601 text with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def unicode_lower(value):
    """SQL lower() replacement; SQLite's own only folds ASCII."""
    return value.lower() if isinstance(value, str) else value
