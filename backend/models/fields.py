"""Conversions between stored column values and API values."""

import json
import logging
import re
import unicodedata

from db.errors import ValidationError

logger = logging.getLogger(__name__)

_SLUG_STRIP = re.compile(r"[^a-z0-9]+")
_TRUE_STRINGS = {'1', 'true', 'yes', 'on'}
_FALSE_STRINGS = {'0', 'false', 'no', 'off', ''}


def to_bool(value):
    """Read-side coercion of a 0/1 column to bool."""
    return bool(value) if value is not None else False


def bool_to_int(value, field=None):
    """Write-side coercion: accepts bools, 0/1 and common strings."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return 1 if value else 0
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return 1
        if lowered in _FALSE_STRINGS:
            return 0
    raise ValidationError(f"Invalid boolean value for {field or 'field'}: {value!r}", field=field)


def decode_tags(raw):
    """Parse a JSON tags column. Null, empty or malformed text gives []."""
    if raw is None or raw == '':
        return []
    if isinstance(raw, list):
        return raw
    try:
        value = json.loads(raw)
    except (TypeError, ValueError):
        logger.debug("Unparseable tags column %r, treating as empty", raw)
        return []
    if not isinstance(value, list):
        return []
    return [str(tag) for tag in value if tag is not None]


def split_tags(value):
    """Tag input as a list; comma separated text from plain form fields is split."""
    if value is None:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(',') if part.strip()]
    return value


def encode_tags(value, field='tags'):
    value = split_tags(value)
    if not isinstance(value, (list, tuple)):
        raise ValidationError(f"{field} must be a list of strings", field=field)
    return json.dumps([str(tag) for tag in value], ensure_ascii=False)


def pick_columns(data, writable, aliases):
    """Collect writable column values from a payload.

    Accepts both the column name (author_image) and its API alias
    (authorImage); the alias wins when both are present and not None.
    Keys that are not writable are ignored.
    """
    columns = {}
    for column in writable:
        alias = aliases.get(column)
        if alias and alias in data and (data[alias] is not None or column not in data):
            columns[column] = data[alias]
        elif column in data:
            columns[column] = data[column]
    return columns


def slugify(text):
    """Lowercase, ASCII-fold and hyphenate text into a URL-safe slug."""
    if not text:
        return ''
    folded = unicodedata.normalize('NFKD', str(text)).encode('ascii', 'ignore').decode('ascii')
    return _SLUG_STRIP.sub('-', folded.lower()).strip('-')
