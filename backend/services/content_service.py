"""Helpers for post bodies: reading time and front matter.

Compiling MDX to renderable output happens in the frontend; here we
only deal with the raw text stored in posts.content.
"""

import math
import re
from datetime import date, datetime
from typing import Dict, Tuple

import yaml

from models.fields import slugify

WORDS_PER_MINUTE = 200

_FRONT_MATTER = re.compile(r'\A---\s*\r?\n(.*?)\r?\n---\s*(?:\r?\n|\Z)', re.DOTALL)


class FrontMatterError(Exception):
    """Raised when a front matter header is not valid YAML mapping"""
    def __init__(self, message: str, source: str = None):
        super().__init__(message)
        self.source = source


def count_words(text: str) -> int:
    return len(text.split()) if text else 0


def estimate_reading_time(text: str) -> str:
    """Display string such as '3 min read' (minimum 1 minute)."""
    minutes = max(1, math.ceil(count_words(text) / WORDS_PER_MINUTE))
    return f"{minutes} min read"


def _normalize(value):
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


def parse_front_matter(source: str, origin: str = None) -> Tuple[Dict, str]:
    """
    Split a document into (metadata, body).

    Documents without a leading '---' block return ({}, source).
    Dates parsed by YAML come back as ISO strings.
    """
    match = _FRONT_MATTER.match(source)
    if not match:
        return {}, source

    try:
        data = yaml.safe_load(match.group(1)) or {}
    except yaml.YAMLError as e:
        raise FrontMatterError(f"Invalid front matter: {e}", source=origin) from e

    if not isinstance(data, dict):
        raise FrontMatterError("Front matter must be a mapping", source=origin)

    metadata = {key: _normalize(value) for key, value in data.items()}
    return metadata, source[match.end():]


def tag_payloads(names):
    """Turn tag names into create_many() payloads, skipping blanks."""
    payloads = []
    for name in names or []:
        name = str(name).strip()
        slug = slugify(name)
        if slug:
            payloads.append({'slug': slug, 'name': name})
    return payloads
