from .content_service import (
    FrontMatterError,
    estimate_reading_time,
    parse_front_matter,
    slugify,
    tag_payloads,
)

__all__ = ['FrontMatterError', 'estimate_reading_time', 'parse_front_matter', 'slugify', 'tag_payloads']
