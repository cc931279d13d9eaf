"""Metadata for uploaded media files.

Only metadata lives here; the bytes are written and removed by the
upload route.
"""

from models.fields import pick_columns
from db.errors import ValidationError


class Media:
    TABLE = 'media'
    ENTITY = 'media'

    ALIASES = {
        'original_name': 'originalName',
        'mime_type': 'mimeType',
        'alt_text': 'altText',
        'created_at': 'createdAt',
        'updated_at': 'updatedAt',
    }
    WRITABLE = (
        'filename', 'original_name', 'path', 'url', 'mime_type', 'size',
        'width', 'height', 'alt_text',
    )
    REQUIRED = ('filename', 'url')
    INTEGER_FIELDS = ('size', 'width', 'height')

    def __init__(self, id, filename, url, original_name=None, path=None, mime_type=None,
                 size=0, width=None, height=None, alt_text=None, created_at=None,
                 updated_at=None):
        self.id = id
        self.filename = filename
        self.original_name = original_name
        self.path = path
        self.url = url
        self.mime_type = mime_type
        self.size = size
        self.width = width
        self.height = height
        self.alt_text = alt_text
        self.created_at = created_at
        self.updated_at = updated_at

    @classmethod
    def from_row(cls, row):
        return cls(**row) if row else None

    @classmethod
    def columns_from_payload(cls, data, partial=False):
        columns = pick_columns(data, cls.WRITABLE, cls.ALIASES)
        for field in cls.REQUIRED:
            if (not partial or field in columns) and not columns.get(field):
                raise ValidationError(f"Media {field} is required", field=field)

        for field in cls.INTEGER_FIELDS:
            value = columns.get(field)
            if value is None or value == '':
                if field in columns:
                    columns[field] = None if field != 'size' else 0
                continue
            try:
                columns[field] = int(value)
            except (TypeError, ValueError):
                raise ValidationError(f"Media {field} must be an integer", field=field)
        return columns

    def to_dict(self):
        """Convert to dictionary"""
        return {
            'id': self.id,
            'filename': self.filename,
            'originalName': self.original_name,
            'path': self.path,
            'url': self.url,
            'mimeType': self.mime_type,
            'size': self.size,
            'width': self.width,
            'height': self.height,
            'altText': self.alt_text,
            'createdAt': self.created_at,
            'updatedAt': self.updated_at,
        }
