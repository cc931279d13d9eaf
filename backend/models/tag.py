from models.fields import pick_columns
from db.errors import ValidationError


class Tag:
    TABLE = 'tags'
    ENTITY = 'tag'

    ALIASES = {
        'created_at': 'createdAt',
        'updated_at': 'updatedAt',
    }
    WRITABLE = ('slug', 'name')

    def __init__(self, id, slug, name, created_at=None, updated_at=None, post_count=None):
        self.id = id
        self.slug = slug
        self.name = name
        self.created_at = created_at
        self.updated_at = updated_at
        # only set by TagRepository.get_popular()
        self.post_count = post_count

    @classmethod
    def from_row(cls, row):
        return cls(**row) if row else None

    @classmethod
    def columns_from_payload(cls, data, partial=False):
        columns = pick_columns(data, cls.WRITABLE, cls.ALIASES)
        if (not partial or 'name' in columns) and not columns.get('name'):
            raise ValidationError("Tag name is required", field='name')
        return columns

    def to_dict(self):
        """Convert to dictionary"""
        data = {
            'id': self.id,
            'slug': self.slug,
            'name': self.name,
            'createdAt': self.created_at,
            'updatedAt': self.updated_at,
        }
        if self.post_count is not None:
            data['postCount'] = self.post_count
        return data
