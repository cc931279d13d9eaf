from models.fields import pick_columns
from db.errors import ValidationError


class Author:
    TABLE = 'authors'
    ENTITY = 'author'

    ALIASES = {
        'created_at': 'createdAt',
        'updated_at': 'updatedAt',
    }
    WRITABLE = ('slug', 'name', 'bio', 'avatar', 'email', 'twitter', 'linkedin', 'github')

    def __init__(self, id, slug, name, bio=None, avatar=None, email=None, twitter=None,
                 linkedin=None, github=None, created_at=None, updated_at=None):
        self.id = id
        self.slug = slug
        self.name = name
        self.bio = bio
        self.avatar = avatar
        self.email = email
        self.twitter = twitter
        self.linkedin = linkedin
        self.github = github
        self.created_at = created_at
        self.updated_at = updated_at

    @classmethod
    def from_row(cls, row):
        return cls(**row) if row else None

    @classmethod
    def columns_from_payload(cls, data, partial=False):
        columns = pick_columns(data, cls.WRITABLE, cls.ALIASES)
        if (not partial or 'name' in columns) and not columns.get('name'):
            raise ValidationError("Author name is required", field='name')
        return columns

    def to_dict(self):
        """Convert to dictionary"""
        return {
            'id': self.id,
            'slug': self.slug,
            'name': self.name,
            'bio': self.bio,
            'avatar': self.avatar,
            'email': self.email,
            'twitter': self.twitter,
            'linkedin': self.linkedin,
            'github': self.github,
            'createdAt': self.created_at,
            'updatedAt': self.updated_at,
        }
