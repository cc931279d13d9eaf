from models.fields import bool_to_int, decode_tags, encode_tags, pick_columns, to_bool
from db.errors import ValidationError


class Post:
    TABLE = 'posts'
    ENTITY = 'post'

    # column -> API field, for columns whose names differ
    ALIASES = {
        'author_image': 'authorImage',
        'cover_image': 'coverImage',
        'reading_time': 'readingTime',
        'created_at': 'createdAt',
        'updated_at': 'updatedAt',
    }
    WRITABLE = (
        'slug', 'title', 'content', 'excerpt', 'date', 'author', 'author_image',
        'cover_image', 'category', 'tags', 'draft', 'featured', 'reading_time',
    )
    REQUIRED = ('title', 'content')

    def __init__(self, id, slug, title, content, excerpt=None, date=None, author=None,
                 author_image=None, cover_image=None, category=None, tags=None, draft=1,
                 featured=0, reading_time=None, views=0, created_at=None, updated_at=None):
        self.id = id
        self.slug = slug
        self.title = title
        self.content = content
        self.excerpt = excerpt
        self.date = date
        self.author = author
        self.author_image = author_image
        self.cover_image = cover_image
        self.category = category
        self.tags = decode_tags(tags)
        self.draft = to_bool(draft)
        self.featured = to_bool(featured)
        self.reading_time = reading_time
        self.views = views or 0
        self.created_at = created_at
        self.updated_at = updated_at

    @classmethod
    def from_row(cls, row):
        return cls(**row) if row else None

    @classmethod
    def columns_from_payload(cls, data, partial=False):
        """Map an API payload onto column values ready for SQL."""
        columns = pick_columns(data, cls.WRITABLE, cls.ALIASES)

        if not partial:
            for field in cls.REQUIRED:
                if not columns.get(field):
                    raise ValidationError(f"Post {field} is required", field=field)
        else:
            for field in cls.REQUIRED:
                if field in columns and not columns[field]:
                    raise ValidationError(f"Post {field} cannot be empty", field=field)

        if 'tags' in columns:
            columns['tags'] = encode_tags(columns['tags'])
        for flag in ('draft', 'featured'):
            # null means "not given": create applies the default, update leaves the column alone
            if flag in columns and columns[flag] is None:
                del columns[flag]
            elif flag in columns:
                columns[flag] = bool_to_int(columns[flag], field=flag)
        return columns

    def to_dict(self):
        """Convert to dictionary"""
        return {
            'id': self.id,
            'slug': self.slug,
            'title': self.title,
            'content': self.content,
            'excerpt': self.excerpt,
            'date': self.date,
            'author': self.author,
            'authorImage': self.author_image,
            'coverImage': self.cover_image,
            'category': self.category,
            'tags': list(self.tags),
            'draft': self.draft,
            'featured': self.featured,
            'readingTime': self.reading_time,
            'views': self.views,
            'createdAt': self.created_at,
            'updatedAt': self.updated_at,
        }

    def __repr__(self):
        return f"<Post(id={self.id}, slug='{self.slug}', draft={self.draft})>"
