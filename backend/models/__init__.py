"""Blog entity models."""

from models.post import Post
from models.author import Author
from models.category import Category
from models.tag import Tag
from models.media import Media

__all__ = [
    'Post',
    'Author',
    'Category',
    'Tag',
    'Media'
]
