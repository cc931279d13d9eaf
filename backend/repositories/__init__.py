"""Entity repositories over the shared SQLite connection."""

from repositories.posts import PostRepository
from repositories.authors import AuthorRepository
from repositories.categories import CategoryRepository
from repositories.tags import TagRepository
from repositories.media import MediaRepository
from repositories.stats import StatsRepository

__all__ = [
    'PostRepository',
    'AuthorRepository',
    'CategoryRepository',
    'TagRepository',
    'MediaRepository',
    'StatsRepository'
]
