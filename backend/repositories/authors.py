from models.author import Author
from repositories.base import SlugRepository


class AuthorRepository(SlugRepository):
    model = Author
