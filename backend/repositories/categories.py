from models.category import Category
from repositories.base import SlugRepository


class CategoryRepository(SlugRepository):
    """Categories are referenced from posts by name, not by key.

    Deleting or renaming a category leaves existing posts untouched.
    """

    model = Category

    def get_with_post_counts(self):
        rows = self._query_all(
            f"""SELECT c.*,
                       (SELECT COUNT(*) FROM posts p
                         WHERE p.draft = 0
                           AND (py_lower(p.category) = py_lower(c.name)
                                OR py_lower(p.category) = py_lower(c.slug))) AS post_count
                FROM categories c
                ORDER BY {self.order_by}"""
        )
        return self._to_dicts(rows)
