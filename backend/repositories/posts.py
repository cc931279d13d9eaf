import math
from datetime import date

from models.post import Post
from repositories.base import SlugRepository, like_pattern

DEFAULT_AUTHOR = 'Anonymous'
DEFAULT_CATEGORY = 'Uncategorized'

RECENT_FIRST = 'date DESC, created_at DESC, id DESC'
SEARCH_COLUMNS = ('title', 'excerpt', 'content', 'category', 'tags')


class PostRepository(SlugRepository):
    model = Post
    order_by = RECENT_FIRST
    slug_source = 'title'

    def _apply_defaults(self, columns):
        columns.setdefault('date', None)
        if not columns['date']:
            columns['date'] = date.today().isoformat()
        if columns.get('draft') is None:
            columns['draft'] = 1
        if columns.get('featured') is None:
            columns['featured'] = 0
        if not columns.get('author'):
            columns['author'] = DEFAULT_AUTHOR
        if not columns.get('category'):
            columns['category'] = DEFAULT_CATEGORY
        columns.setdefault('tags', '[]')
        columns['views'] = 0
        return columns

    def get_published(self):
        return self._to_dicts(self._query_all(
            f"SELECT * FROM posts WHERE draft = 0 ORDER BY {RECENT_FIRST}"
        ))

    def get_featured(self):
        return self._to_dicts(self._query_all(
            f"SELECT * FROM posts WHERE featured = 1 AND draft = 0 ORDER BY {RECENT_FIRST}"
        ))

    def get_by_category(self, category):
        return self._to_dicts(self._query_all(
            f"""SELECT * FROM posts
                WHERE draft = 0 AND py_lower(category) = py_lower(?)
                ORDER BY {RECENT_FIRST}""",
            (category,)
        ))

    def get_by_tag(self, tag):
        """Published posts whose tags list contains tag (case-insensitive)."""
        wanted = tag.strip().lower()
        if not wanted:
            return []
        rows = self._query_all(
            f"""SELECT * FROM posts
                WHERE draft = 0 AND py_lower(tags) LIKE ? ESCAPE '\\'
                ORDER BY {RECENT_FIRST}""",
            (like_pattern(wanted),)
        )
        # LIKE is only a prefilter; match whole tags on the decoded list
        posts = [Post.from_row(row) for row in rows]
        return [post.to_dict() for post in posts
                if any(t.lower() == wanted for t in post.tags)]

    def search(self, query, published_only=False):
        """Case-insensitive substring search, most recent first."""
        query = (query or '').strip()
        if not query:
            return []
        pattern = like_pattern(query)
        clauses = ' OR '.join(f"py_lower(coalesce({column}, '')) LIKE ? ESCAPE '\\'"
                              for column in SEARCH_COLUMNS)
        where = f"({clauses})"
        if published_only:
            where += " AND draft = 0"
        return self._to_dicts(self._query_all(
            f"SELECT * FROM posts WHERE {where} ORDER BY {RECENT_FIRST}",
            (pattern,) * len(SEARCH_COLUMNS)
        ))

    def increment_views(self, slug):
        """Atomically add one view; False when the post does not exist."""
        rowcount, _ = self._execute(
            "UPDATE posts SET views = views + 1 WHERE slug = ?", (slug,)
        )
        return rowcount > 0

    def get_paginated(self, page=1, limit=10, published_only=True):
        page = max(int(page), 1)
        limit = max(int(limit), 1)
        where = "WHERE draft = 0" if published_only else ""

        total = self._scalar(f"SELECT COUNT(*) AS count FROM posts {where}")
        rows = self._query_all(
            f"SELECT * FROM posts {where} ORDER BY {RECENT_FIRST} LIMIT ? OFFSET ?",
            (limit, (page - 1) * limit)
        )
        return {
            'posts': self._to_dicts(rows),
            'pagination': {
                'page': page,
                'limit': limit,
                'total': total,
                'totalPages': math.ceil(total / limit),
            },
        }

    def count_published(self):
        return self._scalar("SELECT COUNT(*) AS count FROM posts WHERE draft = 0")

    def total_views(self):
        return self._scalar("SELECT SUM(views) AS total FROM posts")
