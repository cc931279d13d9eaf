from collections import Counter

from models.fields import decode_tags, slugify
from models.tag import Tag
from repositories.base import IGNORE_DUPLICATE, SlugRepository, like_pattern
from db.utils import utc_now_iso

SEARCH_LIMIT = 10
POPULAR_LIMIT = 20


class TagRepository(SlugRepository):
    """Tags are created idempotently: a repeated slug is a no-op."""

    model = Tag
    duplicate_policy = IGNORE_DUPLICATE

    def create_many(self, tags):
        """Insert-or-ignore a batch of tags; returns how many were new.

        Items may be dicts ({'name': ..., 'slug': ...}) or plain names.
        """
        now = utc_now_iso()
        rows = []
        for item in tags or []:
            data = {'name': item} if isinstance(item, str) else item
            columns = Tag.columns_from_payload(data)
            slug = columns.get('slug') or slugify(columns['name'])
            if slug:
                rows.append((slug, columns['name'], now, now))
        if not rows:
            return 0

        def operation(conn):
            cur = conn.executemany(
                "INSERT OR IGNORE INTO tags (slug, name, created_at, updated_at) VALUES (?, ?, ?, ?)",
                rows
            )
            try:
                return cur.rowcount
            finally:
                cur.close()
        return self._executor.execute_with_retry(operation)

    def search(self, query, limit=SEARCH_LIMIT):
        query = (query or '').strip()
        if not query:
            return []
        return self._to_dicts(self._query_all(
            f"""SELECT * FROM tags WHERE py_lower(name) LIKE ? ESCAPE '\\'
                ORDER BY {self.order_by} LIMIT ?""",
            (like_pattern(query), limit)
        ))

    def get_popular(self, limit=POPULAR_LIMIT):
        """Tags used by at least one published post, most used first.

        A post uses a tag when one of its tag names slugifies to the
        tag's slug, so case and accents do not matter.
        """
        usage = Counter()
        for row in self._query_all("SELECT tags FROM posts WHERE draft = 0"):
            usage.update({slugify(name) for name in decode_tags(row['tags'])})

        popular = []
        for row in self._query_all(f"SELECT * FROM tags ORDER BY {self.order_by}"):
            tag = Tag.from_row(row)
            tag.post_count = usage[tag.slug]
            if tag.post_count:
                popular.append(tag)

        # ties stay in name order
        popular.sort(key=lambda tag: tag.post_count, reverse=True)
        return [tag.to_dict() for tag in popular[:limit]]
