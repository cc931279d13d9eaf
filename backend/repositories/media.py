from models.media import Media
from repositories.base import BaseRepository, like_pattern
from db.utils import utc_now_iso

RECENT_FIRST = 'created_at DESC, id DESC'
SEARCH_COLUMNS = ('filename', 'original_name', 'alt_text')
SEARCH_LIMIT = 20


def _search_clause():
    return '(' + ' OR '.join(f"py_lower(coalesce({column}, '')) LIKE ? ESCAPE '\\'"
                             for column in SEARCH_COLUMNS) + ')'


class MediaRepository(BaseRepository):
    """Media rows are keyed by numeric id rather than slug.

    Deleting a row does not remove the file; callers do that with the
    path returned by delete().
    """

    model = Media
    order_by = RECENT_FIRST

    def get_all(self, limit=50, offset=0):
        return self._to_dicts(self._query_all(
            f"SELECT * FROM media ORDER BY {RECENT_FIRST} LIMIT ? OFFSET ?",
            (int(limit), int(offset))
        ))

    def get_by_id(self, media_id):
        return self._to_dict(self._query_one("SELECT * FROM media WHERE id = ?", (media_id,)))

    def get_by_filename(self, filename):
        return self._to_dict(self._query_one(
            "SELECT * FROM media WHERE filename = ? ORDER BY id DESC LIMIT 1", (filename,)
        ))

    def count(self, search=None):
        search = (search or '').strip()
        if not search:
            return self._scalar("SELECT COUNT(*) AS count FROM media")
        return self._scalar(
            f"SELECT COUNT(*) AS count FROM media WHERE {_search_clause()}",
            (like_pattern(search),) * len(SEARCH_COLUMNS)
        )

    def search(self, query, limit=SEARCH_LIMIT, offset=0):
        query = (query or '').strip()
        if not query:
            return []
        return self._to_dicts(self._query_all(
            f"SELECT * FROM media WHERE {_search_clause()} ORDER BY {RECENT_FIRST} LIMIT ? OFFSET ?",
            (like_pattern(query),) * len(SEARCH_COLUMNS) + (int(limit), int(offset))
        ))

    def create(self, data):
        columns = Media.columns_from_payload(data)
        _, media_id = self._insert(columns)
        return self.get_by_id(media_id)

    def update(self, media_id, patch):
        columns = Media.columns_from_payload(patch or {}, partial=True)
        assignments = [f"{column} = ?" for column in columns]
        assignments.append("updated_at = ?")
        params = list(columns.values()) + [utc_now_iso(), media_id]

        rowcount, _ = self._execute(
            f"UPDATE media SET {', '.join(assignments)} WHERE id = ?", params
        )
        if rowcount == 0:
            return None
        return self.get_by_id(media_id)

    def delete(self, media_id):
        """Delete by id; returns the deleted row or None."""
        existing = self.get_by_id(media_id)
        if existing is None:
            return None
        rowcount, _ = self._execute("DELETE FROM media WHERE id = ?", (media_id,))
        return existing if rowcount else None

    def delete_by_filename(self, filename):
        existing = self.get_by_filename(filename)
        if existing is None:
            return None
        return self.delete(existing['id'])
