"""Shared CRUD plumbing for the entity repositories.

Every statement runs through RetryingExecutor.execute_with_retry(); no
repository touches the connection directly.
"""

import logging
import sqlite3

from db.errors import DuplicateKeyError, ValidationError
from db.utils import utc_now_iso
from models.fields import slugify

logger = logging.getLogger(__name__)

# What create() does when the slug already exists
RAISE_ON_DUPLICATE = 'raise'
IGNORE_DUPLICATE = 'ignore'


def like_pattern(query):
    """Substring LIKE pattern with %, _ and \\ escaped (use ESCAPE '\\')."""
    escaped = query.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')
    return f"%{escaped.lower()}%"


def is_unique_violation(exc):
    return isinstance(exc, sqlite3.IntegrityError) and 'UNIQUE constraint failed' in str(exc)


class BaseRepository:
    model = None
    order_by = 'name COLLATE NOCASE ASC'
    duplicate_policy = RAISE_ON_DUPLICATE

    def __init__(self, executor):
        self._executor = executor

    # -- low level ---------------------------------------------------------

    def _query_all(self, sql, params=()):
        def operation(conn):
            cur = conn.execute(sql, tuple(params))
            try:
                return cur.fetchall()
            finally:
                cur.close()
        return self._executor.execute_with_retry(operation)

    def _query_one(self, sql, params=()):
        def operation(conn):
            cur = conn.execute(sql, tuple(params))
            try:
                return cur.fetchone()
            finally:
                cur.close()
        return self._executor.execute_with_retry(operation)

    def _execute(self, sql, params=()):
        """Run a write statement; returns (rowcount, lastrowid)."""
        def operation(conn):
            cur = conn.execute(sql, tuple(params))
            try:
                return cur.rowcount, cur.lastrowid
            finally:
                cur.close()
        return self._executor.execute_with_retry(operation)

    def _scalar(self, sql, params=()):
        row = self._query_one(sql, params)
        if not row:
            return 0
        return next(iter(row.values())) or 0

    def _to_dict(self, row):
        return self.model.from_row(row).to_dict() if row else None

    def _to_dicts(self, rows):
        return [self.model.from_row(row).to_dict() for row in rows]

    def _insert(self, columns):
        now = utc_now_iso()
        columns = dict(columns, created_at=now, updated_at=now)
        names = ', '.join(columns)
        placeholders = ', '.join('?' for _ in columns)
        verb = 'INSERT OR IGNORE' if self.duplicate_policy == IGNORE_DUPLICATE else 'INSERT'
        return self._execute(
            f"{verb} INTO {self.model.TABLE} ({names}) VALUES ({placeholders})",
            tuple(columns.values())
        )

    def get_all(self):
        return self._to_dicts(self._query_all(
            f"SELECT * FROM {self.model.TABLE} ORDER BY {self.order_by}"
        ))

    def count(self):
        return self._scalar(f"SELECT COUNT(*) AS count FROM {self.model.TABLE}")


class SlugRepository(BaseRepository):
    """CRUD for entities whose external key is a unique slug."""

    slug_source = 'name'

    def get_by_slug(self, slug):
        return self._to_dict(self._query_one(
            f"SELECT * FROM {self.model.TABLE} WHERE slug = ?", (slug,)
        ))

    def _apply_defaults(self, columns):
        """Hook for entity-specific defaults on create."""
        return columns

    def create(self, data):
        """Insert a row and return it as a dict.

        A duplicate slug raises DuplicateKeyError, unless the repository's
        duplicate_policy is IGNORE_DUPLICATE, in which case the existing
        row is returned unchanged.
        """
        columns = self.model.columns_from_payload(data)
        slug = columns.get('slug') or slugify(columns.get(self.slug_source))
        if not slug:
            raise ValidationError(f"Cannot derive a slug for this {self.model.ENTITY}", field='slug')
        columns['slug'] = slug
        columns = self._apply_defaults(columns)

        try:
            rowcount, _ = self._insert(columns)
        except sqlite3.IntegrityError as e:
            if is_unique_violation(e):
                raise DuplicateKeyError(self.model.ENTITY, slug) from e
            raise

        if rowcount == 0:
            logger.debug("%s '%s' already exists, left unchanged", self.model.ENTITY, slug)
        else:
            logger.info("Created %s '%s'", self.model.ENTITY, slug)
        return self.get_by_slug(slug)

    def update(self, slug, patch):
        """Apply a partial update and return the updated row, or None.

        Only the columns present in patch are written; updated_at is
        always re-stamped.
        """
        columns = self.model.columns_from_payload(patch or {}, partial=True)
        if 'slug' in columns and not columns['slug']:
            del columns['slug']
        new_slug = columns.get('slug', slug)

        assignments = [f"{column} = ?" for column in columns]
        assignments.append("updated_at = ?")
        params = list(columns.values()) + [utc_now_iso(), slug]

        try:
            rowcount, _ = self._execute(
                f"UPDATE {self.model.TABLE} SET {', '.join(assignments)} WHERE slug = ?",
                params
            )
        except sqlite3.IntegrityError as e:
            if is_unique_violation(e):
                raise DuplicateKeyError(self.model.ENTITY, new_slug) from e
            raise

        if rowcount == 0:
            return None
        return self.get_by_slug(new_slug)

    def delete(self, slug):
        rowcount, _ = self._execute(f"DELETE FROM {self.model.TABLE} WHERE slug = ?", (slug,))
        if rowcount:
            logger.info("Deleted %s '%s'", self.model.ENTITY, slug)
        return rowcount > 0
