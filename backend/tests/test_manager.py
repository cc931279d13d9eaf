import os
import sqlite3
import threading

import pytest
from unittest.mock import patch

from db import paths
from db.backoff import INIT_POLICY, BackoffPolicy
from db.errors import StorageUnavailableError
from db.manager import DatabaseManager
from db.schema import DEFAULT_AUTHORS, DEFAULT_CATEGORIES, bootstrap_schema
from db.utils import utc_now_iso


def _count(conn, table):
    return conn.execute(f"SELECT COUNT(*) AS count FROM {table}").fetchone()['count']


class TestInitialize:

    def test_fresh_boot_creates_schema_and_seeds(self, manager, db_path):
        conn = manager.initialize()

        assert manager.is_initialized
        assert manager.path == db_path
        assert os.path.exists(db_path)
        assert _count(conn, 'categories') == len(DEFAULT_CATEGORIES) == 8
        assert _count(conn, 'authors') == len(DEFAULT_AUTHORS) == 2
        for table in ('posts', 'tags', 'media'):
            assert _count(conn, table) == 0

    def test_pragmas_are_applied(self, manager):
        conn = manager.initialize()
        assert conn.execute("PRAGMA journal_mode").fetchone()['journal_mode'] == 'wal'
        assert conn.execute("PRAGMA foreign_keys").fetchone()['foreign_keys'] == 1
        assert conn.execute("PRAGMA busy_timeout").fetchone()['timeout'] == 5000

    def test_write_check_table_is_removed(self, manager):
        conn = manager.initialize()
        row = conn.execute(
            "SELECT name FROM sqlite_master WHERE name = '_write_check'"
        ).fetchone()
        assert row is None

    def test_initialize_is_idempotent(self, manager):
        first = manager.initialize()
        assert manager.initialize() is first
        assert manager.get_connection() is first

    def test_seeds_do_not_overwrite_existing_rows(self, manager):
        conn = manager.initialize()
        conn.execute("UPDATE categories SET name = 'Renamed' WHERE slug = 'devops'")

        bootstrap_schema(conn, utc_now_iso())

        row = conn.execute("SELECT name FROM categories WHERE slug = 'devops'").fetchone()
        assert row['name'] == 'Renamed'
        assert _count(conn, 'categories') == 8

    def test_close_then_reinitialize(self, manager, db_path):
        conn = manager.initialize()
        conn.execute(
            "INSERT INTO tags (slug, name, created_at, updated_at) VALUES ('x', 'x', 'now', 'now')"
        )
        manager.close()

        assert not manager.is_initialized
        assert manager.path is None

        reopened = manager.initialize()
        assert reopened is not conn
        assert _count(reopened, 'tags') == 1

    def test_close_without_connection_is_a_no_op(self, manager):
        manager.close()
        assert not manager.is_initialized

    def test_concurrent_callers_share_one_connection(self, manager):
        results = []
        barrier = threading.Barrier(8)

        def worker():
            barrier.wait()
            results.append(manager.initialize())

        with patch.object(DatabaseManager, '_open', autospec=True,
                          side_effect=DatabaseManager._open) as opener:
            threads = [threading.Thread(target=worker) for _ in range(8)]
            for t in threads:
                t.start()
            for t in threads:
                t.join()

        assert len(results) == 8
        assert len({id(conn) for conn in results}) == 1
        assert opener.call_count == 1


class TestInitializeFailures:

    def test_exhausted_attempts_raise_storage_unavailable(self, db_path):
        sleeps = []
        manager = DatabaseManager(path_resolver=lambda: db_path, sleep=sleeps.append)
        error = sqlite3.OperationalError('unable to open database file')

        with patch.object(DatabaseManager, '_open', side_effect=error) as opener:
            with pytest.raises(StorageUnavailableError) as exc_info:
                manager.initialize()

        assert opener.call_count == INIT_POLICY.max_attempts == 3
        assert exc_info.value.cause is error
        assert 'unable to open database file' in str(exc_info.value)
        # 2s then 4s between the three attempts
        assert sleeps == [2.0, 4.0]
        assert not manager.is_initialized

    def test_recovers_when_a_later_attempt_succeeds(self, db_path):
        manager = DatabaseManager(
            path_resolver=lambda: db_path,
            init_policy=BackoffPolicy(max_attempts=3, base_delay=0),
            sleep=lambda seconds: None,
        )
        real_open = DatabaseManager._open
        calls = []

        def flaky_open(self):
            calls.append(1)
            if len(calls) == 1:
                raise sqlite3.OperationalError('disk I/O error')
            return real_open(self)

        with patch.object(DatabaseManager, '_open', flaky_open):
            conn = manager.initialize()

        assert len(calls) == 2
        assert _count(conn, 'categories') == 8
        manager.close()

    def test_permission_failure_falls_back_to_temp_dir(self, tmp_path):
        fallback = tmp_path / 'fallback'
        fallback.mkdir()
        fallback_db = str(fallback / 'blog.db')
        manager = DatabaseManager(path_resolver=lambda: '/not-writable/blog.db',
                                  sleep=lambda seconds: None)

        with patch.object(paths, '_check_directory',
                          side_effect=[PermissionError('denied'), None]), \
             patch.object(paths, 'fallback_path', return_value=fallback_db):
            manager.initialize()

        assert manager.path == fallback_db
        assert os.path.exists(fallback_db)
        manager.close()


class TestLegacyMigration:

    def test_legacy_database_is_copied_on_first_boot(self, tmp_path, db_path):
        legacy = str(tmp_path / 'legacy.db')
        conn = sqlite3.connect(legacy, isolation_level=None)
        bootstrap_schema(conn, utc_now_iso())
        conn.execute(
            "INSERT INTO tags (slug, name, created_at, updated_at) VALUES ('old', 'Old', 'now', 'now')"
        )
        conn.close()

        manager = DatabaseManager(path_resolver=lambda: db_path, legacy_path=legacy)
        migrated = manager.initialize()

        assert migrated.execute("SELECT name FROM tags WHERE slug = 'old'").fetchone()['name'] == 'Old'
        manager.close()

    def test_existing_target_is_not_overwritten(self, tmp_path, db_path, manager):
        manager.initialize()
        manager.close()

        legacy = tmp_path / 'legacy.db'
        legacy.write_bytes(b'not a database')

        other = DatabaseManager(path_resolver=lambda: db_path, legacy_path=str(legacy))
        conn = other.initialize()
        assert _count(conn, 'categories') == 8
        other.close()
