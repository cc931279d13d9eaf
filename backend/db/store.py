"""Process-scoped context object wiring the connection to the repositories.

create_app() builds one BlogStore and registers it on the Flask app;
handlers reach it with get_store().
"""

import logging
import signal
import threading

from flask import current_app

from db.backoff import BackoffPolicy
from db.executor import RetryingExecutor
from db.manager import DatabaseManager
from db.paths import resolve_database_path, resolve_legacy_path
from repositories import (
    AuthorRepository,
    CategoryRepository,
    MediaRepository,
    PostRepository,
    StatsRepository,
    TagRepository,
)

logger = logging.getLogger(__name__)

EXTENSION_KEY = 'blog_store'


class BlogStore:
    def __init__(self, manager, executor):
        self.manager = manager
        self.executor = executor
        self.posts = PostRepository(executor)
        self.authors = AuthorRepository(executor)
        self.categories = CategoryRepository(executor)
        self.tags = TagRepository(executor)
        self.media = MediaRepository(executor)
        self.stats = StatsRepository(self.posts, self.authors, self.categories,
                                     self.tags, self.media)

    @classmethod
    def from_config(cls, config):
        """Build a store from a Flask config mapping (or Config attributes)."""
        override = config.get('DATABASE_PATH')
        manager = DatabaseManager(
            path_resolver=lambda: resolve_database_path(override=override),
            legacy_path=config.get('LEGACY_DATABASE_PATH') or resolve_legacy_path(),
            busy_timeout_ms=config.get('DB_BUSY_TIMEOUT_MS', 5000),
            init_policy=BackoffPolicy(
                max_attempts=config.get('DB_INIT_ATTEMPTS', 3),
                base_delay=config.get('DB_INIT_BACKOFF_SECONDS', 2.0),
            ),
        )
        executor = RetryingExecutor(
            manager,
            policy=BackoffPolicy(
                max_attempts=config.get('DB_RETRY_ATTEMPTS', 3),
                base_delay=config.get('DB_RETRY_BACKOFF_SECONDS', 0.1),
            ),
        )
        return cls(manager, executor)

    def initialize(self):
        return self.manager.initialize()

    def close(self):
        self.manager.close()

    def init_app(self, app):
        app.extensions[EXTENSION_KEY] = self


def get_store():
    """Return the BlogStore of the current Flask application."""
    return current_app.extensions[EXTENSION_KEY]


def register_shutdown_handlers(manager, signals=(signal.SIGTERM, signal.SIGINT)):
    """Close the database on termination signals, then defer to the previous handler.

    Only possible from the main thread; returns False elsewhere.
    """
    if threading.current_thread() is not threading.main_thread():
        logger.debug("Not in main thread, skipping signal handler registration")
        return False

    for signum in signals:
        previous = signal.getsignal(signum)

        def handler(received, frame, previous=previous):
            logger.info("Received signal %s, closing database", received)
            manager.close()
            if callable(previous):
                previous(received, frame)
            elif previous != signal.SIG_IGN:
                raise SystemExit(0)

        signal.signal(signum, handler)
    return True
