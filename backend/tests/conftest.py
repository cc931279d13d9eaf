import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import pytest

from app import create_app
from db.backoff import BackoffPolicy
from db.executor import RetryingExecutor
from db.manager import DatabaseManager
from db.store import BlogStore

ADMIN_PASSWORD = 'test-password'


@pytest.fixture
def app(tmp_path):
    """Create an app backed by a fresh database file"""
    app = create_app({
        'TESTING': True,
        'DATABASE_PATH': str(tmp_path / 'blog.db'),
        'LEGACY_DATABASE_PATH': str(tmp_path / 'legacy.db'),
        'DB_INIT_BACKOFF_SECONDS': 0,
        'DB_RETRY_BACKOFF_SECONDS': 0,
        'UPLOAD_PATH': str(tmp_path / 'uploads'),
        'ADMIN_PASSWORD': ADMIN_PASSWORD,
        'JWT_SECRET_KEY': 'test-jwt-secret-key-that-is-long-enough-for-hs256',
    })
    yield app
    app.extensions['blog_store'].close()


@pytest.fixture
def client(app):
    """Create test client"""
    with app.test_client() as client:
        yield client


@pytest.fixture
def store(app):
    return app.extensions['blog_store']


@pytest.fixture
def auth_headers(client):
    response = client.post('/api/admin/auth/login', json={'password': ADMIN_PASSWORD})
    token = response.get_json()['access_token']
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / 'data' / 'blog.db')


@pytest.fixture
def manager(db_path):
    """A manager that never sleeps between init attempts"""
    manager = DatabaseManager(
        path_resolver=lambda: db_path,
        init_policy=BackoffPolicy(max_attempts=3, base_delay=0),
        sleep=lambda seconds: None,
    )
    yield manager
    manager.close()


@pytest.fixture
def standalone_store(manager):
    """A BlogStore without a Flask app"""
    executor = RetryingExecutor(manager, policy=BackoffPolicy(max_attempts=3, base_delay=0),
                                sleep=lambda seconds: None)
    return BlogStore(manager, executor)
