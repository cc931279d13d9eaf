import os
from datetime import timedelta
from dotenv import load_dotenv

load_dotenv()

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'
    JWT_SECRET_KEY = os.environ.get('JWT_SECRET_KEY') or SECRET_KEY
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(days=7)
    ADMIN_PASSWORD = os.environ.get('ADMIN_PASSWORD') or 'your-secure-password-here'
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()

    # Storage: DATABASE_PATH overrides every platform convention (see db/paths.py)
    DATABASE_PATH = os.environ.get('DATABASE_PATH')
    LEGACY_DATABASE_PATH = os.environ.get('LEGACY_DATABASE_PATH')
    DB_BUSY_TIMEOUT_MS = int(os.environ.get('DB_BUSY_TIMEOUT_MS', 5000))
    DB_INIT_ATTEMPTS = int(os.environ.get('DB_INIT_ATTEMPTS', 3))
    DB_INIT_BACKOFF_SECONDS = float(os.environ.get('DB_INIT_BACKOFF_SECONDS', 2.0))
    DB_RETRY_ATTEMPTS = int(os.environ.get('DB_RETRY_ATTEMPTS', 3))
    DB_RETRY_BACKOFF_SECONDS = float(os.environ.get('DB_RETRY_BACKOFF_SECONDS', 0.1))

    # Media uploads
    MAX_CONTENT_LENGTH = 10 * 1024 * 1024  # 10MB max upload
    UPLOAD_PATH = os.environ.get('UPLOAD_PATH') or os.path.join(os.path.dirname(os.path.dirname(__file__)), 'public', 'images', 'blog')
    UPLOAD_URL_PREFIX = os.environ.get('UPLOAD_URL_PREFIX', '/images/blog')
    ALLOWED_MEDIA_TYPES = ('image/jpeg', 'image/png', 'image/gif', 'image/webp', 'image/svg+xml')

    # Blog content used by scripts/migrate_posts.py
    CONTENT_PATH = os.environ.get('CONTENT_PATH') or os.path.join(os.path.dirname(os.path.dirname(__file__)), 'content', 'blog')
