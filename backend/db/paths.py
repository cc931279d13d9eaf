"""Database file location.

resolve_database_path() is a pure function of the environment; the
filesystem helpers below it are used by DatabaseManager during init.
"""

import logging
import os
import shutil
import tempfile
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

DATABASE_FILENAME = 'blog.db'
DEV_DATABASE_FILENAME = 'blog.dev.db'
CONTAINER_DATA_DIR = '/data'
FALLBACK_DIR_NAME = 'almastack'

SERVERLESS_MARKERS = ('NETLIFY', 'VERCEL', 'AWS_LAMBDA_FUNCTION_NAME')
CONTAINER_MARKERS = ('CONTAINER', 'DOCKER', 'RENDER')


def _is_production(environ: Mapping[str, str]) -> bool:
    env = environ.get('APP_ENV') or environ.get('FLASK_ENV') or ''
    return env.lower() == 'production'


def resolve_database_path(environ: Optional[Mapping[str, str]] = None,
                          cwd: Optional[str] = None,
                          override: Optional[str] = None) -> str:
    """Return the database file path for the given environment.

    Precedence: explicit override (argument, then DATABASE_PATH) ->
    serverless temp dir -> container data dir -> production working
    directory -> development working directory.
    """
    if environ is None:
        environ = os.environ
    if cwd is None:
        cwd = os.getcwd()

    explicit = override or environ.get('DATABASE_PATH')
    if explicit:
        return explicit

    if any(environ.get(marker) for marker in SERVERLESS_MARKERS):
        tmp_dir = environ.get('TMPDIR') or '/tmp'
        return os.path.join(tmp_dir, DATABASE_FILENAME)

    if any(environ.get(marker) for marker in CONTAINER_MARKERS):
        return os.path.join(CONTAINER_DATA_DIR, DATABASE_FILENAME)

    if _is_production(environ):
        return os.path.join(cwd, 'data', DATABASE_FILENAME)

    return os.path.join(cwd, 'data', DEV_DATABASE_FILENAME)


def resolve_legacy_path(environ: Optional[Mapping[str, str]] = None,
                        cwd: Optional[str] = None) -> str:
    if environ is None:
        environ = os.environ
    if cwd is None:
        cwd = os.getcwd()
    return environ.get('LEGACY_DATABASE_PATH') or os.path.join(cwd, DATABASE_FILENAME)


def fallback_path(db_path: str) -> str:
    return os.path.join(tempfile.gettempdir(), FALLBACK_DIR_NAME, os.path.basename(db_path))


def _check_directory(directory: str) -> None:
    os.makedirs(directory, exist_ok=True)
    if not os.access(directory, os.W_OK):
        raise PermissionError(f"Directory is not writable: {directory}")


def ensure_writable_directory(db_path: str) -> str:
    """Make sure the parent directory of db_path exists and is writable.

    Returns the path to use, which is a temp-dir fallback when the
    preferred directory cannot be created or written. PermissionError
    propagates only when the fallback fails too.
    """
    directory = os.path.dirname(os.path.abspath(db_path))
    try:
        _check_directory(directory)
        return db_path
    except PermissionError as e:
        alternative = fallback_path(db_path)
        logger.warning("Cannot write to %s (%s); falling back to %s", directory, e, alternative)

    _check_directory(os.path.dirname(alternative))
    return alternative


def migrate_legacy_database(legacy_path: Optional[str], target_path: str) -> bool:
    """Copy a database from legacy_path to target_path if the target is absent.

    Never overwrites. Returns True when a copy was made.
    """
    if not legacy_path:
        return False
    if os.path.abspath(legacy_path) == os.path.abspath(target_path):
        return False
    if not os.path.isfile(legacy_path) or os.path.exists(target_path):
        return False

    shutil.copy2(legacy_path, target_path)
    logger.info("Migrated legacy database %s -> %s", legacy_path, target_path)
    return True
