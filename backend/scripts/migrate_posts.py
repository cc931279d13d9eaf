"""Import MDX posts from content/blog into the database.

Run with: python scripts/migrate_posts.py [content_dir]
Existing slugs are skipped, so the script can be re-run safely.
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import glob
import logging
from datetime import date

from config import Config
from db.errors import DuplicateKeyError
from db.store import BlogStore
from models.fields import split_tags
from services import estimate_reading_time, parse_front_matter, tag_payloads

logger = logging.getLogger(__name__)

SUCCESS = 'success'
SKIPPED = 'skipped'
ERROR = 'error'


def find_post_files(content_dir):
    return sorted(glob.glob(os.path.join(content_dir, '**', '*.mdx'), recursive=True))


def slug_from_path(file_path):
    return os.path.splitext(os.path.basename(file_path))[0]


def migrate_file(store, file_path):
    """Import one file; returns (status, slug, error message or None)"""
    slug = slug_from_path(file_path)
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            source = f.read()
        data, content = parse_front_matter(source, origin=file_path)

        if store.posts.get_by_slug(slug):
            print(f"  Post '{slug}' already exists in database, skipping...")
            return SKIPPED, slug, None

        tags = split_tags(data.get('tags'))
        if isinstance(tags, list):
            store.tags.create_many(tag_payloads(tags))

        store.posts.create({
            'slug': slug,
            'title': data.get('title') or 'Untitled',
            'content': content,
            'excerpt': data.get('excerpt') or '',
            'date': data.get('date') or date.today().isoformat(),
            'author': data.get('author') or 'Anonymous',
            'authorImage': data.get('authorImage'),
            'coverImage': data.get('coverImage'),
            'category': data.get('category') or 'Uncategorized',
            'tags': tags,
            'draft': data.get('draft') or False,
            'featured': data.get('featured') or False,
            'readingTime': estimate_reading_time(content),
        })
        print(f"  Successfully migrated: {slug}")
        return SUCCESS, slug, None
    except DuplicateKeyError:
        # created by someone else between the check and the insert
        print(f"  Post '{slug}' already exists in database, skipping...")
        return SKIPPED, slug, None
    except Exception as e:
        logger.exception("Error migrating %s", file_path)
        print(f"  Error migrating {file_path}: {e}")
        return ERROR, slug, str(e)


def migrate_directory(store, content_dir):
    """Import every .mdx file under content_dir; returns per-status slug lists"""
    results = {SUCCESS: [], SKIPPED: [], ERROR: []}

    file_paths = find_post_files(content_dir)
    if not file_paths:
        print(f"No MDX files found in {content_dir}")
        return results

    print(f"Found {len(file_paths)} MDX files to process")
    for file_path in file_paths:
        status, slug, _ = migrate_file(store, file_path)
        results[status].append(slug)
    return results


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    content_dir = argv[0] if argv else Config.CONTENT_PATH

    logging.basicConfig(level=Config.LOG_LEVEL)
    store = BlogStore.from_config(vars(Config))
    try:
        results = migrate_directory(store, content_dir)
    finally:
        store.close()

    print("Migration summary:")
    print(f"  Migrated: {len(results[SUCCESS])}")
    print(f"  Skipped:  {len(results[SKIPPED])}")
    print(f"  Errors:   {len(results[ERROR])}")
    return 1 if results[ERROR] else 0


if __name__ == '__main__':
    sys.exit(main())
