import logging

logger = logging.getLogger(__name__)

TABLES = (
    """
    CREATE TABLE IF NOT EXISTS posts (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        slug TEXT UNIQUE NOT NULL,
        title TEXT NOT NULL,
        content TEXT NOT NULL,
        excerpt TEXT,
        date TEXT NOT NULL,
        author TEXT,
        author_image TEXT,
        cover_image TEXT,
        category TEXT,
        tags TEXT DEFAULT '[]',
        draft INTEGER NOT NULL DEFAULT 1,
        featured INTEGER NOT NULL DEFAULT 0,
        reading_time TEXT,
        views INTEGER NOT NULL DEFAULT 0,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS authors (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        slug TEXT UNIQUE NOT NULL,
        name TEXT NOT NULL,
        bio TEXT,
        avatar TEXT,
        email TEXT,
        twitter TEXT,
        linkedin TEXT,
        github TEXT,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS categories (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        slug TEXT UNIQUE NOT NULL,
        name TEXT NOT NULL,
        description TEXT,
        color TEXT,
        icon TEXT,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS tags (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        slug TEXT UNIQUE NOT NULL,
        name TEXT NOT NULL,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS media (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        filename TEXT NOT NULL,
        original_name TEXT,
        path TEXT,
        url TEXT NOT NULL,
        mime_type TEXT,
        size INTEGER DEFAULT 0,
        width INTEGER,
        height INTEGER,
        alt_text TEXT,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    );
    """,
)

INDEXES = (
    "CREATE INDEX IF NOT EXISTS idx_posts_date ON posts(date);",
    "CREATE INDEX IF NOT EXISTS idx_posts_category ON posts(category);",
    "CREATE INDEX IF NOT EXISTS idx_posts_draft_featured ON posts(draft, featured);",
    "CREATE INDEX IF NOT EXISTS idx_media_created_at ON media(created_at);",
    "CREATE INDEX IF NOT EXISTS idx_media_filename ON media(filename);",
)

DEFAULT_AUTHORS = (
    {
        'slug': 'alessandro-dantoni',
        'name': "Alessandro D'Antoni",
        'bio': 'Full-stack developer e technical writer appassionato di tecnologie web.',
        'avatar': '/images/authors/alessandro_avatar-min.webp',
        'email': 'alessandro@almastack.it',
        'twitter': '@alessandro',
        'linkedin': 'https://linkedin.com/in/alessandro-dantoni',
        'github': 'https://github.com/alessandro',
    },
    {
        'slug': 'manfredi-marrone',
        'name': 'Manfredi Mauro Marrone',
        'bio': 'Developer e specialista in architetture cloud e sistemi distribuiti.',
        'avatar': '/images/authors/manfredi_avatar-min.webp',
        'email': 'manfredi@almastack.it',
        'twitter': '@manfredi',
        'linkedin': 'https://linkedin.com/in/manfredi-marrone',
        'github': 'https://github.com/manfredi',
    },
)

DEFAULT_CATEGORIES = (
    {'slug': 'cyber-security', 'name': 'Cyber Security', 'description': 'Articoli su sicurezza informatica e best practices', 'color': '#DC2626', 'icon': '🔒'},
    {'slug': 'web-development', 'name': 'Web Development', 'description': 'Guide e tutorial sullo sviluppo web moderno', 'color': '#3B82F6', 'icon': '🚀'},
    {'slug': 'cloud-computing', 'name': 'Cloud Computing', 'description': 'AWS, Azure, GCP e architetture cloud', 'color': '#10B981', 'icon': '☁️'},
    {'slug': 'ai-ml', 'name': 'AI & Machine Learning', 'description': 'Intelligenza artificiale e machine learning', 'color': '#8B5CF6', 'icon': '🤖'},
    {'slug': 'devops', 'name': 'DevOps', 'description': 'CI/CD, containerizzazione e automazione', 'color': '#F59E0B', 'icon': '⚙️'},
    {'slug': 'database', 'name': 'Database', 'description': 'SQL, NoSQL e ottimizzazione database', 'color': '#06B6D4', 'icon': '🗄️'},
    {'slug': 'mobile-dev', 'name': 'Mobile Development', 'description': 'React Native, Flutter e sviluppo mobile', 'color': '#EC4899', 'icon': '📱'},
    {'slug': 'best-practices', 'name': 'Best Practices', 'description': 'Pattern, principi e metodologie', 'color': '#84CC16', 'icon': '✨'},
)


def _seed(cur, table, rows, now):
    for row in rows:
        columns = list(row.keys()) + ['created_at', 'updated_at']
        placeholders = ', '.join('?' for _ in columns)
        cur.execute(
            f"INSERT OR IGNORE INTO {table} ({', '.join(columns)}) VALUES ({placeholders})",
            tuple(row.values()) + (now, now)
        )


def bootstrap_schema(conn, now):
    """Create tables, indexes and seed rows in one transaction.

    Seeds use INSERT OR IGNORE so existing rows with the same slug are
    left untouched. Expects an autocommit connection (isolation_level=None).
    """
    cur = conn.cursor()
    cur.execute("BEGIN IMMEDIATE")
    try:
        for statement in TABLES:
            cur.execute(statement)
        for statement in INDEXES:
            cur.execute(statement)

        _seed(cur, 'authors', DEFAULT_AUTHORS, now)
        _seed(cur, 'categories', DEFAULT_CATEGORIES, now)

        cur.execute("COMMIT")
    except Exception:
        if conn.in_transaction:
            cur.execute("ROLLBACK")
        raise
    finally:
        cur.close()

    logger.debug("Schema bootstrap complete")
