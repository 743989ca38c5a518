import logging
import sqlite3
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone

from flask import current_app, g

from core.errors import CollaboratorError, NotFoundError

logger = logging.getLogger(__name__)

# Columns every collection exposes. Names used in filters, ordering and
# expansion are checked against this map before they reach any SQL string.
COLLECTIONS = {
    'profiles': ('id', 'username', 'full_name', 'avatar_url', 'bio', 'is_admin',
                 'created_at', 'updated_at'),
    'categories': ('id', 'name', 'slug', 'description', 'created_at'),
    'blogs': ('id', 'title', 'slug', 'content', 'excerpt', 'featured_image', 'author_id',
              'category_id', 'status', 'admin_feedback', 'is_featured', 'view_count',
              'like_count', 'published_at', 'created_at', 'updated_at'),
    'comments': ('id', 'blog_id', 'user_id', 'parent_id', 'content', 'created_at', 'updated_at'),
    'blog_likes': ('id', 'blog_id', 'user_id', 'created_at'),
}

# (collection, foreign key column) -> referenced collection
FOREIGN_KEYS = {
    ('blogs', 'author_id'): 'profiles',
    ('blogs', 'category_id'): 'categories',
    ('comments', 'blog_id'): 'blogs',
    ('comments', 'user_id'): 'profiles',
    ('comments', 'parent_id'): 'comments',
    ('blog_likes', 'blog_id'): 'blogs',
    ('blog_likes', 'user_id'): 'profiles',
}

BOOL_COLUMNS = {'is_admin', 'is_featured'}

DEFAULT_CATEGORIES = ['Tech', 'Social', 'Education', 'Jobs', 'Health', 'Finance', 'Travel']

SCHEMA = '''
CREATE TABLE IF NOT EXISTS profiles (
    id TEXT PRIMARY KEY,
    username TEXT NOT NULL UNIQUE,
    full_name TEXT,
    avatar_url TEXT,
    bio TEXT NOT NULL DEFAULT '',
    is_admin INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS categories (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL UNIQUE,
    slug TEXT NOT NULL UNIQUE,
    description TEXT NOT NULL DEFAULT '',
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS blogs (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    slug TEXT NOT NULL UNIQUE,
    content TEXT NOT NULL DEFAULT '',
    excerpt TEXT NOT NULL DEFAULT '',
    featured_image TEXT,
    author_id TEXT NOT NULL REFERENCES profiles(id) ON DELETE CASCADE,
    category_id TEXT REFERENCES categories(id) ON DELETE SET NULL,
    status TEXT NOT NULL DEFAULT 'draft'
        CHECK (status IN ('draft', 'pending', 'approved', 'rejected', 'hidden')),
    admin_feedback TEXT NOT NULL DEFAULT '',
    is_featured INTEGER NOT NULL DEFAULT 0,
    view_count INTEGER NOT NULL DEFAULT 0 CHECK (view_count >= 0),
    like_count INTEGER NOT NULL DEFAULT 0 CHECK (like_count >= 0),
    published_at TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS comments (
    id TEXT PRIMARY KEY,
    blog_id TEXT NOT NULL REFERENCES blogs(id) ON DELETE CASCADE,
    user_id TEXT NOT NULL REFERENCES profiles(id) ON DELETE CASCADE,
    parent_id TEXT REFERENCES comments(id) ON DELETE CASCADE,
    content TEXT NOT NULL,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS blog_likes (
    id TEXT PRIMARY KEY,
    blog_id TEXT NOT NULL REFERENCES blogs(id) ON DELETE CASCADE,
    user_id TEXT NOT NULL REFERENCES profiles(id) ON DELETE CASCADE,
    created_at TEXT NOT NULL,
    UNIQUE (blog_id, user_id)
);

CREATE INDEX IF NOT EXISTS idx_blogs_status ON blogs(status);
CREATE INDEX IF NOT EXISTS idx_comments_blog ON comments(blog_id, created_at);
'''


def utcnow():
    return datetime.now(timezone.utc).isoformat()


def connect(path):
    conn = sqlite3.connect(path, timeout=30, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute('PRAGMA foreign_keys = ON')
    return conn


def get_db():
    """
    Opens a new database connection if there is none yet for the
    current application context.
    """
    if 'db' not in g:
        g.db = connect(current_app.config['DB_PATH'])
    return g.db


def get_store():
    """The record store bound to this application context's connection."""
    if 'store' not in g:
        g.store = RecordStore(get_db())
    return g.store


def close_db(exc=None):
    g.pop('store', None)
    db = g.pop('db', None)
    if db is not None:
        db.close()


def init_db(path):
    """
    Creates the schema and seeds the default categories.
    Safe to run on every start.
    """
    conn = connect(path)
    try:
        conn.executescript(SCHEMA)
        now = utcnow()
        for name in DEFAULT_CATEGORIES:
            conn.execute(
                'INSERT OR IGNORE INTO categories (id, name, slug, description, created_at) '
                'VALUES (?, ?, ?, ?, ?)',
                (str(uuid.uuid4()), name, name.lower(), '', now))
        conn.commit()
    finally:
        conn.close()
    logger.info("Database initialized at %s", path)


class RecordStore:
    """
    Collection-level access to the blog records: fetch with filters, ordering
    and related-record expansion, plus insert/update/delete.

    Each write commits on its own unless it runs inside transaction(), in
    which case the whole block commits or rolls back together. Every sqlite
    failure leaves here as a CollaboratorError (or NotFoundError when a
    foreign key points at nothing).
    """

    def __init__(self, conn):
        self.conn = conn
        self._in_transaction = False

    # --- plumbing ---

    @contextmanager
    def transaction(self):
        if self._in_transaction:
            yield self
            return
        self._in_transaction = True
        try:
            yield self
            self.conn.commit()
        except Exception:
            self.conn.rollback()
            raise
        finally:
            self._in_transaction = False

    def _execute(self, sql, params=()):
        try:
            return self.conn.execute(sql, params)
        except sqlite3.IntegrityError as e:
            self._rollback_if_autocommit()
            if 'FOREIGN KEY' in str(e):
                raise NotFoundError("Referenced record does not exist") from e
            raise CollaboratorError(f"Constraint violation: {e}") from e
        except sqlite3.Error as e:
            self._rollback_if_autocommit()
            logger.error("Store query failed: %s", e)
            raise CollaboratorError(f"Storage failure: {e}") from e

    def _rollback_if_autocommit(self):
        if not self._in_transaction:
            self.conn.rollback()

    def _commit(self):
        if not self._in_transaction:
            try:
                self.conn.commit()
            except sqlite3.Error as e:
                raise CollaboratorError(f"Storage failure: {e}") from e

    @staticmethod
    def _columns(collection):
        try:
            return COLLECTIONS[collection]
        except KeyError:
            raise CollaboratorError(f"Unknown collection: {collection}")

    def _check_column(self, collection, column):
        if column not in self._columns(collection):
            raise CollaboratorError(f"Unknown column {collection}.{column}")
        return column

    def _where(self, collection, filters):
        if not filters:
            return '', []
        clauses, params = [], []
        for column, value in filters.items():
            self._check_column(collection, column)
            if value is None:
                clauses.append(f'{column} IS NULL')
            elif isinstance(value, (list, tuple, set)):
                values = list(value)
                if not values:
                    clauses.append('0')
                    continue
                clauses.append(f"{column} IN ({', '.join('?' for _ in values)})")
                params.extend(values)
            else:
                clauses.append(f'{column} = ?')
                params.append(value)
        return ' WHERE ' + ' AND '.join(clauses), params

    def _order_by(self, collection, order):
        if not order:
            return ' ORDER BY rowid ASC'
        if isinstance(order, str) or (len(order) == 2 and order[1] in ('asc', 'desc')
                                      and isinstance(order[0], str)):
            order = [order]
        parts = []
        for item in order:
            column, direction = (item, 'asc') if isinstance(item, str) else item
            self._check_column(collection, column)
            direction = 'DESC' if direction.lower() == 'desc' else 'ASC'
            parts.append(f'{column} {direction}')
        # rowid keeps equal timestamps in insertion order
        parts.append('rowid ASC')
        return ' ORDER BY ' + ', '.join(parts)

    @staticmethod
    def _to_record(row):
        record = dict(row)
        for column in BOOL_COLUMNS & record.keys():
            record[column] = bool(record[column])
        return record

    def _expand(self, collection, records, expand):
        for name, (fk, columns) in expand.items():
            target = FOREIGN_KEYS.get((collection, fk))
            if target is None:
                raise CollaboratorError(f"No relation {collection}.{fk}")
            wanted = ['id'] + [self._check_column(target, c) for c in columns if c != 'id']
            keys = {r[fk] for r in records if r.get(fk)}
            related = {}
            if keys:
                where, params = self._where(target, {'id': keys})
                rows = self._execute(f"SELECT {', '.join(wanted)} FROM {target}{where}", params)
                related = {row['id']: self._to_record(row) for row in rows.fetchall()}
            for record in records:
                match = related.get(record.get(fk))
                if match is not None and 'id' not in columns:
                    match = {k: v for k, v in match.items() if k != 'id'}
                record[name] = match
        return records

    # --- collaborator operations ---

    def fetch(self, collection, filters=None, order=None, limit=None, expand=None):
        self._columns(collection)
        where, params = self._where(collection, filters)
        sql = f'SELECT * FROM {collection}{where}{self._order_by(collection, order)}'
        if limit is not None:
            sql += ' LIMIT ?'
            params.append(int(limit))
        records = [self._to_record(row) for row in self._execute(sql, params).fetchall()]
        if expand:
            self._expand(collection, records, expand)
        return records

    def fetch_one(self, collection, filters, expand=None):
        records = self.fetch(collection, filters, limit=1, expand=expand)
        if not records:
            raise NotFoundError(f"{collection} record not found")
        return records[0]

    def exists(self, collection, filters):
        return bool(self.fetch(collection, filters, limit=1))

    def count(self, collection, filters=None):
        self._columns(collection)
        where, params = self._where(collection, filters)
        return self._execute(f'SELECT COUNT(*) FROM {collection}{where}', params).fetchone()[0]

    def insert(self, collection, record):
        columns = self._columns(collection)
        record = dict(record)
        record.setdefault('id', str(uuid.uuid4()))
        now = utcnow()
        for stamp in ('created_at', 'updated_at'):
            if stamp in columns:
                record.setdefault(stamp, now)
        names = [self._check_column(collection, c) for c in record]
        self._execute(
            f"INSERT INTO {collection} ({', '.join(names)}) VALUES ({', '.join('?' for _ in names)})",
            [record[c] for c in names])
        self._commit()
        return self.fetch_one(collection, {'id': record['id']})

    def update(self, collection, filters, patch):
        columns = self._columns(collection)
        patch = dict(patch)
        if 'updated_at' in columns:
            patch.setdefault('updated_at', utcnow())
        assignments = ', '.join(f'{self._check_column(collection, c)} = ?' for c in patch)
        where, params = self._where(collection, filters)
        cursor = self._execute(f'UPDATE {collection} SET {assignments}{where}',
                               list(patch.values()) + params)
        self._commit()
        return cursor.rowcount

    def increment(self, collection, filters, column, by=1):
        """Atomic in-place counter change, never dropping below zero."""
        self._check_column(collection, column)
        where, params = self._where(collection, filters)
        cursor = self._execute(
            f'UPDATE {collection} SET {column} = MAX(0, {column} + ?){where}', [by] + params)
        self._commit()
        return cursor.rowcount

    def delete(self, collection, filters):
        self._columns(collection)
        where, params = self._where(collection, filters)
        cursor = self._execute(f'DELETE FROM {collection}{where}', params)
        self._commit()
        return cursor.rowcount
