"""
db/init_db.py
-------------
Creates the store and its schema the first time it is opened.
Initialization only ever goes from "no store" to schema version 1;
an existing store is opened as-is and never re-initialized.
Run this module directly to initialize the configured store:
    python -m sleeplog.db.init_db
"""

import os
import sqlite3

from sleeplog.db.connection import ConnectionPool, create_store, store_exists
from sleeplog.exceptions import InitializationError, StoreError
from sleeplog.utils.logger import get_logger

logger = get_logger(__name__)

SCHEMA_VERSION = 1

SCHEMA_SQL = """
BEGIN;

-- One row per night of sleep
CREATE TABLE IF NOT EXISTS sleep (
    id          INTEGER  NOT NULL PRIMARY KEY AUTOINCREMENT,
    night       TEXT     NOT NULL,
    amount      REAL     NOT NULL,
    quality     INTEGER  NOT NULL,
    created_on  DATETIME NOT NULL DEFAULT (datetime('now', 'localtime')),
    updated_on  DATETIME NOT NULL DEFAULT (datetime('now', 'localtime'))
);

-- Labels attachable to many nights; color is packed 0xRRGGBB
CREATE TABLE IF NOT EXISTS tag (
    id          INTEGER  NOT NULL PRIMARY KEY AUTOINCREMENT,
    name        TEXT     NOT NULL,
    color       INTEGER  NOT NULL,
    created_on  DATETIME NOT NULL DEFAULT (datetime('now', 'localtime')),
    updated_on  DATETIME NOT NULL DEFAULT (datetime('now', 'localtime'))
);

-- Many-to-many association between sleep and tag
CREATE TABLE IF NOT EXISTS sleep_tags (
    id          INTEGER  NOT NULL PRIMARY KEY AUTOINCREMENT,
    sleep_id    INTEGER  NOT NULL REFERENCES sleep (id) ON UPDATE CASCADE ON DELETE CASCADE,
    tag_id      INTEGER  NOT NULL REFERENCES tag (id) ON UPDATE CASCADE ON DELETE CASCADE
);

-- Free-text notes on a single night
CREATE TABLE IF NOT EXISTS comment (
    id          INTEGER  NOT NULL PRIMARY KEY AUTOINCREMENT,
    sleep_id    INTEGER  NOT NULL REFERENCES sleep (id) ON UPDATE CASCADE ON DELETE CASCADE,
    comment     TEXT     NOT NULL,
    created_on  DATETIME NOT NULL DEFAULT (datetime('now', 'localtime'))
);

CREATE INDEX IF NOT EXISTS idx_sleep_night ON sleep (night);
CREATE INDEX IF NOT EXISTS idx_sleep_tags_sleep ON sleep_tags (sleep_id);
CREATE INDEX IF NOT EXISTS idx_sleep_tags_tag ON sleep_tags (tag_id);
CREATE INDEX IF NOT EXISTS idx_comment_sleep ON comment (sleep_id);

PRAGMA user_version = 1;

COMMIT;
"""


def create_tables(pool: ConnectionPool) -> None:
    """
    Execute the schema script as a single transaction.

    Raises:
        InitializationError: If any statement fails. Nothing is left behind.
    """
    conn = pool.getconn()
    try:
        conn.executescript(SCHEMA_SQL)
        logger.info(f"Database schema v{SCHEMA_VERSION} initialized successfully.")
    except sqlite3.Error as e:
        if conn.in_transaction:
            conn.rollback()
        logger.error(f"Failed to initialize schema: {e}")
        raise InitializationError(f"schema creation failed: {e}") from e
    finally:
        pool.putconn(conn)


def get_schema_version(pool: ConnectionPool) -> int:
    """Read the schema version marker (0 for an uninitialized store)."""
    with pool.connection() as conn:
        return conn.execute("PRAGMA user_version;").fetchone()[0]


def init_store(
    db_path: str,
    max_connections: int = 4,
    timeout: float = 5.0,
    foreign_keys: bool = True,
) -> ConnectionPool:
    """
    Open the store at ``db_path``, creating and initializing it if absent.

    Existence is checked once, before anything touches the path. Only a
    store created by this call is initialized. If initialization fails the
    half-created file is removed so the next start tries again.

    Returns:
        An open ConnectionPool.

    Raises:
        StoreUnavailableError: If the store cannot be created or opened.
        InitializationError: If schema creation fails.
    """
    is_new = not store_exists(db_path)

    # validates its arguments without touching the path
    pool = ConnectionPool(db_path, max_connections, timeout, foreign_keys)

    if not is_new:
        logger.info(f"Store exists at {db_path}")
    else:
        create_store(db_path)
        try:
            create_tables(pool)
        except StoreError:
            pool.closeall()
            _discard_store(db_path)
            raise

    logger.info(f"Store opened with {pool.size} connection(s), max {max_connections}.")
    return pool


def _discard_store(db_path: str) -> None:
    for path in (db_path, f"{db_path}-journal", f"{db_path}-wal", f"{db_path}-shm"):
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.error(f"Unable to remove partially initialized store {path}: {e}")


if __name__ == "__main__":
    from sleeplog.config import DB_FOREIGN_KEYS, DB_MAX_CONNECTIONS, DB_PATH, DB_TIMEOUT

    store = init_store(DB_PATH, DB_MAX_CONNECTIONS, DB_TIMEOUT, DB_FOREIGN_KEYS)
    logger.info(f"Schema version: {get_schema_version(store)}")
    store.closeall()
