"""
repositories/base.py
--------------------
Shared plumbing for the table repositories: borrowing a pooled connection,
committing or rolling back, and translating sqlite3 errors into the
sleeplog exception hierarchy.
"""

import sqlite3
from typing import Any, Optional, Sequence

from sleeplog.db.connection import ConnectionPool, to_store_error
from sleeplog.exceptions import NotFoundError
from sleeplog.utils.logger import get_logger

logger = get_logger(__name__)


class BaseRepository:
    """
    Base class for single-table repositories.

    Write methods accept an optional ``conn``; when given, the statement
    joins the caller's transaction and is neither committed nor rolled
    back here.
    """

    table: str = ""

    def __init__(self, pool: ConnectionPool):
        self.pool = pool

    def _fetch_all(self, sql: str, params: Sequence[Any] = ()) -> list[tuple]:
        with self.pool.connection() as conn:
            try:
                return conn.execute(sql, params).fetchall()
            except sqlite3.Error as e:
                logger.error(f"Query on {self.table} failed: {e}")
                raise to_store_error(e) from e

    def _fetch_one(self, sql: str, params: Sequence[Any], row_id: int) -> tuple:
        with self.pool.connection() as conn:
            try:
                row = conn.execute(sql, params).fetchone()
            except sqlite3.Error as e:
                logger.error(f"Query on {self.table} failed: {e}")
                raise to_store_error(e) from e
        if row is None:
            raise NotFoundError(f"no {self.table} row with id {row_id}")
        return row

    def _write(
        self,
        sql: str,
        params: Sequence[Any],
        conn: Optional[sqlite3.Connection] = None,
    ) -> sqlite3.Cursor:
        """Execute one INSERT/UPDATE/DELETE and return its cursor."""
        owned = conn is None
        if owned:
            conn = self.pool.getconn()
        try:
            cur = conn.execute(sql, params)
            if owned:
                conn.commit()
            return cur
        except sqlite3.Error as e:
            if owned:
                conn.rollback()
            logger.error(f"Write to {self.table} failed: {e}")
            raise to_store_error(e) from e
        finally:
            if owned:
                self.pool.putconn(conn)
