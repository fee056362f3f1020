"""
db/connection.py
----------------
Manages the SQLite connection pool.
Connections come from a SQLAlchemy ``QueuePool`` bounded at
``max_connections`` and are handed out as raw sqlite3 connections, one
per call, so the pool is safe to share between threads.
"""

import os
import sqlite3
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import event
from sqlalchemy import exc as sa_exc
from sqlalchemy.pool import PoolProxiedConnection, QueuePool

from sleeplog.exceptions import ConstraintViolationError, StoreError, StoreUnavailableError
from sleeplog.utils.logger import get_logger

logger = get_logger(__name__)


def to_store_error(e: sqlite3.Error) -> StoreError:
    """Map a sqlite3 exception onto the sleeplog hierarchy."""
    if isinstance(e, sqlite3.IntegrityError):
        return ConstraintViolationError(str(e))
    return StoreError(str(e))


def store_exists(db_path: str) -> bool:
    """Return True if a store file already exists at ``db_path``."""
    return os.path.isfile(db_path)


def create_store(db_path: str) -> None:
    """
    Create an empty store file at ``db_path``.

    Raises:
        StoreUnavailableError: If the file cannot be created.
    """
    try:
        parent = os.path.dirname(os.path.abspath(db_path))
        os.makedirs(parent, exist_ok=True)
        sqlite3.connect(db_path).close()
    except (OSError, sqlite3.Error) as e:
        logger.error(f"Unable to create store at {db_path}: {e}")
        raise StoreUnavailableError(f"unable to create store at {db_path}: {e}") from e
    logger.info(f"Store created at {db_path}")


class ConnectionPool:
    """
    Bounded pool of SQLite connections to one store file.

    Nothing is opened until the first ``getconn``.

    Args:
        db_path: Path to the SQLite file.
        max_connections: Maximum number of connections ever opened.
        timeout: Seconds to wait for a free connection, also used as
            SQLite's busy timeout.
        foreign_keys: Enable ``PRAGMA foreign_keys`` on every connection.
    """

    def __init__(
        self,
        db_path: str,
        max_connections: int = 4,
        timeout: float = 5.0,
        foreign_keys: bool = True,
    ):
        if db_path == ":memory:":
            raise ValueError("in-memory stores cannot be pooled")
        if max_connections < 1:
            raise ValueError("max_connections must be at least 1")
        self.db_path = db_path
        self.max_connections = max_connections
        self.timeout = timeout
        self.foreign_keys = foreign_keys
        self.enforces_foreign_keys = foreign_keys
        self._closed = False
        self._checked_out: dict[int, PoolProxiedConnection] = {}
        self._pool = QueuePool(
            lambda: sqlite3.connect(db_path, timeout=timeout, check_same_thread=False),
            pool_size=max_connections,
            max_overflow=0,
            timeout=timeout,
            use_lifo=True,
        )
        event.listen(self._pool, "connect", self._on_connect)

    @property
    def size(self) -> int:
        """Number of connections currently open."""
        return self._pool.checkedin() + self._pool.checkedout()

    @property
    def closed(self) -> bool:
        return self._closed

    def _on_connect(self, dbapi_connection: sqlite3.Connection, _record) -> None:
        if not self.foreign_keys:
            return
        dbapi_connection.execute("PRAGMA foreign_keys = ON;")
        # builds without foreign key support silently ignore the pragma
        enabled = dbapi_connection.execute("PRAGMA foreign_keys;").fetchone()
        if not enabled or enabled[0] != 1:
            logger.warning("Store does not enforce foreign keys; cascades run explicitly.")
            self.enforces_foreign_keys = False

    def getconn(self) -> sqlite3.Connection:
        """
        Get an exclusive connection from the pool.

        Blocks up to ``timeout`` seconds when every connection is in use.

        Raises:
            StoreUnavailableError: If the pool is closed, the store cannot be
                opened, or no connection became free in time.
        """
        if self._closed:
            raise StoreUnavailableError("connection pool is closed")
        try:
            proxy = self._pool.connect()
        except sa_exc.TimeoutError:
            raise StoreUnavailableError(
                f"no connection available after {self.timeout}s "
                f"({self.max_connections} in use)"
            ) from None
        except sqlite3.Error as e:
            logger.error(f"Failed to open connection to {self.db_path}: {e}")
            raise StoreUnavailableError(f"unable to open {self.db_path}: {e}") from e
        conn = proxy.dbapi_connection
        self._checked_out[id(conn)] = proxy
        return conn

    def putconn(self, conn: sqlite3.Connection) -> None:
        """Return a connection back to the pool; any open transaction is rolled back."""
        proxy = self._checked_out.pop(id(conn), None)
        if proxy is None:
            return
        proxy.close()
        if self._closed:
            self._pool.dispose()

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        """Borrow a connection for the duration of a ``with`` block."""
        conn = self.getconn()
        try:
            yield conn
        finally:
            self.putconn(conn)

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """
        Borrow a connection and run the block as one transaction.

        Commits on normal exit and rolls back if the block raises.

        Raises:
            StoreError: If the commit itself fails.
        """
        with self.connection() as conn:
            try:
                yield conn
            except BaseException:
                conn.rollback()
                raise
            try:
                conn.commit()
            except sqlite3.Error as e:
                conn.rollback()
                logger.error(f"Commit on {self.db_path} failed: {e}")
                raise to_store_error(e) from e

    def closeall(self) -> None:
        """Close all connections in the pool."""
        if self._closed:
            return
        self._closed = True
        self._pool.dispose()
        logger.info(f"Connection pool for {self.db_path} closed.")
