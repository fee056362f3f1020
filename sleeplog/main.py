"""
main.py
-------
Entry point for the sleeplog store.

Responsibilities:
    - Open (and on first run, create and initialize) the configured store.
    - Report what it holds.
    - Close the connection pool on the way out.

Run with:
    python -m sleeplog.main
"""

from sleeplog.config import DB_FOREIGN_KEYS, DB_MAX_CONNECTIONS, DB_PATH, DB_TIMEOUT
from sleeplog.db.init_db import get_schema_version, init_store
from sleeplog.exceptions import StoreError
from sleeplog.services.sleep_service import SleepManager
from sleeplog.utils.logger import get_logger

logger = get_logger(__name__)


def main() -> int:
    """Open the store, log a summary and close it. Returns an exit code."""

    # ── 1. Store setup ────────────────────────────────────
    logger.info(f"Opening store at {DB_PATH}...")
    try:
        pool = init_store(DB_PATH, DB_MAX_CONNECTIONS, DB_TIMEOUT, DB_FOREIGN_KEYS)
    except StoreError as e:
        logger.error(f"Unable to open store: {e}")
        return 1

    # ── 2. Summary ────────────────────────────────────────
    try:
        manager = SleepManager(pool)
        sleeps = manager.get_all_sleeps() or []
        tags = manager.get_all_tags() or []
        logger.info(
            f"Schema v{get_schema_version(pool)}: {len(sleeps)} sleep(s), {len(tags)} tag(s), "
            f"pool of {pool.size}/{pool.max_connections} connection(s)."
        )
    finally:
        # ── 3. Cleanup ────────────────────────────────────
        pool.closeall()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
