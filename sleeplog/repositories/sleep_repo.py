"""
repositories/sleep_repo.py
--------------------------
Data access layer for nights of sleep.
All SQL queries related to the `sleep` table live here.
"""

import sqlite3
from typing import Optional

from sleeplog.models.night import month_prefix
from sleeplog.models.sleep import Sleep
from sleeplog.repositories.base import BaseRepository
from sleeplog.utils.logger import get_logger

logger = get_logger(__name__)

_COLUMNS = "id, night, amount, quality"


class SleepRepository(BaseRepository):
    """Repository for CRUD operations on the sleep table."""

    table = "sleep"

    # ── CREATE ────────────────────────────────────────────

    def insert(self, night: str, amount: float, quality: int) -> int:
        """
        Insert a new night.

        Returns:
            The store-assigned id of the new row.

        Raises:
            ConstraintViolationError: If a required field is missing.
        """
        sql = "INSERT INTO sleep (night, amount, quality) VALUES (?, ?, ?);"
        sleep_id = self._write(sql, (night, amount, quality)).lastrowid
        logger.info(f"Added sleep #{sleep_id} for night {night}")
        return sleep_id

    # ── READ ──────────────────────────────────────────────

    def select_one(self, sleep_id: int) -> Sleep:
        """
        Fetch a single night by id.

        Raises:
            NotFoundError: If no row has that id.
        """
        sql = f"SELECT {_COLUMNS} FROM sleep WHERE id = ?;"
        return self._row_to_sleep(self._fetch_one(sql, (sleep_id,), sleep_id))

    def select_all(self) -> list[Sleep]:
        """Fetch every night ordered by id."""
        sql = f"SELECT {_COLUMNS} FROM sleep ORDER BY id;"
        return [self._row_to_sleep(r) for r in self._fetch_all(sql)]

    def select_by_month(self, month: int, year: int) -> list[Sleep]:
        """
        Fetch every night in the given month, ordered by id.

        Args:
            month: Month number (1-12).
            year: Four digit year.
        """
        sql = f"SELECT {_COLUMNS} FROM sleep WHERE night LIKE ? ORDER BY id;"
        return [
            self._row_to_sleep(r)
            for r in self._fetch_all(sql, (month_prefix(month, year) + "%",))
        ]

    # ── UPDATE ────────────────────────────────────────────

    def update_amount(self, sleep_id: int, amount: float) -> bool:
        """
        Set the hours slept.

        Returns:
            True if a row was updated, False if the id does not exist.
        """
        sql = """
            UPDATE sleep
            SET amount = ?, updated_on = datetime('now', 'localtime')
            WHERE id = ?;
        """
        return self._write(sql, (amount, sleep_id)).rowcount > 0

    def update_quality(self, sleep_id: int, quality: int) -> bool:
        """Set the quality score. Returns False if the id does not exist."""
        sql = """
            UPDATE sleep
            SET quality = ?, updated_on = datetime('now', 'localtime')
            WHERE id = ?;
        """
        return self._write(sql, (quality, sleep_id)).rowcount > 0

    # ── DELETE ────────────────────────────────────────────

    def delete(self, sleep_id: int, conn: Optional[sqlite3.Connection] = None) -> bool:
        """
        Delete a night by id.

        Junction and comment rows go with it through ON DELETE CASCADE
        when the store enforces foreign keys.

        Returns:
            True if a row was deleted, False otherwise.
        """
        sql = "DELETE FROM sleep WHERE id = ?;"
        deleted = self._write(sql, (sleep_id,), conn).rowcount > 0
        if deleted:
            logger.info(f"Deleted sleep #{sleep_id}")
        return deleted

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _row_to_sleep(row: tuple) -> Sleep:
        """Convert a database row tuple to a Sleep domain object."""
        return Sleep(
            id=row[0],
            night=row[1],
            amount=float(row[2]),
            quality=row[3],
        )
