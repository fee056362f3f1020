"""
repositories/sleep_tag_repo.py
------------------------------
Data access layer for the sleep/tag junction table.
Rows are identified by the (sleep_id, tag_id) pair; the same pair may be
stored more than once.
"""

import sqlite3
from typing import Optional

from sleeplog.models.sleep_tag import SleepTag
from sleeplog.repositories.base import BaseRepository
from sleeplog.utils.logger import get_logger

logger = get_logger(__name__)


class SleepTagRepository(BaseRepository):
    """Repository for the sleep_tags junction table."""

    table = "sleep_tags"

    # ── CREATE ────────────────────────────────────────────

    def insert(self, sleep_id: int, tag_id: int) -> int:
        """
        Associate a tag with a sleep.

        Raises:
            ConstraintViolationError: If either id does not reference an
                existing row.
        """
        sql = "INSERT INTO sleep_tags (sleep_id, tag_id) VALUES (?, ?);"
        return self._write(sql, (sleep_id, tag_id)).lastrowid

    # ── READ ──────────────────────────────────────────────

    def select_all(self) -> list[SleepTag]:
        sql = "SELECT id, sleep_id, tag_id FROM sleep_tags ORDER BY id;"
        return [self._row_to_sleep_tag(r) for r in self._fetch_all(sql)]

    def select_by_sleep_id(self, sleep_id: int) -> list[SleepTag]:
        sql = "SELECT id, sleep_id, tag_id FROM sleep_tags WHERE sleep_id = ? ORDER BY id;"
        return [self._row_to_sleep_tag(r) for r in self._fetch_all(sql, (sleep_id,))]

    def select_by_tag_id(self, tag_id: int) -> list[SleepTag]:
        sql = "SELECT id, sleep_id, tag_id FROM sleep_tags WHERE tag_id = ? ORDER BY id;"
        return [self._row_to_sleep_tag(r) for r in self._fetch_all(sql, (tag_id,))]

    # ── DELETE ────────────────────────────────────────────

    def delete(self, sleep_id: int, tag_id: int) -> bool:
        """Remove every association between the given sleep and tag."""
        sql = "DELETE FROM sleep_tags WHERE sleep_id = ? AND tag_id = ?;"
        return self._write(sql, (sleep_id, tag_id)).rowcount > 0

    def delete_by_sleep_id(self, sleep_id: int, conn: Optional[sqlite3.Connection] = None) -> int:
        """Remove every association of a sleep. Returns the number of rows removed."""
        sql = "DELETE FROM sleep_tags WHERE sleep_id = ?;"
        return self._write(sql, (sleep_id,), conn).rowcount

    def delete_by_tag_id(self, tag_id: int, conn: Optional[sqlite3.Connection] = None) -> int:
        """Remove every association of a tag. Returns the number of rows removed."""
        sql = "DELETE FROM sleep_tags WHERE tag_id = ?;"
        return self._write(sql, (tag_id,), conn).rowcount

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _row_to_sleep_tag(row: tuple) -> SleepTag:
        return SleepTag(id=row[0], sleep_id=row[1], tag_id=row[2])
