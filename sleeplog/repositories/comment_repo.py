"""
repositories/comment_repo.py
----------------------------
Data access layer for comments on a night.
"""

import sqlite3
from typing import Optional

from sleeplog.models.comment import Comment
from sleeplog.repositories.base import BaseRepository
from sleeplog.utils.logger import get_logger

logger = get_logger(__name__)


class CommentRepository(BaseRepository):
    """Repository for CRUD operations on the comment table."""

    table = "comment"

    # ── CREATE ────────────────────────────────────────────

    def insert(self, sleep_id: int, comment: str) -> int:
        """
        Attach a comment to a sleep.

        Returns:
            The id of the new comment.

        Raises:
            ConstraintViolationError: If the sleep does not exist.
        """
        sql = "INSERT INTO comment (sleep_id, comment) VALUES (?, ?);"
        comment_id = self._write(sql, (sleep_id, comment)).lastrowid
        logger.info(f"Added comment #{comment_id} to sleep #{sleep_id}")
        return comment_id

    # ── READ ──────────────────────────────────────────────

    def select_one(self, comment_id: int) -> Comment:
        """Fetch a comment by id, raising NotFoundError if absent."""
        sql = "SELECT id, sleep_id, comment FROM comment WHERE id = ?;"
        return self._row_to_comment(self._fetch_one(sql, (comment_id,), comment_id))

    def select_all(self) -> list[Comment]:
        """Fetch every comment ordered by id."""
        sql = "SELECT id, sleep_id, comment FROM comment ORDER BY id;"
        return [self._row_to_comment(r) for r in self._fetch_all(sql)]

    def select_by_sleep_id(self, sleep_id: int) -> list[Comment]:
        """Fetch the comments of one sleep, oldest first."""
        sql = "SELECT id, sleep_id, comment FROM comment WHERE sleep_id = ? ORDER BY id;"
        return [self._row_to_comment(r) for r in self._fetch_all(sql, (sleep_id,))]

    # ── UPDATE ────────────────────────────────────────────

    def update_comment(self, comment_id: int, comment: str) -> bool:
        """Replace a comment's text. Returns False if no comment has that id."""
        sql = "UPDATE comment SET comment = ? WHERE id = ?;"
        return self._write(sql, (comment, comment_id)).rowcount > 0

    # ── DELETE ────────────────────────────────────────────

    def delete(self, comment_id: int) -> bool:
        sql = "DELETE FROM comment WHERE id = ?;"
        deleted = self._write(sql, (comment_id,)).rowcount > 0
        if deleted:
            logger.info(f"Deleted comment #{comment_id}")
        return deleted

    def delete_by_sleep_id(self, sleep_id: int, conn: Optional[sqlite3.Connection] = None) -> int:
        """Remove every comment of a sleep. Returns the number of rows removed."""
        sql = "DELETE FROM comment WHERE sleep_id = ?;"
        return self._write(sql, (sleep_id,), conn).rowcount

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _row_to_comment(row: tuple) -> Comment:
        return Comment(id=row[0], sleep_id=row[1], comment=row[2])
