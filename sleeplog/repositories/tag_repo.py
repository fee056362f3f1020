"""
repositories/tag_repo.py
------------------------
Data access layer for tags.
"""

import sqlite3
from typing import Optional

from sleeplog.models.tag import Tag
from sleeplog.repositories.base import BaseRepository
from sleeplog.utils.logger import get_logger

logger = get_logger(__name__)


class TagRepository(BaseRepository):
    """Repository for CRUD operations on the tag table."""

    table = "tag"

    # ── CREATE ────────────────────────────────────────────

    def insert(self, name: str, color: int) -> int:
        """Insert a tag and return its id."""
        sql = "INSERT INTO tag (name, color) VALUES (?, ?);"
        tag_id = self._write(sql, (name, color)).lastrowid
        logger.info(f"Added tag #{tag_id} '{name}'")
        return tag_id

    # ── READ ──────────────────────────────────────────────

    def select_one(self, tag_id: int) -> Tag:
        """Fetch a tag by id, raising NotFoundError if absent."""
        sql = "SELECT id, name, color FROM tag WHERE id = ?;"
        return self._row_to_tag(self._fetch_one(sql, (tag_id,), tag_id))

    def select_all(self) -> list[Tag]:
        """Fetch every tag ordered by id."""
        sql = "SELECT id, name, color FROM tag ORDER BY id;"
        return [self._row_to_tag(r) for r in self._fetch_all(sql)]

    # ── UPDATE ────────────────────────────────────────────

    def update_name(self, tag_id: int, name: str) -> bool:
        """Rename a tag. Returns False if no tag has that id."""
        sql = """
            UPDATE tag
            SET name = ?, updated_on = datetime('now', 'localtime')
            WHERE id = ?;
        """
        return self._write(sql, (name, tag_id)).rowcount > 0

    def update_color(self, tag_id: int, color: int) -> bool:
        """
        Recolor a tag.

        Args:
            tag_id: Tag to change.
            color: Packed 0xRRGGBB value.

        Returns:
            False if no tag has that id.
        """
        sql = """
            UPDATE tag
            SET color = ?, updated_on = datetime('now', 'localtime')
            WHERE id = ?;
        """
        return self._write(sql, (color, tag_id)).rowcount > 0

    # ── DELETE ────────────────────────────────────────────

    def delete(self, tag_id: int, conn: Optional[sqlite3.Connection] = None) -> bool:
        """Delete a tag; its junction rows cascade with it."""
        sql = "DELETE FROM tag WHERE id = ?;"
        deleted = self._write(sql, (tag_id,), conn).rowcount > 0
        if deleted:
            logger.info(f"Deleted tag #{tag_id}")
        return deleted

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _row_to_tag(row: tuple) -> Tag:
        return Tag(id=row[0], name=row[1], color=row[2])
