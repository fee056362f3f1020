"""
services/sleep_service.py
-------------------------
Domain-level operations over sleeps, tags and comments.
Sequences repository calls, folds their results into aggregates and turns
store failures into the absent / False / INVALID_ID results callers expect.
"""

from functools import wraps
from operator import attrgetter
from typing import Callable, Iterable, Optional

from sleeplog.db.connection import ConnectionPool
from sleeplog.exceptions import SleepLogError, StoreError, ValidationError
from sleeplog.models.comment import Comment
from sleeplog.models.night import Night, NightBoundary, night_in_range
from sleeplog.models.sleep import Sleep, SleepAggregate
from sleeplog.models.tag import Tag
from sleeplog.repositories.comment_repo import CommentRepository
from sleeplog.repositories.sleep_repo import SleepRepository
from sleeplog.repositories.sleep_tag_repo import SleepTagRepository
from sleeplog.repositories.tag_repo import TagRepository
from sleeplog.utils.joins import filter_by_keys, zip_by_key
from sleeplog.utils.logger import get_logger

logger = get_logger(__name__)

INVALID_ID = -1

_by_id = attrgetter("id")


def _check_amount(amount: float) -> None:
    if amount is not None and amount < 0:
        raise ValidationError(f"amount must be non-negative hours, got {amount}")


def absorbs_failures(default):
    """
    Decorator that converts expected failures into ``default``.

    ``StoreError`` and ``ValidationError`` raised by the wrapped operation
    are logged, kept on ``self.last_error`` and replaced by ``default``.
    A successful call clears ``last_error``.
    """
    def decorator(func: Callable):
        @wraps(func)
        def wrapper(self: "SleepManager", *args, **kwargs):
            self.last_error = None
            try:
                return func(self, *args, **kwargs)
            except (StoreError, ValidationError) as e:
                self.last_error = e
                logger.warning(f"{func.__name__} failed: {type(e).__name__}: {e}")
                return default
        return wrapper
    return decorator


class SleepManager:
    """
    Aggregate operations over the sleep store.

    A manager holds no state besides its repositories and ``last_error``,
    the failure absorbed by its most recent call. Create one per logical
    caller (request, session) so the error slot is never shared; the
    connection pool underneath is.

    Usage:
        manager = SleepManager(pool)
        sleep_id = manager.insert_sleep("2023-05-13", 7.5, 5)
        aggregate = manager.get_sleep(sleep_id, include_tags=True)
    """

    def __init__(self, pool: ConnectionPool):
        self.pool = pool
        self.sleeps = SleepRepository(pool)
        self.tags = TagRepository(pool)
        self.sleep_tags = SleepTagRepository(pool)
        self.comments = CommentRepository(pool)
        self.last_error: Optional[SleepLogError] = None

    # ── SLEEPS ────────────────────────────────────────────

    @absorbs_failures(INVALID_ID)
    def insert_sleep(self, night: str, amount: float, quality: int) -> int:
        """
        Add a night and return its id, or INVALID_ID on failure.

        Args:
            night: Date in ``yyyy-mm-dd`` format.
            amount: Hours slept, never negative.
            quality: Quality score.
        """
        Night.from_string(night)
        _check_amount(amount)
        return self.sleeps.insert(night, amount, quality)

    @absorbs_failures(None)
    def get_sleep(self, sleep_id: int, include_tags: bool = False) -> Optional[SleepAggregate]:
        """
        Fetch one sleep, optionally with its tags.

        Returns None if the sleep does not exist or any lookup fails; a
        partially built aggregate is never returned.
        """
        aggregate = SleepAggregate(sleep=self.sleeps.select_one(sleep_id))
        if include_tags:
            aggregate.tags = self._tags_of(sleep_id)
        return aggregate

    @absorbs_failures(None)
    def get_all_sleeps(self, include_tags: bool = False) -> Optional[list[SleepAggregate]]:
        """Fetch every sleep ordered by id. An empty store gives an empty list."""
        return self._aggregate(self.sleeps.select_all(), include_tags)

    @absorbs_failures(None)
    def get_multiple_sleeps(
        self, ids: Iterable[int], include_tags: bool = False
    ) -> Optional[list[SleepAggregate]]:
        """
        Fetch the sleeps whose ids are in ``ids``.

        Reads the whole table and filters by membership; every match is
        returned in id order, wherever it sits in the table.
        """
        return self._multiple_sleeps(ids, include_tags)

    @absorbs_failures(None)
    def get_sleeps_by_tag(self, tag_id: int) -> Optional[list[SleepAggregate]]:
        """Fetch every sleep carrying the tag. An unused tag gives an empty list."""
        links = self.sleep_tags.select_by_tag_id(tag_id)
        return self._multiple_sleeps([link.sleep_id for link in links])

    @absorbs_failures(None)
    def get_sleeps_by_month(self, month: int, year: int) -> Optional[list[SleepAggregate]]:
        """
        Fetch the sleeps of one month.

        Args:
            month: Month value (1-12).
            year: Four digit year.
        """
        return self._aggregate(self.sleeps.select_by_month(month, year))

    @absorbs_failures(None)
    def get_sleeps_in_range(self, start: NightBoundary, end: NightBoundary) -> Optional[list[Sleep]]:
        """
        Fetch the sleeps between two inclusive boundaries.

        Returns None if any stored night cannot be parsed; the offending
        InvalidNightError is kept on ``last_error``.
        """
        return [
            sleep for sleep in self.sleeps.select_all()
            if night_in_range(Night.from_string(sleep.night), start, end)
        ]

    @absorbs_failures(False)
    def update_sleep_amount(self, sleep_id: int, amount: float) -> bool:
        _check_amount(amount)
        return self.sleeps.update_amount(sleep_id, amount)

    @absorbs_failures(False)
    def update_sleep_quality(self, sleep_id: int, quality: int) -> bool:
        return self.sleeps.update_quality(sleep_id, quality)

    @absorbs_failures(False)
    def delete_sleep(self, sleep_id: int) -> bool:
        """
        Delete a sleep together with its tag associations and comments.

        The store cascades on its own when it enforces foreign keys;
        otherwise the dependent rows are removed here in the same
        transaction as the sleep.
        """
        if self.pool.enforces_foreign_keys:
            return self.sleeps.delete(sleep_id)
        with self.pool.transaction() as conn:
            self.sleep_tags.delete_by_sleep_id(sleep_id, conn)
            self.comments.delete_by_sleep_id(sleep_id, conn)
            return self.sleeps.delete(sleep_id, conn)

    # ── TAGS ──────────────────────────────────────────────

    @absorbs_failures(INVALID_ID)
    def insert_tag(self, name: str, color: int) -> int:
        """
        Add a tag and return its id, or INVALID_ID on failure.

        Args:
            name: Tag name.
            color: Decimal packed RGB value, e.g. 16711680 for red.
        """
        return self.tags.insert(name, color)

    @absorbs_failures(None)
    def get_tag(self, tag_id: int) -> Optional[Tag]:
        return self.tags.select_one(tag_id)

    @absorbs_failures(None)
    def get_all_tags(self) -> Optional[list[Tag]]:
        return self.tags.select_all()

    @absorbs_failures(None)
    def get_multiple_tags(self, ids: Iterable[int]) -> Optional[list[Tag]]:
        return filter_by_keys(self.tags.select_all(), ids, key=_by_id)

    @absorbs_failures(None)
    def get_tags_by_sleep(self, sleep_id: int) -> Optional[list[Tag]]:
        return self._tags_of(sleep_id)

    @absorbs_failures(False)
    def update_tag_name(self, tag_id: int, name: str) -> bool:
        return self.tags.update_name(tag_id, name)

    @absorbs_failures(False)
    def update_tag_color(self, tag_id: int, color: int) -> bool:
        return self.tags.update_color(tag_id, color)

    @absorbs_failures(False)
    def delete_tag(self, tag_id: int) -> bool:
        """Delete a tag and its associations with every sleep."""
        if self.pool.enforces_foreign_keys:
            return self.tags.delete(tag_id)
        with self.pool.transaction() as conn:
            self.sleep_tags.delete_by_tag_id(tag_id, conn)
            return self.tags.delete(tag_id, conn)

    @absorbs_failures(False)
    def add_tags_to_sleep(self, sleep_id: int, tag_ids: Iterable[int]) -> bool:
        """
        Associate tags with a sleep, one row per tag id, in order.

        Stops at the first failed insert and returns False. Associations
        made before the failure are kept.
        """
        for tag_id in tag_ids:
            self.sleep_tags.insert(sleep_id, tag_id)
        return True

    @absorbs_failures(False)
    def remove_tag_from_sleep(self, sleep_id: int, tag_id: int) -> bool:
        return self.sleep_tags.delete(sleep_id, tag_id)

    # ── COMMENTS ──────────────────────────────────────────

    @absorbs_failures(INVALID_ID)
    def insert_comment(self, sleep_id: int, comment: str) -> int:
        """Attach a comment to a sleep; INVALID_ID if the sleep does not exist."""
        return self.comments.insert(sleep_id, comment)

    @absorbs_failures(None)
    def get_comment(self, comment_id: int) -> Optional[Comment]:
        return self.comments.select_one(comment_id)

    @absorbs_failures(None)
    def get_comments_by_sleep(self, sleep_id: int) -> Optional[list[Comment]]:
        return self.comments.select_by_sleep_id(sleep_id)

    @absorbs_failures(False)
    def update_comment(self, comment_id: int, comment: str) -> bool:
        return self.comments.update_comment(comment_id, comment)

    @absorbs_failures(False)
    def delete_comment(self, comment_id: int) -> bool:
        return self.comments.delete(comment_id)

    # ── HELPERS ───────────────────────────────────────────

    def _tags_of(self, sleep_id: int) -> list[Tag]:
        tag_ids = [link.tag_id for link in self.sleep_tags.select_by_sleep_id(sleep_id)]
        return filter_by_keys(self.tags.select_all(), tag_ids, key=_by_id)

    def _multiple_sleeps(self, ids: Iterable[int], include_tags: bool = False) -> list[SleepAggregate]:
        sleeps = filter_by_keys(self.sleeps.select_all(), ids, key=_by_id)
        return self._aggregate(sleeps, include_tags)

    def _aggregate(self, sleeps: list[Sleep], include_tags: bool = False) -> list[SleepAggregate]:
        if not include_tags:
            return [SleepAggregate(sleep=sleep) for sleep in sleeps]
        all_tags = self.tags.select_all()
        pairs = zip_by_key(sleeps, self.sleep_tags.select_all(), _by_id, attrgetter("sleep_id"))
        return [
            SleepAggregate(
                sleep=sleep,
                tags=filter_by_keys(all_tags, [link.tag_id for link in links], key=_by_id),
            )
            for sleep, links in pairs
        ]
