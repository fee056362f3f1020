"""Tests for sleeplog.services.sleep_service.SleepManager."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from sleeplog.db.init_db import init_store
from sleeplog.exceptions import (
    ConstraintViolationError,
    InvalidNightError,
    NotFoundError,
    StoreError,
    StoreUnavailableError,
    ValidationError,
)
from sleeplog.models.night import NightBoundary
from sleeplog.repositories.sleep_repo import SleepRepository
from sleeplog.services.sleep_service import INVALID_ID, SleepManager
from tests.conftest import seed


def _ids(rows) -> list[int]:
    return [row.id for row in rows]


# ============================================================================
# Reads
# ============================================================================


class TestSleepReads:

    def test_round_trip(self, manager):
        sleep_id = manager.insert_sleep("2023-05-13", 7.5, 5)
        aggregate = manager.get_sleep(sleep_id)
        assert (aggregate.sleep.night, aggregate.sleep.amount, aggregate.sleep.quality) == (
            "2023-05-13",
            7.5,
            5,
        )
        assert aggregate.id == sleep_id

    def test_missing_sleep_is_absent(self, seeded):
        assert seeded.get_sleep(100) is None
        assert isinstance(seeded.last_error, NotFoundError)
        assert seeded.get_sleep(100, include_tags=True) is None

    def test_tags_only_when_requested(self, seeded):
        assert seeded.get_sleep(2).tags is None

        with_tags = seeded.get_sleep(1, include_tags=True)
        assert {t.id for t in with_tags.tags} == {1, 2}

        single = seeded.get_sleep(2, include_tags=True).tags
        assert [(t.id, t.name, t.color) for t in single] == [(2, "screen", 9590460)]

    def test_requested_but_untagged_is_empty_not_absent(self, seeded):
        assert seeded.get_sleep(3, include_tags=True).tags == []

    def test_failed_tag_lookup_gives_no_partial_aggregate(self, seeded, pool):
        with pool.connection() as conn:
            conn.execute("ALTER TABLE sleep_tags RENAME TO sleep_tags_old;")

        assert seeded.get_sleep(1) is not None
        assert seeded.get_sleep(1, include_tags=True) is None
        assert isinstance(seeded.last_error, StoreError)

    def test_get_all_sleeps(self, manager):
        assert manager.get_all_sleeps() == []
        assert manager.last_error is None

        seed(manager)
        sleeps = manager.get_all_sleeps()
        assert _ids(sleeps) == [1, 2, 3]
        assert all(s.tags is None for s in sleeps)

    def test_get_all_sleeps_with_tags(self, seeded):
        sleeps = seeded.get_all_sleeps(include_tags=True)
        assert [_ids(s.tags) for s in sleeps] == [[1, 2], [2], []]

    def test_get_multiple_sleeps_keeps_every_match(self, seeded):
        assert _ids(seeded.get_multiple_sleeps([3, 1])) == [1, 3]
        assert _ids(seeded.get_multiple_sleeps([3])) == [3]
        assert seeded.get_multiple_sleeps([]) == []
        assert seeded.get_multiple_sleeps([42]) == []

        tagged = seeded.get_multiple_sleeps([2], include_tags=True)
        assert _ids(tagged[0].tags) == [2]

    def test_get_sleeps_by_tag(self, seeded):
        assert set(_ids(seeded.get_sleeps_by_tag(2))) == {1, 2}
        assert _ids(seeded.get_sleeps_by_tag(1)) == [1]
        assert seeded.get_sleeps_by_tag(100) == []

    def test_get_sleeps_by_month(self, seeded):
        assert len(seeded.get_sleeps_by_month(11, 2022)) == 3
        assert seeded.get_sleeps_by_month(12, 2022) == []
        assert seeded.get_sleeps_by_month(11, 2023) == []
        assert seeded.get_sleeps_by_month(1, 2022) == []

    def test_single_digit_month_does_not_match_later_months(self, seeded):
        jan = seeded.insert_sleep("2022-01-05", 7.0, 2)
        assert _ids(seeded.get_sleeps_by_month(1, 2022)) == [jan]
        assert jan not in _ids(seeded.get_sleeps_by_month(11, 2022))


class TestSleepsInRange:

    def test_day_precision_when_both_ends_have_a_day(self, seeded):
        sleeps = seeded.get_sleeps_in_range(NightBoundary(2022, 11, 24), NightBoundary(2022, 11, 25))
        assert _ids(sleeps) == [1, 2]

    def test_month_precision_without_days(self, seeded):
        sleeps = seeded.get_sleeps_in_range(NightBoundary(2022, 11), NightBoundary(2022, 11))
        assert _ids(sleeps) == [1, 2, 3]

    def test_day_ignored_when_only_one_end_has_it(self, seeded):
        sleeps = seeded.get_sleeps_in_range(NightBoundary(2022, 11, 26), NightBoundary(2022, 11))
        assert _ids(sleeps) == [1, 2, 3]

    def test_year_compared_before_month(self, seeded):
        seeded.insert_sleep("2023-01-02", 7.0, 1)
        sleeps = seeded.get_sleeps_in_range(NightBoundary(2022, 12), NightBoundary(2023, 1))
        assert _ids(sleeps) == [4]
        assert seeded.get_sleeps_in_range(NightBoundary(2021, 1), NightBoundary(2021, 12)) == []

    def test_malformed_stored_night_is_a_recoverable_error(self, seeded, pool):
        SleepRepository(pool).insert("last tuesday", 5.0, 1)
        assert seeded.get_sleeps_in_range(NightBoundary(2022, 1), NightBoundary(2022, 12)) is None
        assert isinstance(seeded.last_error, InvalidNightError)


# ============================================================================
# Writes
# ============================================================================


class TestWrites:

    def test_insert_sleep_rejects_malformed_night(self, seeded):
        assert seeded.insert_sleep("2022/11/27", 7.0, 1) == INVALID_ID
        assert isinstance(seeded.last_error, InvalidNightError)
        assert len(seeded.get_all_sleeps()) == 3

    def test_insert_sleep_requires_zero_padded_night(self, seeded):
        assert seeded.insert_sleep("2022-1-5", 7.0, 1) == INVALID_ID
        assert isinstance(seeded.last_error, InvalidNightError)
        assert seeded.get_sleeps_in_range(NightBoundary(2022, 1), NightBoundary(2022, 1)) == []

    def test_negative_amount_is_rejected(self, seeded):
        assert seeded.insert_sleep("2022-11-27", -1.0, 3) == INVALID_ID
        assert isinstance(seeded.last_error, ValidationError)
        assert seeded.update_sleep_amount(1, -0.5) is False
        assert seeded.get_sleep(1).sleep.amount == 7.5
        assert seeded.insert_sleep("2022-11-27", 0.0, 3) == 4

    def test_failed_inserts_return_sentinel(self, seeded):
        assert seeded.insert_comment(100, "orphan") == INVALID_ID
        assert isinstance(seeded.last_error, ConstraintViolationError)
        assert seeded.insert_tag("no color", None) == INVALID_ID

    def test_partial_failure_when_attaching_tags(self, seeded):
        assert seeded.add_tags_to_sleep(3, [1, 2, 999, 1]) is False
        assert isinstance(seeded.last_error, ConstraintViolationError)
        assert _ids(seeded.get_tags_by_sleep(3)) == [1, 2]
        assert len(seeded.sleep_tags.select_by_sleep_id(3)) == 2

    def test_attaching_nothing_succeeds(self, seeded):
        assert seeded.add_tags_to_sleep(3, [])

    def test_attaching_twice_stores_two_rows(self, seeded):
        assert seeded.add_tags_to_sleep(2, [2])
        assert len(seeded.sleep_tags.select_by_sleep_id(2)) == 2
        assert _ids(seeded.get_sleep(2, include_tags=True).tags) == [2]

    def test_remove_tag_from_sleep(self, seeded):
        assert seeded.remove_tag_from_sleep(1, 1)
        assert _ids(seeded.get_sleep(1, include_tags=True).tags) == [2]
        assert seeded.remove_tag_from_sleep(1, 1) is False

    def test_updates(self, seeded):
        assert seeded.update_sleep_amount(1, 7.0)
        assert seeded.get_sleep(1).sleep.amount == 7.0

        assert seeded.update_sleep_quality(3, 1)
        assert seeded.get_sleep(3).sleep.quality == 1

        assert seeded.update_tag_name(1, "update test")
        assert seeded.get_tag(1).name == "update test"

        assert seeded.update_tag_color(2, 65535)
        assert seeded.get_tag(2).color == 65535

        assert seeded.update_comment(3, "updated_comment")
        assert seeded.get_comments_by_sleep(1)[1].comment == "updated_comment"

    def test_update_of_missing_row_is_a_no_op(self, seeded):
        assert seeded.update_sleep_amount(999, 5.0) is False
        assert seeded.last_error is None
        assert len(seeded.get_all_sleeps()) == 3
        assert seeded.update_tag_name(999, "x") is False
        assert seeded.update_comment(999, "x") is False


# ============================================================================
# Tags and comments
# ============================================================================


class TestTagsAndComments:

    def test_tag_reads(self, seeded):
        assert seeded.get_tag(2).name == "screen"
        assert seeded.get_tag(100) is None
        assert _ids(seeded.get_all_tags()) == [1, 2]
        assert _ids(seeded.get_multiple_tags([2, 7])) == [2]
        assert seeded.get_tags_by_sleep(100) == []

    def test_comment_reads(self, seeded):
        first_night = seeded.get_comments_by_sleep(1)
        assert [c.comment for c in first_night] == ["First comment", "2nd comment on night"]
        assert [c.comment for c in seeded.get_comments_by_sleep(2)] == ["test comment"]
        assert seeded.get_comments_by_sleep(3) == []
        assert seeded.get_comment(2).sleep_id == 2
        assert seeded.get_comment(99) is None


# ============================================================================
# Deletes and cascades
# ============================================================================


class TestDeletes:

    def test_scenario(self, seeded):
        assert set(_ids(seeded.get_sleeps_by_tag(2))) == {1, 2}
        assert len(seeded.get_all_sleeps()) == 3

        assert seeded.delete_tag(1)
        assert _ids(seeded.get_sleep(1, include_tags=True).tags) == [2]
        assert _ids(seeded.get_all_tags()) == [2]

    def test_deleting_a_sleep_cascades(self, seeded):
        assert seeded.delete_sleep(1)
        assert _ids(seeded.get_all_sleeps()) == [2, 3]
        assert seeded.get_comments_by_sleep(1) == []
        assert seeded.sleep_tags.select_by_sleep_id(1) == []
        assert _ids(seeded.get_sleeps_by_tag(2)) == [2]
        assert [c.comment for c in seeded.get_comments_by_sleep(2)] == ["test comment"]

    def test_delete_missing_rows(self, seeded):
        assert seeded.delete_sleep(99) is False
        assert seeded.delete_tag(99) is False
        assert seeded.delete_comment(99) is False

    def test_delete_comment(self, seeded):
        assert seeded.delete_comment(2)
        assert seeded.get_comments_by_sleep(2) == []


class TestExplicitCascade:
    """Stores that do not enforce foreign keys get their cascades from the manager."""

    @pytest.fixture
    def manager(self, db_path):
        pool = init_store(db_path, foreign_keys=False)
        yield SleepManager(pool)
        pool.closeall()

    def test_delete_sleep_removes_dependents(self, manager):
        seed(manager)
        assert not manager.pool.enforces_foreign_keys

        assert manager.delete_sleep(1)
        assert manager.get_comments_by_sleep(1) == []
        assert manager.sleep_tags.select_by_sleep_id(1) == []
        assert len(manager.get_comments_by_sleep(2)) == 1

    def test_delete_tag_removes_associations(self, manager):
        seed(manager)
        assert manager.delete_tag(2)
        assert manager.sleep_tags.select_by_tag_id(2) == []
        assert _ids(manager.get_tags_by_sleep(1)) == [1]

    def test_missing_sleep_deletes_nothing(self, manager):
        seed(manager)
        assert manager.delete_sleep(99) is False
        assert len(manager.sleep_tags.select_all()) == 3


# ============================================================================
# Error channel and concurrency
# ============================================================================


class TestFailures:

    def test_unavailable_store(self, seeded, pool):
        pool.closeall()
        assert seeded.get_all_sleeps() is None
        assert isinstance(seeded.last_error, StoreUnavailableError)
        assert seeded.insert_sleep("2022-11-27", 7.0, 1) == INVALID_ID
        assert seeded.delete_sleep(1) is False
        assert seeded.add_tags_to_sleep(1, [1]) is False

    def test_success_clears_last_error(self, seeded):
        seeded.get_sleep(100)
        assert seeded.last_error is not None
        seeded.get_sleep(1)
        assert seeded.last_error is None

    def test_error_slot_is_per_manager(self, seeded, pool):
        other = SleepManager(pool)
        seeded.get_sleep(100)
        assert other.get_sleep(1) is not None
        assert isinstance(seeded.last_error, NotFoundError)
        assert other.last_error is None

    def test_concurrent_inserts_share_the_pool(self, pool):
        def insert_nights(day: int) -> list[int]:
            manager = SleepManager(pool)
            return [manager.insert_sleep(f"2022-11-{day:02d}", 7.0, i) for i in range(5)]

        with ThreadPoolExecutor(max_workers=4) as executor:
            results = list(executor.map(insert_nights, range(1, 9)))

        ids = [sleep_id for batch in results for sleep_id in batch]
        assert INVALID_ID not in ids
        assert len(set(ids)) == 40
        assert pool.size <= 4
