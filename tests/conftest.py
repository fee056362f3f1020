"""Shared fixtures: a fresh store per test under pytest's tmp_path."""

import pytest

from sleeplog.db.init_db import init_store
from sleeplog.services.sleep_service import SleepManager


@pytest.fixture
def db_path(tmp_path) -> str:
    return str(tmp_path / "sleep.db")


@pytest.fixture
def pool(db_path):
    pool = init_store(db_path, max_connections=4, timeout=5.0)
    yield pool
    pool.closeall()


@pytest.fixture
def manager(pool) -> SleepManager:
    return SleepManager(pool)


def seed(manager: SleepManager) -> SleepManager:
    """
    Three nights in November 2022, two tags and three comments:

        sleep 1 (2022-11-25) -> tags 1, 2; comments 1, 3
        sleep 2 (2022-11-24) -> tag 2;     comment 2
        sleep 3 (2022-11-26) -> no tags, no comments
    """
    assert manager.insert_sleep("2022-11-25", 7.5, 1) == 1
    assert manager.insert_sleep("2022-11-24", 6.0, 2) == 2
    assert manager.insert_sleep("2022-11-26", 8.0, 3) == 3

    assert manager.insert_tag("test name", 3713678) == 1
    assert manager.insert_tag("screen", 9590460) == 2

    assert manager.add_tags_to_sleep(2, [2])
    assert manager.add_tags_to_sleep(1, [1, 2])

    assert manager.insert_comment(1, "First comment") == 1
    assert manager.insert_comment(2, "test comment") == 2
    assert manager.insert_comment(1, "2nd comment on night") == 3
    return manager


@pytest.fixture
def seeded(manager) -> SleepManager:
    return seed(manager)
