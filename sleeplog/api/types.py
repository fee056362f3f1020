"""
api/types.py
------------
Output views and input shapes of the query/mutation contract.
"""

from dataclasses import dataclass
from typing import Optional

from sleeplog.models.comment import Comment
from sleeplog.models.night import Night, NightBoundary
from sleeplog.models.sleep import Sleep, SleepAggregate
from sleeplog.models.tag import Tag
from sleeplog.services.sleep_service import SleepManager


@dataclass
class SleepView:
    """
    A sleep as exposed to callers.

    Scalar fields are filled eagerly. Tags and comments are resolved on
    demand, each with its own manager call keyed by the sleep id.
    """
    id: int
    night: Night
    amount: float
    quality: int

    @classmethod
    def from_sleep(cls, sleep: Sleep) -> "SleepView":
        """
        Raises:
            InvalidNightError: If the stored night is malformed.
        """
        return cls(
            id=sleep.id,
            night=Night.from_string(sleep.night),
            amount=sleep.amount,
            quality=sleep.quality,
        )

    @classmethod
    def from_aggregate(cls, aggregate: SleepAggregate) -> "SleepView":
        return cls.from_sleep(aggregate.sleep)

    def tags(self, manager: SleepManager) -> Optional[list[Tag]]:
        return manager.get_tags_by_sleep(self.id)

    def comments(self, manager: SleepManager) -> Optional[list[Comment]]:
        return manager.get_comments_by_sleep(self.id)


@dataclass
class SleepInput:
    night: str
    amount: float
    quality: int
    tags: Optional[list[int]] = None
    comments: Optional[list[str]] = None


@dataclass
class TagInput:
    name: str
    color: int


@dataclass
class UpdateSleepInput:
    """Fields left as None are not touched."""
    sleep_id: int
    amount: Optional[float] = None
    quality: Optional[int] = None


@dataclass
class UpdateTagInput:
    """Fields left as None are not touched."""
    tag_id: int
    name: Optional[str] = None
    color: Optional[int] = None


@dataclass
class UpdateCommentInput:
    comment_id: int
    comment: str


@dataclass
class AddTagsToSleepInput:
    sleep_id: int
    tag_ids: list[int]


@dataclass
class AddCommentToSleepInput:
    sleep_id: int
    comment: str


@dataclass
class RemoveTagFromSleepInput:
    sleep_id: int
    tag_id: int


@dataclass
class SleepsByMonthInput:
    month: int
    year: int


SleepsInRangeInput = NightBoundary
