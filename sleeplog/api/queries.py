"""
api/queries.py
--------------
Read side of the query/mutation contract.
Every query returns a value, an empty list, or None when the underlying
manager call failed; ``error`` exposes why the last call failed.
"""

from typing import Optional

from sleeplog.api.types import SleepsByMonthInput, SleepsInRangeInput, SleepView
from sleeplog.exceptions import InvalidNightError
from sleeplog.models.sleep import Sleep, SleepAggregate
from sleeplog.models.tag import Tag
from sleeplog.services.sleep_service import SleepManager
from sleeplog.utils.logger import get_logger

logger = get_logger(__name__)


def to_views(manager: SleepManager, sleeps: Optional[list]) -> Optional[list[SleepView]]:
    """
    Convert manager results into views.

    Accepts aggregates or bare sleeps. A malformed stored night makes the
    whole result None and is recorded on ``manager.last_error``.
    """
    if sleeps is None:
        return None
    try:
        return [
            SleepView.from_aggregate(s) if isinstance(s, SleepAggregate) else SleepView.from_sleep(s)
            for s in sleeps
        ]
    except InvalidNightError as e:
        manager.last_error = e
        logger.warning(f"Unable to build sleep views: {e}")
        return None


def sleep_view(manager: SleepManager, sleep_id: int) -> Optional[SleepView]:
    """Fetch one sleep as a view, or None."""
    aggregate = manager.get_sleep(sleep_id, include_tags=False)
    if aggregate is None:
        return None
    views = to_views(manager, [aggregate])
    return views[0] if views else None


class SleepQueries:
    """Query root bound to one caller's SleepManager."""

    def __init__(self, manager: SleepManager):
        self.manager = manager

    def all_sleeps(self) -> Optional[list[SleepView]]:
        return to_views(self.manager, self.manager.get_all_sleeps())

    def sleep(self, sleep_id: int) -> Optional[SleepView]:
        return sleep_view(self.manager, sleep_id)

    def sleeps_by_month(self, month: SleepsByMonthInput) -> Optional[list[SleepView]]:
        return to_views(self.manager, self.manager.get_sleeps_by_month(month.month, month.year))

    def sleeps_in_range(
        self, start_date: SleepsInRangeInput, end_date: SleepsInRangeInput
    ) -> Optional[list[SleepView]]:
        """Sleeps between two inclusive dates."""
        sleeps: Optional[list[Sleep]] = self.manager.get_sleeps_in_range(start_date, end_date)
        return to_views(self.manager, sleeps)

    def sleeps_by_tag(self, tag_id: int) -> Optional[list[SleepView]]:
        return to_views(self.manager, self.manager.get_sleeps_by_tag(tag_id))

    def tag(self, tag_id: int) -> Optional[Tag]:
        return self.manager.get_tag(tag_id)

    def all_tags(self) -> Optional[list[Tag]]:
        return self.manager.get_all_tags()

    def error(self) -> str:
        """Description of the last failure, or an empty string."""
        error = self.manager.last_error
        return f"{type(error).__name__}: {error}" if error else ""
