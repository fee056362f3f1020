"""
models/sleep.py
---------------
Domain models for a night's sleep and the aggregate built around it.
"""

from dataclasses import dataclass
from typing import Optional

from sleeplog.models.tag import Tag


@dataclass
class Sleep:
    """
    A single night's sleep record.

    Attributes:
        id: Store-assigned primary key (None for new records).
        night: Date of the night, ``yyyy-mm-dd``.
        amount: Hours slept.
        quality: Caller-defined quality score.
    """
    night: str
    amount: float
    quality: int
    id: Optional[int] = None

    def __str__(self) -> str:
        return f"#{self.id} {self.night}: {self.amount:.1f}h (quality {self.quality})"


@dataclass
class SleepAggregate:
    """
    A sleep plus, when requested, the tags attached to it.

    ``tags`` is None when tags were not requested; an empty list means
    they were requested and the sleep has none.
    """
    sleep: Sleep
    tags: Optional[list[Tag]] = None

    @property
    def id(self) -> Optional[int]:
        return self.sleep.id
