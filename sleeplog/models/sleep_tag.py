"""
models/sleep_tag.py
-------------------
Row of the sleep/tag junction table.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class SleepTag:
    sleep_id: int
    tag_id: int
    id: Optional[int] = None
