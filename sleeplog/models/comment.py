"""
models/comment.py
-----------------
Domain model for a free-text note on one night.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Comment:
    sleep_id: int
    comment: str
    id: Optional[int] = None
