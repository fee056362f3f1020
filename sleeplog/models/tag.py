"""
models/tag.py
-------------
Domain model for a colored label attachable to many nights.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Tag:
    """
    Attributes:
        id: Store-assigned primary key (None for new records).
        name: Display name.
        color: Packed RGB as a decimal integer (``0xRRGGBB``).
    """
    name: str
    color: int
    id: Optional[int] = None

    @property
    def rgb(self) -> tuple[int, int, int]:
        """Unpack ``color`` into (red, green, blue)."""
        return (self.color >> 16) & 0xFF, (self.color >> 8) & 0xFF, self.color & 0xFF

    @property
    def hex_color(self) -> str:
        return f"#{self.color & 0xFFFFFF:06x}"
