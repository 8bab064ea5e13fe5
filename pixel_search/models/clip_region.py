from __future__ import annotations
from dataclasses import dataclass

from .pixel_buffer import PixelBuffer


@dataclass(frozen=True)
class ClipRegion:
    """Sub-rectangle of the haystack the needle is searched in."""
    x: int
    y: int
    width: int
    height: int

    @classmethod
    def full(cls, buffer: PixelBuffer) -> ClipRegion:
        return cls(0, 0, buffer.width, buffer.height)

    @property
    def area(self) -> int:
        return self.width * self.height
