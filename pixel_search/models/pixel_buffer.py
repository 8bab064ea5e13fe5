from __future__ import annotations
from dataclasses import dataclass
from typing import Sequence

from .errors import SizeMismatchError
from .pixel import PixelLike


@dataclass(frozen=True)
class PixelBuffer:
    """
    Read-only, row-major view over a caller-owned pixel sequence.

    The sequence is borrowed, never copied: the view is only valid while the
    backing storage stays alive and is not resized or written to.
    """
    pixels: Sequence[PixelLike]  # Row-major, index = x + y * width.
    width: int
    height: int

    def __post_init__(self):
        if len(self.pixels) != self.width * self.height:
            raise SizeMismatchError(
                f"Pixel sequence of length {len(self.pixels)} does not match "
                f"{self.width}x{self.height}"
            )

    @property
    def size(self) -> int:
        """Total pixel count (width * height)."""
        return self.width * self.height

    def pixel_at(self, x: int, y: int) -> PixelLike:
        return self.pixels[x + y * self.width]
