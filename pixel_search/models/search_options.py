from __future__ import annotations
from dataclasses import dataclass
import math


def _clamp_unit(value: float | None) -> float:
    value = float(value or 0.0)
    if math.isnan(value):
        return 0.0
    return min(max(value, 0.0), 1.0)


@dataclass(frozen=True)
class SearchOptions:
    """
    Value-object holding the two search tolerances as fractions in [0, 1]:
        pixel_tolerance  – per-pixel colour drift (1.0 = a full 255 channel delta)
        image_tolerance  – share of needle pixels allowed to fail the pixel test
    Out-of-range values are clamped, None and NaN mean 0 (exact match).
    """
    pixel_tolerance: float | None = 0.0
    image_tolerance: float | None = 0.0

    def __post_init__(self):
        object.__setattr__(self, "pixel_tolerance", _clamp_unit(self.pixel_tolerance))
        object.__setattr__(self, "image_tolerance", _clamp_unit(self.image_tolerance))

    @classmethod
    def default(cls) -> SearchOptions:
        return cls(0.0, 0.0)
