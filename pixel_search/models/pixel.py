from __future__ import annotations
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@runtime_checkable
class PixelLike(Protocol):
    """
    Anything exposing four 8-bit channels and value equality can be searched.
    Integrators wrap their native pixel formats behind these four properties.
    """

    @property
    def r(self) -> int: ...

    @property
    def g(self) -> int: ...

    @property
    def b(self) -> int: ...

    @property
    def a(self) -> int: ...

    def __eq__(self, other: object) -> bool: ...


@dataclass(frozen=True)
class Pixel:
    """
    RGBA colour packed in an unsigned 32-bit integer, R in the lowest octet:

        |-------|-------|-------|-------|
        A       B       G       R
    """
    packed_value: int

    def __post_init__(self):
        object.__setattr__(self, "packed_value", int(self.packed_value) & 0xFFFFFFFF)

    @classmethod
    def from_rgba(cls, r: int, g: int, b: int, a: int = 255) -> Pixel:
        return cls((r & 0xFF) | (g & 0xFF) << 8 | (b & 0xFF) << 16 | (a & 0xFF) << 24)

    @property
    def r(self) -> int:
        return self.packed_value & 0xFF

    @property
    def g(self) -> int:
        return (self.packed_value >> 8) & 0xFF

    @property
    def b(self) -> int:
        return (self.packed_value >> 16) & 0xFF

    @property
    def a(self) -> int:
        return (self.packed_value >> 24) & 0xFF

    def as_rgba(self) -> tuple[int, int, int, int]:
        return self.r, self.g, self.b, self.a
