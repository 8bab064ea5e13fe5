from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class MatchLocation:
    """
    Result of a search. `found` is the outcome; x/y are the top-left corner
    of the match and only meaningful when found.
    """
    found: bool
    x: int = 0
    y: int = 0

    @classmethod
    def at(cls, x: int, y: int) -> MatchLocation:
        return cls(True, x, y)

    @classmethod
    def not_found(cls) -> MatchLocation:
        return cls(False)

    def __bool__(self) -> bool:
        return self.found

    def as_tuple(self) -> tuple[int, int]:
        if not self.found:
            raise ValueError("No location: the needle was not found")
        return self.x, self.y
