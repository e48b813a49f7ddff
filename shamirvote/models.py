"""Core data model: points, share sets and the error taxonomy."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Tuple

Point = Tuple[int, int]
Combination = Tuple[Point, ...]


class InvalidDigit(ValueError):
    """Raised when a share value has a digit outside its declared base."""


class InvalidShareSet(ValueError):
    """Raised when a share set breaks n >= k >= 1 or repeats an x value."""


class NonIntegralResult(ArithmeticError):
    """Raised when the interpolated constant term is not an integer."""

    def __init__(self, numerator: int, denominator: int) -> None:
        super().__init__(f"Result is not an integer: {numerator}/{denominator}")
        self.numerator = numerator
        self.denominator = denominator


class SecretNotFound(LookupError):
    """Raised when no k-subset of the shares interpolates to an integer."""


class ReconstructionCancelled(RuntimeError):
    """Raised when the caller's cancellation check fires mid-enumeration."""


@dataclass(frozen=True)
class ShareSet:
    """An ordered, read-only set of n decoded shares with threshold k."""

    points: Tuple[Point, ...]
    k: int

    def __post_init__(self) -> None:
        n = len(self.points)
        if self.k < 1 or self.k > n:
            raise InvalidShareSet(f"Invalid threshold: k={self.k}, n={n}")
        xs = [x for x, _ in self.points]
        if len(set(xs)) != n:
            raise InvalidShareSet("Share indices (x values) must be distinct")

    @classmethod
    def from_points(cls, points: Iterable[Point], k: int) -> "ShareSet":
        return cls(points=tuple((int(x), int(y)) for x, y in points), k=k)

    @property
    def n(self) -> int:
        return len(self.points)
