"""Exact Lagrange interpolation at x = 0 over the rationals.

API
---
evaluate_at_zero(points)     -> Integral(value) | NonIntegral(num, den)
interpolate_at_zero(points)  -> int   (raises NonIntegralResult)

For each point (x_i, y_i) the basis term at zero is

    y_i * prod_{j != i}(0 - x_j) / prod_{j != i}(x_i - x_j)

and the terms are summed into a running reduced fraction.  Distinct x
values are a precondition: a repeated x makes a denominator product zero
and surfaces as ``ZeroDivisionError``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Union

from shamirvote.crypto import rational
from shamirvote.models import NonIntegralResult, Point


@dataclass(frozen=True)
class Integral:
    value: int


@dataclass(frozen=True)
class NonIntegral:
    numerator: int
    denominator: int


InterpolationResult = Union[Integral, NonIntegral]


def evaluate_at_zero(points: Sequence[Point]) -> InterpolationResult:
    """Interpolate *points* and return the constant term as a result value."""
    if not points:
        raise ValueError("Need at least one point")
    k = len(points)
    total = rational.ZERO
    for i in range(k):
        xi, yi = points[i]
        num = 1
        den = 1
        for j in range(k):
            if j == i:
                continue
            xj = points[j][0]
            num *= -xj          # (0 - x_j)
            den *= xi - xj      # (x_i - x_j)
        total = rational.add(total, rational.reduce(yi * num, den))
    if not total.is_integral():
        return NonIntegral(total.numerator, total.denominator)
    return Integral(total.to_int())


def interpolate_at_zero(points: Sequence[Point]) -> int:
    """Reconstruct f(0) from *points*; raise ``NonIntegralResult`` if not an integer."""
    result = evaluate_at_zero(points)
    if isinstance(result, NonIntegral):
        raise NonIntegralResult(result.numerator, result.denominator)
    return result.value
