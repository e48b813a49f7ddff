"""Exact rational arithmetic over Python ints.

Fractions are always kept in lowest terms with a positive denominator;
the numerator carries the sign.  No floating point is used anywhere.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Fraction:
    numerator: int
    denominator: int

    def is_integral(self) -> bool:
        return self.numerator % self.denominator == 0

    def to_int(self) -> int:
        """Exact integer value; only valid when ``is_integral()``."""
        return self.numerator // self.denominator


ZERO = Fraction(0, 1)


def gcd(a: int, b: int) -> int:
    """Greatest common divisor (Euclid).  gcd(0, n) == n."""
    a, b = abs(a), abs(b)
    while b:
        a, b = b, a % b
    return a


def reduce(numerator: int, denominator: int) -> Fraction:
    """Build a ``Fraction`` in lowest terms with a positive denominator."""
    if denominator == 0:
        raise ZeroDivisionError("Fraction with zero denominator")
    if denominator < 0:
        numerator, denominator = -numerator, -denominator
    g = gcd(numerator, denominator)
    return Fraction(numerator // g, denominator // g)


def add(a: Fraction, b: Fraction) -> Fraction:
    """Fraction addition (cross-multiply, then reduce)."""
    return reduce(
        a.numerator * b.denominator + b.numerator * a.denominator,
        a.denominator * b.denominator,
    )


def mul(a: Fraction, b: Fraction) -> Fraction:
    """Fraction multiplication."""
    return reduce(a.numerator * b.numerator, a.denominator * b.denominator)
