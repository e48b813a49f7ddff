"""Tests for exact rational arithmetic."""

import pytest

from shamirvote.crypto import rational
from shamirvote.crypto.rational import Fraction


def test_gcd_basic():
    assert rational.gcd(12, 18) == 6


def test_gcd_with_zero():
    assert rational.gcd(0, 7) == 7
    assert rational.gcd(7, 0) == 7


def test_gcd_negative_operands():
    assert rational.gcd(-12, 18) == 6
    assert rational.gcd(12, -18) == 6


def test_reduce_lowest_terms():
    assert rational.reduce(6, 8) == Fraction(3, 4)


def test_reduce_moves_sign_to_numerator():
    assert rational.reduce(3, -6) == Fraction(-1, 2)
    assert rational.reduce(-3, -6) == Fraction(1, 2)


def test_reduce_zero_numerator():
    assert rational.reduce(0, -5) == Fraction(0, 1)


def test_reduce_zero_denominator():
    with pytest.raises(ZeroDivisionError):
        rational.reduce(1, 0)


def test_add():
    assert rational.add(Fraction(1, 2), Fraction(1, 3)) == Fraction(5, 6)


def test_add_cancels_to_integer():
    total = rational.add(Fraction(1, 2), Fraction(1, 2))
    assert total == Fraction(1, 1)
    assert total.is_integral()
    assert total.to_int() == 1


def test_mul():
    assert rational.mul(Fraction(2, 3), Fraction(-3, 4)) == Fraction(-1, 2)


def test_big_integers_stay_exact():
    big = 2**521 - 1
    f = rational.add(Fraction(big, 3), Fraction(-big, 3))
    assert f == rational.ZERO
    g = rational.reduce(big * 6, 3)
    assert g.is_integral() and g.to_int() == big * 2


def test_non_integral():
    assert not Fraction(7, 2).is_integral()
    assert Fraction(-8, 2).to_int() == -4
