"""k-of-n subset enumeration.

``combinations`` walks the subsets depth-first with backtracking and yields
them lazily, so callers can stream, chunk or stop early.  There is no
pruning: C(n, k) subsets are produced, which is exponential for large n.
"""

from __future__ import annotations

import math
from typing import Iterator, List, Sequence, Tuple, TypeVar

T = TypeVar("T")


def combinations(items: Sequence[T], k: int) -> Iterator[Tuple[T, ...]]:
    """Yield every size-*k* subset of *items*, preserving relative order.

    Each yielded tuple is an independent copy of the working stack.
    """
    if k < 0:
        raise ValueError(f"k must be non-negative, got {k}")
    n = len(items)
    current: List[T] = []

    def _backtrack(start: int) -> Iterator[Tuple[T, ...]]:
        if len(current) == k:
            yield tuple(current)
            return
        for i in range(start, n):
            current.append(items[i])
            yield from _backtrack(i + 1)
            current.pop()

    return _backtrack(0)


def count_combinations(n: int, k: int) -> int:
    """Number of subsets ``combinations`` yields for *n* items: C(n, k)."""
    if k < 0 or n < 0:
        raise ValueError(f"Invalid sizes: n={n}, k={k}")
    return math.comb(n, k)
