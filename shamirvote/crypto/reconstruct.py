"""Majority-vote secret reconstruction from possibly corrupted shares.

Every k-subset of the n shares is interpolated at zero.  Subsets whose
constant term is an integer cast one vote for it; subsets with a
non-integral result are taken to contain a corrupted share and cast none.
The value with the most votes wins, ties going to the value that entered
the tally first in enumeration order.

This is a heuristic, not a cryptographic guarantee: it recovers the true
secret whenever the subsets avoiding every corrupted share outnumber the
votes of any single spurious integral value.

Tallies are plain ``collections.Counter`` objects, so partial tallies over
disjoint slices of the enumeration merge by key-wise addition.
``reconstruct_parallel`` uses that to spread chunks over a process pool.
"""

from __future__ import annotations

import collections
import itertools
from concurrent.futures import Future, ProcessPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, Counter, Deque, Dict, Iterable, Iterator, List, Optional, Tuple

from shamirvote.config import DEFAULT_WORKERS, PARALLEL_CHUNK_SIZE
from shamirvote.crypto.combinations import combinations, count_combinations
from shamirvote.crypto.lagrange import Integral, evaluate_at_zero
from shamirvote.models import (
    Combination,
    ReconstructionCancelled,
    SecretNotFound,
    ShareSet,
)

VoteTally = Counter[int]
EventHook = Callable[[str, Dict[str, Any]], Any]
CancelCheck = Callable[[], bool]


@dataclass
class Reconstruction:
    """Outcome of one majority-vote run over a share set."""

    secret: int
    votes: int
    total_combinations: int
    valid_combinations: int
    tally: VoteTally = field(default_factory=collections.Counter)

    def candidates(self) -> List[Dict[str, Any]]:
        return [{"secret": s, "count": c} for s, c in self.tally.items()]


def _no_event(event: str, data: Dict[str, Any]) -> None:
    return None


def _check_cancel(should_cancel: Optional[CancelCheck]) -> None:
    if should_cancel is not None and should_cancel():
        raise ReconstructionCancelled("Reconstruction cancelled")


# ---------------------------------------------------------------------------
# Tallying
# ---------------------------------------------------------------------------


def tally_votes(
    combos: Iterable[Combination],
    should_cancel: Optional[CancelCheck] = None,
) -> VoteTally:
    """Interpolate each combination and count the integral constant terms."""
    tally: VoteTally = collections.Counter()
    for combo in combos:
        _check_cancel(should_cancel)
        result = evaluate_at_zero(combo)
        if isinstance(result, Integral):
            tally[result.value] += 1
    return tally


def merge_tallies(*tallies: VoteTally) -> VoteTally:
    """Key-wise sum of *tallies*.  Pass them in enumeration order."""
    merged: VoteTally = collections.Counter()
    for tally in tallies:
        merged.update(tally)
    return merged


def most_frequent(tally: VoteTally) -> Optional[Tuple[int, int]]:
    """Return ``(secret, count)`` with the strictly highest count, or None.

    On a tie the entry inserted first keeps the lead.
    """
    best: Optional[Tuple[int, int]] = None
    for secret, count in tally.items():
        if best is None or count > best[1]:
            best = (secret, count)
    return best


# ---------------------------------------------------------------------------
# Reconstruction
# ---------------------------------------------------------------------------


def _conclude(tally: VoteTally, total: int, emit: EventHook) -> Reconstruction:
    valid = sum(tally.values())
    emit("tally", {"valid": valid, "total": total})
    for secret, count in tally.items():
        emit("candidate", {"secret": secret, "count": count})

    winner = most_frequent(tally)
    if winner is None:
        emit("not_found", {"total": total})
        raise SecretNotFound(
            f"No integral constant term in any of {total} combinations"
        )
    secret, votes = winner
    emit("recovered", {"secret": secret, "votes": votes})
    return Reconstruction(
        secret=secret,
        votes=votes,
        total_combinations=total,
        valid_combinations=valid,
        tally=tally,
    )


def reconstruct(
    share_set: ShareSet,
    on_event: Optional[EventHook] = None,
    should_cancel: Optional[CancelCheck] = None,
) -> Reconstruction:
    """Run the majority vote over every k-subset of *share_set*.

    *on_event* receives diagnostic events as ``(event, data)`` pairs, the
    same shape ``RecoveryLog.append`` takes.  *should_cancel* is polled
    between combinations.
    """
    emit = on_event or _no_event
    total = count_combinations(share_set.n, share_set.k)
    emit("combinations", {"n": share_set.n, "k": share_set.k, "total": total})

    tally = tally_votes(combinations(share_set.points, share_set.k), should_cancel)
    return _conclude(tally, total, emit)


def recover_secret(
    share_set: ShareSet,
    on_event: Optional[EventHook] = None,
    should_cancel: Optional[CancelCheck] = None,
) -> int:
    """Return the most frequently reconstructed secret.

    Raises ``SecretNotFound`` if no combination interpolates to an integer.
    """
    return reconstruct(share_set, on_event, should_cancel).secret


# ---------------------------------------------------------------------------
# Parallel variant
# ---------------------------------------------------------------------------


def _chunked(combos: Iterator[Combination], size: int) -> Iterator[Tuple[Combination, ...]]:
    while True:
        chunk = tuple(itertools.islice(combos, size))
        if not chunk:
            return
        yield chunk


def reconstruct_parallel(
    share_set: ShareSet,
    workers: int = DEFAULT_WORKERS,
    chunk_size: int = PARALLEL_CHUNK_SIZE,
    on_event: Optional[EventHook] = None,
    should_cancel: Optional[CancelCheck] = None,
) -> Reconstruction:
    """Like ``reconstruct`` but tallies chunks of combinations in worker processes.

    Partial tallies are merged in chunk order, so the winner (including
    tie-breaks) is the same as the sequential run.  At most ``2 * workers``
    chunks are in flight; the enumeration is never materialized in full.
    """
    if workers <= 1:
        return reconstruct(share_set, on_event, should_cancel)
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")

    emit = on_event or _no_event
    total = count_combinations(share_set.n, share_set.k)
    emit("combinations", {"n": share_set.n, "k": share_set.k, "total": total})

    tally: VoteTally = collections.Counter()
    pending: Deque[Future] = collections.deque()
    chunks = _chunked(combinations(share_set.points, share_set.k), chunk_size)
    with ProcessPoolExecutor(max_workers=workers) as pool:
        try:
            for chunk in chunks:
                _check_cancel(should_cancel)
                pending.append(pool.submit(tally_votes, chunk))
                if len(pending) >= 2 * workers:
                    tally.update(pending.popleft().result())
            while pending:
                _check_cancel(should_cancel)
                tally.update(pending.popleft().result())
        except ReconstructionCancelled:
            pool.shutdown(wait=False, cancel_futures=True)
            raise
    return _conclude(tally, total, emit)
