"""Hash-chained recovery log.

Collects the reconstructor's diagnostic events (combination counts,
candidate secrets, outcome).  Each entry carries the SHA-256 of the
previous one so a rewritten history is detectable.  Entries live in
memory only.
"""

from __future__ import annotations

import hashlib
import json
import threading
import time
from dataclasses import asdict, dataclass
from typing import Any, Dict, List

GENESIS_HASH = "0" * 64


@dataclass
class LogEntry:
    timestamp: float
    event: str
    data: Dict[str, Any]
    prev_hash: str
    entry_hash: str


def _entry_digest(timestamp: float, event: str, data: Dict[str, Any], prev_hash: str) -> str:
    payload = json.dumps(
        {"timestamp": timestamp, "event": event, "data": data, "prev_hash": prev_hash},
        sort_keys=True,
        separators=(",", ":"),
    )
    return hashlib.sha256(payload.encode()).hexdigest()


class RecoveryLog:
    """Append-only hash-chained event log.

    ``append`` matches the reconstructor's ``on_event`` hook, so a log can
    be passed straight to ``reconstruct(share_set, on_event=log.append)``.
    Payloads are hashed as JSON, so secrets past the int-to-str digit limit
    must be converted with ``encode_decimal`` first.
    """

    def __init__(self) -> None:
        self._entries: List[LogEntry] = []
        self._prev_hash: str = GENESIS_HASH
        # Held while reading and advancing the chain head.
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def append(self, event: str, data: Dict[str, Any]) -> LogEntry:
        with self._lock:
            ts = time.time()
            entry = LogEntry(
                timestamp=ts,
                event=event,
                data=data,
                prev_hash=self._prev_hash,
                entry_hash=_entry_digest(ts, event, data, self._prev_hash),
            )
            self._entries.append(entry)
            self._prev_hash = entry.entry_hash
        return entry

    def _snapshot(self) -> List[LogEntry]:
        with self._lock:
            return list(self._entries)

    def entries(self) -> List[Dict[str, Any]]:
        return [asdict(e) for e in self._snapshot()]

    def events(self, name: str) -> List[Dict[str, Any]]:
        """Data payloads of every entry recorded under *name*."""
        return [e.data for e in self._snapshot() if e.event == name]

    def verify_chain(self) -> bool:
        """Verify the integrity of the full chain."""
        prev = GENESIS_HASH
        for e in self._snapshot():
            if e.prev_hash != prev:
                return False
            if e.entry_hash != _entry_digest(e.timestamp, e.event, e.data, e.prev_hash):
                return False
            prev = e.entry_hash
        return True
