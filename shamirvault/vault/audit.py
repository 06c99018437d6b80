"""Append-only trace of sharing sessions.

Entries are chained by SHA-256 so that removing or editing one breaks
``verify_chain``.  ``append`` has the observer signature accepted by
``ShamirScheme.reconstruct``, so a log can record interpolation terms directly.
Secret values and share y-values must never be appended.
"""

from __future__ import annotations

import hashlib
import json
import threading
import time
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

GENESIS = "0" * 64


def _digest(timestamp: float, event: str, data: Dict[str, Any], prev_hash: str) -> str:
    payload = json.dumps(
        {"timestamp": timestamp, "event": event, "data": data, "prev_hash": prev_hash},
        sort_keys=True,
        separators=(",", ":"),
        default=str,
    )
    return hashlib.sha256(payload.encode()).hexdigest()


@dataclass(frozen=True)
class TraceEntry:
    timestamp: float
    event: str
    data: Dict[str, Any]
    prev_hash: str
    entry_hash: str


class AuditLog:
    """Hash-chained in-memory event log, safe to share between threads."""

    def __init__(self) -> None:
        self._entries: List[TraceEntry] = []
        self._lock = threading.Lock()

    @property
    def head(self) -> str:
        return self._entries[-1].entry_hash if self._entries else GENESIS

    def append(self, event: str, data: Dict[str, Any]) -> TraceEntry:
        # head read and append must not interleave with another writer
        with self._lock:
            ts = time.time()
            prev = self.head
            entry = TraceEntry(ts, event, dict(data), prev, _digest(ts, event, data, prev))
            self._entries.append(entry)
        return entry

    def entries(self, event: Optional[str] = None) -> List[Dict[str, Any]]:
        with self._lock:
            snapshot = list(self._entries)
        return [asdict(e) for e in snapshot if event is None or e.event == event]

    def verify_chain(self) -> bool:
        with self._lock:
            snapshot = list(self._entries)
        prev = GENESIS
        for e in snapshot:
            if e.prev_hash != prev:
                return False
            if e.entry_hash != _digest(e.timestamp, e.event, e.data, e.prev_hash):
                return False
            prev = e.entry_hash
        return True

    def __len__(self) -> int:
        return len(self._entries)
