# wrc_platform/snapshot_store.py
# Websites REST Connector - keyed pre-change snapshots with expiry.
# Copyright (c) 2025-2026 Websites REST Connector
from __future__ import annotations

import threading
import time
from typing import Callable

from ._types import Snapshot

SNAPSHOT_TTL_SEC = 60 * 60


class SnapshotStore:
    """
    In-process map of record id -> (expires_at, Snapshot), plus the set of
    records with a pending send.

    The lock only keeps the dict consistent. It does not serialize edits:
    two saves of the same record inside the TTL window race and the last
    pre-update wins.
    """

    def __init__(self, ttl_sec: int = SNAPSHOT_TTL_SEC, clock: Callable[[], float] = time.time):
        self.ttl_sec = int(ttl_sec)
        self._clock = clock
        self._items: dict[int, tuple[float, Snapshot]] = {}
        self._pending: set[int] = set()
        self._lock = threading.Lock()

    def now(self) -> float:
        return self._clock()

    def _evict_locked(self, now: float) -> None:
        dead = [rid for rid, (exp, _) in self._items.items() if exp <= now]
        for rid in dead:
            self._items.pop(rid, None)
            self._pending.discard(rid)

    def put(self, snap: Snapshot) -> None:
        now = self.now()
        with self._lock:
            self._evict_locked(now)
            self._items[snap.record_id] = (now + self.ttl_sec, snap)
            self._pending.add(snap.record_id)

    def get(self, record_id: int) -> Snapshot | None:
        now = self.now()
        with self._lock:
            self._evict_locked(now)
            hit = self._items.get(int(record_id))
            return hit[1] if hit else None

    def delete(self, record_id: int) -> bool:
        rid = int(record_id)
        with self._lock:
            self._pending.discard(rid)
            return self._items.pop(rid, None) is not None

    def is_pending(self, record_id: int) -> bool:
        now = self.now()
        with self._lock:
            self._evict_locked(now)
            return int(record_id) in self._pending

    def clear_pending(self, record_id: int) -> None:
        with self._lock:
            self._pending.discard(int(record_id))

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
