# wrc_platform/capture.py
# Websites REST Connector - pre-update snapshot capture for product records.
# Copyright (c) 2025-2026 Websites REST Connector
from __future__ import annotations

from _logging import log as BASE_LOG

from ._types import Record, SaveContext, Snapshot
from .snapshot_store import SnapshotStore

_log = BASE_LOG.child("SNAPSHOT")


class SnapshotCapture:
    def __init__(self, store: SnapshotStore):
        self.store = store

    def capture(self, record: Record, ctx: SaveContext) -> Snapshot | None:
        """Store the pre-change state of a product; None when the save does not qualify."""
        if not ctx.qualifies:
            return None
        if not record.is_product:
            return None

        snap = Snapshot.of(record, captured_at=self.store.now())
        replaced = self.store.get(record.id) is not None
        self.store.put(snap)
        _log.debug(f"captured record={record.id} sku={record.sku or '-'}{' (replaced pending)' if replaced else ''}")
        return snap
