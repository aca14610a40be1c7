# wrc_platform/delta.py
# Websites REST Connector - field-level delta between a snapshot and the saved record.
# Copyright (c) 2025-2026 Websites REST Connector
from __future__ import annotations

from typing import Any

from _logging import log as BASE_LOG

from ._types import IDENTIFIER_FIELD, Record, SaveContext, Snapshot
from .snapshot_store import SnapshotStore

_log = BASE_LOG.child("DELTA")

_NOT_COMPARED = frozenset({"id", IDENTIFIER_FIELD})


def diff_snapshot(snap: Snapshot, current: Record, *, language: str) -> dict[str, Any]:
    """
    New values of every snapshot field that changed. Empty when nothing
    tracked changed; otherwise language and sku are attached.
    """
    delta: dict[str, Any] = {}
    for name, old in snap.values.items():
        if name in _NOT_COMPARED:
            continue
        new = current.value(name)
        if new != old:
            delta[name] = new

    if not delta:
        return {}

    delta["language"] = language
    delta[IDENTIFIER_FIELD] = current.sku
    return delta


class DeltaComputer:
    def __init__(self, store: SnapshotStore, *, language: str):
        self.store = store
        self.language = language

    def compute(self, record: Record, ctx: SaveContext) -> tuple[dict[str, Any], str]:
        """Return (delta, reason). An empty delta means nothing to send; reason says why."""
        if not ctx.qualifies:
            return {}, "autosave or revision"
        if not record.is_product:
            return {}, f"not a product ({record.post_type})"

        snap = self.store.get(record.id)
        if snap is None:
            return {}, "no snapshot"

        delta = diff_snapshot(snap, record, language=self.language)
        if not delta:
            # pre-state equals the saved state: drop it now instead of letting it expire;
            # the next pre-update captures a fresh one
            self.store.delete(record.id)
            return {}, "no tracked field changed"

        changed = sorted(k for k in delta if k not in ("language", IDENTIFIER_FIELD))
        _log.debug(f"record={record.id} changed={','.join(changed)}")
        return delta, "changed"
