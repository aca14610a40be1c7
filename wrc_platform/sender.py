# wrc_platform/sender.py
# Websites REST Connector - lifecycle handlers for the sending side.
# Copyright (c) 2025-2026 Websites REST Connector
from __future__ import annotations

import dataclasses
from typing import Any, Callable

from _logging import log as BASE_LOG

from ._types import OutcomeStatus, Record, SaveContext, SyncOutcome
from .capture import SnapshotCapture
from .delta import DeltaComputer
from .errors import ConnectorError, CredentialsMissing, TransportError
from .outbound import OutboundSync
from .snapshot_store import SnapshotStore

__all__ = ["PostSender", "ProductSender"]

_log = BASE_LOG.child("SENDER")


def _bind_id(record_id: Any, record: Record) -> Record:
    if isinstance(record_id, Record) or not isinstance(record, Record):
        raise TypeError("lifecycle handlers take (record_id, record, ctx)")
    rid = int(record_id)
    return record if record.id == rid else dataclasses.replace(record, id=rid)


class _HookBoundary:
    """Nothing raised inside a lifecycle handler may reach the host's save."""

    label = "hook"

    def _guarded(self, step: str, record_id: Any, fn: Callable[[], SyncOutcome]) -> SyncOutcome:
        try:
            out = fn()
        except CredentialsMissing as e:
            _log.error(f"{self.label}.{step} record={record_id}: {e}")
            return SyncOutcome.failed(str(e))
        except TransportError as e:
            _log.error(f"{self.label}.{step} record={record_id}: {e}")
            return SyncOutcome.failed(str(e), http_status=e.status)
        except ConnectorError as e:
            _log.error(f"{self.label}.{step} record={record_id}: {e}")
            return SyncOutcome.failed(str(e))
        except Exception as e:
            _log.error(f"{self.label}.{step} record={record_id}: unexpected {type(e).__name__}: {e}")
            return SyncOutcome.fatal(f"{type(e).__name__}: {e}")
        if out.status is OutcomeStatus.SKIPPED:
            _log.debug(f"{self.label}.{step} record={record_id} skipped: {out.reason}")
        return out


class PostSender(_HookBoundary):
    """Plain content: every qualifying save pushes the full record."""

    label = "post"

    def __init__(self, outbound: OutboundSync):
        self.outbound = outbound

    def on_post_save(self, record_id: Any, record: Record, ctx: SaveContext = SaveContext()) -> SyncOutcome:
        return self._guarded("post_save", record_id, lambda: self._post_save(_bind_id(record_id, record), ctx))

    def _post_save(self, record: Record, ctx: SaveContext) -> SyncOutcome:
        if not ctx.qualifies:
            return SyncOutcome.skipped("autosave or revision")
        if record.is_product:
            return SyncOutcome.skipped("product handled by product pipeline")

        resp = self.outbound.send_post(record)
        _log.info(f"post {record.id} sent ({resp.status_code})")
        return SyncOutcome.sent(resp.status_code)


class ProductSender(_HookBoundary):
    """Products: snapshot before the update, send only changed fields after the save."""

    label = "product"

    def __init__(self, outbound: OutboundSync, store: SnapshotStore, *, language: str):
        self.outbound = outbound
        self.store = store
        self.capture = SnapshotCapture(store)
        self.delta = DeltaComputer(store, language=language)

    def on_pre_update(self, record_id: Any, record: Record, ctx: SaveContext = SaveContext()) -> SyncOutcome:
        return self._guarded("pre_update", record_id, lambda: self._pre_update(_bind_id(record_id, record), ctx))

    def on_post_save(self, record_id: Any, record: Record, ctx: SaveContext = SaveContext()) -> SyncOutcome:
        return self._guarded("post_save", record_id, lambda: self._post_save(_bind_id(record_id, record), ctx))

    def _pre_update(self, record: Record, ctx: SaveContext) -> SyncOutcome:
        snap = self.capture.capture(record, ctx)
        if snap is None:
            return SyncOutcome.skipped("save does not qualify for a snapshot")
        return SyncOutcome.skipped("snapshot captured")

    def _post_save(self, record: Record, ctx: SaveContext) -> SyncOutcome:
        delta, reason = self.delta.compute(record, ctx)
        if not delta:
            return SyncOutcome.skipped(reason)

        # snapshot and marker survive a failed send
        resp = self.outbound.send_product(delta)
        self.store.delete(record.id)
        self.store.clear_pending(record.id)
        _log.info(f"product {record.id} sku={delta.get('sku') or '-'} sent ({resp.status_code})")
        return SyncOutcome.sent(resp.status_code, payload=delta)
