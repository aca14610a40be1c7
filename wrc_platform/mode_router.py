# wrc_platform/mode_router.py
# Websites REST Connector - startup wiring for sender or receiver mode.
# Copyright (c) 2025-2026 Websites REST Connector
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, TYPE_CHECKING

from _logging import log as BASE_LOG

from ._types import HostEnvironment, Record, SaveContext, SyncMode, SyncOutcome
from .errors import ConfigUnavailable
from .events import POST_SAVE, PRE_UPDATE, EventBus
from .outbound import OutboundSync
from .sender import PostSender, ProductSender
from .settings import SettingsStore, SyncConfig
from .snapshot_store import SnapshotStore

if TYPE_CHECKING:
    from fastapi import FastAPI

_log = BASE_LOG.child("ROUTER")


@dataclass
class Wiring:
    mode: SyncMode
    lifecycle: EventBus
    events: EventBus
    config: SyncConfig | None = None
    outbound: OutboundSync | None = None
    post_sender: PostSender | None = None
    product_sender: ProductSender | None = None
    routes: list[str] = field(default_factory=list)
    products: bool = False

    @property
    def sending(self) -> bool:
        return self.lifecycle.has(POST_SAVE)

    def on_pre_update(self, record_id: Any, record: Record, ctx: SaveContext = SaveContext()) -> list[SyncOutcome]:
        return self.lifecycle.emit(PRE_UPDATE, record_id, record, ctx)

    def on_post_save(self, record_id: Any, record: Record, ctx: SaveContext = SaveContext()) -> list[SyncOutcome]:
        return self.lifecycle.emit(POST_SAVE, record_id, record, ctx)

    def summary(self) -> str:
        if self.mode == "send":
            hooks = ",".join(self.lifecycle.events()) or "none"
            return f"mode=send hooks={hooks} products={'on' if self.products else 'off'}"
        return f"mode=receive routes={','.join(self.routes) or 'none'}"

    def close(self) -> None:
        if self.outbound is not None:
            self.outbound.close()


class ModeRouter:
    """
    Decides once, at startup, whether this process sends or receives. The
    same decision covers posts and, when the host has a product catalog,
    products. A process never sends and receives the same resource type.
    """

    def __init__(
        self,
        settings: SettingsStore,
        host: HostEnvironment | None = None,
        *,
        events: EventBus | None = None,
        snapshots: SnapshotStore | None = None,
    ):
        self.settings = settings
        self.host = host or settings
        self.events = events or EventBus()
        self.snapshots = snapshots or SnapshotStore()

    def _catalog_active(self) -> bool:
        try:
            return bool(self.host.product_catalog_active())
        except Exception as e:
            _log.warn(f"product catalog detection failed: {e}")
            return False

    def wire(self, app: "FastAPI | None" = None) -> Wiring:
        mode = self.settings.get_mode()
        products = self._catalog_active()
        w = Wiring(mode=mode, lifecycle=EventBus(), events=self.events, products=products)

        if mode == "send":
            self._wire_sender(w)
        else:
            self._wire_receiver(w, app)

        _log.info(w.summary())
        return w

    def _wire_sender(self, w: Wiring) -> None:
        try:
            cfg = self.settings.sync_config()
        except ConfigUnavailable as e:
            _log.error(f"outbound sync disabled: {e}")
            return
        w.config = cfg
        if not cfg.complete:
            _log.error(f"outbound sync disabled: missing {', '.join(cfg.missing())}")
            return
        if not cfg.verify_ssl:
            _log.warn("local development: TLS verification disabled for outbound calls")

        w.outbound = OutboundSync(cfg)
        w.post_sender = PostSender(w.outbound)
        w.lifecycle.on(POST_SAVE, w.post_sender.on_post_save)

        if w.products:
            w.product_sender = ProductSender(w.outbound, self.snapshots, language=cfg.language)
            w.lifecycle.on(PRE_UPDATE, w.product_sender.on_pre_update)
            w.lifecycle.on(POST_SAVE, w.product_sender.on_post_save)

    def _wire_receiver(self, w: Wiring, app: "FastAPI | None") -> None:
        if app is None:
            _log.warn("receive mode without an application; no routes mounted")
            return
        from api.receiveAPI import register_receiver

        w.routes = register_receiver(
            app,
            self.settings.inbound_credentials,
            self.events,
            posts=True,
            products=w.products,
        )
