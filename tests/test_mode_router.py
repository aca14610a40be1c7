# Websites REST Connector test scripts
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

import responses
from fastapi import FastAPI
from fastapi.testclient import TestClient

from wrc_platform._types import OutcomeStatus, Record, SaveContext
from wrc_platform.events import ON_RECEIVE_POST_DATA, POST_SAVE, PRE_UPDATE, EventBus
from wrc_platform.mode_router import ModeRouter
from wrc_platform.settings import SettingsStore


@dataclass
class FakeHost:
    catalog: bool

    def product_catalog_active(self) -> bool:
        return self.catalog


def _settings(cfg: dict[str, Any] | None) -> SettingsStore:
    return SettingsStore(loader=lambda: cfg)


def _routes(app: FastAPI) -> set[str]:
    return {getattr(r, "path", "") for r in app.routes}


def test_send_mode_registers_lifecycle_hooks_only(sender_settings) -> None:
    app = FastAPI()
    w = ModeRouter(_settings(sender_settings), FakeHost(catalog=True)).wire(app)

    assert w.mode == "send"
    assert w.sending
    assert w.lifecycle.events() == [POST_SAVE, PRE_UPDATE]
    assert len(w.lifecycle.handlers(POST_SAVE)) == 2
    assert w.routes == []
    assert "/wrc/v1/receive-post-data" not in _routes(app)


def test_send_mode_without_catalog_has_no_product_hooks(sender_settings) -> None:
    w = ModeRouter(_settings(sender_settings), FakeHost(catalog=False)).wire()
    assert w.product_sender is None
    assert w.lifecycle.events() == [POST_SAVE]


def test_send_mode_with_incomplete_credentials_registers_nothing(sender_settings) -> None:
    sender_settings["websites_rest_connector_settings"]["wrc_api_password"] = ""
    w = ModeRouter(_settings(sender_settings), FakeHost(catalog=True)).wire()
    assert w.mode == "send"
    assert not w.sending
    assert w.outbound is None
    assert w.on_post_save(1, Record(id=1)) == []


def test_receive_mode_mounts_routes_only(receiver_settings) -> None:
    app = FastAPI()
    w = ModeRouter(_settings(receiver_settings), FakeHost(catalog=True)).wire(app)

    assert w.mode == "receive"
    assert not w.sending
    assert w.routes == ["/wrc/v1/receive-post-data", "/wrc/v1/receive-product-data"]
    assert {"/wrc/v1/receive-post-data", "/wrc/v1/receive-product-data"} <= _routes(app)


def test_receive_mode_without_catalog_mounts_post_route(receiver_settings) -> None:
    app = FastAPI()
    w = ModeRouter(_settings(receiver_settings), FakeHost(catalog=False)).wire(app)
    assert w.routes == ["/wrc/v1/receive-post-data"]


def test_unset_store_defaults_to_receive() -> None:
    app = FastAPI()
    w = ModeRouter(_settings(None), FakeHost(catalog=False)).wire(app)
    assert w.mode == "receive"
    r = TestClient(app).post("/wrc/v1/receive-post-data", json={"id": 1}, auth=("username1", "password1"))
    assert r.status_code == 401


def test_received_data_reaches_shared_event_bus(receiver_settings) -> None:
    bus = EventBus()
    got: list[Any] = []
    bus.on(ON_RECEIVE_POST_DATA, lambda data, request: got.append(data))

    app = FastAPI()
    ModeRouter(_settings(receiver_settings), FakeHost(catalog=False), events=bus).wire(app)
    r = TestClient(app).post("/wrc/v1/receive-post-data", json={"id": 9}, auth=("username1", "password1"))
    assert r.status_code == 200
    assert got == [{"id": 9}]


def test_wired_sender_end_to_end(sender_settings) -> None:
    w = ModeRouter(_settings(sender_settings), FakeHost(catalog=True)).wire()
    before = Record(id=3, post_type="product", sku="A1", post_title="Old")
    after = Record(id=3, post_type="product", sku="A1", post_title="New")

    with responses.RequestsMock() as rsps:
        rsps.add(responses.POST, "https://remote.example/wrc/v1/receive-product-data", json="ok", status=200)
        w.on_pre_update(3, before)
        outcomes = w.on_post_save(3, after)

    statuses = sorted(o.status.name for o in outcomes)
    # post pipeline skips products; product pipeline sends the delta
    assert statuses == [OutcomeStatus.SENT.name, OutcomeStatus.SKIPPED.name]
    assert len(rsps.calls) == 1


def test_host_emits_on_lifecycle_bus_directly(sender_settings) -> None:
    w = ModeRouter(_settings(sender_settings), FakeHost(catalog=True)).wire()
    before = Record(id=5, post_type="product", sku="C3", post_excerpt="old")
    after = Record(id=5, post_type="product", sku="C3", post_excerpt="new")

    with responses.RequestsMock() as rsps:
        rsps.add(responses.POST, "https://remote.example/wrc/v1/receive-product-data", json="ok", status=200)
        w.lifecycle.emit(PRE_UPDATE, 5, before, SaveContext())
        outcomes = w.lifecycle.emit(POST_SAVE, 5, after, SaveContext())

    sent = [o for o in outcomes if o.status is OutcomeStatus.SENT]
    assert len(sent) == 1
    assert sent[0].payload == {"post_excerpt": "new", "language": "nl", "sku": "C3"}
    assert json.loads(rsps.calls[0].request.body) == sent[0].payload


def test_lifecycle_call_without_record_id_is_reported(sender_settings) -> None:
    w = ModeRouter(_settings(sender_settings), FakeHost(catalog=False)).wire()
    outcomes = w.lifecycle.emit(POST_SAVE, Record(id=1), SaveContext())
    assert [o.status for o in outcomes] == [OutcomeStatus.FATAL]
    assert "(record_id, record, ctx)" in (outcomes[0].reason or "")
