# /wrc.py
# Websites REST Connector - application factory and server entry point
# Copyright (c) 2025-2026 Websites REST Connector
from __future__ import annotations

import argparse
import json
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import uvicorn
from fastapi import FastAPI

from _logging import log as BASE_LOG
from wrc_platform import config_base
from wrc_platform._types import HostEnvironment
from wrc_platform.events import EventBus
from wrc_platform.mode_router import ModeRouter, Wiring
from wrc_platform.settings import SettingsStore

_log = BASE_LOG.child("WRC")


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    try:
        yield
    finally:
        wiring = getattr(app.state, "wiring", None)
        if wiring is not None:
            wiring.close()


def create_app(
    settings: SettingsStore | None = None,
    *,
    host: HostEnvironment | None = None,
    events: EventBus | None = None,
) -> FastAPI:
    """
    Build the application and wire it for the configured mode. Downstream
    consumers subscribe on ``app.state.wiring.events``; host adapters fire
    lifecycle events through ``app.state.wiring.on_pre_update`` and
    ``app.state.wiring.on_post_save``.
    """
    settings = settings or SettingsStore()
    app = FastAPI(title="Websites REST Connector", docs_url=None, redoc_url=None, lifespan=_lifespan)
    wiring: Wiring = ModeRouter(settings, host, events=events).wire(app)
    app.state.wiring = wiring
    app.state.settings = settings
    return app


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="wrc", description="Websites REST connector")
    ap.add_argument("--host", default=None)
    ap.add_argument("--port", type=int, default=None)
    args = ap.parse_args(argv)

    cfg: dict[str, Any] = config_base.load_config()
    debug = bool((cfg.get("runtime") or {}).get("debug"))
    if debug:
        BASE_LOG.set_level("debug")
    _log.debug(f"effective config: {json.dumps(config_base.redact_config(cfg), sort_keys=True)}")

    server = cfg.get("server") or {}
    host = args.host or str(server.get("host") or "0.0.0.0")
    port = int(args.port or server.get("port") or 8788)

    app = create_app()
    wiring: Wiring = app.state.wiring

    print("\nWebsites REST Connector:")
    print(f"  Config:  {config_base.config_path()} (JSON)")
    print(f"  Wiring:  {wiring.summary()}\n")

    if wiring.mode != "receive":
        _log.info("send mode: lifecycle hooks are driven by the host adapter; no server started")
        return 0

    uvicorn.run(app, host=host, port=port, log_level=("debug" if debug else "warning"))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
