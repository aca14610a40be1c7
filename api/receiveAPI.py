# api/receiveAPI.py
# Websites REST Connector - inbound endpoints for pushed posts and product deltas.
# Copyright (c) 2025-2026 Websites REST Connector
from __future__ import annotations

import base64
import binascii
import hmac
import json
from typing import Any, Callable

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from _logging import log as BASE_LOG
from wrc_platform.errors import DispatchFailure, Unauthorized
from wrc_platform.events import ON_RECEIVE_POST_DATA, ON_RECEIVE_PRODUCT_DATA, EventBus

__all__ = [
    "NAMESPACE",
    "InboundReceiver",
    "register_receiver",
    "parse_basic_auth",
    "rest_error",
]

_log = BASE_LOG.child("RECEIVER")

NAMESPACE = "/wrc/v1"
REALM = "wrc"

CredentialsFn = Callable[[], tuple[str, str]]


def _digest_eq(a: str, b: str) -> bool:
    return hmac.compare_digest((a or "").encode("utf-8"), (b or "").encode("utf-8"))


def parse_basic_auth(header: str | None) -> tuple[str, str]:
    """Split a Basic Authorization header into (user, password); UTF-8, first colon."""
    scheme, _, token = (header or "").strip().partition(" ")
    if scheme.lower() != "basic" or not token.strip():
        raise Unauthorized("Authentication Required")
    try:
        raw = base64.b64decode(token.strip(), validate=True).decode("utf-8")
    except (binascii.Error, ValueError) as e:
        raise Unauthorized("Invalid Credentials") from e
    user, sep, pwd = raw.partition(":")
    if not sep:
        raise Unauthorized("Invalid Credentials")
    return user, pwd


def rest_error(code: str, message: str, status: int, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(
        {"code": code, "message": message, "data": {"status": status}},
        status_code=status,
        headers=headers,
    )


async def _unauthorized_handler(request: Request, exc: Exception) -> JSONResponse:
    msg = exc.message if isinstance(exc, Unauthorized) else "Authentication Required"
    return rest_error("rest_forbidden", msg, 401, {"WWW-Authenticate": f'Basic realm="{REALM}"'})


class InboundReceiver:
    """
    Both routes share one permission check and one shape: decode the JSON
    body, hand it to the subscribers of a named event, answer with a fixed
    message. There is no dedup; the same payload is accepted every time.
    """

    def __init__(self, credentials: CredentialsFn, bus: EventBus):
        self._credentials = credentials
        self.bus = bus

    def permission_check(self, request: Request) -> bool:
        got_user, got_pwd = parse_basic_auth(request.headers.get("authorization"))
        user, pwd = self._credentials()
        _log.redact(pwd)
        if not (user and pwd):
            _log.warn("inbound credentials are not configured; refusing request")
            raise Unauthorized("Invalid Credentials")
        ok_user = _digest_eq(got_user, user)
        ok_pwd = _digest_eq(got_pwd, pwd)
        if not (ok_user and ok_pwd):
            _log.warn(f"invalid credentials for user {got_user!r}")
            raise Unauthorized("Invalid Credentials")
        return True

    async def _receive(self, request: Request, *, event: str, label: str) -> JSONResponse:
        body = await request.body()
        try:
            try:
                data: Any = json.loads(body.decode("utf-8"))
            except (UnicodeDecodeError, ValueError) as e:
                raise DispatchFailure(f"malformed JSON body: {e}") from e
            try:
                await run_in_threadpool(self.bus.emit, event, data, request)
            except Exception as e:
                raise DispatchFailure(f"{event} subscriber failed: {type(e).__name__}: {e}") from e
        except DispatchFailure as e:
            _log.error(f"{label} request ({len(body)} bytes): {e}")
            return rest_error("wrc_dispatch_failed", f"Error processing {label} request", 500)

        _log.info(f"{label} data received ({len(body)} bytes, {len(self.bus.handlers(event))} subscriber(s))")
        return JSONResponse(f"{label.capitalize()} processed successfully", status_code=200)

    async def receive_post_data(self, request: Request) -> JSONResponse:
        return await self._receive(request, event=ON_RECEIVE_POST_DATA, label="post")

    async def receive_product_data(self, request: Request) -> JSONResponse:
        return await self._receive(request, event=ON_RECEIVE_PRODUCT_DATA, label="product")

    def router(self, *, posts: bool = True, products: bool = True) -> APIRouter:
        r = APIRouter(prefix=NAMESPACE, tags=["receive"], dependencies=[Depends(self.permission_check)])
        if posts:
            r.add_api_route("/receive-post-data", self.receive_post_data, methods=["POST"])
        if products:
            r.add_api_route("/receive-product-data", self.receive_product_data, methods=["POST"])
        return r


def register_receiver(
    app: FastAPI,
    credentials: CredentialsFn,
    bus: EventBus,
    *,
    posts: bool = True,
    products: bool = True,
) -> list[str]:
    rx = InboundReceiver(credentials, bus)
    app.add_exception_handler(Unauthorized, _unauthorized_handler)
    app.include_router(rx.router(posts=posts, products=products))
    mounted: list[str] = []
    if posts:
        mounted.append(f"{NAMESPACE}/receive-post-data")
    if products:
        mounted.append(f"{NAMESPACE}/receive-product-data")
    return mounted
