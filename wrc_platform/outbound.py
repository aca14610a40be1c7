# wrc_platform/outbound.py
# Websites REST Connector - authenticated JSON POSTs to the remote site.
# Copyright (c) 2025-2026 Websites REST Connector
from __future__ import annotations

import base64
import json
from collections.abc import Mapping
from typing import Any

import requests

from _logging import log as BASE_LOG

from ._types import POST_FIELDS, Record
from .errors import CredentialsMissing, TransportError
from .settings import SyncConfig

__all__ = [
    "OutboundSync",
    "POST_ENDPOINT",
    "PRODUCT_ENDPOINT",
    "build_url",
    "basic_auth_header",
    "post_payload",
]

_log = BASE_LOG.child("OUTBOUND")

NAMESPACE = "/wrc/v1"
POST_ENDPOINT = f"{NAMESPACE}/receive-post-data"
PRODUCT_ENDPOINT = f"{NAMESPACE}/receive-product-data"
USER_AGENT = "WebsitesRESTConnector/1.0"


def build_url(base_url: str, endpoint_path: str) -> str:
    return (base_url or "").rstrip("/") + "/" + (endpoint_path or "").lstrip("/")


def basic_auth_header(username: str, password: str) -> str:
    token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


def post_payload(record: Record) -> dict[str, Any]:
    return {name: record.value(name) for name in POST_FIELDS}


class OutboundSync:
    def __init__(self, config: SyncConfig, session: requests.Session | None = None):
        self.config = config
        self.session = session or requests.Session()
        if config.password:
            _log.redact(config.password, basic_auth_header(config.username, config.password).split(" ", 1)[1])

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": basic_auth_header(self.config.username, self.config.password),
            "User-Agent": USER_AGENT,
        }

    def send(self, endpoint_path: str, payload: Mapping[str, Any]) -> requests.Response:
        cfg = self.config
        if not cfg.complete:
            raise CredentialsMissing(f"outbound sync not configured: missing {', '.join(cfg.missing())}")

        url = build_url(cfg.api_url, endpoint_path)
        body = json.dumps(dict(payload), ensure_ascii=False)
        try:
            resp = self.session.post(
                url,
                data=body.encode("utf-8"),
                headers=self._headers(),
                timeout=cfg.timeout,
                verify=cfg.verify_ssl,
            )
            resp.raise_for_status()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise TransportError(f"POST {url} -> HTTP {status}: {e}", status=status) from e
        except requests.RequestException as e:
            raise TransportError(f"POST {url} failed: {e}") from e

        _log.debug(f"POST {url} -> {resp.status_code} ({len(body)} bytes)")
        return resp

    def send_post(self, record: Record) -> requests.Response:
        return self.send(POST_ENDPOINT, post_payload(record))

    def send_product(self, delta: Mapping[str, Any]) -> requests.Response:
        return self.send(PRODUCT_ENDPOINT, delta)

    def close(self) -> None:
        self.session.close()
