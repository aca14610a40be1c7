# Websites REST Connector test scripts
from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Callable

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


@pytest.fixture()
def config_base(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setenv("WRC_CONFIG_BASE", str(tmp_path))
    monkeypatch.delenv("WRC_LOCAL_DEV", raising=False)
    monkeypatch.delenv("WRC_PRODUCT_CATALOG", raising=False)
    return tmp_path


@pytest.fixture()
def write_config(config_base: Path) -> Callable[[dict[str, Any]], Path]:
    def _write(cfg: dict[str, Any]) -> Path:
        p = config_base / "config.json"
        p.write_text(json.dumps(cfg), encoding="utf-8")
        return p
    return _write


@pytest.fixture()
def sender_settings() -> dict[str, Any]:
    return {
        "websites_rest_connector_settings": {
            "wrc_api_url": "https://remote.example/",
            "wrc_api_username": "editor",
            "wrc_api_password": "s3cret",
            "wrc_mode": "send",
        },
        "runtime": {"product_catalog": True},
    }


@pytest.fixture()
def receiver_settings() -> dict[str, Any]:
    return {
        "websites_rest_connector_settings": {
            "wrc_mode": "receive",
            "wrc_inbound_username": "username1",
            "wrc_inbound_password": "password1",
        },
        "runtime": {"product_catalog": True},
    }
