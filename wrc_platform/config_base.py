# wrc_platform/config_base.py
# Websites REST Connector - config file location, defaults and persistence.
# Copyright (c) 2025-2026 Websites REST Connector
from __future__ import annotations

import copy
import json
import os
import secrets
import threading
import time
from pathlib import Path
from typing import Any, Dict

SETTINGS_KEY = "websites_rest_connector_settings"
REDACTED = "••••••••"

# ------------------------------------------------------------
# Base dir resolution
# ------------------------------------------------------------
def CONFIG_BASE() -> Path:
    """
    Determine the base directory for config files.

    Priority:
      1) $WRC_CONFIG_BASE if set
      2) /config (when running in a container that mounts /config)
      3) Project root (one level up from this file)
    """
    env = os.getenv("WRC_CONFIG_BASE")
    if env:
        return Path(env)

    if Path("/app").exists():
        return Path("/config")

    return Path(__file__).resolve().parents[1]


# Default config structure
DEFAULT_CFG: Dict[str, Any] = {
    # --- Connector settings (the host option store) -------------------------
    SETTINGS_KEY: {
        "wrc_api_url": "",                              # Base URL of the remote site (https://other.example)
        "wrc_api_username": "",                         # Basic auth user on the remote site
        "wrc_api_password": "",                         # Basic auth password on the remote site
        "wrc_mode": "receive",                          # "send" | "receive"
        "wrc_language": "nl",                           # Language code attached to every product delta
        "wrc_timeout": 180,                             # Outbound HTTP timeout (seconds)
        "wrc_inbound_username": "",                     # Credentials remote senders must present
        "wrc_inbound_password": "",
    },

    # --- Runtime -------------------------------------------------------------
    "runtime": {
        "debug": False,                                 # Verbose logging
        "local_dev": False,                             # Skip TLS verification on outbound calls
        "product_catalog": False,                       # Host has a product catalog extension active
    },

    # --- Server --------------------------------------------------------------
    "server": {
        "host": "0.0.0.0",
        "port": 8788,
    },
}

SECRET_KEYS: tuple[tuple[str, str], ...] = (
    (SETTINGS_KEY, "wrc_api_password"),
    (SETTINGS_KEY, "wrc_inbound_password"),
)


# ------------------------------------------------------------
# Helpers: paths, IO, merging
# ------------------------------------------------------------
def config_path() -> Path:
    return CONFIG_BASE() / "config.json"


def _read_json(p: Path) -> Dict[str, Any]:
    with p.open("r", encoding="utf-8") as f:
        return json.load(f)


def _write_json_atomic(p: Path, data: Dict[str, Any]) -> None:
    p.parent.mkdir(parents=True, exist_ok=True)
    suffix = f".{time.time_ns()}.{os.getpid()}.{threading.get_ident()}.{secrets.token_hex(4)}.tmp"
    tmp = p.with_suffix(suffix)

    with tmp.open("w", encoding="utf-8", newline="\n") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
        f.write("\n")
    tmp.replace(p)


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    out = copy.deepcopy(base)
    for k, v in (override or {}).items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)  # type: ignore[assignment]
        else:
            out[k] = v
    return out


# ------------------------------------------------------------
# Public API
# ------------------------------------------------------------
def read_user_config() -> Dict[str, Any] | None:
    """Raw config.json contents, or None when the file was never written."""
    p = config_path()
    if not p.exists():
        return None
    data = _read_json(p)
    return data if isinstance(data, dict) else None


def load_config() -> Dict[str, Any]:
    """
    Read config.json merged over DEFAULT_CFG. A missing or unreadable
    file yields the defaults.
    """
    try:
        user_cfg = read_user_config() or {}
    except (OSError, ValueError):
        user_cfg = {}
    return _deep_merge(DEFAULT_CFG, user_cfg)


def save_config(cfg: Dict[str, Any]) -> None:
    _write_json_atomic(config_path(), dict(cfg or {}))


def redact_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
    out = copy.deepcopy(cfg or {})
    for section, key in SECRET_KEYS:
        node = out.get(section)
        if isinstance(node, dict) and node.get(key):
            node[key] = REDACTED
    return out
