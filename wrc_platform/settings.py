# wrc_platform/settings.py
# Websites REST Connector - read-only view over the persisted connector settings.
# Copyright (c) 2025-2026 Websites REST Connector
from __future__ import annotations

import os
import re
from dataclasses import dataclass
from collections.abc import Mapping
from typing import Any, Callable

from _logging import log as BASE_LOG

from . import config_base
from ._types import SyncMode
from .errors import ConfigUnavailable

_log = BASE_LOG.child("SETTINGS")

MODES: tuple[str, ...] = ("send", "receive")
DEFAULT_MODE: SyncMode = "receive"
DEFAULT_LANGUAGE = "nl"
DEFAULT_TIMEOUT = 180.0
MIN_TIMEOUT = 180.0

TEXT_KEYS: tuple[str, ...] = (
    "wrc_api_url",
    "wrc_api_username",
    "wrc_api_password",
    "wrc_mode",
    "wrc_language",
    "wrc_inbound_username",
    "wrc_inbound_password",
)

_CTRL = re.compile(r"[\x00-\x1f\x7f]")


def _env_bool(name: str) -> bool:
    v = (os.getenv(name) or "").strip().lower()
    return v in ("1", "true", "yes", "on")


def sanitize_text(v: Any) -> str:
    s = "" if v is None else str(v)
    s = re.sub(r"<[^>]*>", "", s)
    s = _CTRL.sub(" ", s)
    return " ".join(s.split())


def _as_timeout(v: Any) -> float:
    try:
        t = float(v)
    except (TypeError, ValueError):
        return DEFAULT_TIMEOUT
    return max(MIN_TIMEOUT, t)


@dataclass(frozen=True)
class SyncConfig:
    api_url: str = ""
    username: str = ""
    password: str = ""
    mode: SyncMode = DEFAULT_MODE
    language: str = DEFAULT_LANGUAGE
    timeout: float = DEFAULT_TIMEOUT
    verify_ssl: bool = True

    @property
    def complete(self) -> bool:
        return bool(self.api_url and self.username and self.password)

    def missing(self) -> list[str]:
        out: list[str] = []
        if not self.api_url:
            out.append("wrc_api_url")
        if not self.username:
            out.append("wrc_api_username")
        if not self.password:
            out.append("wrc_api_password")
        return out


class SettingsStore:
    """
    Settings live under one section of config.json, the same way the
    host keeps them under a single option. ``loader`` returns the raw
    user config, or None when it was never written.
    """

    def __init__(
        self,
        loader: Callable[[], Mapping[str, Any] | None] | None = None,
        saver: Callable[[dict[str, Any]], None] | None = None,
    ):
        self._loader = loader or config_base.read_user_config
        self._saver = saver or config_base.save_config

    def _raw(self) -> Mapping[str, Any]:
        try:
            raw = self._loader()
        except (OSError, ValueError) as e:
            raise ConfigUnavailable(f"settings store unreadable: {e}") from e
        if raw is None:
            raise ConfigUnavailable("settings store was never initialized")
        return raw

    def get_all(self) -> dict[str, str]:
        node = self._raw().get(config_base.SETTINGS_KEY)
        if not isinstance(node, Mapping):
            raise ConfigUnavailable(f"no '{config_base.SETTINGS_KEY}' section in settings store")
        return {str(k): ("" if v is None else str(v)) for k, v in node.items()}

    def get_mode(self) -> SyncMode:
        try:
            mode = (self.get_all().get("wrc_mode") or "").strip().lower()
        except ConfigUnavailable:
            return DEFAULT_MODE
        return mode if mode in MODES else DEFAULT_MODE  # type: ignore[return-value]

    def runtime(self) -> dict[str, Any]:
        try:
            rt = self._raw().get("runtime")
        except ConfigUnavailable:
            return {}
        return dict(rt) if isinstance(rt, Mapping) else {}

    def local_dev(self) -> bool:
        return _env_bool("WRC_LOCAL_DEV") or bool(self.runtime().get("local_dev"))

    def product_catalog_active(self) -> bool:
        return _env_bool("WRC_PRODUCT_CATALOG") or bool(self.runtime().get("product_catalog"))

    def sync_config(self) -> SyncConfig:
        s = self.get_all()
        return SyncConfig(
            api_url=(s.get("wrc_api_url") or "").strip(),
            username=(s.get("wrc_api_username") or "").strip(),
            password=s.get("wrc_api_password") or "",
            mode=self.get_mode(),
            language=(s.get("wrc_language") or "").strip() or DEFAULT_LANGUAGE,
            timeout=_as_timeout(s.get("wrc_timeout") or DEFAULT_TIMEOUT),
            verify_ssl=not self.local_dev(),
        )

    def inbound_credentials(self) -> tuple[str, str]:
        try:
            s = self.get_all()
        except ConfigUnavailable:
            return "", ""
        return (s.get("wrc_inbound_username") or "").strip(), s.get("wrc_inbound_password") or ""

    def save(self, settings: Mapping[str, Any]) -> dict[str, Any]:
        clean: dict[str, Any] = {}
        for k in TEXT_KEYS:
            if k in settings:
                clean[k] = sanitize_text(settings[k])
        if "wrc_mode" in clean and clean["wrc_mode"].lower() not in MODES:
            _log.warn(f"unknown mode {clean['wrc_mode']!r}; storing default {DEFAULT_MODE!r}")
            clean["wrc_mode"] = DEFAULT_MODE
        if "wrc_timeout" in settings:
            clean["wrc_timeout"] = _as_timeout(settings["wrc_timeout"])

        try:
            current = dict(self._raw())
        except ConfigUnavailable:
            current = {}
        section = dict(current.get(config_base.SETTINGS_KEY) or {})
        section.update(clean)
        current[config_base.SETTINGS_KEY] = section
        self._saver(current)
        _log.info(f"settings saved ({', '.join(sorted(clean)) or 'nothing'})")
        _log.debug(f"settings now {config_base.redact_config({config_base.SETTINGS_KEY: section})[config_base.SETTINGS_KEY]}")
        return section
