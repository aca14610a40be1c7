# wrc_platform/_types.py
# Websites REST Connector - records, snapshots, save context and hook outcomes.
# Copyright (c) 2025-2026 Websites REST Connector
from __future__ import annotations

from dataclasses import dataclass, field, fields as dc_fields
from collections.abc import Mapping
from enum import Enum, auto
from types import MappingProxyType
from typing import Any, Literal, Protocol

SyncMode = Literal["send", "receive"]

PRODUCT_TYPE = "product"
IDENTIFIER_FIELD = "sku"

# Sent as-is for plain content
POST_FIELDS: tuple[str, ...] = (
    "id",
    "post_title",
    "post_content",
    "post_excerpt",
    "post_name",
    "post_status",
    "post_type",
    "post_date",
)

# Compared between snapshot and new state for products
PRODUCT_TRACKED_FIELDS: tuple[str, ...] = (
    "post_name",
    "post_title",
    "post_content",
    "post_excerpt",
)

SNAPSHOT_FIELDS: tuple[str, ...] = ("id", IDENTIFIER_FIELD, *PRODUCT_TRACKED_FIELDS)

# Host product catalog attribute -> record field
CATALOG_FIELD_MAP: dict[str, str] = {
    "slug": "post_name",
    "name": "post_title",
    "description": "post_content",
    "short_description": "post_excerpt",
}


@dataclass(frozen=True)
class Record:
    id: int
    post_type: str = "post"
    post_title: str = ""
    post_content: str = ""
    post_excerpt: str = ""
    post_name: str = ""
    post_status: str = ""
    post_date: str = ""
    sku: str = ""

    @property
    def is_product(self) -> bool:
        return self.post_type == PRODUCT_TYPE

    def value(self, name: str) -> Any:
        return getattr(self, name)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Record":
        known = {f.name for f in dc_fields(cls)}
        kw: dict[str, Any] = {}
        for k, v in (data or {}).items():
            k = CATALOG_FIELD_MAP.get(k, k)
            if k in known:
                kw[k] = v
        if "id" not in kw:
            raise ValueError("record mapping has no id")
        kw["id"] = int(kw["id"])
        if "type" in (data or {}) and "post_type" not in kw:
            kw["post_type"] = str(data["type"])
        return cls(**kw)


@dataclass(frozen=True)
class SaveContext:
    """Host flags describing the save that fired the lifecycle event."""
    autosave: bool = False
    revision: bool = False

    @property
    def qualifies(self) -> bool:
        return not (self.autosave or self.revision)


@dataclass(frozen=True)
class Snapshot:
    record_id: int
    values: Mapping[str, Any]
    captured_at: float

    @classmethod
    def of(cls, record: Record, *, captured_at: float) -> "Snapshot":
        vals = {name: record.value(name) for name in SNAPSHOT_FIELDS}
        return cls(record_id=record.id, values=MappingProxyType(vals), captured_at=captured_at)

    def get(self, name: str, default: Any = None) -> Any:
        return self.values.get(name, default)


# Hook outcomes

class OutcomeStatus(Enum):
    SENT = auto()
    SKIPPED = auto()
    FAILED = auto()
    FATAL = auto()


@dataclass(frozen=True)
class SyncOutcome:
    status: OutcomeStatus
    reason: str = ""
    http_status: int | None = None
    payload: dict[str, Any] | None = field(default=None, compare=False)

    @property
    def ok(self) -> bool:
        return self.status in (OutcomeStatus.SENT, OutcomeStatus.SKIPPED)

    @classmethod
    def sent(cls, http_status: int | None, payload: dict[str, Any] | None = None) -> "SyncOutcome":
        return cls(OutcomeStatus.SENT, "sent", http_status, payload)

    @classmethod
    def skipped(cls, reason: str) -> "SyncOutcome":
        return cls(OutcomeStatus.SKIPPED, reason)

    @classmethod
    def failed(cls, reason: str, http_status: int | None = None) -> "SyncOutcome":
        return cls(OutcomeStatus.FAILED, reason, http_status)

    @classmethod
    def fatal(cls, reason: str) -> "SyncOutcome":
        return cls(OutcomeStatus.FATAL, reason)


class HostEnvironment(Protocol):
    def product_catalog_active(self) -> bool: ...
