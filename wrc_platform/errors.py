# wrc_platform/errors.py
# Websites REST Connector - error taxonomy.
# Copyright (c) 2025-2026 Websites REST Connector
from __future__ import annotations


class ConnectorError(Exception):
    pass


class ConfigUnavailable(ConnectorError):
    """Settings store missing or never initialized. Outbound stays disabled."""


class CredentialsMissing(ConnectorError):
    """Outbound URL, username or password not configured."""


class TransportError(ConnectorError):
    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class Unauthorized(ConnectorError):
    status_code = 401

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class DispatchFailure(ConnectorError):
    """Inbound payload could not be decoded or a subscriber raised."""


__all__ = [
    "ConnectorError",
    "ConfigUnavailable",
    "CredentialsMissing",
    "TransportError",
    "Unauthorized",
    "DispatchFailure",
]
