from __future__ import annotations

from .receiveAPI import InboundReceiver, register_receiver, rest_error, NAMESPACE

__all__ = [
    "InboundReceiver",
    "register_receiver",
    "rest_error",
    "NAMESPACE",
]
