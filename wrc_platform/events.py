# wrc_platform/events.py
# Websites REST Connector - named events for host lifecycle hooks and downstream consumers.
# Copyright (c) 2025-2026 Websites REST Connector
from __future__ import annotations

import threading
from typing import Any, Callable

Handler = Callable[..., Any]

# host lifecycle
PRE_UPDATE = "pre_update"
POST_SAVE = "post_save"

# extensibility points for received data
ON_RECEIVE_POST_DATA = "on_receive_post_data"
ON_RECEIVE_PRODUCT_DATA = "on_receive_product_data"


class EventBus:
    """
    Handlers run in registration order on the caller's thread. A handler
    exception propagates out of ``emit`` and stops the remaining handlers.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[Handler]] = {}
        self._lock = threading.Lock()

    def on(self, event: str, fn: Handler) -> Handler:
        with self._lock:
            self._handlers.setdefault(event, []).append(fn)
        return fn

    def subscribe(self, event: str) -> Callable[[Handler], Handler]:
        def deco(fn: Handler) -> Handler:
            return self.on(event, fn)
        return deco

    def off(self, event: str, fn: Handler) -> bool:
        with self._lock:
            lst = self._handlers.get(event) or []
            if fn in lst:
                lst.remove(fn)
                return True
        return False

    def handlers(self, event: str) -> list[Handler]:
        with self._lock:
            return list(self._handlers.get(event) or [])

    def has(self, event: str) -> bool:
        return bool(self.handlers(event))

    def events(self) -> list[str]:
        with self._lock:
            return sorted(k for k, v in self._handlers.items() if v)

    def emit(self, event: str, *args: Any, **kwargs: Any) -> list[Any]:
        return [fn(*args, **kwargs) for fn in self.handlers(event)]
