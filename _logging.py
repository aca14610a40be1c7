# _logging.py
# Websites REST Connector - module-tagged console logger with secret masking and an optional JSON-lines sink.
from __future__ import annotations
import sys, datetime, json, os, threading, time
from pathlib import Path
from typing import Any, Optional, TextIO, Mapping, Dict

RESET = "\033[0m"
DIM = "\033[90m"
RED = "\033[91m"
YELLOW = "\033[33m"
BLUE = "\033[94m"

LEVELS = {"silent": 60, "error": 40, "warn": 30, "info": 20, "debug": 10}
COLORS = {"DEBUG": YELLOW, "INFO": BLUE, "WARN": YELLOW, "ERROR": RED}

MASK = "********"

# WRC_DEBUG wins; otherwise runtime.debug from config.json, re-read at most every 5s
_gate: Dict[str, Any] = {"ts": 0.0, "on": False}

def _debug_from_config() -> bool:
    now = time.time()
    if now - _gate["ts"] > 5.0:
        base = os.getenv("WRC_CONFIG_BASE")
        path = (Path(base) if base else Path(".")) / "config.json"
        try:
            cfg = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            cfg = {}
        rt = cfg.get("runtime") if isinstance(cfg, dict) else None
        _gate.update(ts=now, on=bool((rt or {}).get("debug")))
    return _gate["on"]

def _debug_enabled() -> bool:
    if (os.getenv("WRC_DEBUG") or "").strip().lower() in ("1", "true", "yes", "on"):
        return True
    return _debug_from_config()


class _Core:
    """State shared by a logger and every child bound from it."""

    def __init__(self, stream: TextIO, level_no: int, use_color: bool, show_time: bool):
        self.stream = stream
        self.level_no = level_no
        self.use_color = use_color
        self.show_time = show_time
        self.json_stream: Optional[TextIO] = None
        self.secrets: set[str] = set()
        self.lock = threading.Lock()

    def mask(self, text: str) -> str:
        # longest first so a secret containing another is masked whole
        for s in sorted(self.secrets, key=len, reverse=True):
            text = text.replace(s, MASK)
        return text


class Logger:
    """
    Children made with ``child``/``bind`` only add context; level, sinks
    and the redaction list stay shared, so ``set_level`` on the root logger
    reaches module loggers created at import time.
    """

    def __init__(
        self,
        stream: TextIO = sys.stdout,
        level: str = "info",
        use_color: bool = True,
        show_time: bool = True,
        *,
        _core: Optional[_Core] = None,
        _context: Optional[Dict[str, Any]] = None,
    ):
        self._core = _core or _Core(stream, LEVELS.get(level, 20), use_color, show_time)
        self._context: Dict[str, Any] = dict(_context or {})

    def set_level(self, level: str) -> None:
        self._core.level_no = LEVELS.get(level, self._core.level_no)

    def enable_json(self, file_path: str) -> None:
        self._core.json_stream = open(file_path, "a", encoding="utf-8")

    def redact(self, *values: Any) -> None:
        """Mask these values wherever they show up in a message. Blank values are ignored."""
        for v in values:
            s = str(v or "")
            if s.strip():
                self._core.secrets.add(s)

    def bind(self, **ctx: Any) -> "Logger":
        return Logger(_core=self._core, _context={**self._context, **ctx})

    def child(self, name: str) -> "Logger":
        return self.bind(module=name)

    def _line(self, label: str, msg: str) -> str:
        core = self._core
        mod = str(self._context.get("module") or "").strip()
        col = COLORS.get(label) if core.use_color else None
        lvl = f"{col}{label}{RESET}" if col else label
        line = f"{f'[{mod}]' if mod else ''} {lvl} {msg}".strip()
        if not core.show_time:
            return line
        ts = datetime.datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        return f"{DIM}[{ts}]{RESET} {line}" if core.use_color else f"[{ts}] {line}"

    def _emit(self, severity: str, *parts: Any, extra: Optional[Mapping[str, Any]] = None) -> None:
        core = self._core
        sev_no = LEVELS[severity]
        if core.level_no > sev_no and not (severity == "debug" and _debug_enabled()):
            return
        label = severity.upper()
        msg = core.mask(" ".join(str(p) for p in parts))
        with core.lock:
            core.stream.write(self._line(label, msg) + "\n")
            core.stream.flush()
            if core.json_stream is None:
                return
            rec: Dict[str, Any] = {
                "ts": datetime.datetime.now(datetime.timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
                "level": label,
                "msg": msg,
                "ctx": self._context,
            }
            if extra:
                rec["extra"] = {k: core.mask(v) if isinstance(v, str) else v for k, v in extra.items()}
            core.json_stream.write(json.dumps(rec, ensure_ascii=False, default=str) + "\n")
            core.json_stream.flush()

    def debug(self, *parts: Any, extra: Optional[Mapping[str, Any]] = None) -> None:
        self._emit("debug", *parts, extra=extra)

    def info(self, *parts: Any, extra: Optional[Mapping[str, Any]] = None) -> None:
        self._emit("info", *parts, extra=extra)

    def warn(self, *parts: Any, extra: Optional[Mapping[str, Any]] = None) -> None:
        self._emit("warn", *parts, extra=extra)

    def error(self, *parts: Any, extra: Optional[Mapping[str, Any]] = None) -> None:
        self._emit("error", *parts, extra=extra)

    # log("text", level="warn", module="OUTBOUND", extra={...})
    def __call__(
        self,
        message: str,
        *,
        level: str = "info",
        module: Optional[str] = None,
        extra: Optional[Mapping[str, Any]] = None,
    ) -> None:
        target = self.bind(module=module) if module else self
        lvl = (level or "info").lower()
        if lvl == "warning":
            lvl = "warn"
        target._emit(lvl if lvl in ("debug", "warn", "error") else "info", message, extra=extra)

# default instance
log = Logger()

__all__ = ["Logger", "log", "LEVELS", "MASK"]
