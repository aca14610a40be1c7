# Websites REST Connector test scripts
from __future__ import annotations

import io
import json

import pytest

import wrc
from _logging import MASK, Logger, log
from wrc_platform.config_base import REDACTED
from wrc_platform.events import EventBus
from wrc_platform.outbound import OutboundSync, basic_auth_header
from wrc_platform.settings import SyncConfig


def test_bus_runs_handlers_in_order_and_propagates_errors() -> None:
    bus = EventBus()
    seen: list[str] = []

    @bus.subscribe("evt")
    def first(x: int) -> int:
        seen.append(f"first:{x}")
        return x + 1

    bus.on("evt", lambda x: seen.append(f"second:{x}"))
    assert bus.emit("evt", 1)[0] == 2
    assert seen == ["first:1", "second:1"]

    def broken(x: int) -> None:
        raise ValueError("nope")

    bus.on("evt", broken)
    with pytest.raises(ValueError):
        bus.emit("evt", 2)

    assert bus.off("evt", broken) is True
    assert bus.off("evt", broken) is False
    assert bus.emit("missing") == []


def test_logger_module_tag_and_json_sink(tmp_path) -> None:
    out = io.StringIO()
    base = Logger(stream=out, use_color=False, show_time=False)
    sink = tmp_path / "log.jsonl"
    base.enable_json(str(sink))

    base.child("OUTBOUND").warn("remote unreachable")
    base("custom", level="error", module="RECEIVER", extra={"status": 500})

    lines = out.getvalue().splitlines()
    assert lines[0] == "[OUTBOUND] WARN remote unreachable"
    assert lines[1] == "[RECEIVER] ERROR custom"

    records = [json.loads(x) for x in sink.read_text(encoding="utf-8").splitlines()]
    assert records[1]["extra"] == {"status": 500}
    assert records[1]["ctx"]["module"] == "RECEIVER"


def test_logger_level_filters() -> None:
    out = io.StringIO()
    lg = Logger(stream=out, level="error", use_color=False, show_time=False)
    lg.info("hidden")
    lg.error("shown")
    assert out.getvalue().strip() == "ERROR shown"


def test_children_share_level_and_redaction(tmp_path) -> None:
    out = io.StringIO()
    root = Logger(stream=out, level="warn", use_color=False, show_time=False)
    mod = root.child("OUTBOUND")

    root.set_level("info")
    root.redact("hunter2", "", None)
    sink = tmp_path / "log.jsonl"
    root.enable_json(str(sink))
    mod.info("auth with hunter2 failed", extra={"pw": "hunter2", "n": 1})

    assert out.getvalue().strip() == f"[OUTBOUND] INFO auth with {MASK} failed"
    rec = json.loads(sink.read_text(encoding="utf-8"))
    assert rec["msg"] == f"auth with {MASK} failed"
    assert rec["extra"] == {"pw": MASK, "n": 1}


def test_outbound_credentials_never_reach_the_log(monkeypatch: pytest.MonkeyPatch) -> None:
    out = io.StringIO()
    monkeypatch.setattr(log._core, "stream", out)
    monkeypatch.setattr(log._core, "secrets", set())
    monkeypatch.setattr(log._core, "use_color", False)

    cfg = SyncConfig(api_url="https://remote.example/", username="editor", password="pä55word", mode="send")
    OutboundSync(cfg)
    token = basic_auth_header("editor", "pä55word").split(" ", 1)[1]
    log.child("OUTBOUND").error(f"rejected pä55word / {token}")

    text = out.getvalue()
    assert "pä55word" not in text
    assert token not in text
    assert text.count(MASK) == 2


def test_redacted_config_in_debug_output(write_config, sender_settings, monkeypatch: pytest.MonkeyPatch) -> None:
    out = io.StringIO()
    monkeypatch.setattr(log._core, "stream", out)
    monkeypatch.setattr(log._core, "secrets", set())
    monkeypatch.setattr(log._core, "use_color", False)
    monkeypatch.setattr(log._core, "level_no", log._core.level_no)
    sender_settings["runtime"]["debug"] = True
    write_config(sender_settings)

    assert wrc.main([]) == 0
    text = out.getvalue()
    assert "effective config" in text
    assert "s3cret" not in text
    assert REDACTED in text
