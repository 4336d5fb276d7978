"""Unit tests for structured logging."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

from homebrew_tap_setup.logging import JsonFormatter, configure_logging


def _record(**extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="homebrew_tap_setup.workflow.runner",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Step %s",
        args=("started",),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_emits_core_fields() -> None:
    payload = json.loads(JsonFormatter().format(_record()))

    assert payload["level"] == "INFO"
    assert payload["logger"] == "homebrew_tap_setup.workflow.runner"
    assert payload["message"] == "Step started"
    assert "timestamp" in payload
    assert "extra" not in payload


def test_json_formatter_lifts_run_and_step_ids() -> None:
    payload = json.loads(JsonFormatter().format(_record(run_id="r-1", step_id="preflight")))

    assert payload["run_id"] == "r-1"
    assert payload["step_id"] == "preflight"
    assert "extra" not in payload


def test_json_formatter_includes_other_extra_fields() -> None:
    record = _record(run_id="r-1", command=["git", "status"], cwd=Path("/tmp/tap"))

    payload = json.loads(JsonFormatter().format(record))

    assert payload["run_id"] == "r-1"
    assert payload["extra"] == {"command": ["git", "status"], "cwd": "/tmp/tap"}


def test_json_formatter_includes_exception() -> None:
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = _record()
        record.exc_info = sys.exc_info()

    payload = json.loads(JsonFormatter().format(record))

    assert "RuntimeError: boom" in payload["exception"]


def test_configure_logging_replaces_handlers() -> None:
    root = logging.getLogger()
    previous_handlers = list(root.handlers)
    previous_level = root.level
    try:
        configure_logging("debug")
        configure_logging("info")

        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JsonFormatter)
        assert root.level == logging.INFO
        assert logging.getLogger("github").level == logging.INFO
    finally:
        for handler in list(root.handlers):
            root.removeHandler(handler)
        for handler in previous_handlers:
            root.addHandler(handler)
        root.setLevel(previous_level)
