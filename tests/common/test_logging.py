"""Tests for console log formatting and structured context."""

from __future__ import annotations

import logging

from docshub_api.common.logging import (
    ConsoleLogFormatter,
    bind_request_context,
    clear_request_context,
    current_correlation_id,
    log_context,
)


def _record(message: str, **extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="docshub_api.tests",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=message,
        args=None,
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_renders_correlation_id_and_extras() -> None:
    bind_request_context("cid-123")
    try:
        line = ConsoleLogFormatter().format(
            _record("policy.workspace.create", workspace_id="ws-1", flag=True, note=None)
        )
    finally:
        clear_request_context()

    assert "INFO" in line
    assert "docshub_api.tests [cid=cid-123] policy.workspace.create" in line
    assert "workspace_id=ws-1" in line
    assert "flag=True" in line
    assert "note=null" in line
    assert line.split(" ", 1)[0].endswith("Z")


def test_formatter_without_request_context() -> None:
    clear_request_context()

    line = ConsoleLogFormatter().format(_record("app.startup"))

    assert "[cid=-]" in line
    assert current_correlation_id() is None


def test_log_context_drops_unset_identifiers() -> None:
    assert log_context(workspace_id="ws-1", member_id=None, reason="expired") == {
        "workspace_id": "ws-1",
        "reason": "expired",
    }
