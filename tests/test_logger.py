from __future__ import annotations

import logging
import uuid

import pytest

from netutil.clients.pipeline import ResponseMetadata, WireRequest
from netutil.clients.session import HTTPXSession
from netutil.exceptions import ControllerError, GeneralFailure
from netutil.logger import (
    REDACTED,
    ErrorLogMessage,
    LogEntry,
    NetworkLogger,
    RequestLogMessage,
    ResponseLogMessage,
    redact_headers,
    strip_url_query_and_fragment,
)
from netutil.types import RequestId

REQUEST_ID = RequestId(uuid.UUID("12345678-1234-5678-1234-567812345678"))


def _request_message() -> RequestLogMessage:
    return RequestLogMessage(
        session=HTTPXSession(),
        wire_request=WireRequest(
            method="GET",
            url="https://api.example/users?email=a@b.c",
            headers=(("Authorization", "Bearer secret"), ("Accept", "application/json")),
        ),
    )


def test_strip_url_query_and_fragment() -> None:
    assert strip_url_query_and_fragment("https://h/p?q=1#f") == "https://h/p"


def test_redact_headers_is_case_insensitive() -> None:
    redacted = redact_headers(
        [("authorization", "x"), ("X-API-KEY", "k"), ("Accept", "a")],
        frozenset({"authorization", "x-api-key"}),
    )
    assert redacted == [("authorization", REDACTED), ("X-API-KEY", REDACTED), ("Accept", "a")]


def test_request_event_is_logged_without_secrets_or_query(
    caplog: pytest.LogCaptureFixture,
) -> None:
    caplog.set_level(logging.DEBUG, logger="netutil")
    NetworkLogger().log(_request_message(), request_id=REQUEST_ID, request="GET /users")

    text = caplog.text
    assert str(REQUEST_ID) in text
    assert "https://api.example/users" in text
    assert "secret" not in text
    assert "a@b.c" not in text
    assert "application/json" in text


def test_response_body_preview_is_opt_in(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="netutil")
    message = ResponseLogMessage(data=b'{"ok":true}', metadata=ResponseMetadata(status_code=200))

    NetworkLogger().log(message, request_id=REQUEST_ID, request="r")
    assert '{"ok":true}' not in caplog.text

    caplog.clear()
    NetworkLogger(log_bodies=True).log(message, request_id=REQUEST_ID, request="r")
    assert '{"ok":true}' in caplog.text


def test_error_event_is_logged_at_warning(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING, logger="netutil")
    error = ControllerError(
        request_id=REQUEST_ID, request="GET /x", category=GeneralFailure(RuntimeError("boom"))
    )
    NetworkLogger().log(ErrorLogMessage(error=error), request_id=REQUEST_ID, request="GET /x")

    records = [r for r in caplog.records if r.name == "netutil.logger"]
    assert len(records) == 1
    assert records[0].levelno == logging.WARNING
    assert "general" in records[0].getMessage()


def test_hooks_receive_entries_by_kind() -> None:
    seen: dict[str, list[LogEntry]] = {"request": [], "response": [], "error": []}
    logger = (
        NetworkLogger()
        .add_request_hook(seen["request"].append)
        .add_response_hook(seen["response"].append)
        .add_error_hook(seen["error"].append)
    )
    logger.log(_request_message(), request_id=REQUEST_ID, request="r")
    logger.log(
        ResponseLogMessage(data=b"", metadata=ResponseMetadata(status_code=204)),
        request_id=REQUEST_ID,
        request="r",
    )
    assert len(seen["request"]) == 1
    assert len(seen["response"]) == 1
    assert seen["error"] == []
    assert seen["request"][0].request_id == REQUEST_ID


def test_hook_failures_are_reported_not_raised(caplog: pytest.LogCaptureFixture) -> None:
    def bad_hook(entry: LogEntry) -> None:
        raise RuntimeError("hook failed")

    logger = NetworkLogger().add_request_hook(bad_hook)
    logger.log(_request_message(), request_id=REQUEST_ID, request="r")
    assert "hook failed" in caplog.text


def test_disabled_logger_is_silent(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="netutil")
    calls: list[LogEntry] = []
    logger = NetworkLogger(enabled=False).add_request_hook(calls.append)
    logger.log(_request_message(), request_id=REQUEST_ID, request="r")
    assert calls == []
    assert caplog.records == []
