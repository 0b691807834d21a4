"""
Controller logging sink.

The controller reports three lifecycle events per send: the outgoing request
(before the transport call), the incoming response, or the error. `NetworkLogger`
writes them to the stdlib `logging` tree and fans them out to optional hooks.
The sink never raises into the pipeline.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, TypeAlias
from urllib.parse import urlsplit, urlunsplit

from .clients.pipeline import Header, ResponseMetadata, WireRequest

if TYPE_CHECKING:
    from .clients.session import Session
    from .exceptions import ControllerError
    from .types import RequestId

_log = logging.getLogger(__name__)

REDACTED = "***"
DEFAULT_REDACTED_HEADERS = frozenset(
    {"authorization", "proxy-authorization", "cookie", "set-cookie", "x-api-key"}
)


@dataclass(frozen=True, slots=True)
class RequestLogMessage:
    session: Session
    wire_request: WireRequest


@dataclass(frozen=True, slots=True)
class ResponseLogMessage:
    data: bytes
    metadata: ResponseMetadata


@dataclass(frozen=True, slots=True)
class ErrorLogMessage:
    error: ControllerError


LogMessage: TypeAlias = RequestLogMessage | ResponseLogMessage | ErrorLogMessage


@dataclass(frozen=True, slots=True)
class LogEntry:
    request_id: RequestId
    request: Any
    message: LogMessage


RequestHook: TypeAlias = Callable[[LogEntry], None]
ResponseHook: TypeAlias = Callable[[LogEntry], None]
ErrorHook: TypeAlias = Callable[[LogEntry], None]


def strip_url_query_and_fragment(url: str) -> str:
    """
    Keep scheme/host/path but drop query/fragment to reduce accidental leakage of PII.
    """
    try:
        parts = urlsplit(url)
        return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))
    except ValueError:
        return url


def redact_headers(headers: Iterable[Header], sensitive: frozenset[str]) -> list[Header]:
    return [(k, REDACTED if k.lower() in sensitive else v) for k, v in headers]


@dataclass
class NetworkLogger:
    """
    Logging sink used by `AsyncNetworkController`.

    Attributes:
        enabled: When False, neither the `logging` output nor the hooks fire
        log_bodies: Include (truncated) response bodies in DEBUG output
        redacted_headers: Lower-cased header names masked in log text
    """

    enabled: bool = True
    log_bodies: bool = False
    body_preview_bytes: int = 512
    redacted_headers: frozenset[str] = DEFAULT_REDACTED_HEADERS
    on_request: list[RequestHook] = field(default_factory=list)
    on_response: list[ResponseHook] = field(default_factory=list)
    on_error: list[ErrorHook] = field(default_factory=list)
    logger: logging.Logger = field(default_factory=lambda: _log)

    def add_request_hook(self, hook: RequestHook) -> NetworkLogger:
        self.on_request.append(hook)
        return self

    def add_response_hook(self, hook: ResponseHook) -> NetworkLogger:
        self.on_response.append(hook)
        return self

    def add_error_hook(self, hook: ErrorHook) -> NetworkLogger:
        self.on_error.append(hook)
        return self

    def log(self, message: LogMessage, *, request_id: RequestId, request: Any) -> None:
        if not self.enabled:
            return
        entry = LogEntry(request_id=request_id, request=request, message=message)
        try:
            self._emit(entry)
        except Exception:
            _log.exception("Failed to write network log entry for %s", request_id)

        hooks: list[Callable[[LogEntry], None]]
        if isinstance(message, RequestLogMessage):
            hooks = self.on_request
        elif isinstance(message, ResponseLogMessage):
            hooks = self.on_response
        else:
            hooks = self.on_error
        for hook in list(hooks):
            try:
                hook(entry)
            except Exception:
                _log.exception("Network log hook %r raised; ignoring", hook)

    def _emit(self, entry: LogEntry) -> None:
        message = entry.message
        if isinstance(message, RequestLogMessage):
            if not self.logger.isEnabledFor(logging.DEBUG):
                return
            wire = message.wire_request
            self.logger.debug(
                "[%s] -> %s %s headers=%s body=%d bytes session=%r",
                entry.request_id,
                wire.method,
                strip_url_query_and_fragment(wire.url),
                redact_headers(wire.headers, self.redacted_headers),
                len(wire.content or b""),
                message.session,
            )
        elif isinstance(message, ResponseLogMessage):
            if not self.logger.isEnabledFor(logging.DEBUG):
                return
            meta = message.metadata
            suffix = ""
            if self.log_bodies and message.data:
                preview = message.data[: self.body_preview_bytes]
                suffix = " body=" + preview.decode("utf-8", errors="replace")
            self.logger.debug(
                "[%s] <- %s %s (%d bytes)%s",
                entry.request_id,
                meta.status_code,
                strip_url_query_and_fragment(meta.url),
                len(message.data),
                suffix,
            )
        else:
            error = message.error
            self.logger.warning(
                "[%s] %s failed (%s): %s",
                entry.request_id,
                entry.request,
                error.kind.value,
                error.cause.__class__.__name__,
            )
