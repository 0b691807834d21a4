from __future__ import annotations

import os
import sys
from contextlib import suppress
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

import httpx

from ..config import ENV_PREFIX, ControllerConfig, Policies, WritePolicy
from ..config import _maybe_load_dotenv as _sdk_maybe_load_dotenv
from ..controller import AsyncNetworkController
from ..exceptions import ConfigurationError
from ..logger import (
    ErrorLogMessage,
    LogEntry,
    RequestLogMessage,
    ResponseLogMessage,
    strip_url_query_and_fragment,
)

from .errors import CLIError

OutputFormat = Literal["table", "json"]


@dataclass(frozen=True, slots=True)
class CLIOverrides:
    """Programmatic overrides for embedding the CLI (e.g. an httpx mock transport)."""

    transport: httpx.AsyncBaseTransport | None = None


def parse_header_option(raw: str) -> tuple[str, str]:
    """Parse `Name: value` (curl style) or `Name=value`."""
    for sep in (":", "="):
        name, found, value = raw.partition(sep)
        if found and name.strip():
            return name.strip(), value.strip()
    raise CLIError(f"Invalid header {raw!r}; expected 'Name: value'")


def _trace_write(line: str) -> None:
    sys.stderr.write(line + "\n")
    with suppress(Exception):
        sys.stderr.flush()


def trace_request(entry: LogEntry) -> None:
    message = entry.message
    if isinstance(message, RequestLogMessage):
        wire = message.wire_request
        _trace_write(f"trace -> {wire.method} {strip_url_query_and_fragment(wire.url)}")


def trace_response(entry: LogEntry) -> None:
    message = entry.message
    if isinstance(message, ResponseLogMessage):
        meta = message.metadata
        extra = ""
        if meta.elapsed_seconds is not None:
            extra = f" elapsedMs={int(meta.elapsed_seconds * 1000)}"
        _trace_write(f"trace <- {meta.status_code} {strip_url_query_and_fragment(meta.url)}{extra}")


def trace_error(entry: LogEntry) -> None:
    message = entry.message
    if isinstance(message, ErrorLogMessage):
        error = message.error
        _trace_write(f"trace !! {error.kind.value} {error.cause.__class__.__name__} {entry.request}")


@dataclass
class CLIContext:
    output: OutputFormat
    quiet: bool
    verbosity: int
    base_url: str | None
    headers: list[str]
    timeout: float | None
    readonly: bool
    trace: bool
    dotenv: bool
    env_file: Path
    overrides: CLIOverrides = field(default_factory=CLIOverrides)

    _controller: AsyncNetworkController | None = None

    def load_dotenv_if_requested(self) -> None:
        try:
            _sdk_maybe_load_dotenv(load_dotenv=self.dotenv, dotenv_path=self.env_file, override=False)
        except ImportError as exc:
            raise CLIError(
                "Optional .env support requires python-dotenv; install `netutil[dotenv]`.",
            ) from exc

    def resolve_config(self) -> ControllerConfig:
        self.load_dotenv_if_requested()
        extra_headers = dict(parse_header_option(h) for h in self.headers)

        environ = dict(os.environ)
        if self.base_url:
            scheme, sep, rest = self.base_url.partition("://")
            if not sep or not rest:
                raise CLIError("--base-url must start with http:// or https://")
            environ[ENV_PREFIX + "BASE_PATH"] = rest
            environ[ENV_PREFIX + "SCHEME"] = scheme
        elif not environ.get(ENV_PREFIX + "BASE_PATH", "").strip():
            raise CLIError("Missing base URL. Pass --base-url or set NETUTIL_BASE_PATH.")

        try:
            base = ControllerConfig.from_env(environ=environ)
        except ConfigurationError as exc:
            raise CLIError(str(exc)) from exc

        timeout = self.timeout if self.timeout is not None else base.timeout
        if timeout is not None and timeout <= 0:
            raise CLIError("--timeout must be > 0.")

        policies = Policies(write=WritePolicy.DENY) if self.readonly else base.policies
        return ControllerConfig(
            base_path=base.base_path,
            scheme=base.scheme,
            query=base.query,
            headers={**base.headers, **extra_headers},
            timeout=timeout,
            follow_redirects=base.follow_redirects,
            policies=policies,
            redacted_headers=base.redacted_headers,
        )

    def get_controller(self) -> AsyncNetworkController:
        if self._controller is not None:
            return self._controller

        controller = AsyncNetworkController.from_config(
            self.resolve_config(), transport=self.overrides.transport
        )
        if self.trace:
            controller.configure_logger(
                lambda logger: logger.add_request_hook(trace_request)
                .add_response_hook(trace_response)
                .add_error_hook(trace_error)
            )
        self._controller = controller
        return controller
