"""
Transport sessions.

A `Session` performs the network I/O for one wire request. `HTTPXSession` is the
httpx-backed implementation; sessions are produced per logical request by a
`SessionBuilder` so configuration (e.g. timeouts) can vary per request.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable

import httpx

from ..exceptions import TransportError, TransportTimeoutError
from .pipeline import ResponseMetadata, WireRequest

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0


@runtime_checkable
class Session(Protocol):
    async def execute(self, request: WireRequest) -> tuple[bytes, ResponseMetadata]:
        """
        Send `request` and return the payload and response metadata.

        Raises:
            TransportError: For network/connectivity failures.
        """
        ...


@runtime_checkable
class SessionBuilder(Protocol):
    def build(self, request: Any) -> Session: ...


def _metadata_from_response(response: httpx.Response) -> ResponseMetadata:
    try:
        elapsed: float | None = response.elapsed.total_seconds()
    except RuntimeError:
        elapsed = None
    return ResponseMetadata(
        status_code=response.status_code,
        headers=tuple(response.headers.multi_items()),
        url=str(response.request.url),
        http_version=response.http_version,
        elapsed_seconds=elapsed,
    )


class HTTPXSession:
    """
    Session backed by a short-lived `httpx.AsyncClient`.

    The client is opened and closed inside `execute`, so the session holds no
    open connections between sends. Cancelling the awaiting task cancels the
    in-flight httpx request.
    """

    def __init__(
        self,
        *,
        timeout: float | None = DEFAULT_TIMEOUT_SECONDS,
        follow_redirects: bool = False,
        transport: httpx.AsyncBaseTransport | None = None,
        verify: bool = True,
    ):
        self.timeout = timeout
        self.follow_redirects = follow_redirects
        self.verify = verify
        self._transport = transport

    def __repr__(self) -> str:
        return f"HTTPXSession(timeout={self.timeout!r}, follow_redirects={self.follow_redirects!r})"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=self.follow_redirects,
            transport=self._transport,
            verify=self.verify,
        )

    async def execute(self, request: WireRequest) -> tuple[bytes, ResponseMetadata]:
        async with self._client() as client:
            http_request = client.build_request(
                request.method,
                request.url,
                headers=list(request.headers),
                content=request.content,
                extensions=dict(request.extensions) or None,
            )
            try:
                response = await client.send(http_request)
                payload = await response.aread()
            except httpx.TimeoutException as e:
                raise TransportTimeoutError(
                    f"Request timed out: {type(e).__name__}", url=request.url
                ) from e
            except httpx.TransportError as e:
                raise TransportError(
                    f"Transport failure: {type(e).__name__}: {e}", url=request.url
                ) from e
        logger.debug("HTTP %s %s -> %s", request.method, request.url, response.status_code)
        return payload, _metadata_from_response(response)


class StandardSessionBuilder:
    """
    Builds an `HTTPXSession` per logical request.

    A request exposing a non-None `timeout` attribute overrides the default
    timeout for that send.
    """

    def __init__(
        self,
        *,
        timeout: float | None = DEFAULT_TIMEOUT_SECONDS,
        follow_redirects: bool = False,
        transport: httpx.AsyncBaseTransport | None = None,
        verify: bool = True,
    ):
        if timeout is not None and timeout <= 0:
            raise ValueError("timeout must be positive")
        self.timeout = timeout
        self.follow_redirects = follow_redirects
        self.verify = verify
        self._transport = transport

    def build(self, request: Any) -> Session:
        timeout = getattr(request, "timeout", None)
        if timeout is not None and timeout <= 0:
            raise ValueError(f"Request timeout must be positive, got {timeout!r}")
        return HTTPXSession(
            timeout=timeout if timeout is not None else self.timeout,
            follow_redirects=self.follow_redirects,
            transport=self._transport,
            verify=self.verify,
        )
