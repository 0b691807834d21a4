"""
Logical-request to wire-request building.

`StandardWireRequestBuilder` joins a scheme and base path with the request path,
merges base query/headers with the request's own, and encodes the body.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from typing import Any, Protocol, runtime_checkable

import httpx
from pydantic import BaseModel

from ..types import method_name
from .pipeline import Header, WireRequest


@runtime_checkable
class WireRequestBuilder(Protocol):
    def build(self, request: Any) -> WireRequest: ...


def _resolve(value: Any) -> Any:
    return value() if callable(value) else value


def encode_body(body: Any) -> tuple[bytes | None, str | None]:
    """Return `(content, content_type)` for a logical request body."""
    if body is None:
        return None, None
    if isinstance(body, bytes):
        return body, None
    if isinstance(body, str):
        return body.encode("utf-8"), "text/plain; charset=utf-8"
    if isinstance(body, BaseModel):
        return body.model_dump_json(by_alias=True).encode("utf-8"), "application/json"
    return json.dumps(body, separators=(",", ":")).encode("utf-8"), "application/json"


def join_url(scheme: str, base_path: str, path: str) -> str:
    if "?" in base_path or "#" in base_path:
        raise ValueError(f"base_path must not carry a query or fragment: {base_path!r}")
    base = base_path if "://" in base_path else f"{scheme}://{base_path}"
    base = base.rstrip("/")
    if not path:
        return base
    return f"{base}/{path.lstrip('/')}"


class StandardWireRequestBuilder:
    """
    Standard builder over scheme/base-path/query/headers.

    Each setting may be a plain value (captured once, here) or a zero-arg callable
    that is re-evaluated on every `build`, which keeps per-call values such as a
    rotating token fresh.
    """

    def __init__(
        self,
        *,
        base_path: str | Callable[[], str],
        scheme: str | Callable[[], str] = "http",
        query: Mapping[str, str] | Callable[[], Mapping[str, str]] | None = None,
        headers: Mapping[str, str] | Callable[[], Mapping[str, str]] | None = None,
    ):
        # Eager mappings are copied so later caller mutations do not leak in.
        self._scheme = scheme
        self._base_path = base_path
        self._query = query if callable(query) else dict(query or {})
        self._headers = headers if callable(headers) else dict(headers or {})

    def build(self, request: Any) -> WireRequest:
        scheme = str(_resolve(self._scheme))
        base_path = str(_resolve(self._base_path))
        if not base_path:
            raise ValueError("base_path must not be empty")

        query: dict[str, str] = dict(_resolve(self._query) or {})
        query.update(getattr(request, "query", None) or {})

        merged_headers: dict[str, str] = {}
        for source in (_resolve(self._headers) or {}, getattr(request, "headers", None) or {}):
            for name, value in source.items():
                for existing in [k for k in merged_headers if k.lower() == name.lower()]:
                    del merged_headers[existing]
                merged_headers[name] = value

        content, content_type = encode_body(getattr(request, "body", None))
        if content_type and not any(k.lower() == "content-type" for k in merged_headers):
            merged_headers["Content-Type"] = content_type

        url = httpx.URL(join_url(scheme, base_path, getattr(request, "path", "")))
        if query:
            url = url.copy_merge_params(query)

        headers: tuple[Header, ...] = tuple(merged_headers.items())
        return WireRequest(
            method=method_name(request.method),
            url=str(url),
            headers=headers,
            content=content,
        )
