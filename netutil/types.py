"""
Logical request types.

A logical request describes *what* to call. The controller never inspects it
beyond handing it to the session factory and the wire-request builder.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, NewType, Protocol, runtime_checkable

RequestId = NewType("RequestId", uuid.UUID)


def new_request_id() -> RequestId:
    """Return a fresh random (version 4) request identifier."""
    return RequestId(uuid.uuid4())


class HTTPMethod(str, Enum):
    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"

    @property
    def is_write(self) -> bool:
        return self in _WRITE_METHODS


_WRITE_METHODS = frozenset({HTTPMethod.POST, HTTPMethod.PUT, HTTPMethod.PATCH, HTTPMethod.DELETE})


@runtime_checkable
class Request(Protocol):
    """
    Contract read by `StandardWireRequestBuilder`.

    Custom builders may accept any object; this protocol only describes what the
    standard builder and session factory look at.
    """

    @property
    def method(self) -> HTTPMethod | str: ...

    @property
    def path(self) -> str: ...

    @property
    def query(self) -> Mapping[str, str]: ...

    @property
    def headers(self) -> Mapping[str, str]: ...

    @property
    def body(self) -> Any | None: ...

    @property
    def timeout(self) -> float | None: ...


@dataclass(frozen=True, slots=True)
class StandardRequest:
    """Ready-made immutable logical request."""

    method: HTTPMethod | str
    path: str
    query: Mapping[str, str] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Any | None = None
    timeout: float | None = None

    @classmethod
    def get(cls, path: str, **kwargs: Any) -> StandardRequest:
        return cls(HTTPMethod.GET, path, **kwargs)

    @classmethod
    def post(cls, path: str, body: Any | None = None, **kwargs: Any) -> StandardRequest:
        return cls(HTTPMethod.POST, path, body=body, **kwargs)

    def __str__(self) -> str:
        return f"{method_name(self.method)} {self.path}"


def method_name(method: HTTPMethod | str) -> str:
    if isinstance(method, HTTPMethod):
        return method.value
    return str(method).upper()
