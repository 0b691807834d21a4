"""
Stock interceptors.

Each class implements the `Interceptor` protocol; any object with an
`intercept(request) -> request` method works just as well.
"""

from __future__ import annotations

from collections.abc import Callable

from .clients.pipeline import WireRequest
from .config import WritePolicy
from .exceptions import WriteNotAllowedError
from .types import HTTPMethod

_WRITE_METHOD_NAMES = frozenset(m.value for m in HTTPMethod if m.is_write)


class HeaderInterceptor:
    """Set a header to a fixed value, or to the result of a callable evaluated per request."""

    def __init__(self, name: str, value: str | Callable[[], str], *, overwrite: bool = True):
        self.name = name
        self._value = value
        self.overwrite = overwrite

    def intercept(self, request: WireRequest) -> WireRequest:
        if not self.overwrite and request.header(self.name) is not None:
            return request
        value = self._value() if callable(self._value) else self._value
        return request.with_header(self.name, value)

    def __repr__(self) -> str:
        return f"HeaderInterceptor({self.name!r})"


class BearerAuthInterceptor:
    """Adds `Authorization: Bearer <token>`; `token` may be a callable for rotating tokens."""

    def __init__(self, token: str | Callable[[], str]):
        self._token = token

    def intercept(self, request: WireRequest) -> WireRequest:
        token = self._token() if callable(self._token) else self._token
        if not token:
            raise ValueError("Bearer token is empty")
        return request.with_header("Authorization", f"Bearer {token}")

    def __repr__(self) -> str:
        return "BearerAuthInterceptor()"


class WritePolicyInterceptor:
    """Rejects write methods (POST/PUT/PATCH/DELETE) when writes are denied."""

    def __init__(self, policy: WritePolicy):
        self.policy = policy

    def intercept(self, request: WireRequest) -> WireRequest:
        if self.policy == WritePolicy.DENY and request.method.upper() in _WRITE_METHOD_NAMES:
            raise WriteNotAllowedError(
                f"Cannot {request.method.upper()} while writes are disabled by policy",
                method=request.method.upper(),
                url=request.url,
            )
        return request

    def __repr__(self) -> str:
        return f"WritePolicyInterceptor({self.policy.value!r})"
