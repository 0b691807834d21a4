"""
Request pipeline primitives.

Logical requests are turned into `WireRequest` values by a builder, then passed
through an ordered chain of interceptors before a session sends them.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from typing import Any, Protocol, TypeAlias, runtime_checkable

Header: TypeAlias = tuple[str, str]


@dataclass(frozen=True, slots=True)
class WireRequest:
    """
    Concrete transport-level request.

    Instances are immutable; interceptors return a modified copy using the
    `with_*` helpers (or `dataclasses.replace`).
    """

    method: str
    url: str
    headers: tuple[Header, ...] = ()
    content: bytes | None = None
    extensions: Mapping[str, Any] = field(default_factory=dict)

    def header(self, name: str, default: str | None = None) -> str | None:
        lowered = name.lower()
        for key, value in self.headers:
            if key.lower() == lowered:
                return value
        return default

    def header_map(self) -> dict[str, str]:
        return dict(self.headers)

    def with_header(self, name: str, value: str) -> WireRequest:
        """Set `name`, replacing any existing values (case-insensitive)."""
        return replace(self, headers=(*self.without_header(name).headers, (name, value)))

    def append_header(self, name: str, value: str) -> WireRequest:
        """Concatenate `value` onto the existing header value, or set it."""
        current = self.header(name)
        return self.with_header(name, value if current is None else current + value)

    def without_header(self, name: str) -> WireRequest:
        lowered = name.lower()
        return replace(self, headers=tuple(h for h in self.headers if h[0].lower() != lowered))

    def with_headers(self, headers: Mapping[str, str]) -> WireRequest:
        updated = self
        for name, value in headers.items():
            updated = updated.with_header(name, value)
        return updated

    def with_url(self, url: str) -> WireRequest:
        return replace(self, url=url)

    def with_content(self, content: bytes | None) -> WireRequest:
        return replace(self, content=content)


@dataclass(frozen=True, slots=True)
class ResponseMetadata:
    """Transport response metadata (everything except the payload)."""

    status_code: int
    headers: tuple[Header, ...] = ()
    url: str = ""
    http_version: str | None = None
    elapsed_seconds: float | None = None

    def header(self, name: str, default: str | None = None) -> str | None:
        lowered = name.lower()
        for key, value in self.headers:
            if key.lower() == lowered:
                return value
        return default

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


@runtime_checkable
class Interceptor(Protocol):
    """A single fallible transformation step over a wire request."""

    def intercept(self, request: WireRequest) -> WireRequest: ...


Interception: TypeAlias = Callable[[WireRequest], WireRequest]


class CompactInterceptor:
    """Adapts a plain function into an `Interceptor`."""

    __slots__ = ("_fn", "name")

    def __init__(self, fn: Interception, *, name: str | None = None):
        self._fn = fn
        self.name = name or getattr(fn, "__name__", "interception")

    def intercept(self, request: WireRequest) -> WireRequest:
        return self._fn(request)

    def __repr__(self) -> str:
        return f"CompactInterceptor({self.name!r})"


class InterceptorChain:
    """
    Ordered composition of interceptors.

    Units run strictly in the order given; the first failure propagates and later
    units never run. Use `create` rather than the constructor: it returns `None`
    for an empty sequence so callers can skip the chain entirely.
    """

    __slots__ = ("_units",)

    def __init__(self, units: Sequence[Interceptor]):
        if not units:
            raise ValueError("InterceptorChain requires at least one unit; use create()")
        self._units = tuple(units)

    @classmethod
    def create(cls, units: Iterable[Interceptor]) -> InterceptorChain | None:
        collected = tuple(units)
        if not collected:
            return None
        return cls(collected)

    @property
    def units(self) -> tuple[Interceptor, ...]:
        return self._units

    def __len__(self) -> int:
        return len(self._units)

    def transform(self, request: WireRequest) -> WireRequest:
        for unit in self._units:
            request = unit.intercept(request)
        return request

    def intercept(self, request: WireRequest) -> WireRequest:
        return self.transform(request)


def effective_interceptors(
    one_off: Interceptor | None, standing: Sequence[Interceptor]
) -> list[Interceptor]:
    """One-off interceptor first, then the standing list in declared order."""
    units: list[Interceptor] = [one_off] if one_off is not None else []
    units.extend(standing)
    return units
