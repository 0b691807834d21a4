from __future__ import annotations

import pytest

from netutil.clients.pipeline import (
    CompactInterceptor,
    Interceptor,
    InterceptorChain,
    WireRequest,
    effective_interceptors,
)


def _append(value: str) -> CompactInterceptor:
    return CompactInterceptor(lambda req: req.append_header("X-Trace", value), name=value)


def _wire() -> WireRequest:
    return WireRequest(method="GET", url="https://api.example/items")


def test_create_from_no_units_returns_none() -> None:
    assert InterceptorChain.create([]) is None
    assert InterceptorChain.create(iter(())) is None


def test_constructor_rejects_empty_sequence() -> None:
    with pytest.raises(ValueError):
        InterceptorChain([])


def test_units_apply_in_declared_order() -> None:
    chain = InterceptorChain.create([_append("x"), _append("y")])
    assert chain is not None
    assert chain.transform(_wire()).header("x-trace") == "xy"

    reversed_chain = InterceptorChain.create([_append("y"), _append("x")])
    assert reversed_chain is not None
    assert reversed_chain.transform(_wire()).header("X-Trace") == "yx"


def test_first_failure_stops_the_chain() -> None:
    ran: list[str] = []

    def boom(req: WireRequest) -> WireRequest:
        ran.append("boom")
        raise RuntimeError("interceptor failed")

    def after(req: WireRequest) -> WireRequest:
        ran.append("after")
        return req

    chain = InterceptorChain.create([CompactInterceptor(boom), CompactInterceptor(after)])
    assert chain is not None
    with pytest.raises(RuntimeError, match="interceptor failed"):
        chain.transform(_wire())
    assert ran == ["boom"]


def test_original_request_is_not_mutated() -> None:
    original = _wire()
    chain = InterceptorChain.create([_append("x")])
    assert chain is not None
    transformed = chain.transform(original)
    assert original.header("X-Trace") is None
    assert transformed.header("X-Trace") == "x"


def test_compact_interceptor_satisfies_protocol_and_keeps_name() -> None:
    def add_accept(req: WireRequest) -> WireRequest:
        return req.with_header("Accept", "application/json")

    unit = CompactInterceptor(add_accept)
    assert isinstance(unit, Interceptor)
    assert unit.name == "add_accept"
    assert unit.intercept(_wire()).header("accept") == "application/json"


def test_chain_can_be_nested_as_a_unit() -> None:
    inner = InterceptorChain([_append("a"), _append("b")])
    outer = InterceptorChain([inner, _append("c")])
    assert len(outer) == 2
    assert outer.transform(_wire()).header("X-Trace") == "abc"


def test_effective_interceptors_puts_one_off_first() -> None:
    one_off = _append("1")
    standing = [_append("2"), _append("3")]
    assert effective_interceptors(one_off, standing) == [one_off, *standing]
    assert effective_interceptors(None, standing) == standing
    assert effective_interceptors(None, []) == []


def test_wire_request_header_helpers_are_case_insensitive() -> None:
    req = _wire().with_header("Content-Type", "text/plain").with_header("content-type", "a/b")
    assert req.headers == (("content-type", "a/b"),)
    assert req.without_header("CONTENT-TYPE").headers == ()
    assert req.with_headers({"A": "1", "B": "2"}).header_map() == {
        "content-type": "a/b",
        "A": "1",
        "B": "2",
    }
