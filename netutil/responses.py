"""
Response shapes.

The same send pipeline produces three result shapes from raw transport output:

- `StandardResponse`: the payload and metadata as-is
- any class implementing `Response`: constructed via `from_payload`
- `StandardModelResponse[M]`: the payload decoded into a model type `M`
"""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, Protocol, TypeAlias, TypeVar, runtime_checkable

from pydantic import TypeAdapter

from .clients.pipeline import Header, ResponseMetadata

T = TypeVar("T")
M = TypeVar("M")
R = TypeVar("R", covariant=True)

ResultConstructor: TypeAlias = Callable[[bytes, ResponseMetadata], T]


@runtime_checkable
class Response(Protocol):
    """A result type that knows how to construct itself from transport output."""

    @classmethod
    def from_payload(cls, data: bytes, metadata: ResponseMetadata) -> Any: ...


class ResponseModelDecoder(Protocol):
    def decode(self, type_: type[T], data: bytes) -> T: ...


class PydanticModelDecoder:
    """
    Decodes JSON payloads with pydantic.

    Works with anything pydantic can validate: `BaseModel` subclasses, dataclasses,
    `TypedDict`s, and builtin containers.
    """

    def __init__(self, *, strict: bool | None = None):
        self.strict = strict
        self._adapters: dict[Any, TypeAdapter[Any]] = {}

    def _adapter(self, type_: Any) -> TypeAdapter[Any]:
        adapter = self._adapters.get(type_)
        if adapter is None:
            adapter = TypeAdapter(type_)
            self._adapters[type_] = adapter
        return adapter

    def decode(self, type_: type[T], data: bytes) -> T:
        return self._adapter(type_).validate_json(data, strict=self.strict)


@dataclass(frozen=True, slots=True)
class StandardResponse:
    data: bytes
    metadata: ResponseMetadata

    @classmethod
    def from_payload(cls, data: bytes, metadata: ResponseMetadata) -> StandardResponse:
        return cls(data=data, metadata=metadata)

    @property
    def status_code(self) -> int:
        return self.metadata.status_code

    @property
    def headers(self) -> tuple[Header, ...]:
        return self.metadata.headers

    @property
    def is_success(self) -> bool:
        return self.metadata.is_success

    @property
    def text(self) -> str:
        return self.data.decode("utf-8", errors="replace")

    def json(self) -> Any:
        return json.loads(self.data)


@dataclass(frozen=True, slots=True)
class StandardModelResponse(Generic[M]):
    model: M
    data: bytes
    metadata: ResponseMetadata

    @property
    def status_code(self) -> int:
        return self.metadata.status_code

    @classmethod
    def constructor(
        cls, model_type: type[M], decoder: ResponseModelDecoder
    ) -> ResultConstructor[StandardModelResponse[M]]:
        def construct(data: bytes, metadata: ResponseMetadata) -> StandardModelResponse[M]:
            return cls(model=decoder.decode(model_type, data), data=data, metadata=metadata)

        return construct
