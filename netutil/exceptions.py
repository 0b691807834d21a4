"""
Exception hierarchy.

Every failure of a controller send is reported as a single `ControllerError`
whose `category` tells which pipeline stage produced it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, TypeAlias

if TYPE_CHECKING:
    from .clients.pipeline import WireRequest
    from .clients.session import Session
    from .types import RequestId


class NetUtilError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(NetUtilError):
    """Invalid or incomplete configuration."""


class WriteNotAllowedError(NetUtilError):
    """Raised when a write request is attempted under a deny-writes policy."""

    def __init__(self, message: str, *, method: str, url: str):
        super().__init__(message)
        self.method = method
        self.url = url


class TransportError(NetUtilError):
    """
    Classified network/connectivity failure raised by a session.

    Sessions raise this (or a subclass) for failures that happened while talking
    to the network. Anything else a session raises is treated as unclassified.
    """

    def __init__(self, message: str, *, url: str | None = None):
        super().__init__(message)
        self.url = url


class TransportTimeoutError(TransportError):
    """Connecting or reading timed out."""


class ErrorKind(str, Enum):
    REQUEST_BUILD = "request_build"
    NETWORK = "network"
    RESPONSE_DECODE = "response_decode"
    GENERAL = "general"


@dataclass(frozen=True, slots=True)
class RequestBuildFailure:
    """Session/wire-request construction or an interceptor failed; nothing was sent."""

    cause: BaseException
    kind = ErrorKind.REQUEST_BUILD


@dataclass(frozen=True, slots=True)
class NetworkFailure:
    """Classified transport error after dispatch; carries what is needed to retry."""

    session: Session
    wire_request: WireRequest
    error: TransportError
    kind = ErrorKind.NETWORK

    @property
    def cause(self) -> BaseException:
        return self.error


@dataclass(frozen=True, slots=True)
class ResponseDecodeFailure:
    """The transport call succeeded but the payload could not be decoded."""

    cause: BaseException
    kind = ErrorKind.RESPONSE_DECODE


@dataclass(frozen=True, slots=True)
class GeneralFailure:
    """Unclassified failure during the network stage."""

    cause: BaseException
    kind = ErrorKind.GENERAL


ErrorCategory: TypeAlias = RequestBuildFailure | NetworkFailure | ResponseDecodeFailure | GeneralFailure


class ControllerError(NetUtilError):
    """
    Categorized failure of a single controller send.

    Attributes:
        request_id: Identifier shared with the log events of the failing call
        request: The logical request that was being sent
        category: One of `RequestBuildFailure`, `NetworkFailure`,
            `ResponseDecodeFailure`, `GeneralFailure`
    """

    def __init__(self, *, request_id: RequestId, request: Any, category: ErrorCategory):
        self.request_id = request_id
        self.request = request
        self.category = category
        super().__init__(self._format())

    @property
    def kind(self) -> ErrorKind:
        return self.category.kind

    @property
    def cause(self) -> BaseException:
        return self.category.cause

    def _format(self) -> str:
        cause = self.cause
        detail = str(cause) or cause.__class__.__name__
        return f"{self.kind.value} failure [{self.request_id}]: {cause.__class__.__name__}: {detail}"

    def __repr__(self) -> str:
        return (
            f"ControllerError(kind={self.kind.value!r}, request_id={str(self.request_id)!r}, "
            f"cause={self.cause!r})"
        )
