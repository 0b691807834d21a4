"""
netutil: typed async HTTP request pipeline.

Build a controller, add interceptors, and send logical requests:

    from netutil import AsyncNetworkController, BearerAuthInterceptor, StandardRequest

    controller = AsyncNetworkController.from_base_path(
        "api.example.com", scheme="https", interceptors=[BearerAuthInterceptor("T")]
    )
    response = await controller.send(StandardRequest.get("/users/1"))
"""

from __future__ import annotations

from .clients.builder import StandardWireRequestBuilder, WireRequestBuilder
from .clients.pipeline import (
    CompactInterceptor,
    Interceptor,
    InterceptorChain,
    ResponseMetadata,
    WireRequest,
)
from .clients.session import HTTPXSession, Session, SessionBuilder, StandardSessionBuilder
from .config import ControllerConfig, Policies, WritePolicy
from .controller import AsyncNetworkController
from .exceptions import (
    ConfigurationError,
    ControllerError,
    ErrorKind,
    GeneralFailure,
    NetUtilError,
    NetworkFailure,
    RequestBuildFailure,
    ResponseDecodeFailure,
    TransportError,
    TransportTimeoutError,
    WriteNotAllowedError,
)
from .interceptors import BearerAuthInterceptor, HeaderInterceptor, WritePolicyInterceptor
from .logger import LogEntry, NetworkLogger
from .responses import (
    PydanticModelDecoder,
    Response,
    ResponseModelDecoder,
    StandardModelResponse,
    StandardResponse,
)
from .types import HTTPMethod, Request, RequestId, StandardRequest

__version__ = "0.3.0"

__all__ = [
    "AsyncNetworkController",
    "BearerAuthInterceptor",
    "CompactInterceptor",
    "ConfigurationError",
    "ControllerConfig",
    "ControllerError",
    "ErrorKind",
    "GeneralFailure",
    "HTTPMethod",
    "HTTPXSession",
    "HeaderInterceptor",
    "Interceptor",
    "InterceptorChain",
    "LogEntry",
    "NetUtilError",
    "NetworkFailure",
    "NetworkLogger",
    "Policies",
    "PydanticModelDecoder",
    "Request",
    "RequestBuildFailure",
    "RequestId",
    "Response",
    "ResponseDecodeFailure",
    "ResponseMetadata",
    "ResponseModelDecoder",
    "Session",
    "SessionBuilder",
    "StandardModelResponse",
    "StandardRequest",
    "StandardResponse",
    "StandardSessionBuilder",
    "StandardWireRequestBuilder",
    "TransportError",
    "TransportTimeoutError",
    "WireRequest",
    "WireRequestBuilder",
    "WriteNotAllowedError",
    "WritePolicy",
    "WritePolicyInterceptor",
    "__version__",
]
