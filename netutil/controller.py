"""
Async network controller.

`AsyncNetworkController.send*` turns a logical request into a wire request,
applies interceptors, executes it through a session and builds the requested
result shape. Every failure is reported as exactly one `ControllerError`, logged
once at the stage where it occurred.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any, TypeVar

import httpx

from .clients.builder import StandardWireRequestBuilder, WireRequestBuilder
from .clients.pipeline import (
    CompactInterceptor,
    Interception,
    Interceptor,
    InterceptorChain,
    WireRequest,
    effective_interceptors,
)
from .clients.session import SessionBuilder, StandardSessionBuilder
from .config import ControllerConfig, WritePolicy
from .exceptions import (
    ControllerError,
    ErrorCategory,
    GeneralFailure,
    NetworkFailure,
    RequestBuildFailure,
    ResponseDecodeFailure,
    TransportError,
)
from .interceptors import WritePolicyInterceptor
from .logger import ErrorLogMessage, NetworkLogger, RequestLogMessage, ResponseLogMessage
from .responses import (
    PydanticModelDecoder,
    ResponseModelDecoder,
    ResultConstructor,
    StandardModelResponse,
    StandardResponse,
)
from .types import RequestId, new_request_id

T = TypeVar("T")
M = TypeVar("M")
RS = TypeVar("RS")


def _one_off_interceptor(
    interceptor: Interceptor | None, interception: Interception | None
) -> Interceptor | None:
    if interceptor is not None and interception is not None:
        raise TypeError("Pass either 'interceptor' or 'interception', not both")
    if interception is not None:
        return CompactInterceptor(interception)
    return interceptor


class AsyncNetworkController:
    """
    Sends logical requests through a build / network / decode pipeline.

    Standing interceptors, builders and the logger are fixed at construction and
    only read during a send, so one controller may serve many concurrent sends.

    Example:
        ```python
        controller = AsyncNetworkController.from_base_path(
            "api.example.com/v1",
            scheme="https",
            interceptors=[BearerAuthInterceptor(get_token)],
        )
        user = await controller.send_model(StandardRequest.get("/users/1"), User)
        print(user.model.name)
        ```
    """

    def __init__(
        self,
        *,
        request_builder: WireRequestBuilder,
        session_builder: SessionBuilder | None = None,
        interceptors: Sequence[Interceptor] = (),
        decoder: ResponseModelDecoder | None = None,
        logger: NetworkLogger | None = None,
    ):
        self._request_builder = request_builder
        self._session_builder = session_builder or StandardSessionBuilder()
        self._interceptors: tuple[Interceptor, ...] = tuple(interceptors)
        self._decoder = decoder or PydanticModelDecoder()
        self._logger = logger or NetworkLogger()

    # =========================================================================
    # Convenience construction
    # =========================================================================

    @classmethod
    def from_base_path(
        cls,
        base_path: str,
        *,
        scheme: str = "http",
        query: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
        session_builder: SessionBuilder | None = None,
        interceptors: Sequence[Interceptor] = (),
        decoder: ResponseModelDecoder | None = None,
        logger: NetworkLogger | None = None,
    ) -> AsyncNetworkController:
        """Build a controller whose base settings are captured once, now."""
        return cls(
            request_builder=StandardWireRequestBuilder(
                scheme=scheme,
                base_path=base_path,
                query=dict(query or {}),
                headers=dict(headers or {}),
            ),
            session_builder=session_builder,
            interceptors=interceptors,
            decoder=decoder,
            logger=logger,
        )

    @classmethod
    def from_lazy_base_path(
        cls,
        base_path: Callable[[], str],
        *,
        scheme: Callable[[], str] = lambda: "http",
        query: Callable[[], Mapping[str, str]] = dict,
        headers: Callable[[], Mapping[str, str]] = dict,
        session_builder: SessionBuilder | None = None,
        interceptors: Sequence[Interceptor] = (),
        decoder: ResponseModelDecoder | None = None,
        logger: NetworkLogger | None = None,
    ) -> AsyncNetworkController:
        """
        Build a controller whose base settings are re-evaluated on every send.

        Failures raised by these callables surface as request-build failures.
        """
        return cls(
            request_builder=StandardWireRequestBuilder(
                scheme=scheme, base_path=base_path, query=query, headers=headers
            ),
            session_builder=session_builder,
            interceptors=interceptors,
            decoder=decoder,
            logger=logger,
        )

    @classmethod
    def from_config(
        cls,
        config: ControllerConfig,
        *,
        interceptors: Sequence[Interceptor] = (),
        transport: httpx.AsyncBaseTransport | None = None,
        decoder: ResponseModelDecoder | None = None,
        logger: NetworkLogger | None = None,
    ) -> AsyncNetworkController:
        standing = list(interceptors)
        if config.policies.write == WritePolicy.DENY:
            standing.append(WritePolicyInterceptor(config.policies.write))
        if logger is None:
            logger = NetworkLogger(redacted_headers=config.redacted_headers)
        return cls.from_base_path(
            config.base_path,
            scheme=config.scheme,
            query=config.query,
            headers=config.headers,
            session_builder=StandardSessionBuilder(
                timeout=config.timeout,
                follow_redirects=config.follow_redirects,
                transport=transport,
            ),
            interceptors=standing,
            decoder=decoder,
            logger=logger,
        )

    @property
    def interceptors(self) -> tuple[Interceptor, ...]:
        return self._interceptors

    @property
    def logger(self) -> NetworkLogger:
        return self._logger

    def configure_logger(self, configure: Callable[[NetworkLogger], Any]) -> AsyncNetworkController:
        """Run `configure` against the logger (e.g. to add hooks) and return self."""
        configure(self._logger)
        return self

    # =========================================================================
    # Public send operations
    # =========================================================================

    async def send(
        self,
        request: Any,
        *,
        interceptor: Interceptor | None = None,
        interception: Interception | None = None,
    ) -> StandardResponse:
        """
        Send `request` and return the raw response.

        Args:
            request: Logical request understood by the configured builders
            interceptor: One-off interceptor applied before the standing ones
            interception: Same as `interceptor`, given as a plain function

        Raises:
            ControllerError: For any build, network or decode failure.
        """
        one_off = _one_off_interceptor(interceptor, interception)
        return await self._send(request, StandardResponse.from_payload, one_off)

    async def send_response(
        self,
        request: Any,
        response_type: type[RS],
        *,
        interceptor: Interceptor | None = None,
        interception: Interception | None = None,
    ) -> RS:
        """Send `request` and build `response_type` via its `from_payload` classmethod."""
        construct = getattr(response_type, "from_payload", None)
        if not callable(construct):
            raise TypeError(f"{response_type!r} does not define from_payload(data, metadata)")
        one_off = _one_off_interceptor(interceptor, interception)
        return await self._send(request, construct, one_off)

    async def send_model(
        self,
        request: Any,
        model_type: type[M],
        *,
        interceptor: Interceptor | None = None,
        interception: Interception | None = None,
    ) -> StandardModelResponse[M]:
        """Send `request` and decode the payload into `model_type`."""
        one_off = _one_off_interceptor(interceptor, interception)
        construct = StandardModelResponse.constructor(model_type, self._decoder)
        return await self._send(request, construct, one_off)

    # =========================================================================
    # Pipeline
    # =========================================================================

    def _build_wire_request(self, request: Any, one_off: Interceptor | None) -> WireRequest:
        built = self._request_builder.build(request)
        chain = InterceptorChain.create(effective_interceptors(one_off, self._interceptors))
        if chain is None:
            return built
        return chain.transform(built)

    async def _send(
        self,
        request: Any,
        construct: ResultConstructor[T],
        one_off: Interceptor | None,
    ) -> T:
        request_id = new_request_id()

        try:
            session = self._session_builder.build(request)
            wire_request = self._build_wire_request(request, one_off)
        except Exception as e:
            raise self._failure(request_id, request, RequestBuildFailure(e)) from e

        self._logger.log(
            RequestLogMessage(session=session, wire_request=wire_request),
            request_id=request_id,
            request=request,
        )

        # The only suspension point; CancelledError is not an Exception and propagates.
        try:
            data, metadata = await session.execute(wire_request)
        except TransportError as e:
            raise self._failure(
                request_id,
                request,
                NetworkFailure(session=session, wire_request=wire_request, error=e),
            ) from e
        except Exception as e:
            raise self._failure(request_id, request, GeneralFailure(e)) from e

        self._logger.log(
            ResponseLogMessage(data=data, metadata=metadata),
            request_id=request_id,
            request=request,
        )

        try:
            return construct(data, metadata)
        except Exception as e:
            raise self._failure(request_id, request, ResponseDecodeFailure(e)) from e

    def _failure(
        self, request_id: RequestId, request: Any, category: ErrorCategory
    ) -> ControllerError:
        error = ControllerError(request_id=request_id, request=request, category=category)
        self._logger.log(ErrorLogMessage(error=error), request_id=request_id, request=request)
        return error
