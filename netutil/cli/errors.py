from __future__ import annotations

from typing import Any

from ..exceptions import ConfigurationError, ControllerError, ErrorKind

_KIND_EXIT_CODES: dict[ErrorKind, int] = {
    ErrorKind.REQUEST_BUILD: 2,
    ErrorKind.NETWORK: 5,
    ErrorKind.RESPONSE_DECODE: 6,
    ErrorKind.GENERAL: 1,
}


class CLIError(Exception):
    """Usage or input problem detected by the CLI itself (no request was sent)."""

    def __init__(
        self,
        message: str,
        *,
        exit_code: int = 2,
        error_type: str = "usage_error",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code
        self.error_type = error_type
        self.details = details

    def __str__(self) -> str:  # pragma: no cover
        return self.message


def exit_code_for_exception(exc: Exception) -> int:
    if isinstance(exc, CLIError):
        return exc.exit_code
    if isinstance(exc, ConfigurationError):
        return 2
    if isinstance(exc, ControllerError):
        return _KIND_EXIT_CODES[exc.kind]
    return 1


def error_details(exc: Exception) -> tuple[str, str, dict[str, Any] | None]:
    """Return `(type, message, details)` for rendering."""
    if isinstance(exc, CLIError):
        return exc.error_type, exc.message, exc.details
    if isinstance(exc, ControllerError):
        cause = exc.cause
        return (
            f"{exc.kind.value}_failure",
            f"{cause.__class__.__name__}: {cause}",
            {"requestId": str(exc.request_id), "request": str(exc.request)},
        )
    if isinstance(exc, ConfigurationError):
        return "config_error", str(exc), None
    return exc.__class__.__name__, str(exc), None
