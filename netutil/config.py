"""
Controller configuration.

`ControllerConfig` holds the settings needed to build a standard controller and
can be read from `NETUTIL_*` environment variables (optionally loaded from a
`.env` file via python-dotenv).
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .exceptions import ConfigurationError
from .logger import DEFAULT_REDACTED_HEADERS

ENV_PREFIX = "NETUTIL_"

_TRUTHY = frozenset({"1", "true", "yes", "on"})
_FALSY = frozenset({"0", "false", "no", "off", ""})


class WritePolicy(Enum):
    """Whether write methods (POST, PUT, PATCH, DELETE) may reach the network."""

    ALLOW = "allow"
    DENY = "deny"


@dataclass(frozen=True, slots=True)
class Policies:
    write: WritePolicy = WritePolicy.ALLOW


def _maybe_load_dotenv(
    *, load_dotenv: bool, dotenv_path: str | os.PathLike[str] | None, override: bool
) -> None:
    if not load_dotenv:
        return
    try:
        import dotenv  # pyright: ignore[reportMissingImports]
    except ImportError as e:
        raise ImportError(
            "Optional .env support requires python-dotenv; install `netutil[dotenv]`."
        ) from e
    path = Path(dotenv_path) if dotenv_path is not None else None
    dotenv.load_dotenv(dotenv_path=path, override=override)


def parse_header_list(raw: str) -> dict[str, str]:
    """Parse `Name=value;Other=value` into a header mapping."""
    headers: dict[str, str] = {}
    for chunk in raw.split(";"):
        chunk = chunk.strip()
        if not chunk:
            continue
        name, sep, value = chunk.partition("=")
        if not sep or not name.strip():
            raise ConfigurationError(f"Invalid header entry {chunk!r}; expected Name=value")
        headers[name.strip()] = value.strip()
    return headers


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ConfigurationError(f"{name} must be a boolean, got {raw!r}")


@dataclass(frozen=True, slots=True)
class ControllerConfig:
    base_path: str
    scheme: str = "https"
    query: Mapping[str, str] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)
    timeout: float | None = 30.0
    follow_redirects: bool = False
    policies: Policies = field(default_factory=Policies)
    redacted_headers: frozenset[str] = DEFAULT_REDACTED_HEADERS

    def __post_init__(self) -> None:
        if not self.base_path:
            raise ConfigurationError("base_path is required")
        if self.scheme not in ("http", "https"):
            raise ConfigurationError(f"Unsupported scheme: {self.scheme!r}")
        if self.timeout is not None and self.timeout <= 0:
            raise ConfigurationError("timeout must be positive")

    @classmethod
    def from_env(
        cls,
        *,
        environ: Mapping[str, str] | None = None,
        load_dotenv: bool = False,
        dotenv_path: str | os.PathLike[str] | None = None,
    ) -> ControllerConfig:
        """
        Build a config from environment variables.

        Reads `NETUTIL_BASE_PATH` (required), `NETUTIL_SCHEME`, `NETUTIL_TIMEOUT`,
        `NETUTIL_HEADERS` (`Name=value;Other=value`), `NETUTIL_FOLLOW_REDIRECTS`
        and `NETUTIL_READONLY`.

        Raises:
            ConfigurationError: If a variable is missing or malformed.
        """
        _maybe_load_dotenv(load_dotenv=load_dotenv, dotenv_path=dotenv_path, override=False)
        env = os.environ if environ is None else environ

        def get(name: str) -> str | None:
            return env.get(ENV_PREFIX + name)

        base_path = (get("BASE_PATH") or "").strip()
        if not base_path:
            raise ConfigurationError(f"Missing {ENV_PREFIX}BASE_PATH")

        timeout: float | None = 30.0
        raw_timeout = get("TIMEOUT")
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError as e:
                raise ConfigurationError(
                    f"{ENV_PREFIX}TIMEOUT must be a number, got {raw_timeout!r}"
                ) from e

        readonly = _parse_bool(ENV_PREFIX + "READONLY", get("READONLY") or "")
        return cls(
            base_path=base_path,
            scheme=(get("SCHEME") or "https").strip().lower(),
            headers=parse_header_list(get("HEADERS") or ""),
            timeout=timeout,
            follow_redirects=_parse_bool(
                ENV_PREFIX + "FOLLOW_REDIRECTS", get("FOLLOW_REDIRECTS") or ""
            ),
            policies=Policies(write=WritePolicy.DENY if readonly else WritePolicy.ALLOW),
        )
