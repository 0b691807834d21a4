from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

import click

from ...logger import LogEntry
from ...responses import StandardResponse
from ...types import HTTPMethod, StandardRequest
from ..context import CLIContext
from ..errors import CLIError
from ..runner import CommandOutput, run_command

_METHODS = [m.value for m in HTTPMethod]


def _parse_query(values: tuple[str, ...]) -> dict[str, str]:
    query: dict[str, str] = {}
    for raw in values:
        name, sep, value = raw.partition("=")
        if not sep or not name:
            raise CLIError(f"Invalid --query {raw!r}; expected name=value")
        query[name] = value
    return query


def _parse_data(raw: str | None) -> Any | None:
    if raw is None:
        return None
    if raw.startswith("@"):
        path = Path(raw[1:])
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as e:
            raise CLIError(f"Cannot read --data file: {path}") from e
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise CLIError(f"--data must be valid JSON: {e.msg}") from e


def _response_body(response: StandardResponse) -> Any:
    content_type = response.metadata.header("content-type") or ""
    if "json" in content_type and response.data:
        try:
            return response.json()
        except ValueError:
            return response.text
    return response.text


def serialize_response(response: StandardResponse) -> dict[str, Any]:
    return {
        "status": response.status_code,
        "url": response.metadata.url,
        "headers": dict(response.headers),
        "body": _response_body(response),
    }


@click.command(name="send")
@click.argument("method", type=click.Choice(_METHODS, case_sensitive=False))
@click.argument("path", type=str)
@click.option("--query", "queries", multiple=True, help="Query parameter (name=value). Repeatable.")
@click.option("--data", type=str, default=None, help="JSON body, or @path to read it from a file.")
@click.option(
    "--fail/--no-fail",
    default=False,
    help="Exit with code 7 when the response status is not 2xx.",
)
@click.pass_obj
def send_cmd(
    ctx: CLIContext,
    method: str,
    path: str,
    queries: tuple[str, ...],
    data: str | None,
    fail: bool,
) -> None:
    """Send METHOD PATH relative to the base URL and print the response."""

    def fn(ctx: CLIContext, warnings: list[str]) -> CommandOutput:
        request = StandardRequest(
            method=HTTPMethod(method.upper()),
            path=path,
            query=_parse_query(queries),
            body=_parse_data(data),
        )
        controller = ctx.get_controller()
        seen: list[LogEntry] = []
        controller.configure_logger(lambda logger: logger.add_response_hook(seen.append))

        response = asyncio.run(controller.send(request))

        if not response.is_success:
            warnings.append(f"Server responded with HTTP {response.status_code}")
        return CommandOutput(
            data=serialize_response(response),
            warnings=warnings,
            request_id=str(seen[-1].request_id) if seen else None,
            exit_code=7 if fail and not response.is_success else 0,
        )

    run_command(ctx, command="send", fn=fn)
