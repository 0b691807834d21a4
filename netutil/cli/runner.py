from __future__ import annotations

import json
import sys
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import click
from rich.console import Console
from rich.json import JSON
from rich.table import Table

from .context import CLIContext
from .errors import error_details, exit_code_for_exception
from .results import CommandMeta, CommandResult, ErrorInfo


@dataclass(frozen=True, slots=True)
class CommandOutput:
    data: Any | None = None
    warnings: list[str] | None = None
    request_id: str | None = None
    exit_code: int = 0


def _emit_json(result: CommandResult) -> None:
    payload = result.model_dump(by_alias=True, mode="json")
    meta = payload.get("meta")
    if isinstance(meta, dict) and meta.get("requestId") is None:
        meta.pop("requestId", None)
    sys.stdout.write(json.dumps(payload, ensure_ascii=False) + "\n")


def _render_table(ctx: CLIContext, result: CommandResult) -> None:
    stdout = Console(force_terminal=False, soft_wrap=True)
    stderr = Console(file=sys.stderr, force_terminal=False)
    if result.error is not None:
        stderr.print(f"Error ({result.error.type}): {result.error.message}")
        if ctx.verbosity >= 1 and result.error.details:
            for key, value in result.error.details.items():
                stderr.print(f"  {key}: {value}")
        return

    data = result.data
    if isinstance(data, dict) and "status" in data:
        table = Table(show_header=False, box=None)
        table.add_row("Status", str(data["status"]))
        table.add_row("URL", str(data.get("url", "")))
        if ctx.verbosity >= 1:
            for name, value in (data.get("headers") or {}).items():
                table.add_row(name, str(value))
        stdout.print(table)
        body = data.get("body")
        if isinstance(body, (dict, list)):
            stdout.print(JSON.from_data(body))
        elif body:
            stdout.print(body, markup=False, highlight=False)
    elif isinstance(data, dict):
        table = Table(show_header=False, box=None)
        for key, value in data.items():
            table.add_row(key, str(value))
        stdout.print(table)
    elif data is not None:
        stdout.print(data, markup=False, highlight=False)

    if not ctx.quiet:
        for warning in result.warnings:
            stderr.print(f"Warning: {warning}")


def emit_result(ctx: CLIContext, result: CommandResult) -> None:
    if ctx.output == "json":
        _emit_json(result)
        return
    _render_table(ctx, result)


CommandFn = Callable[[CLIContext, list[str]], CommandOutput]


def run_command(ctx: CLIContext, *, command: str, fn: CommandFn) -> None:
    started = time.time()
    warnings: list[str] = []
    try:
        out = fn(ctx, warnings)
        result = CommandResult(
            ok=True,
            command=command,
            data=out.data,
            warnings=out.warnings or warnings,
            meta=CommandMeta(duration_ms=_elapsed_ms(started), request_id=out.request_id),
        )
        emit_result(ctx, result)
        raise click.exceptions.Exit(out.exit_code)
    except click.exceptions.Exit:
        raise
    except Exception as exc:
        error_type, message, details = error_details(exc)
        request_id = details.get("requestId") if details else None
        result = CommandResult(
            ok=False,
            command=command,
            warnings=warnings,
            meta=CommandMeta(duration_ms=_elapsed_ms(started), request_id=request_id),
            error=ErrorInfo(type=error_type, message=message, details=details),
        )
        emit_result(ctx, result)
        raise click.exceptions.Exit(exit_code_for_exception(exc)) from exc


def _elapsed_ms(started: float) -> int:
    return int(max(0.0, (time.time() - started) * 1000))
