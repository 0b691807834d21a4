from __future__ import annotations

import platform

import click
import httpx
import pydantic

import netutil

from ..context import CLIContext
from ..runner import CommandOutput, run_command


@click.command(name="version")
@click.pass_obj
def version_cmd(ctx: CLIContext) -> None:
    """Show package, dependency and platform versions (no network)."""

    def fn(_: CLIContext, _warnings: list[str]) -> CommandOutput:
        data = {
            "version": netutil.__version__,
            "httpxVersion": httpx.__version__,
            "pydanticVersion": pydantic.VERSION,
            "pythonVersion": platform.python_version(),
            "platform": platform.platform(),
        }
        return CommandOutput(data=data)

    run_command(ctx, command="version", fn=fn)
