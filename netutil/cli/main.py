from __future__ import annotations

from pathlib import Path

import click

import netutil

from .context import CLIContext, CLIOverrides
from .logging import configure_logging, restore_logging


@click.group(
    name="netutil",
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.option(
    "--output",
    type=click.Choice(["table", "json"]),
    default="table",
)
@click.option("--json", "json_flag", is_flag=True, help="Alias for --output json.")
@click.option("-q", "--quiet", is_flag=True, help="Suppress non-essential stderr output.")
@click.option("-v", "verbose", count=True, help="Increase verbosity (-v, -vv).")
@click.option(
    "--base-url",
    type=str,
    default=None,
    help="Base URL (e.g. https://api.example.com/v1). Defaults to NETUTIL_BASE_PATH.",
)
@click.option(
    "-H",
    "--header",
    "headers",
    multiple=True,
    help="Extra header sent with every request ('Name: value'). Repeatable.",
)
@click.option("--timeout", type=float, default=None, help="Per-request timeout in seconds.")
@click.option(
    "--readonly",
    is_flag=True,
    help="Disallow write methods (POST/PUT/PATCH/DELETE); nothing is sent.",
)
@click.option(
    "--trace",
    is_flag=True,
    help="Trace request/response/error events to stderr (query strings stripped).",
)
@click.option("--dotenv/--no-dotenv", default=False, help="Opt-in .env loading.")
@click.option(
    "--env-file",
    type=click.Path(dir_okay=False),
    default=".env",
)
@click.version_option(version=netutil.__version__, prog_name="netutil")
@click.pass_context
def cli(
    click_ctx: click.Context,
    *,
    output: str,
    json_flag: bool,
    quiet: bool,
    verbose: int,
    base_url: str | None,
    headers: tuple[str, ...],
    timeout: float | None,
    readonly: bool,
    trace: bool,
    dotenv: bool,
    env_file: str,
) -> None:
    if click_ctx.invoked_subcommand is None:
        # No args: show help; no network calls.
        click.echo(click_ctx.get_help())
        raise click.exceptions.Exit(0)

    overrides = click_ctx.obj if isinstance(click_ctx.obj, CLIOverrides) else CLIOverrides()
    click_ctx.obj = CLIContext(
        output="json" if json_flag else output,  # type: ignore[arg-type]
        quiet=quiet,
        verbosity=verbose,
        base_url=base_url,
        headers=list(headers),
        timeout=timeout,
        readonly=readonly,
        trace=trace,
        dotenv=dotenv,
        env_file=Path(env_file),
        overrides=overrides,
    )

    previous_logging = configure_logging(verbosity=verbose, quiet=quiet)
    click_ctx.call_on_close(lambda: restore_logging(previous_logging))


# Register commands
from .commands.send_cmd import send_cmd as _send_cmd  # noqa: E402
from .commands.version_cmd import version_cmd as _version_cmd  # noqa: E402

cli.add_command(_version_cmd)
cli.add_command(_send_cmd)
