"""Command-line interface for the rotating file logger.

Purpose
-------
Reproduce the operational entry points around the logger: serve the log
directory over HTTP, run the periodic sample-error demo, write a single record,
and trigger a rotation pass by hand.

Contents
--------
* :func:`cli` - Click group with global traceback and dotenv toggles.
* Commands ``info``, ``serve``, ``demo``, ``log``, ``rotate``.
* :func:`main` - entry point routed through :mod:`lib_cli_exit_tools`.

System Role
-----------
Presentation layer. It resolves configuration through
:mod:`lib_log_rotate.config` and delegates all behaviour to the logger, the
rotation engine, and the static server adapter.
"""

from __future__ import annotations

import itertools
import os
import time
from pathlib import Path
from typing import Sequence

import click
import lib_cli_exit_tools
from rich.console import Console

from . import __init__conf__
from . import config as config_module
from .adapters.rotation import rotate as rotate_once
from .adapters.static_server import serve_forever, start_in_thread
from .domain.levels import TraceLevel
from .logger import Logger

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
DEMO_MESSAGE = "sample error emitted by the demo loop"

_LEVEL_CHOICE = click.Choice([level.name.lower() for level in TraceLevel], case_sensitive=False)


def _console() -> Console:
    return Console(highlight=False, markup=False)


@click.group(invoke_without_command=True, context_settings=CLICK_CONTEXT_SETTINGS)
@click.version_option(version=__init__conf__.version, prog_name=__init__conf__.shell_command, message="%(prog)s version %(version)s")
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors.",
)
@click.option(
    "--use-dotenv/--no-use-dotenv",
    default=False,
    help=f"Load a nearby .env before resolving configuration (env toggle: {config_module.DOTENV_ENV_VAR}).",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool, use_dotenv: bool) -> None:
    """Leveled file logger with reverse-order view files and archives."""

    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback

    explicit: bool | None = None
    if ctx.get_parameter_source("use_dotenv") is not click.core.ParameterSource.DEFAULT:
        explicit = use_dotenv
    if config_module.should_use_dotenv(explicit=explicit, env_value=os.getenv(config_module.DOTENV_ENV_VAR)):
        config_module.enable_dotenv()

    if ctx.invoked_subcommand is None:
        click.echo(__init__conf__.summary_info(), nl=False)


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print package metadata."""

    click.echo(__init__conf__.summary_info(), nl=False)


@cli.command("serve", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option("-p", "--port", type=int, default=None, help="Port to serve on (default 8100, env LOG_SERVE_PORT).")
@click.option(
    "-d",
    "--directory",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory of static files to host (default ./logs, env LOG_SERVE_DIRECTORY).",
)
@click.option("--host", default="0.0.0.0", show_default=True, help="Interface to bind.")
def cli_serve(port: int | None, directory: Path | None, host: str) -> None:
    """Serve the log directory over HTTP with directory listings."""

    settings = config_module.build_settings(serve_port=port, serve_directory=directory)
    settings.serve_directory.mkdir(parents=True, exist_ok=True)
    _console().print(f"serving {settings.serve_directory} on http://{host}:{settings.serve_port}/")
    serve_forever(settings.serve_directory, host=host, port=settings.serve_port)


@cli.command("demo", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option("--interval", type=float, default=None, help="Seconds between sample errors (default 5, env LOG_DEMO_INTERVAL).")
@click.option("--count", type=click.IntRange(min=1), default=None, help="Stop after this many records; runs forever when omitted.")
@click.option("--serve/--no-serve", default=True, show_default=True, help="Serve the log directory in the background.")
@click.option("-p", "--port", type=int, default=None, help="Port for the background server.")
@click.option("--file", "file_path", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Primary log file.")
def cli_demo(interval: float | None, count: int | None, serve: bool, port: int | None, file_path: Path | None) -> None:
    """Emit a sample error every INTERVAL seconds while serving the logs."""

    settings = config_module.build_settings(file_path=file_path, serve_port=port, demo_interval=interval)
    settings.file_path.parent.mkdir(parents=True, exist_ok=True)
    console = _console()
    if serve:
        directory = settings.file_path.parent
        start_in_thread(directory, port=settings.serve_port)
        console.print(f"serving {directory} on http://0.0.0.0:{settings.serve_port}/")

    logger = Logger(settings.file_path, settings.trace_level)
    for index in itertools.count(1):
        logger.error(DEMO_MESSAGE)
        console.print(f"[{index}] wrote error record to {settings.file_path}")
        if count is not None and index >= count:
            break
        time.sleep(settings.demo_interval)


@cli.command("log", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("level", type=_LEVEL_CHOICE)
@click.argument("values", nargs=-1)
@click.option("--template", "-t", default=None, help="printf-style template; VALUES are substituted into it.")
@click.option("--file", "file_path", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Primary log file (env LOG_FILE).")
@click.option("--trace-level", type=_LEVEL_CHOICE, default=None, help="Minimum level written (env LOG_TRACE_LEVEL).")
def cli_log(level: str, values: tuple[str, ...], template: str | None, file_path: Path | None, trace_level: str | None) -> None:
    """Write one record at LEVEL; ``fatal`` exits with status 1."""

    settings = config_module.build_settings(file_path=file_path, trace_level=trace_level)
    logger = Logger(settings.file_path, settings.trace_level)
    method = level.lower()
    if template is None:
        getattr(logger, method)(*values)
    else:
        getattr(logger, f"{method}f")(template, *values)


@cli.command("rotate", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option("--file", "file_path", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Primary log file (env LOG_FILE).")
def cli_rotate(file_path: Path | None) -> None:
    """Rewrite the view file for the primary log and archive when oversized."""

    settings = config_module.build_settings(file_path=file_path)
    result = rotate_once(settings.file_path)
    if not result.ok:
        raise click.ClickException(f"rotation failed for {settings.file_path}")
    click.echo(f"reversed {result.lines} lines ({result.primary_size} bytes)")
    if result.archive_path is not None:
        click.echo(f"archived to {result.archive_path}")


def main(argv: Sequence[str] | None = None, *, restore_traceback: bool = True) -> int:
    """Run the CLI through :func:`lib_cli_exit_tools.run_cli` and return its exit code.

    Traceback preferences changed by ``--traceback`` are restored afterwards
    so repeated in-process invocations start from the same state.
    """

    previous_traceback = lib_cli_exit_tools.config.traceback
    previous_force_color = lib_cli_exit_tools.config.traceback_force_color
    try:
        return lib_cli_exit_tools.run_cli(
            cli,
            argv=list(argv) if argv is not None else None,
            prog_name=__init__conf__.shell_command,
        )
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color


__all__ = ["cli", "main"]
