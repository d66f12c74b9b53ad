"""Typer application and CLI entry point for fluent-openapi.

The CLI is a thin shell around the library: ``tree`` and ``paths`` show how
a spec compiles, ``call`` walks the compiled client and sends one request,
and ``config`` manages the defaults they fall back on.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers and invokes the Typer app.
Unhandled exceptions are written to a crash log under the data directory.

See Also:
    :mod:`fluent_openapi.config`: Global configuration resolution.
    :mod:`fluent_openapi.output`: Output formatting initialised in
    :func:`main_callback`.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from datetime import datetime
from typing import Any

import typer

from fluent_openapi import __version__
from fluent_openapi.commands.call import call_command
from fluent_openapi.commands.config import config_app
from fluent_openapi.commands.inspect import paths_command, tree_command
from fluent_openapi.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="fluent-openapi",
    help="Compile OpenAPI paths into a navigable client.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("tree")(tree_command)
app.command("paths")(paths_command)
app.command("call")(call_command)
app.add_typer(config_app, name="config", help="Configuration management.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"fluent-openapi {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~fluent_openapi.output.OutputManager`
    from CLI flags. With ``--verbose`` the library loggers (compiler and
    dispatcher) are also sent to stderr at DEBUG level.
    """
    from fluent_openapi.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(
        OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose)
    )

    if verbose:
        logging.basicConfig(
            level=logging.WARNING,
            stream=sys.stderr,
            format="[debug] %(name)s: %(message)s",
        )
        logging.getLogger("fluent_openapi").setLevel(logging.DEBUG)


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from fluent_openapi.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``fluent-openapi`` console script.

    Unhandled :class:`~fluent_openapi.exceptions.FluentError` instances
    cause a clean exit with the error's ``exit_code``. All other exceptions
    produce a crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from fluent_openapi.exceptions import FluentError
        from fluent_openapi.output import error

        if isinstance(exc, FluentError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
