"""Typer application factory and CLI entry point for sonar-cli.

:func:`create_app` builds the root Typer application: the global options
callback, the built-in ``config`` group, and one generated group per
SonarQube service (see :mod:`sonarcli.generator.command_tree`).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers and invokes the app.
:class:`~sonarcli.exceptions.SonarCliError` instances exit with their own
code; other exceptions are written to a crash log under the data
directory.

See Also:
    :mod:`sonarcli.config`: Connection settings resolution.
    :mod:`sonarcli.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import platform
import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from sonarcli import __version__
from sonarcli.config import ENV_PASSWORD, ENV_TOKEN, ENV_URL, ENV_USERNAME
from sonarcli.exit_codes import EXIT_GENERIC_FAILURE, EXIT_INTERRUPTED
from sonarcli.generator.command_tree import ClientResolver, register_all_commands
from sonarcli.output import OutputFormat


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"sonar-cli {__version__} (python {platform.python_version()})")
        raise typer.Exit()


def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    url: Optional[str] = typer.Option(
        None, "--url", envvar=ENV_URL, help="SonarQube API base URL, e.g. https://sonar.example.com/api/."
    ),
    token: Optional[str] = typer.Option(
        None, "--token", envvar=ENV_TOKEN, help="User token."
    ),
    username: Optional[str] = typer.Option(
        None, "--username", envvar=ENV_USERNAME, help="Login for basic authentication."
    ),
    password: Optional[str] = typer.Option(
        None, "--password", envvar=ENV_PASSWORD, help="Password for basic authentication."
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="Request timeout in seconds (default 30)."
    ),
    output_format: Optional[OutputFormat] = typer.Option(
        None, "--output", "-o", help="Output format: json, table or yaml."
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

    Initialises the global :class:`~sonarcli.output.OutputManager` from CLI
    flags and the config file, and stores the resolved
    :class:`~sonarcli.models.ConnectionSettings` in ``ctx.obj["settings"]``
    so that generated commands can build the client.

    Args:
        ctx: Typer invocation context.
        version: If ``True``, print the version string and exit.
        url: Server URL override (highest precedence).
        token: User token.
        username: Basic-auth login.
        password: Basic-auth password.
        timeout: Request timeout override.
        output_format: Data output format; defaults to the configured one.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress non-essential diagnostic output.
        verbose: Enable debug-level diagnostic output.
    """
    from sonarcli.config import load_global_config, resolve_settings
    from sonarcli.exceptions import ConfigError
    from sonarcli.models import GlobalConfig
    from sonarcli.output import OutputManager, set_output, warning

    config_problem: Optional[str] = None
    try:
        config = load_global_config()
    except ConfigError as exc:
        config_problem = str(exc)
        config = GlobalConfig()

    output = OutputManager(
        format=output_format or OutputFormat(config.output.format),
        no_color=no_color or config.output.no_color,
        quiet=quiet,
        verbose=verbose,
    )
    set_output(output)
    if config_problem:
        warning(f"{config_problem}; using defaults")

    ctx.ensure_object(dict)
    ctx.obj["settings"] = resolve_settings(
        cli_url=url,
        cli_token=token,
        cli_username=username,
        cli_password=password,
        cli_timeout=timeout,
        global_config=config,
    )


def create_app(client_resolver: Optional[ClientResolver] = None) -> typer.Typer:
    """Build the root application.

    Args:
        client_resolver: Forwarded to
            :func:`~sonarcli.generator.command_tree.register_all_commands`;
            returns the client used by the generated commands.

    Returns:
        A :class:`typer.Typer` app with every command registered.
    """
    from sonarcli.commands.config import config_app

    app = typer.Typer(
        name="sonar-cli",
        help="Command-line client for the SonarQube web API.",
        no_args_is_help=True,
        add_completion=True,
        rich_markup_mode="rich",
    )
    app.callback()(main_callback)
    app.add_typer(config_app, name="config", help="Configuration management.")
    register_all_commands(app, client_resolver=client_resolver)
    return app


app = create_app()


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path.

    Args:
        exc: The unhandled exception to log.

    Returns:
        Absolute path to the written crash log file.
    """
    from sonarcli.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)))
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``sonar-cli`` console script.

    Unhandled :class:`~sonarcli.exceptions.SonarCliError` instances cause a
    clean exit with the error's ``exit_code``. All other exceptions produce
    a crash log and a generic failure exit.

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
        sys.exit(EXIT_INTERRUPTED)
    except Exception as exc:
        from sonarcli.exceptions import SonarCliError
        from sonarcli.output import error

        if isinstance(exc, SonarCliError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
