"""Output formatting system with strict stdout/stderr discipline.

Follows `clig.dev <https://clig.dev/>`_ conventions:

* **stdout** -- primary data only (SonarQube responses as JSON, YAML or a
  table, raw text and raw binary bodies). This is what downstream tools
  pipe and parse.
* **stderr** -- all diagnostics (status, warnings, errors, debug traces of
  requests and pagination). Never contaminates the data stream.
* **Colour control** -- respects ``NO_COLOR``, ``TERM=dumb``, and the
  ``--no-color`` CLI flag.

The module exposes two layers:

1. :class:`OutputManager` -- a stateful object holding the output format,
   Rich consoles, and quiet/verbose flags. Created once in
   :func:`~sonarcli.app.main_callback` and installed via :func:`set_output`.
2. Module-level convenience functions (:func:`format_output`, :func:`info`,
   :func:`error`, :func:`debug`, etc.) that delegate to the global
   ``OutputManager`` instance so callers do not need to pass the manager
   around.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Optional

import yaml
from pydantic import BaseModel
from rich.console import Console
from rich.markup import escape
from rich.table import Table


class OutputFormat(str, Enum):
    """Enumeration of supported data output formats, selected with ``--output``."""

    JSON = "json"
    YAML = "yaml"
    TABLE = "table"


class OutputManager:
    """Central manager for all CLI output with stdout/stderr discipline.

    Maintains two Rich :class:`~rich.console.Console` instances -- one for
    stdout (data) and one for stderr (diagnostics) -- and routes every
    output call to the correct stream with appropriate formatting.

    Args:
        format: Output format for structured values.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress non-essential informational messages on stderr.
        verbose: Enable debug-level messages on stderr.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.JSON,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._format = OutputFormat(format)
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose

        # Consoles resolve sys.stdout / sys.stderr on each write.
        self._stdout = Console(
            no_color=self._no_color,
            highlight=False,
        )
        self._stderr = Console(
            no_color=self._no_color,
            stderr=True,
        )

    @property
    def format(self) -> OutputFormat:
        """The active output format."""
        return self._format

    @property
    def is_quiet(self) -> bool:
        """Whether quiet mode is enabled."""
        return self._quiet

    @property
    def is_verbose(self) -> bool:
        """Whether verbose mode is enabled."""
        return self._verbose

    # ------------------------------------------------------------------ #
    # Data output (stdout)
    # ------------------------------------------------------------------ #

    def format_output(self, value: Any) -> None:
        """Write the result of a service call to stdout.

        ``None`` prints nothing, ``bytes`` are written unchanged to the
        binary stdout, ``str`` is printed as-is. Everything else (pydantic
        models, lists of models, plain containers) is converted to plain
        data and rendered in the active :attr:`format`.

        Args:
            value: The value returned by the invoker or the pagination
                driver.
        """
        if value is None:
            return
        if isinstance(value, (bytes, bytearray)):
            self.write_bytes(bytes(value))
            return
        if isinstance(value, str):
            self.print_data(value)
            return

        data = to_plain(value)
        if self._format == OutputFormat.YAML:
            self.print_data(yaml.safe_dump(data, sort_keys=False, allow_unicode=True))
        elif self._format == OutputFormat.TABLE:
            self._print_table(data)
        else:
            self._print_json(data)

    def print_data(self, text: str) -> None:
        """Print raw text to stdout, appending a newline if missing.

        Args:
            text: The string to write.
        """
        sys.stdout.write(text)
        if not text.endswith("\n"):
            sys.stdout.write("\n")
        sys.stdout.flush()

    def write_bytes(self, data: bytes) -> None:
        """Write a raw binary payload to stdout without any transformation.

        Args:
            data: Bytes to write.
        """
        sys.stdout.flush()
        stream = binary_stdout()
        stream.write(data)
        stream.flush()

    # ------------------------------------------------------------------ #
    # Diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def info(self, message: str) -> None:
        """Print an informational message to stderr. Suppressed by ``--quiet``.

        Args:
            message: The message text.
        """
        if not self._quiet:
            if self._no_color:
                print(message, file=sys.stderr, flush=True)
            else:
                self._stderr.print(escape(message))

    def success(self, message: str) -> None:
        """Print a green success message to stderr. Suppressed by ``--quiet``.

        Args:
            message: The message text.
        """
        if not self._quiet:
            if self._no_color:
                print(message, file=sys.stderr, flush=True)
            else:
                self._stderr.print(f"[green]{escape(message)}[/green]")

    def warning(self, message: str) -> None:
        """Print a yellow warning to stderr. NOT suppressed by ``--quiet``.

        Args:
            message: The warning text.
        """
        if self._no_color:
            print(f"Warning: {message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(f"[yellow]Warning:[/yellow] {escape(message)}")

    def error(self, message: str) -> None:
        """Print a bold-red error to stderr. Never suppressed.

        Args:
            message: The error text.
        """
        if self._no_color:
            print(f"Error: {message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(f"[bold red]Error:[/bold red] {escape(message)}")

    def debug(self, message: str) -> None:
        """Print a debug message to stderr. Only shown when ``--verbose`` is active.

        Args:
            message: The debug text (prefixed with ``[debug]`` on output).
        """
        if self._verbose:
            if self._no_color:
                print(f"[debug] {message}", file=sys.stderr, flush=True)
            else:
                self._stderr.print(f"[dim]\\[debug] {escape(message)}[/dim]")

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _print_json(self, data: Any) -> None:
        self.print_data(json.dumps(data, indent=2, ensure_ascii=False, default=str))

    def _print_table(self, data: Any) -> None:
        """Render records as a Rich table; anything else falls back to JSON."""
        if isinstance(data, list) and all(isinstance(item, dict) for item in data):
            if not data:
                self.print_data("(no results)")
                return
            headers = list(data[0].keys())
            table = Table(show_header=True, header_style="bold cyan")
            for header in headers:
                table.add_column(header.upper())
            for record in data:
                table.add_row(*(_cell(record.get(h)) for h in headers))
            self._stdout.print(table)
        elif isinstance(data, dict):
            table = Table(show_header=True, header_style="bold cyan")
            table.add_column("FIELD")
            table.add_column("VALUE")
            for key, val in data.items():
                if val in (None, "", [], {}):
                    continue
                table.add_row(str(key), _cell(val))
            self._stdout.print(table)
        else:
            self._print_json(data)


# ------------------------------------------------------------------ #
# Module-level helpers
# ------------------------------------------------------------------ #


def to_plain(value: Any) -> Any:
    """Convert pydantic models (possibly nested in containers) into JSON-ready data.

    Models are dumped by alias with ``None`` fields dropped, so the output
    uses the same field names SonarQube sends on the wire.
    """
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(value, (list, tuple)):
        return [to_plain(item) for item in value]
    if isinstance(value, dict):
        return {key: to_plain(item) for key, item in value.items()}
    return value


def _cell(value: Any) -> str:
    """Format a single table cell; nested structures become compact JSON."""
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def binary_stdout() -> Any:
    """Return the binary layer of stdout, or stdout itself when it has none."""
    return getattr(sys.stdout, "buffer", sys.stdout)


def _should_disable_color() -> bool:
    """Check if color should be disabled per clig.dev.

    Returns True when NO_COLOR env var is set (any value) or TERM=dumb.
    """
    if os.environ.get("NO_COLOR") is not None:
        return True
    if os.environ.get("TERM") == "dumb":
        return True
    return False


# ------------------------------------------------------------------ #
# Global output instance (set during app startup)
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the global :class:`OutputManager` instance.

    If no instance has been installed via :func:`set_output`, a default
    JSON ``OutputManager`` is created lazily.
    """
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    """Install *output* as the global :class:`OutputManager` instance.

    Args:
        output: The configured manager to install.
    """
    global _output
    _output = output


def reset_output() -> None:
    """Reset the global :class:`OutputManager` to ``None``.

    Primarily useful in test suites to ensure a clean state between tests.
    """
    global _output
    _output = None


# ------------------------------------------------------------------ #
# Convenience functions that use the global instance
# ------------------------------------------------------------------ #


def format_output(value: Any) -> None:
    """Write a service call result to stdout via the global :class:`OutputManager`."""
    get_output().format_output(value)


def print_data(text: str) -> None:
    """Print raw data to stdout via the global OutputManager."""
    get_output().print_data(text)


def info(message: str) -> None:
    """Print info message to stderr via the global OutputManager."""
    get_output().info(message)


def error(message: str) -> None:
    """Print error to stderr via the global OutputManager."""
    get_output().error(message)


def success(message: str) -> None:
    """Print success message to stderr via the global OutputManager."""
    get_output().success(message)


def warning(message: str) -> None:
    """Print warning to stderr via the global OutputManager."""
    get_output().warning(message)


def debug(message: str) -> None:
    """Print debug message to stderr via the global OutputManager."""
    get_output().debug(message)
