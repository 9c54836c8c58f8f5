"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~sonarcli.exceptions.SonarCliError` subclass.
Shell scripts wrapping ``sonar-cli`` can branch on the exit code instead of
parsing stderr.

Example::

    $ sonar-cli projects delete --project missing
    $ echo $?
    4   # EXIT_NOT_FOUND -- SonarQube answered 404
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments, bad flag values, or missing required flags."""

EXIT_AUTH_FAILURE = 3
"""SonarQube rejected the credentials (HTTP 401 or 403)."""

EXIT_NOT_FOUND = 4
"""The requested resource was not found (HTTP 404)."""

EXIT_SERVER_ERROR = 5
"""SonarQube returned an HTTP 5xx server error."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_INTERRUPTED = 130
"""The user cancelled the command with Ctrl-C."""
