"""Exception hierarchy for sonarcli.

All exceptions inherit from :class:`SonarCliError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`sonarcli.exit_codes`.
The top-level error handler in :func:`sonarcli.app.main` catches
``SonarCliError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    SonarCliError (exit 1)
    +-- InvalidUsageError        (exit 2)
    |   +-- FlagValueError
    |   +-- MissingFlagError
    |   +-- MethodNotFoundError
    |   +-- ServiceNotFoundError
    +-- ValidationError          (exit 2)
    +-- ResponseError            (exit 1)
    |   +-- AuthError            (exit 3)
    |   +-- NotFoundError        (exit 4)
    |   +-- ServerError          (exit 5)
    +-- DecodeError              (exit 1)
    +-- ConnectionError_         (exit 6)
    +-- InvocationError          (exit code of the wrapped error)
    +-- StreamingError           (exit 1)
    +-- ConfigError              (exit 1)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from sonarcli.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SERVER_ERROR,
)

if TYPE_CHECKING:
    import httpx


class SonarCliError(Exception):
    """Base exception for all sonarcli errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`sonarcli.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(SonarCliError):
    """Raised for invalid CLI arguments or missing required parameters."""

    exit_code = EXIT_INVALID_USAGE


class FlagValueError(InvalidUsageError):
    """Raised when a flag value cannot be parsed by its slot (bad boolean, malformed pair, bad JSON)."""


class MissingFlagError(InvalidUsageError):
    """Raised when a required flag was not supplied."""


class MethodNotFoundError(InvalidUsageError):
    """Raised when a method name does not resolve to a callable on a service."""


class ServiceNotFoundError(InvalidUsageError):
    """Raised when a service attribute does not exist on the client."""


class ValidationError(SonarCliError):
    """Raised by SDK methods when an option model fails client-side validation.

    Args:
        field: Name of the offending option field.
        message: What is wrong with the field.
        reason: Optional error category (``"invalid value"``,
            ``"missing required parameter"``, ...), appended in parentheses.
    """

    exit_code = EXIT_INVALID_USAGE

    def __init__(self, field: str, message: str, reason: Optional[str] = None):
        self.field = field
        self.message = message
        self.reason = reason
        text = f'validation error for field "{field}": {message}'
        if reason:
            text = f"{text} ({reason})"
        super().__init__(text)


class ResponseError(SonarCliError):
    """Raised when SonarQube answers with a non-success status code.

    The formatted message mirrors the request line, e.g.
    ``GET http://sonar:9000/api/projects/search: 400 {errors: ...}``.

    Args:
        response: The :class:`httpx.Response` that failed the status check.
        message: Error detail extracted from the response body.
        body: Raw response body.
    """

    def __init__(
        self,
        response: httpx.Response,
        message: str = "",
        body: bytes = b"",
    ):
        self.response = response
        self.message = message
        self.body = body
        super().__init__(self._describe())

    @property
    def status_code(self) -> int:
        """HTTP status code of the failed response."""
        return self.response.status_code

    def _describe(self) -> str:
        request = self.response.request
        url = request.url
        location = f"{url.scheme}://{url.netloc.decode('ascii')}{url.path}"
        return f"{request.method} {location}: {self.response.status_code} {self.message}"


class AuthError(ResponseError):
    """Raised when SonarQube rejects the credentials (HTTP 401 / 403)."""

    exit_code = EXIT_AUTH_FAILURE


class NotFoundError(ResponseError):
    """Raised when SonarQube returns HTTP 404 (resource not found)."""

    exit_code = EXIT_NOT_FOUND


class ServerError(ResponseError):
    """Raised when SonarQube returns an HTTP 5xx server error."""

    exit_code = EXIT_SERVER_ERROR


class DecodeError(SonarCliError):
    """Raised when a successful response body does not match the expected model."""


class ConnectionError_(SonarCliError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class InvocationError(SonarCliError):
    """Raised when a service method invoked by the CLI fails.

    Keeps the transport response, when there is one, so callers can still
    look at the status code or headers of a failed call.

    Args:
        message: Error description, usually ``service.method: cause``.
        response: The transport response of the failed call, if any.
        exit_code: Exit code inherited from the wrapped error.
    """

    def __init__(
        self,
        message: str,
        response: Optional[httpx.Response] = None,
        exit_code: int | None = None,
    ):
        super().__init__(message, exit_code=exit_code)
        self.response = response


class StreamingError(SonarCliError):
    """Raised when copying a streamed response body to the output fails."""


class ConfigError(SonarCliError):
    """Raised for configuration problems (missing server URL, invalid config file)."""

    exit_code = EXIT_GENERIC_FAILURE
