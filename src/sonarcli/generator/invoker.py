"""Call SDK service methods by name and normalise their results.

:func:`invoke_method` handles the request/response methods and returns an
:class:`Invocation`; :func:`invoke_streaming` handles methods that hand
back an open streaming response and copies its body to a binary sink.
"""

from __future__ import annotations

from typing import Any, BinaryIO, Callable, NamedTuple, Optional

import httpx

from sonarcli.exceptions import InvocationError, MethodNotFoundError, SonarCliError, StreamingError
from sonarcli.models import ReturnShape
from sonarcli.output import debug


class Invocation(NamedTuple):
    """Normalised result of a service call."""

    value: Any
    response: Optional[httpx.Response]


def service_label(service: object) -> str:
    """Name of a service for messages: its class name without ``Service``."""
    name = type(service).__name__
    if name.endswith("Service") and name != "Service":
        return name[: -len("Service")]
    return name


def _lookup(service: object, name: str) -> Callable[..., Any]:
    method = None if name.startswith("_") else getattr(service, name, None)
    if method is None or not callable(method):
        raise MethodNotFoundError(f"method {name!r} not found on service")
    return method


def invoke_method(
    service: object,
    name: str,
    opt: Any,
    shape: ReturnShape,
    has_opt: bool,
) -> Invocation:
    """Call ``service.<name>`` and unwrap its result according to *shape*.

    Args:
        service: A service instance, e.g. ``client.projects``.
        name: Method name on the service.
        opt: The option model passed as the only argument when *has_opt*.
        shape: The method's return shape.
        has_opt: Whether the method takes an option argument.

    Returns:
        ``Invocation(None, response)`` for ``NO_BODY`` methods, otherwise
        ``Invocation(value, response)``. A ``None`` value is returned as is.

    Raises:
        MethodNotFoundError: If *name* is not a method of *service*.
        InvocationError: If the method raises a :class:`SonarCliError`, or
            returns something that does not match *shape*. The error keeps
            the wrapped error's exit code and the transport response.
    """
    method = _lookup(service, name)
    label = f"{service_label(service)}.{name}"

    try:
        result = method(opt) if has_opt else method()
    except SonarCliError as exc:
        raise InvocationError(
            f"{label}: {exc}",
            response=getattr(exc, "response", None),
            exit_code=exc.exit_code,
        ) from exc

    if shape is ReturnShape.NO_BODY:
        if isinstance(result, tuple):
            raise InvocationError(f"{label}: unexpected return count {len(result) + 1}")
        return Invocation(None, result)

    if not isinstance(result, tuple) or len(result) != 2:
        count = len(result) + 1 if isinstance(result, tuple) else 2
        raise InvocationError(f"{label}: unexpected return count {count}")
    value, response = result
    return Invocation(value, response)


def invoke_streaming(service: object, name: str, opt: Any, sink: BinaryIO) -> None:
    """Call a streaming method and copy the response body into *sink*.

    Exceptions raised by the method itself propagate unchanged. The response
    is always closed once the copy ends, successfully or not.

    Raises:
        MethodNotFoundError: If *name* is not a method of *service*.
        InvocationError: If the method returns a ``(value, response)`` pair
            instead of a bare response.
        StreamingError: If copying the body fails.
    """
    method = _lookup(service, name)
    response = method(opt) if opt is not None else method()

    if isinstance(response, tuple):
        raise InvocationError(f"unexpected return count {len(response) + 1} from streaming method")
    if response is None:
        return

    debug(f"streaming {service_label(service)}.{name}")
    try:
        for chunk in response.iter_bytes():
            sink.write(chunk)
            sink.flush()
    except (OSError, httpx.HTTPError) as exc:
        raise StreamingError(f"copy stream: {exc}") from exc
    finally:
        response.close()
