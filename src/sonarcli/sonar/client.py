"""Synchronous SonarQube web API client.

:class:`SonarClient` wraps :class:`httpx.Client` and layers on:

- **Base URL handling** -- defaults to ``http://localhost:9000/api/`` and
  always ends with a slash so service paths are joined relative to it.
- **Auth injection** -- a user token is sent as the basic-auth user name
  with an empty password; a user name and password pair is sent as plain
  basic auth.
- **Query encoding** -- option models are turned into query parameters by
  :func:`~sonarcli.sonar.query.encode_query`.
- **Error mapping** -- non-success statuses raise a
  :class:`~sonarcli.exceptions.ResponseError` subclass chosen by status
  code; transport failures raise :class:`~sonarcli.exceptions.ConnectionError_`.

The individual endpoint groups live in the service modules and are reached
through the annotated attributes of :class:`SonarClient`
(``client.projects.search(...)``).
"""

from __future__ import annotations

import json
from typing import Any, Optional, get_origin

import httpx
import pydantic
from pydantic import BaseModel, TypeAdapter

from sonarcli import __version__
from sonarcli.exceptions import (
    AuthError,
    ConnectionError_,
    DecodeError,
    NotFoundError,
    ResponseError,
    ServerError,
)
from sonarcli.output import get_output
from sonarcli.sonar.batch import BatchService
from sonarcli.sonar.hotspots import HotspotsService
from sonarcli.sonar.issues import IssuesService
from sonarcli.sonar.l10n import L10NService
from sonarcli.sonar.languages import LanguagesService
from sonarcli.sonar.monitoring import MonitoringService
from sonarcli.sonar.project_analyses import ProjectAnalysesService
from sonarcli.sonar.projects import ProjectsService
from sonarcli.sonar.push import PushService
from sonarcli.sonar.qualityprofiles import QualityprofilesService
from sonarcli.sonar.query import encode_query
from sonarcli.sonar.server import ServerService
from sonarcli.sonar.settings import SettingsService
from sonarcli.sonar.system import SystemService
from sonarcli.sonar.user_groups import UserGroupsService
from sonarcli.sonar.webservices import WebservicesService

DEFAULT_BASE_URL = "http://localhost:9000/api/"
DEFAULT_TIMEOUT = 30.0

_OK_STATUSES = frozenset({200, 201, 202, 204, 304})


class SonarClient:
    """Client for the SonarQube web API.

    Args:
        url: Base URL of the API, e.g. ``https://sonar.example.com/api/``.
            Defaults to :data:`DEFAULT_BASE_URL`.
        token: User token. Takes precedence over *username*/*password*.
        username: Login for basic authentication.
        password: Password for basic authentication.
        timeout: Request timeout in seconds.
        user_agent: Overrides the ``User-Agent`` header.
        transport: Custom :mod:`httpx` transport (``httpx.MockTransport`` in
            tests).

    Example::

        with SonarClient("https://sonar.example.com/api/", token="squ_...") as client:
            result, response = client.projects.search(ProjectsSearchOption(q="core"))
    """

    batch: BatchService
    hotspots: HotspotsService
    issues: IssuesService
    l10n: L10NService
    languages: LanguagesService
    monitoring: MonitoringService
    project_analyses: ProjectAnalysesService
    projects: ProjectsService
    push: PushService
    qualityprofiles: QualityprofilesService
    server: ServerService
    settings: SettingsService
    system: SystemService
    user_groups: UserGroupsService
    webservices: WebservicesService

    def __init__(
        self,
        url: Optional[str] = None,
        token: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        base_url = url or DEFAULT_BASE_URL
        if not base_url.endswith("/"):
            base_url += "/"
        self.base_url = base_url
        self.user_agent = user_agent or f"sonar-cli/{__version__}"

        auth: Optional[httpx.BasicAuth] = None
        if token:
            auth = httpx.BasicAuth(token, "")
        elif username and password:
            auth = httpx.BasicAuth(username, password)

        self._http = httpx.Client(
            base_url=base_url,
            auth=auth,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json", "User-Agent": self.user_agent},
        )

        self.batch = BatchService(self)
        self.hotspots = HotspotsService(self)
        self.issues = IssuesService(self)
        self.l10n = L10NService(self)
        self.languages = LanguagesService(self)
        self.monitoring = MonitoringService(self)
        self.project_analyses = ProjectAnalysesService(self)
        self.projects = ProjectsService(self)
        self.push = PushService(self)
        self.qualityprofiles = QualityprofilesService(self)
        self.server = ServerService(self)
        self.settings = SettingsService(self)
        self.system = SystemService(self)
        self.user_groups = UserGroupsService(self)
        self.webservices = WebservicesService(self)

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> SonarClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        self._http.close()

    # ------------------------------------------------------------------ #
    # Request plumbing used by the services
    # ------------------------------------------------------------------ #

    def new_request(self, method: str, path: str, opt: Optional[BaseModel] = None) -> httpx.Request:
        """Build a request for *path*, relative to the base URL.

        SonarQube reads parameters from the query string for every method,
        so *opt* is always encoded there, POST included.
        """
        headers: dict[str, str] = {}
        if method in ("POST", "PUT"):
            headers["Content-Type"] = "application/json"
        return self._http.build_request(method, path, params=encode_query(opt), headers=headers)

    def do(self, request: httpx.Request, dest: Any = None) -> tuple[Any, httpx.Response]:
        """Send *request*, check the status and decode the body into *dest*.

        Args:
            request: A request built by :meth:`new_request`.
            dest: What to decode the body into. ``None`` skips decoding,
                ``str`` returns the text (and asks for ``text/plain``),
                ``bytes`` returns the raw content, a model class validates
                the JSON body, and ``list[Model]`` validates a JSON array.

        Returns:
            ``(value, response)``. ``value`` is ``None`` when *dest* is
            ``None`` or the body is empty.

        Raises:
            ResponseError: On a non-success status (see :func:`check_response`).
            ConnectionError_: On network or timeout failures.
            DecodeError: When the body does not match *dest*.
        """
        if dest is str:
            request.headers["Accept"] = "text/plain"

        response = self._send(request)
        check_response(response)

        if dest is None:
            return None, response
        if dest is str:
            return response.text, response
        if dest is bytes:
            return response.content, response
        if not response.content:
            return None, response
        return _decode(response, dest), response

    def stream(self, request: httpx.Request) -> httpx.Response:
        """Send *request* without reading the body.

        The caller owns the returned response and must close it.
        """
        response = self._send(request, stream=True)
        check_response(response)
        return response

    def _send(self, request: httpx.Request, stream: bool = False) -> httpx.Response:
        get_output().debug(f"{request.method} {request.url}")
        try:
            return self._http.send(request, stream=stream)
        except httpx.TransportError as exc:
            raise ConnectionError_(f"{request.method} {request.url}: {exc}") from exc


# ------------------------------------------------------------------ #
# Response helpers
# ------------------------------------------------------------------ #


def _decode(response: httpx.Response, dest: Any) -> Any:
    try:
        data = response.json()
        if get_origin(dest) is list:
            return TypeAdapter(dest).validate_python(data)
        return dest.model_validate(data)
    except (json.JSONDecodeError, pydantic.ValidationError) as exc:
        raise DecodeError(f"failed to decode response from {response.request.url}: {exc}") from exc


def parse_error(raw: Any) -> str:
    """Flatten a decoded JSON error body into a single line.

    SonarQube usually answers ``{"errors": [{"msg": "..."}]}``, which becomes
    ``{errors: [{msg: ...}]}``.
    """
    if isinstance(raw, str):
        return raw
    if isinstance(raw, list):
        return "[" + ", ".join(parse_error(item) for item in raw) + "]"
    if isinstance(raw, dict):
        return ", ".join(sorted(f"{{{key}: {parse_error(value)}}}" for key, value in raw.items()))
    return f"failed to parse unexpected error type: {type(raw).__name__}"


def check_response(response: httpx.Response) -> None:
    """Raise the matching :class:`ResponseError` when *response* is not a success.

    Accepted statuses are 200, 201, 202, 204 and 304. The body of a failed
    response is read, kept on the error, and closed.
    """
    if response.status_code in _OK_STATUSES:
        return

    try:
        body = response.read()
    finally:
        response.close()

    try:
        message = parse_error(json.loads(body)) if body else ""
    except ValueError:
        message = body.decode("utf-8", errors="replace")

    status = response.status_code
    if status in (401, 403):
        error_cls: type[ResponseError] = AuthError
    elif status == 404:
        error_cls = NotFoundError
    elif status >= 500:
        error_cls = ServerError
    else:
        error_cls = ResponseError
    raise error_cls(response, message=message, body=body)
