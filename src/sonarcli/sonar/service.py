"""Base class for the SDK service groups."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sonarcli.sonar.client import SonarClient


class Service:
    """A group of related SonarQube web service endpoints.

    Services are attached to :class:`~sonarcli.sonar.client.SonarClient` as
    annotated attributes (``client.projects``, ``client.issues``...) and
    share the client's HTTP connection. Every public method that does not
    start with ``validate`` is an API call and is exposed as a CLI command.
    """

    def __init__(self, client: SonarClient) -> None:
        self._client = client
