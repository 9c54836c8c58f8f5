"""Server version endpoint (``api/server``)."""

from __future__ import annotations

from typing import Optional

import httpx

from sonarcli.sonar.service import Service


class ServerService(Service):
    def version(self) -> tuple[Optional[str], httpx.Response]:
        """Return the version of the SonarQube server as plain text."""
        request = self._client.new_request("GET", "server/version")
        return self._client.do(request, str)
