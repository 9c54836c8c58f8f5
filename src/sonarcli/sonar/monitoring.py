"""Prometheus metrics endpoint (``api/monitoring``)."""

from __future__ import annotations

from typing import Optional

import httpx

from sonarcli.sonar.service import Service


class MonitoringService(Service):
    """Server monitoring."""

    def metrics(self) -> tuple[Optional[str], httpx.Response]:
        """Return the server metrics in the Prometheus text format."""
        request = self._client.new_request("GET", "monitoring/metrics")
        return self._client.do(request, str)
