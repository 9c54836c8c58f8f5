"""Server-sent event stream for SonarLint (``api/push``)."""

from __future__ import annotations

from typing import Annotated

import httpx
from pydantic import BaseModel, Field

from sonarcli.exceptions import ValidationError
from sonarcli.sonar.common import MISSING_REQUIRED
from sonarcli.sonar.query import UrlTag
from sonarcli.sonar.service import Service


class PushSonarlintEventsOption(BaseModel):
    languages: Annotated[list[str], UrlTag("languages,comma")] = Field(
        default_factory=list, description="Comma-separated list of languages, e.g. java,js"
    )
    project_keys: Annotated[list[str], UrlTag("projectKeys,comma")] = Field(
        default_factory=list, description="Comma-separated list of project keys"
    )


class PushService(Service):
    def validate_sonarlint_events_opt(self, opt: PushSonarlintEventsOption) -> None:
        if not opt.languages:
            raise ValidationError("Languages", "is required", MISSING_REQUIRED)
        if not opt.project_keys:
            raise ValidationError("ProjectKeys", "is required", MISSING_REQUIRED)

    def sonarlint_events(self, opt: PushSonarlintEventsOption) -> httpx.Response:
        """Open the SonarLint event stream.

        The body is a long-lived ``text/event-stream``; the returned response
        is not read and must be closed by the caller.
        """
        self.validate_sonarlint_events_opt(opt)
        request = self._client.new_request("GET", "push/sonarlint_events", opt)
        return self._client.stream(request)
