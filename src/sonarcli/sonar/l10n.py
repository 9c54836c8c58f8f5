"""Localization endpoint (``api/l10n``)."""

from __future__ import annotations

from typing import Annotated, Optional

import httpx
from pydantic import BaseModel, Field

from sonarcli.sonar.common import SonarModel
from sonarcli.sonar.query import UrlTag
from sonarcli.sonar.service import Service


class L10NIndexOption(BaseModel):
    locale: Annotated[str, UrlTag("locale,omitempty")] = Field(
        default="", description="BCP47 language tag, e.g. fr-CH"
    )
    timestamp: Annotated[str, UrlTag("ts,omitempty")] = Field(
        default="",
        description="Date of the last cache update; messages are returned only when newer",
    )


class L10NIndex(SonarModel):
    locale: Optional[str] = None
    messages: Optional[dict[str, str]] = None


class L10NService(Service):
    """Localized UI messages."""

    def index(self, opt: L10NIndexOption) -> tuple[Optional[L10NIndex], httpx.Response]:
        request = self._client.new_request("GET", "l10n/index", opt)
        return self._client.do(request, L10NIndex)
