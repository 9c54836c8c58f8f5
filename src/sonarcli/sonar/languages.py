"""Supported programming languages (``api/languages``)."""

from __future__ import annotations

from typing import Annotated, Optional

import httpx
from pydantic import BaseModel, Field

from sonarcli.sonar.common import SonarModel
from sonarcli.sonar.query import UrlTag
from sonarcli.sonar.service import Service


class LanguagesListOption(BaseModel):
    query: Annotated[str, UrlTag("q,omitempty")] = Field(
        default="", description="Pattern to match language keys or names against"
    )
    page_size: Annotated[int, UrlTag("ps,omitempty")] = Field(
        default=0, description="Size of the list; 0 returns all languages"
    )


class Language(SonarModel):
    key: Optional[str] = None
    name: Optional[str] = None


class LanguagesList(SonarModel):
    languages: list[Language] = Field(default_factory=list)


class LanguagesService(Service):
    """Languages known to the server."""

    def list(self, opt: LanguagesListOption) -> tuple[Optional[LanguagesList], httpx.Response]:
        request = self._client.new_request("GET", "languages/list", opt)
        return self._client.do(request, LanguagesList)
