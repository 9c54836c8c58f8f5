"""Web service introspection endpoints (``api/webservices``)."""

from __future__ import annotations

from typing import Annotated, Optional

import httpx
from pydantic import BaseModel, Field

from sonarcli.sonar.common import SonarModel, validate_required
from sonarcli.sonar.query import UrlTag
from sonarcli.sonar.service import Service


class WebserviceChangelog(SonarModel):
    description: Optional[str] = None
    version: Optional[str] = None


class WebserviceParam(SonarModel):
    default_value: Optional[str] = Field(default=None, alias="defaultValue")
    deprecated_key: Optional[str] = Field(default=None, alias="deprecatedKey")
    deprecated_key_since: Optional[str] = Field(default=None, alias="deprecatedKeySince")
    deprecated_since: Optional[str] = Field(default=None, alias="deprecatedSince")
    description: Optional[str] = None
    example_value: Optional[str] = Field(default=None, alias="exampleValue")
    internal: Optional[bool] = None
    key: Optional[str] = None
    max_values_allowed: Optional[int] = Field(default=None, alias="maxValuesAllowed")
    maximum_length: Optional[int] = Field(default=None, alias="maximumLength")
    maximum_value: Optional[int] = Field(default=None, alias="maximumValue")
    minimum_length: Optional[int] = Field(default=None, alias="minimumLength")
    minimum_value: Optional[int] = Field(default=None, alias="minimumValue")
    possible_values: Optional[list[str]] = Field(default=None, alias="possibleValues")
    required: Optional[bool] = None
    since: Optional[str] = None


class WebserviceAction(SonarModel):
    changelog: Optional[list[WebserviceChangelog]] = None
    deprecated_since: Optional[str] = Field(default=None, alias="deprecatedSince")
    description: Optional[str] = None
    has_response_example: Optional[bool] = Field(default=None, alias="hasResponseExample")
    internal: Optional[bool] = None
    key: Optional[str] = None
    params: Optional[list[WebserviceParam]] = None
    post: Optional[bool] = None
    since: Optional[str] = None


class Webservice(SonarModel):
    actions: Optional[list[WebserviceAction]] = None
    description: Optional[str] = None
    path: Optional[str] = None
    since: Optional[str] = None


class WebservicesList(SonarModel):
    webservices: list[Webservice] = Field(default_factory=list, alias="webServices")


class WebservicesListOption(BaseModel):
    include_internals: Annotated[bool, UrlTag("include_internals,omitempty")] = Field(
        default=False, description="Include web services that are implemented for internal use only"
    )


class WebservicesResponseExampleOption(BaseModel):
    action: Annotated[str, UrlTag("action,omitempty")] = Field(default="", description="Action of the web service")
    controller: Annotated[str, UrlTag("controller,omitempty")] = Field(
        default="", description="Controller of the web service, e.g. api/issues"
    )


class WebservicesService(Service):
    """Describe the web services exposed by the server."""

    def validate_response_example_opt(self, opt: WebservicesResponseExampleOption) -> None:
        validate_required(opt.action, "Action")
        validate_required(opt.controller, "Controller")

    # ------------------------------------------------------------------ #

    def list(self, opt: WebservicesListOption) -> tuple[Optional[WebservicesList], httpx.Response]:
        """List web services with their actions and parameters."""
        return self._client.do(self._client.new_request("GET", "webservices/list", opt), WebservicesList)

    def response_example(self, opt: WebservicesResponseExampleOption) -> tuple[Optional[str], httpx.Response]:
        self.validate_response_example_opt(opt)
        request = self._client.new_request("GET", "webservices/response_example", opt)
        return self._client.do(request, str)
