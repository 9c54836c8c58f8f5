"""Settings endpoints (``api/settings``)."""

from __future__ import annotations

from typing import Annotated, Optional

import httpx
from pydantic import BaseModel, Field

from sonarcli.exceptions import ValidationError
from sonarcli.sonar.common import MISSING_REQUIRED, SonarModel, validate_max_length, validate_required
from sonarcli.sonar.query import UrlTag
from sonarcli.sonar.service import Service

MAX_SETTING_VALUE_LENGTH = 4000


class SettingField(SonarModel):
    description: Optional[str] = None
    key: Optional[str] = None
    name: Optional[str] = None
    type: Optional[str] = None
    options: Optional[list[str]] = None


class SettingDefinition(SonarModel):
    category: Optional[str] = None
    default_value: Optional[str] = Field(default=None, alias="defaultValue")
    description: Optional[str] = None
    key: Optional[str] = None
    name: Optional[str] = None
    sub_category: Optional[str] = Field(default=None, alias="subCategory")
    type: Optional[str] = None
    options: Optional[list[str]] = None
    fields: Optional[list[SettingField]] = None
    multi_values: Optional[bool] = Field(default=None, alias="multiValues")


class SettingsListDefinitions(SonarModel):
    definitions: list[SettingDefinition] = Field(default_factory=list)


class SettingValue(SonarModel):
    key: Optional[str] = None
    value: Optional[str] = None
    values: Optional[list[str]] = None
    field_values: Optional[list[dict[str, str]]] = Field(default=None, alias="fieldValues")
    inherited: Optional[bool] = None


class SettingsValues(SonarModel):
    settings: list[SettingValue] = Field(default_factory=list)
    set_secured_settings: Optional[list[str]] = Field(default=None, alias="setSecuredSettings")


class SettingsListDefinitionsOption(BaseModel):
    component: Annotated[str, UrlTag("component,omitempty")] = Field(default="", description="Component key")


class SettingsResetOption(BaseModel):
    component: Annotated[str, UrlTag("component,omitempty")] = Field(default="", description="Component key")
    keys: Annotated[list[str], UrlTag("keys,omitempty,comma")] = Field(
        default_factory=list, description="Comma-separated list of setting keys"
    )


class SettingsSetOption(BaseModel):
    component: Annotated[str, UrlTag("component,omitempty")] = Field(default="", description="Component key")
    key: Annotated[str, UrlTag("key,omitempty")] = Field(default="", description="Setting key")
    value: Annotated[str, UrlTag("value,omitempty")] = Field(default="", description="Setting value")
    values: Annotated[list[str], UrlTag("values,omitempty")] = Field(
        default_factory=list, description="Values of a multi-value setting; repeat the flag or separate with commas"
    )
    field_values: Annotated[list[str], UrlTag("fieldValues,omitempty")] = Field(
        default_factory=list, description="Field values of a property set, one JSON object per value"
    )


class SettingsValuesOption(BaseModel):
    component: Annotated[str, UrlTag("component,omitempty")] = Field(default="", description="Component key")
    keys: Annotated[list[str], UrlTag("keys,omitempty,comma")] = Field(
        default_factory=list, description="Comma-separated list of setting keys"
    )


class SettingsService(Service):
    """Global and component settings."""

    def validate_reset_opt(self, opt: SettingsResetOption) -> None:
        if not opt.keys:
            raise ValidationError("Keys", "at least one key is required", MISSING_REQUIRED)

    def validate_set_opt(self, opt: SettingsSetOption) -> None:
        validate_required(opt.key, "Key")
        validate_max_length(opt.value, MAX_SETTING_VALUE_LENGTH, "Value")

    # ------------------------------------------------------------------ #

    def list_definitions(
        self, opt: SettingsListDefinitionsOption
    ) -> tuple[Optional[SettingsListDefinitions], httpx.Response]:
        """List the setting definitions available for a component, or globally."""
        request = self._client.new_request("GET", "settings/list_definitions", opt)
        return self._client.do(request, SettingsListDefinitions)

    def reset(self, opt: SettingsResetOption) -> httpx.Response:
        """Remove setting values; the defaults apply again."""
        self.validate_reset_opt(opt)
        _, response = self._client.do(self._client.new_request("POST", "settings/reset", opt))
        return response

    def set(self, opt: SettingsSetOption) -> httpx.Response:
        self.validate_set_opt(opt)
        _, response = self._client.do(self._client.new_request("POST", "settings/set", opt))
        return response

    def values(self, opt: SettingsValuesOption) -> tuple[Optional[SettingsValues], httpx.Response]:
        return self._client.do(self._client.new_request("GET", "settings/values", opt), SettingsValues)
