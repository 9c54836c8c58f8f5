"""Quality profile endpoints (``api/qualityprofiles``)."""

from __future__ import annotations

from typing import Annotated, Optional

import httpx
from pydantic import BaseModel, Field

from sonarcli.exceptions import ValidationError
from sonarcli.sonar.common import (
    ALLOWED_IMPACT_SEVERITIES,
    ALLOWED_IMPACT_SOFTWARE_QUALITIES,
    ALLOWED_SEVERITIES,
    INVALID_VALUE,
    SonarModel,
    is_value_authorized,
    validate_map_keys,
    validate_map_values,
    validate_required,
)
from sonarcli.sonar.query import UrlTag
from sonarcli.sonar.service import Service


class QualityProfileActions(SonarModel):
    edit: Optional[bool] = None
    set_as_default: Optional[bool] = Field(default=None, alias="setAsDefault")
    copy_: Optional[bool] = Field(default=None, alias="copy")
    delete: Optional[bool] = None
    associate_projects: Optional[bool] = Field(default=None, alias="associateProjects")


class QualityProfile(SonarModel):
    key: Optional[str] = None
    name: Optional[str] = None
    language: Optional[str] = None
    language_name: Optional[str] = Field(default=None, alias="languageName")
    parent_key: Optional[str] = Field(default=None, alias="parentKey")
    parent_name: Optional[str] = Field(default=None, alias="parentName")
    last_used: Optional[str] = Field(default=None, alias="lastUsed")
    rule_updated_at: Optional[str] = Field(default=None, alias="ruleUpdatedAt")
    user_updated_at: Optional[str] = Field(default=None, alias="userUpdatedAt")
    active_deprecated_rule_count: Optional[int] = Field(default=None, alias="activeDeprecatedRuleCount")
    active_rule_count: Optional[int] = Field(default=None, alias="activeRuleCount")
    project_count: Optional[int] = Field(default=None, alias="projectCount")
    is_built_in: Optional[bool] = Field(default=None, alias="isBuiltIn")
    is_default: Optional[bool] = Field(default=None, alias="isDefault")
    is_inherited: Optional[bool] = Field(default=None, alias="isInherited")
    actions: Optional[QualityProfileActions] = None


class QualityprofilesSearchActions(SonarModel):
    create: Optional[bool] = None


class QualityprofilesSearch(SonarModel):
    profiles: list[QualityProfile] = Field(default_factory=list)
    actions: Optional[QualityprofilesSearchActions] = None


class QualityprofilesActivateRuleOption(BaseModel):
    key: Annotated[str, UrlTag("key,omitempty")] = Field(default="", description="Quality profile key")
    rule: Annotated[str, UrlTag("rule,omitempty")] = Field(default="", description="Rule key")
    impacts: Annotated[dict[str, str], UrlTag("impacts,omitempty")] = Field(
        default_factory=dict,
        description="Override of impact severities, e.g. MAINTAINABILITY=HIGH,SECURITY=MEDIUM",
    )
    params: Annotated[dict[str, str], UrlTag("params,omitempty")] = Field(
        default_factory=dict, description="Rule parameters as key=value pairs, e.g. max=200,min=10"
    )
    prioritized_rule: Annotated[bool, UrlTag("prioritizedRule,omitempty")] = Field(
        default=False, description="Mark the activated rule as prioritized"
    )
    reset: Annotated[bool, UrlTag("reset,omitempty")] = Field(
        default=False, description="Reset severity and parameters to the parent profile or rule defaults"
    )
    severity: Annotated[str, UrlTag("severity,omitempty")] = Field(
        default="", description="Severity; cannot be combined with impacts"
    )


class QualityprofilesDeactivateRuleOption(BaseModel):
    key: Annotated[str, UrlTag("key,omitempty")] = Field(default="", description="Quality profile key")
    rule: Annotated[str, UrlTag("rule,omitempty")] = Field(default="", description="Rule key")


class QualityprofilesBackupOption(BaseModel):
    language: Annotated[str, UrlTag("language,omitempty")] = Field(default="", description="Profile language")
    quality_profile: Annotated[str, UrlTag("qualityProfile,omitempty")] = Field(
        default="", description="Profile name"
    )


class QualityprofilesSearchOption(BaseModel):
    defaults: Annotated[bool, UrlTag("defaults,omitempty")] = Field(
        default=False, description="Only the default profiles"
    )
    language: Annotated[str, UrlTag("language,omitempty")] = Field(default="", description="Language key")
    project: Annotated[str, UrlTag("project,omitempty")] = Field(default="", description="Project key")
    quality_profile: Annotated[str, UrlTag("qualityProfile,omitempty")] = Field(
        default="", description="Profile name"
    )


class QualityprofilesService(Service):
    """Quality profiles and their rule activations."""

    def validate_activate_rule_opt(self, opt: QualityprofilesActivateRuleOption) -> None:
        validate_required(opt.key, "Key")
        validate_required(opt.rule, "Rule")
        if opt.impacts and opt.severity:
            raise ValidationError(
                "QualityprofilesActivateRuleOption", "cannot set both Impacts and Severity", INVALID_VALUE
            )
        is_value_authorized(opt.severity, ALLOWED_SEVERITIES, "Severity")
        validate_map_keys(opt.impacts, ALLOWED_IMPACT_SOFTWARE_QUALITIES, "Impacts")
        validate_map_values(opt.impacts, ALLOWED_IMPACT_SEVERITIES, "Impacts")

    def validate_deactivate_rule_opt(self, opt: QualityprofilesDeactivateRuleOption) -> None:
        validate_required(opt.key, "Key")
        validate_required(opt.rule, "Rule")

    def validate_backup_opt(self, opt: QualityprofilesBackupOption) -> None:
        validate_required(opt.language, "Language")
        validate_required(opt.quality_profile, "QualityProfile")

    # ------------------------------------------------------------------ #

    def activate_rule(self, opt: QualityprofilesActivateRuleOption) -> httpx.Response:
        """Activate a rule on a quality profile.

        ``impacts`` and ``params`` are sent as ``key=value`` pairs separated
        by semicolons.
        """
        self.validate_activate_rule_opt(opt)
        request = self._client.new_request("POST", "qualityprofiles/activate_rule", opt)
        _, response = self._client.do(request)
        return response

    def backup(self, opt: QualityprofilesBackupOption) -> tuple[Optional[str], httpx.Response]:
        """Back up a quality profile as XML."""
        self.validate_backup_opt(opt)
        return self._client.do(self._client.new_request("GET", "qualityprofiles/backup", opt), str)

    def deactivate_rule(self, opt: QualityprofilesDeactivateRuleOption) -> httpx.Response:
        self.validate_deactivate_rule_opt(opt)
        request = self._client.new_request("POST", "qualityprofiles/deactivate_rule", opt)
        _, response = self._client.do(request)
        return response

    def search(self, opt: QualityprofilesSearchOption) -> tuple[Optional[QualityprofilesSearch], httpx.Response]:
        return self._client.do(self._client.new_request("GET", "qualityprofiles/search", opt), QualityprofilesSearch)
