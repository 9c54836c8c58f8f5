"""Security hotspot endpoints (``api/hotspots``)."""

from __future__ import annotations

from typing import Annotated, Any, Optional

import httpx
from pydantic import BaseModel, Field

from sonarcli.exceptions import ValidationError
from sonarcli.sonar.common import (
    ALLOWED_OWASP_CATEGORIES,
    ALLOWED_SANS_TOP25_CATEGORIES,
    INVALID_VALUE,
    MAX_HOTSPOT_COMMENT_LENGTH,
    MAX_PAGE_SIZE,
    MISSING_REQUIRED,
    PaginationArgs,
    Paging,
    SonarModel,
    are_values_authorized,
    is_value_authorized,
    validate_max_length,
    validate_required,
)
from sonarcli.sonar.query import UrlTag
from sonarcli.sonar.service import Service

ALLOWED_HOTSPOT_STATUSES = frozenset({"TO_REVIEW", "REVIEWED"})
ALLOWED_HOTSPOT_RESOLUTIONS = frozenset({"FIXED", "SAFE", "ACKNOWLEDGED"})
ALLOWED_OWASP_ASVS_LEVELS = frozenset({"1", "2", "3"})


# --------------------------------------------------------------------------- #
# Response models
# --------------------------------------------------------------------------- #


class HotspotComponent(SonarModel):
    key: Optional[str] = None
    long_name: Optional[str] = Field(default=None, alias="longName")
    name: Optional[str] = None
    path: Optional[str] = None
    qualifier: Optional[str] = None


class HotspotSummary(SonarModel):
    assignee: Optional[str] = None
    author: Optional[str] = None
    component: Optional[str] = None
    creation_date: Optional[str] = Field(default=None, alias="creationDate")
    flows: Optional[list[Any]] = None
    key: Optional[str] = None
    line: Optional[int] = None
    message: Optional[str] = None
    message_formattings: Optional[list[Any]] = Field(default=None, alias="messageFormattings")
    project: Optional[str] = None
    rule_key: Optional[str] = Field(default=None, alias="ruleKey")
    security_category: Optional[str] = Field(default=None, alias="securityCategory")
    status: Optional[str] = None
    resolution: Optional[str] = None
    update_date: Optional[str] = Field(default=None, alias="updateDate")
    vulnerability_probability: Optional[str] = Field(default=None, alias="vulnerabilityProbability")


class HotspotComment(SonarModel):
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    html_text: Optional[str] = Field(default=None, alias="htmlText")
    key: Optional[str] = None
    login: Optional[str] = None
    markdown: Optional[str] = None
    updatable: Optional[bool] = None


class HotspotUser(SonarModel):
    login: Optional[str] = None
    name: Optional[str] = None
    active: Optional[bool] = None


class HotspotDiff(SonarModel):
    key: Optional[str] = None
    new_value: Optional[str] = Field(default=None, alias="newValue")
    old_value: Optional[str] = Field(default=None, alias="oldValue")


class HotspotChangelogEntry(SonarModel):
    diffs: Optional[list[HotspotDiff]] = None
    avatar: Optional[str] = None
    creation_date: Optional[str] = Field(default=None, alias="creationDate")
    user: Optional[str] = None
    user_name: Optional[str] = Field(default=None, alias="userName")
    is_user_active: Optional[bool] = Field(default=None, alias="isUserActive")


class HotspotMessageFormatting(SonarModel):
    type: Optional[str] = None
    end: Optional[int] = None
    start: Optional[int] = None


class HotspotProject(SonarModel):
    key: Optional[str] = None
    long_name: Optional[str] = Field(default=None, alias="longName")
    name: Optional[str] = None
    qualifier: Optional[str] = None


class HotspotRule(SonarModel):
    key: Optional[str] = None
    name: Optional[str] = None
    security_category: Optional[str] = Field(default=None, alias="securityCategory")
    vulnerability_probability: Optional[str] = Field(default=None, alias="vulnerabilityProbability")


class HotspotsEditComment(HotspotComment):
    pass


class HotspotsList(SonarModel):
    hotspots: list[HotspotSummary] = Field(default_factory=list)
    components: list[HotspotComponent] = Field(default_factory=list)
    paging: Optional[Paging] = None


class HotspotsSearch(SonarModel):
    hotspots: list[HotspotSummary] = Field(default_factory=list)
    components: list[HotspotComponent] = Field(default_factory=list)
    paging: Optional[Paging] = None


class HotspotsShow(SonarModel):
    assignee: Optional[str] = None
    author: Optional[str] = None
    can_change_status: Optional[bool] = Field(default=None, alias="canChangeStatus")
    changelog: Optional[list[HotspotChangelogEntry]] = None
    code_variants: Optional[list[str]] = Field(default=None, alias="codeVariants")
    comment: Optional[list[HotspotComment]] = None
    component: Optional[HotspotComponent] = None
    creation_date: Optional[str] = Field(default=None, alias="creationDate")
    hash: Optional[str] = None
    key: Optional[str] = None
    line: Optional[int] = None
    message: Optional[str] = None
    message_formattings: Optional[list[HotspotMessageFormatting]] = Field(
        default=None, alias="messageFormattings"
    )
    project: Optional[HotspotProject] = None
    rule: Optional[HotspotRule] = None
    status: Optional[str] = None
    resolution: Optional[str] = None
    update_date: Optional[str] = Field(default=None, alias="updateDate")
    users: Optional[list[HotspotUser]] = None


# --------------------------------------------------------------------------- #
# Option models
# --------------------------------------------------------------------------- #


class HotspotsAddCommentOption(BaseModel):
    comment: Annotated[str, UrlTag("comment")] = Field(default="", description="Comment text")
    hotspot: Annotated[str, UrlTag("hotspot")] = Field(default="", description="Key of the security hotspot")


class HotspotsAssignOption(BaseModel):
    assignee: Annotated[str, UrlTag("assignee,omitempty")] = Field(
        default="", description="Login of the assignee; empty unassigns the hotspot"
    )
    comment: Annotated[str, UrlTag("comment,omitempty")] = Field(default="", description="Comment text")
    hotspot: Annotated[str, UrlTag("hotspot")] = Field(default="", description="Hotspot key")


class HotspotsChangeStatusOption(BaseModel):
    comment: Annotated[str, UrlTag("comment,omitempty")] = Field(default="", description="Comment text")
    hotspot: Annotated[str, UrlTag("hotspot")] = Field(default="", description="Key of the security hotspot")
    resolution: Annotated[str, UrlTag("resolution,omitempty")] = Field(
        default="", description="Resolution when status is REVIEWED: FIXED, SAFE or ACKNOWLEDGED"
    )
    status: Annotated[str, UrlTag("status")] = Field(
        default="", description="New status: TO_REVIEW or REVIEWED"
    )


class HotspotsDeleteCommentOption(BaseModel):
    comment: Annotated[str, UrlTag("comment")] = Field(default="", description="Comment key")


class HotspotsEditCommentOption(BaseModel):
    comment: Annotated[str, UrlTag("comment")] = Field(default="", description="Comment key")
    text: Annotated[str, UrlTag("text")] = Field(default="", description="New comment text")


class HotspotsListOption(BaseModel):
    pagination: Annotated[PaginationArgs, UrlTag(",inline")] = Field(default_factory=PaginationArgs)
    branch: Annotated[str, UrlTag("branch,omitempty")] = Field(default="", description="Branch key")
    project: Annotated[str, UrlTag("project")] = Field(default="", description="Project key")
    pull_request: Annotated[str, UrlTag("pullRequest,omitempty")] = Field(
        default="", description="Pull request id"
    )
    resolution: Annotated[str, UrlTag("resolution,omitempty")] = Field(
        default="", description="Only hotspots with this resolution"
    )
    status: Annotated[str, UrlTag("status,omitempty")] = Field(
        default="", description="Only hotspots with this status"
    )
    in_new_code_period: Annotated[bool, UrlTag("inNewCodePeriod,omitempty")] = Field(
        default=False, description="Only hotspots created in the new code period"
    )


class HotspotsPullOption(BaseModel):
    languages: Annotated[list[str], UrlTag("languages,omitempty,comma")] = Field(
        default_factory=list, description="Comma-separated list of languages"
    )
    branch_name: Annotated[str, UrlTag("branchName")] = Field(default="", description="Branch name")
    project_key: Annotated[str, UrlTag("projectKey")] = Field(default="", description="Project key")
    changed_since: Annotated[int, UrlTag("changedSince,omitempty")] = Field(
        default=0, description="Timestamp; only hotspots changed after it are returned"
    )


class HotspotsSearchOption(BaseModel):
    pagination: Annotated[PaginationArgs, UrlTag(",inline")] = Field(default_factory=PaginationArgs)
    casa: Annotated[list[str], UrlTag("casa,omitempty,comma")] = Field(
        default_factory=list, description="CASA categories"
    )
    compliance_standards: Annotated[list[str], UrlTag("complianceStandards,omitempty,comma")] = Field(
        default_factory=list, description="Compliance standards"
    )
    cwe: Annotated[list[str], UrlTag("cwe,omitempty,comma")] = Field(
        default_factory=list, description="CWE identifiers"
    )
    files: Annotated[list[str], UrlTag("files,omitempty,comma")] = Field(
        default_factory=list, description="File paths"
    )
    hotspots: Annotated[list[str], UrlTag("hotspots,omitempty,comma")] = Field(
        default_factory=list, description="Hotspot keys"
    )
    owasp_asvs_40: Annotated[list[str], UrlTag("owaspAsvs-4.0,omitempty,comma")] = Field(
        default_factory=list, description="OWASP ASVS v4.0 categories"
    )
    owasp_top10: Annotated[list[str], UrlTag("owaspTop10,omitempty,comma")] = Field(
        default_factory=list, description="OWASP Top 10 2017 categories (a1 to a10)"
    )
    owasp_top10_2021: Annotated[list[str], UrlTag("owaspTop10-2021,omitempty,comma")] = Field(
        default_factory=list, description="OWASP Top 10 2021 categories (a1 to a10)"
    )
    pci_dss_32: Annotated[list[str], UrlTag("pciDss-3.2,omitempty,comma")] = Field(
        default_factory=list, description="PCI DSS v3.2 categories"
    )
    pci_dss_40: Annotated[list[str], UrlTag("pciDss-4.0,omitempty,comma")] = Field(
        default_factory=list, description="PCI DSS v4.0 categories"
    )
    sans_top25: Annotated[list[str], UrlTag("sansTop25,omitempty,comma")] = Field(
        default_factory=list, description="SANS Top 25 categories"
    )
    sonarsource_security: Annotated[list[str], UrlTag("sonarsourceSecurity,omitempty,comma")] = Field(
        default_factory=list, description="SonarSource security categories"
    )
    stig_asd_v5r3: Annotated[list[str], UrlTag("stig-ASD_V5R3,omitempty,comma")] = Field(
        default_factory=list, description="STIG V5R3 categories"
    )
    branch: Annotated[str, UrlTag("branch,omitempty")] = Field(default="", description="Branch key")
    owasp_asvs_level: Annotated[str, UrlTag("owaspAsvsLevel,omitempty")] = Field(
        default="", description="OWASP ASVS level: 1, 2 or 3"
    )
    project: Annotated[str, UrlTag("project,omitempty")] = Field(default="", description="Project key")
    pull_request: Annotated[str, UrlTag("pullRequest,omitempty")] = Field(
        default="", description="Pull request id"
    )
    resolution: Annotated[str, UrlTag("resolution,omitempty")] = Field(
        default="", description="Only hotspots with this resolution"
    )
    status: Annotated[str, UrlTag("status,omitempty")] = Field(
        default="", description="Only hotspots with this status"
    )
    in_new_code_period: Annotated[bool, UrlTag("inNewCodePeriod,omitempty")] = Field(
        default=False, description="Only hotspots created in the new code period"
    )
    only_mine: Annotated[bool, UrlTag("onlyMine,omitempty")] = Field(
        default=False, description="Only hotspots assigned to the current user"
    )


class HotspotsShowOption(BaseModel):
    hotspot: Annotated[str, UrlTag("hotspot")] = Field(default="", description="Key of the security hotspot")


# --------------------------------------------------------------------------- #
# Service
# --------------------------------------------------------------------------- #


class HotspotsService(Service):
    """Read and update security hotspots."""

    def validate_add_comment_opt(self, opt: HotspotsAddCommentOption) -> None:
        validate_required(opt.comment, "Comment")
        validate_max_length(opt.comment, MAX_HOTSPOT_COMMENT_LENGTH, "Comment")
        validate_required(opt.hotspot, "Hotspot")

    def validate_assign_opt(self, opt: HotspotsAssignOption) -> None:
        validate_required(opt.hotspot, "Hotspot")

    def validate_change_status_opt(self, opt: HotspotsChangeStatusOption) -> None:
        validate_required(opt.hotspot, "Hotspot")
        validate_required(opt.status, "Status")
        is_value_authorized(opt.status, ALLOWED_HOTSPOT_STATUSES, "Status")
        is_value_authorized(opt.resolution, ALLOWED_HOTSPOT_RESOLUTIONS, "Resolution")

    def validate_delete_comment_opt(self, opt: HotspotsDeleteCommentOption) -> None:
        validate_required(opt.comment, "Comment")

    def validate_edit_comment_opt(self, opt: HotspotsEditCommentOption) -> None:
        validate_required(opt.comment, "Comment")
        validate_required(opt.text, "Text")
        validate_max_length(opt.text, MAX_HOTSPOT_COMMENT_LENGTH, "Text")

    def validate_list_opt(self, opt: HotspotsListOption) -> None:
        validate_required(opt.project, "Project")
        is_value_authorized(opt.status, ALLOWED_HOTSPOT_STATUSES, "Status")
        is_value_authorized(opt.resolution, ALLOWED_HOTSPOT_RESOLUTIONS, "Resolution")
        if opt.pagination.page_size > MAX_PAGE_SIZE:
            raise ValidationError("PageSize", f"must be less than or equal to {MAX_PAGE_SIZE}", INVALID_VALUE)
        opt.pagination.validate_pagination()

    def validate_pull_opt(self, opt: HotspotsPullOption) -> None:
        validate_required(opt.branch_name, "BranchName")
        validate_required(opt.project_key, "ProjectKey")

    def validate_search_opt(self, opt: HotspotsSearchOption) -> None:
        if not opt.project and not opt.hotspots:
            raise ValidationError("Project", "either project or hotspots is required", MISSING_REQUIRED)
        is_value_authorized(opt.status, ALLOWED_HOTSPOT_STATUSES, "Status")
        is_value_authorized(opt.resolution, ALLOWED_HOTSPOT_RESOLUTIONS, "Resolution")
        is_value_authorized(opt.owasp_asvs_level, ALLOWED_OWASP_ASVS_LEVELS, "OwaspAsvsLevel")
        are_values_authorized(opt.owasp_top10, ALLOWED_OWASP_CATEGORIES, "OwaspTop10")
        are_values_authorized(opt.owasp_top10_2021, ALLOWED_OWASP_CATEGORIES, "OwaspTop102021")
        are_values_authorized(opt.sans_top25, ALLOWED_SANS_TOP25_CATEGORIES, "SansTop25")
        opt.pagination.validate_pagination()

    def validate_show_opt(self, opt: HotspotsShowOption) -> None:
        validate_required(opt.hotspot, "Hotspot")

    # ------------------------------------------------------------------ #

    def add_comment(self, opt: HotspotsAddCommentOption) -> httpx.Response:
        """Add a comment to a security hotspot."""
        self.validate_add_comment_opt(opt)
        _, response = self._client.do(self._client.new_request("POST", "hotspots/add_comment", opt))
        return response

    def assign(self, opt: HotspotsAssignOption) -> httpx.Response:
        """Assign a hotspot to an active user, or unassign it."""
        self.validate_assign_opt(opt)
        _, response = self._client.do(self._client.new_request("POST", "hotspots/assign", opt))
        return response

    def change_status(self, opt: HotspotsChangeStatusOption) -> httpx.Response:
        self.validate_change_status_opt(opt)
        _, response = self._client.do(self._client.new_request("POST", "hotspots/change_status", opt))
        return response

    def delete_comment(self, opt: HotspotsDeleteCommentOption) -> httpx.Response:
        self.validate_delete_comment_opt(opt)
        _, response = self._client.do(self._client.new_request("POST", "hotspots/delete_comment", opt))
        return response

    def edit_comment(self, opt: HotspotsEditCommentOption) -> tuple[Optional[HotspotsEditComment], httpx.Response]:
        self.validate_edit_comment_opt(opt)
        request = self._client.new_request("POST", "hotspots/edit_comment", opt)
        return self._client.do(request, HotspotsEditComment)

    def list(self, opt: HotspotsListOption) -> tuple[Optional[HotspotsList], httpx.Response]:
        """List the hotspots of a project, branch or pull request."""
        self.validate_list_opt(opt)
        request = self._client.new_request("GET", "hotspots/list", opt)
        return self._client.do(request, HotspotsList)

    def pull(self, opt: HotspotsPullOption) -> tuple[Optional[bytes], httpx.Response]:
        """Fetch hotspots as a protobuf stream, used by SonarLint to synchronise."""
        self.validate_pull_opt(opt)
        request = self._client.new_request("GET", "hotspots/pull", opt)
        return self._client.do(request, bytes)

    def search(self, opt: HotspotsSearchOption) -> tuple[Optional[HotspotsSearch], httpx.Response]:
        self.validate_search_opt(opt)
        request = self._client.new_request("GET", "hotspots/search", opt)
        return self._client.do(request, HotspotsSearch)

    def show(self, opt: HotspotsShowOption) -> tuple[Optional[HotspotsShow], httpx.Response]:
        """Return the details of a security hotspot."""
        self.validate_show_opt(opt)
        request = self._client.new_request("GET", "hotspots/show", opt)
        return self._client.do(request, HotspotsShow)
