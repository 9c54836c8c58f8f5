"""Issue endpoints (``api/issues``)."""

from __future__ import annotations

from typing import Annotated, Any, Optional

import httpx
from pydantic import BaseModel, Field

from sonarcli.exceptions import ValidationError
from sonarcli.sonar.common import (
    ALLOWED_IMPACT_SEVERITIES,
    ALLOWED_IMPACT_SOFTWARE_QUALITIES,
    ALLOWED_OWASP_CATEGORIES,
    ALLOWED_SANS_TOP25_CATEGORIES,
    ALLOWED_SEVERITIES,
    MAX_PAGE_SIZE,
    MIN_PAGE_SIZE,
    MISSING_REQUIRED,
    PaginationArgs,
    Paging,
    SonarModel,
    are_values_authorized,
    is_value_authorized,
    validate_range,
    validate_required,
)
from sonarcli.sonar.query import UrlTag
from sonarcli.sonar.service import Service

ALLOWED_ISSUE_TYPES = frozenset({"CODE_SMELL", "BUG", "VULNERABILITY"})
ALLOWED_ISSUE_SCOPES = frozenset({"MAIN", "TEST"})
ALLOWED_ISSUE_STATUSES = frozenset(
    {"OPEN", "CONFIRMED", "REOPENED", "RESOLVED", "CLOSED", "ACCEPTED", "FALSE_POSITIVE", "FIXED", "IN_SANDBOX"}
)
ALLOWED_ISSUE_RESOLUTIONS = frozenset({"FALSE-POSITIVE", "WONTFIX", "FIXED", "REMOVED"})
ALLOWED_ISSUE_TRANSITIONS = frozenset(
    {
        "confirm",
        "unconfirm",
        "reopen",
        "resolve",
        "falsepositive",
        "wontfix",
        "close",
        "accept",
        "setinreview",
        "resolveasreviewed",
        "resetastoreview",
    }
)
ALLOWED_CLEAN_CODE_ATTRIBUTE_CATEGORIES = frozenset({"ADAPTABLE", "CONSISTENT", "INTENTIONAL", "RESPONSIBLE"})
ALLOWED_OWASP_MOBILE_CATEGORIES = frozenset(f"m{n}" for n in range(1, 11))

MAX_AUTHORS_PAGE_SIZE = 100


# --------------------------------------------------------------------------- #
# Response models
# --------------------------------------------------------------------------- #


class TextRange(SonarModel):
    start_line: Optional[int] = Field(default=None, alias="startLine")
    end_line: Optional[int] = Field(default=None, alias="endLine")
    start_offset: Optional[int] = Field(default=None, alias="startOffset")
    end_offset: Optional[int] = Field(default=None, alias="endOffset")


class MessageFormatting(SonarModel):
    start: Optional[int] = None
    end: Optional[int] = None
    type: Optional[str] = None


class FlowLocation(SonarModel):
    msg: Optional[str] = None
    text_range: Optional[TextRange] = Field(default=None, alias="textRange")
    msg_formattings: Optional[list[MessageFormatting]] = Field(default=None, alias="msgFormattings")


class IssueFlow(SonarModel):
    locations: Optional[list[FlowLocation]] = None


class IssueImpact(SonarModel):
    severity: Optional[str] = None
    software_quality: Optional[str] = Field(default=None, alias="softwareQuality")


class IssueComment(SonarModel):
    key: Optional[str] = None
    login: Optional[str] = None
    html_text: Optional[str] = Field(default=None, alias="htmlText")
    markdown: Optional[str] = None
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    updatable: Optional[bool] = None


class Issue(SonarModel):
    key: Optional[str] = None
    component: Optional[str] = None
    project: Optional[str] = None
    rule: Optional[str] = None
    message: Optional[str] = None
    line: Optional[int] = None
    hash: Optional[str] = None
    issue_status: Optional[str] = Field(default=None, alias="issueStatus")
    author: Optional[str] = None
    assignee: Optional[str] = None
    effort: Optional[str] = None
    debt: Optional[str] = None
    creation_date: Optional[str] = Field(default=None, alias="creationDate")
    update_date: Optional[str] = Field(default=None, alias="updateDate")
    clean_code_attribute: Optional[str] = Field(default=None, alias="cleanCodeAttribute")
    clean_code_attribute_category: Optional[str] = Field(default=None, alias="cleanCodeAttributeCategory")
    severity: Optional[str] = None
    status: Optional[str] = None
    resolution: Optional[str] = None
    type: Optional[str] = None
    text_range: Optional[TextRange] = Field(default=None, alias="textRange")
    actions: Optional[list[str]] = None
    transitions: Optional[list[str]] = None
    tags: Optional[list[str]] = None
    code_variants: Optional[list[str]] = Field(default=None, alias="codeVariants")
    comments: Optional[list[IssueComment]] = None
    impacts: Optional[list[IssueImpact]] = None
    flows: Optional[list[IssueFlow]] = None
    message_formattings: Optional[list[MessageFormatting]] = Field(default=None, alias="messageFormattings")
    quick_fix_available: Optional[bool] = Field(default=None, alias="quickFixAvailable")
    prioritized_rule: Optional[bool] = Field(default=None, alias="prioritizedRule")


class IssueComponent(SonarModel):
    key: Optional[str] = None
    name: Optional[str] = None
    long_name: Optional[str] = Field(default=None, alias="longName")
    path: Optional[str] = None
    qualifier: Optional[str] = None
    enabled: Optional[bool] = None


class IssueRule(SonarModel):
    key: Optional[str] = None
    name: Optional[str] = None
    lang: Optional[str] = None
    lang_name: Optional[str] = Field(default=None, alias="langName")
    status: Optional[str] = None


class IssueUser(SonarModel):
    login: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    avatar: Optional[str] = None
    active: Optional[bool] = None


class ChangelogDiff(SonarModel):
    key: Optional[str] = None
    old_value: Optional[str] = Field(default=None, alias="oldValue")
    new_value: Optional[str] = Field(default=None, alias="newValue")


class ChangelogEntry(SonarModel):
    user: Optional[str] = None
    user_name: Optional[str] = Field(default=None, alias="userName")
    external_user: Optional[str] = Field(default=None, alias="externalUser")
    avatar: Optional[str] = None
    creation_date: Optional[str] = Field(default=None, alias="creationDate")
    webhook_source: Optional[str] = Field(default=None, alias="webhookSource")
    diffs: Optional[list[ChangelogDiff]] = None
    is_user_active: Optional[bool] = Field(default=None, alias="isUserActive")


class IssueFacetValue(SonarModel):
    val: Optional[str] = None
    count: Optional[int] = None


class IssueFacet(SonarModel):
    property: Optional[str] = None
    values: Optional[list[IssueFacetValue]] = None


class ComponentTag(SonarModel):
    key: Optional[str] = None
    value: Optional[int] = None


class IssueChange(SonarModel):
    """Answer of every call that modifies a single issue."""

    issue: Optional[Issue] = None
    components: Optional[list[IssueComponent]] = None
    rules: Optional[list[IssueRule]] = None
    users: Optional[list[IssueUser]] = None


class IssuesAuthors(SonarModel):
    authors: list[str] = Field(default_factory=list)


class IssuesBulkChange(SonarModel):
    total: Optional[int] = None
    success: Optional[int] = None
    ignored: Optional[int] = None
    failures: Optional[int] = None


class IssuesChangelog(SonarModel):
    changelog: list[ChangelogEntry] = Field(default_factory=list)


class IssuesComponentTags(SonarModel):
    tags: list[ComponentTag] = Field(default_factory=list)


class IssuesList(SonarModel):
    issues: list[Issue] = Field(default_factory=list)
    components: list[IssueComponent] = Field(default_factory=list)
    paging: Optional[Paging] = None


class IssuesSearch(SonarModel):
    issues: list[Issue] = Field(default_factory=list)
    components: list[IssueComponent] = Field(default_factory=list)
    facets: list[IssueFacet] = Field(default_factory=list)
    rules: list[IssueRule] = Field(default_factory=list)
    users: list[IssueUser] = Field(default_factory=list)
    paging: Optional[Paging] = None


class IssuesTags(SonarModel):
    tags: list[str] = Field(default_factory=list)


# --------------------------------------------------------------------------- #
# Option models
# --------------------------------------------------------------------------- #


def _csv(description: str) -> Any:
    """Field for a comma-separated list filter."""
    return Field(default_factory=list, description=description)


class IssuesAddCommentOption(BaseModel):
    issue: Annotated[str, UrlTag("issue,omitempty")] = Field(default="", description="Issue key")
    text: Annotated[str, UrlTag("text,omitempty")] = Field(default="", description="Comment text")


class IssuesAssignOption(BaseModel):
    issue: Annotated[str, UrlTag("issue,omitempty")] = Field(default="", description="Issue key")
    assignee: Annotated[str, UrlTag("assignee,omitempty")] = Field(
        default="", description="Login of the assignee; empty unassigns the issue"
    )


class IssuesAuthorsOption(BaseModel):
    project: Annotated[str, UrlTag("project,omitempty")] = Field(default="", description="Project key")
    query: Annotated[str, UrlTag("q,omitempty")] = Field(default="", description="Limit to authors containing this text")
    page_size: Annotated[int, UrlTag("ps,omitempty")] = Field(default=0, description="Page size, at most 100")


class IssuesBulkChangeOption(BaseModel):
    issues: Annotated[list[str], UrlTag("issues,omitempty,comma")] = Field(
        default_factory=list, description="Comma-separated list of issue keys"
    )
    add_tags: Annotated[list[str], UrlTag("add_tags,omitempty,comma")] = Field(
        default_factory=list, description="Tags to add"
    )
    remove_tags: Annotated[list[str], UrlTag("remove_tags,omitempty,comma")] = Field(
        default_factory=list, description="Tags to remove"
    )
    assign: Annotated[str, UrlTag("assign,omitempty")] = Field(default="", description="Login of the new assignee")
    comment: Annotated[str, UrlTag("comment,omitempty")] = Field(default="", description="Comment added to every issue")
    do_transition: Annotated[str, UrlTag("do_transition,omitempty")] = Field(default="", description="Transition to apply")
    set_severity: Annotated[str, UrlTag("set_severity,omitempty")] = Field(default="", description="New severity")
    set_type: Annotated[str, UrlTag("set_type,omitempty")] = Field(default="", description="New type")
    send_notifications: Annotated[bool, UrlTag("sendNotifications,omitempty")] = Field(
        default=False, description="Send notifications to the users involved"
    )


class IssuesChangelogOption(BaseModel):
    issue: Annotated[str, UrlTag("issue,omitempty")] = Field(default="", description="Issue key")


class IssuesComponentTagsOption(BaseModel):
    component_uuid: Annotated[str, UrlTag("componentUuid,omitempty")] = Field(default="", description="Component UUID")
    created_after: Annotated[str, UrlTag("createdAfter,omitempty")] = Field(
        default="", description="Only issues created after this date"
    )
    page_size: Annotated[int, UrlTag("ps,omitempty")] = Field(default=0, description="Maximum number of tags")


class IssuesDeleteCommentOption(BaseModel):
    comment: Annotated[str, UrlTag("comment,omitempty")] = Field(default="", description="Comment key")


class IssuesDoTransitionOption(BaseModel):
    issue: Annotated[str, UrlTag("issue,omitempty")] = Field(default="", description="Issue key")
    transition: Annotated[str, UrlTag("transition,omitempty")] = Field(
        default="", description="Transition, e.g. confirm, resolve, falsepositive, accept"
    )


class IssuesEditCommentOption(BaseModel):
    comment: Annotated[str, UrlTag("comment,omitempty")] = Field(default="", description="Comment key")
    text: Annotated[str, UrlTag("text,omitempty")] = Field(default="", description="New comment text")


class IssuesListOption(BaseModel):
    pagination: Annotated[PaginationArgs, UrlTag(",inline")] = Field(default_factory=PaginationArgs)
    project: Annotated[str, UrlTag("project,omitempty")] = Field(default="", description="Project key")
    component: Annotated[str, UrlTag("component,omitempty")] = Field(default="", description="Component key")
    branch: Annotated[str, UrlTag("branch,omitempty")] = Field(default="", description="Branch key")
    pull_request: Annotated[str, UrlTag("pullRequest,omitempty")] = Field(default="", description="Pull request id")
    types: Annotated[list[str], UrlTag("types,omitempty,comma")] = Field(
        default_factory=list, description="Issue types: BUG, VULNERABILITY, CODE_SMELL"
    )
    resolved: Annotated[Optional[bool], UrlTag("resolved,omitempty")] = Field(
        default=None, description="Only resolved (true) or unresolved (false) issues"
    )
    in_new_code_period: Annotated[bool, UrlTag("inNewCodePeriod,omitempty")] = Field(
        default=False, description="Only issues created in the new code period"
    )


class IssuesPullOption(BaseModel):
    project_key: Annotated[str, UrlTag("projectKey,omitempty")] = Field(default="", description="Project key")
    branch_name: Annotated[str, UrlTag("branchName,omitempty")] = Field(default="", description="Branch name")
    languages: Annotated[list[str], UrlTag("languages,omitempty,comma")] = Field(
        default_factory=list, description="Languages to include"
    )
    rule_repositories: Annotated[list[str], UrlTag("ruleRepositories,omitempty,comma")] = Field(
        default_factory=list, description="Rule repositories to include"
    )
    changed_since: Annotated[str, UrlTag("changedSince,omitempty")] = Field(
        default="", description="Timestamp; only issues changed after it are returned"
    )
    resolved_only: Annotated[bool, UrlTag("resolvedOnly,omitempty")] = Field(
        default=False, description="Only resolved issues"
    )


class IssuesPullTaintOption(BaseModel):
    project_key: Annotated[str, UrlTag("projectKey,omitempty")] = Field(default="", description="Project key")
    branch_name: Annotated[str, UrlTag("branchName,omitempty")] = Field(default="", description="Branch name")
    languages: Annotated[list[str], UrlTag("languages,omitempty,comma")] = Field(
        default_factory=list, description="Languages to include"
    )
    changed_since: Annotated[str, UrlTag("changedSince,omitempty")] = Field(
        default="", description="Timestamp; only vulnerabilities changed after it are returned"
    )


class IssuesReindexOption(BaseModel):
    project: Annotated[str, UrlTag("project,omitempty")] = Field(default="", description="Project key")


class IssuesSearchOption(PaginationArgs):
    additional_fields: Annotated[list[str], UrlTag("additionalFields,omitempty,comma")] = _csv(
        "Optional fields to return: _all, comments, languages, rules, ruleDescriptionContextKey, transitions, actions, users"
    )
    assignees: Annotated[list[str], UrlTag("assignees,omitempty,comma")] = _csv("Assignee logins; __me__ for the current user")
    author: Annotated[str, UrlTag("author,omitempty")] = Field(default="", description="SCM author")
    branch: Annotated[str, UrlTag("branch,omitempty")] = Field(default="", description="Branch key")
    casa: Annotated[list[str], UrlTag("casa,omitempty,comma")] = _csv("CASA categories")
    clean_code_attribute_categories: Annotated[
        list[str], UrlTag("cleanCodeAttributeCategories,omitempty,comma")
    ] = _csv("Clean code attribute categories: ADAPTABLE, CONSISTENT, INTENTIONAL, RESPONSIBLE")
    code_variants: Annotated[list[str], UrlTag("codeVariants,omitempty,comma")] = _csv("Code variants")
    compliance_standards: Annotated[list[str], UrlTag("complianceStandards,omitempty,comma")] = _csv(
        "Compliance standards"
    )
    components: Annotated[list[str], UrlTag("components,omitempty,comma")] = _csv("Component keys")
    created_after: Annotated[str, UrlTag("createdAfter,omitempty")] = Field(
        default="", description="Issues created after this date"
    )
    created_at: Annotated[str, UrlTag("createdAt,omitempty")] = Field(
        default="", description="Datetime of an analysis"
    )
    created_before: Annotated[str, UrlTag("createdBefore,omitempty")] = Field(
        default="", description="Issues created before this date"
    )
    created_in_last: Annotated[str, UrlTag("createdInLast,omitempty")] = Field(
        default="", description="Issues created during a period, e.g. 1m2w"
    )
    cwe: Annotated[list[str], UrlTag("cwe,omitempty,comma")] = _csv("CWE identifiers")
    directories: Annotated[list[str], UrlTag("directories,omitempty,comma")] = _csv("Directories")
    facets: Annotated[list[str], UrlTag("facets,omitempty,comma")] = _csv("Facets to compute")
    files: Annotated[list[str], UrlTag("files,omitempty,comma")] = _csv("File paths")
    fixed_in_pull_request: Annotated[str, UrlTag("fixedInPullRequest,omitempty")] = Field(
        default="", description="Issues fixed in this pull request"
    )
    impact_severities: Annotated[list[str], UrlTag("impactSeverities,omitempty,comma")] = _csv(
        "Impact severities: BLOCKER, HIGH, MEDIUM, LOW, INFO"
    )
    impact_software_qualities: Annotated[list[str], UrlTag("impactSoftwareQualities,omitempty,comma")] = _csv(
        "Software qualities: MAINTAINABILITY, RELIABILITY, SECURITY"
    )
    in_new_code_period: Annotated[bool, UrlTag("inNewCodePeriod,omitempty")] = Field(
        default=False, description="Only issues created in the new code period"
    )
    issue_statuses: Annotated[list[str], UrlTag("issueStatuses,omitempty,comma")] = _csv("Issue statuses")
    issues: Annotated[list[str], UrlTag("issues,omitempty,comma")] = _csv("Issue keys")
    languages: Annotated[list[str], UrlTag("languages,omitempty,comma")] = _csv("Languages")
    on_component_only: Annotated[bool, UrlTag("onComponentOnly,omitempty")] = Field(
        default=False, description="Only issues on the given components, not their descendants"
    )
    owasp_asvs_40: Annotated[list[str], UrlTag("owaspAsvs-4.0,omitempty,comma")] = _csv("OWASP ASVS v4.0 categories")
    owasp_asvs_level: Annotated[int, UrlTag("owaspAsvsLevel,omitempty")] = Field(
        default=0, description="OWASP ASVS level: 1, 2 or 3"
    )
    owasp_mobile_top10_2024: Annotated[list[str], UrlTag("owaspMobileTop10-2024,omitempty,comma")] = _csv(
        "OWASP Mobile Top 10 2024 categories (m1 to m10)"
    )
    owasp_top10: Annotated[list[str], UrlTag("owaspTop10,omitempty,comma")] = _csv("OWASP Top 10 2017 categories")
    owasp_top10_2021: Annotated[list[str], UrlTag("owaspTop10-2021,omitempty,comma")] = _csv(
        "OWASP Top 10 2021 categories"
    )
    pci_dss_32: Annotated[list[str], UrlTag("pciDss-3.2,omitempty,comma")] = _csv("PCI DSS v3.2 categories")
    pci_dss_40: Annotated[list[str], UrlTag("pciDss-4.0,omitempty,comma")] = _csv("PCI DSS v4.0 categories")
    prioritized_rule: Annotated[bool, UrlTag("prioritizedRule,omitempty")] = Field(
        default=False, description="Only issues raised by prioritized rules"
    )
    projects: Annotated[list[str], UrlTag("projects,omitempty,comma")] = _csv("Project keys")
    pull_request: Annotated[str, UrlTag("pullRequest,omitempty")] = Field(default="", description="Pull request id")
    resolutions: Annotated[list[str], UrlTag("resolutions,omitempty,comma")] = _csv("Resolutions")
    resolved: Annotated[Optional[bool], UrlTag("resolved,omitempty")] = Field(
        default=None, description="Only resolved (true) or unresolved (false) issues"
    )
    rules: Annotated[list[str], UrlTag("rules,omitempty,comma")] = _csv("Rule keys")
    sort: Annotated[str, UrlTag("s,omitempty")] = Field(default="", description="Sort field")
    sans_top25: Annotated[list[str], UrlTag("sansTop25,omitempty,comma")] = _csv("SANS Top 25 categories")
    scopes: Annotated[list[str], UrlTag("scopes,omitempty,comma")] = _csv("Scopes: MAIN, TEST")
    severities: Annotated[list[str], UrlTag("severities,omitempty,comma")] = _csv(
        "Severities: INFO, MINOR, MAJOR, CRITICAL, BLOCKER"
    )
    sonarsource_security: Annotated[list[str], UrlTag("sonarsourceSecurity,omitempty,comma")] = _csv(
        "SonarSource security categories"
    )
    statuses: Annotated[list[str], UrlTag("statuses,omitempty,comma")] = _csv("Statuses")
    stig_asd_v5r3: Annotated[list[str], UrlTag("stig-ASD_V5R3,omitempty,comma")] = _csv("STIG V5R3 categories")
    tags: Annotated[list[str], UrlTag("tags,omitempty,comma")] = _csv("Tags")
    time_zone: Annotated[str, UrlTag("timeZone,omitempty")] = Field(
        default="", description="Time zone used to compute date facets"
    )
    types: Annotated[list[str], UrlTag("types,omitempty,comma")] = _csv("Issue types: BUG, VULNERABILITY, CODE_SMELL")
    assigned: Annotated[Optional[bool], UrlTag("assigned,omitempty")] = Field(
        default=None, description="Only assigned (true) or unassigned (false) issues"
    )
    asc: Annotated[bool, UrlTag("asc,omitempty")] = Field(default=False, description="Ascending sort")


class IssuesSetSeverityOption(BaseModel):
    issue: Annotated[str, UrlTag("issue,omitempty")] = Field(default="", description="Issue key")
    severity: Annotated[str, UrlTag("severity,omitempty")] = Field(default="", description="New severity")
    impact: Annotated[str, UrlTag("impact,omitempty")] = Field(
        default="", description="Override of an impact severity, e.g. MAINTAINABILITY=HIGH"
    )


class IssuesSetTagsOption(BaseModel):
    issue: Annotated[str, UrlTag("issue,omitempty")] = Field(default="", description="Issue key")
    tags: Annotated[list[str], UrlTag("tags,omitempty,comma")] = Field(
        default_factory=list, description="Comma-separated list of tags; empty removes all tags"
    )


class IssuesSetTypeOption(BaseModel):
    issue: Annotated[str, UrlTag("issue,omitempty")] = Field(default="", description="Issue key")
    type: Annotated[str, UrlTag("type,omitempty")] = Field(default="", description="New type")


class IssuesTagsOption(BaseModel):
    project: Annotated[str, UrlTag("project,omitempty")] = Field(default="", description="Project key")
    branch: Annotated[str, UrlTag("branch,omitempty")] = Field(default="", description="Branch key")
    query: Annotated[str, UrlTag("q,omitempty")] = Field(default="", description="Limit to tags containing this text")
    page_size: Annotated[int, UrlTag("ps,omitempty")] = Field(default=0, description="Page size")
    all: Annotated[bool, UrlTag("all,omitempty")] = Field(
        default=False, description="Include tags of closed issues"
    )


# --------------------------------------------------------------------------- #
# Service
# --------------------------------------------------------------------------- #


class IssuesService(Service):
    """Search and update issues."""

    def validate_add_comment_opt(self, opt: IssuesAddCommentOption) -> None:
        validate_required(opt.issue, "Issue")
        validate_required(opt.text, "Text")

    def validate_assign_opt(self, opt: IssuesAssignOption) -> None:
        validate_required(opt.issue, "Issue")

    def validate_authors_opt(self, opt: IssuesAuthorsOption) -> None:
        if opt.page_size != 0:
            validate_range(opt.page_size, MIN_PAGE_SIZE, MAX_AUTHORS_PAGE_SIZE, "PageSize")

    def validate_bulk_change_opt(self, opt: IssuesBulkChangeOption) -> None:
        if not opt.issues:
            raise ValidationError("Issues", "is required", MISSING_REQUIRED)
        is_value_authorized(opt.set_severity, ALLOWED_SEVERITIES, "SetSeverity")
        is_value_authorized(opt.set_type, ALLOWED_ISSUE_TYPES, "SetType")
        is_value_authorized(opt.do_transition, ALLOWED_ISSUE_TRANSITIONS, "DoTransition")

    def validate_changelog_opt(self, opt: IssuesChangelogOption) -> None:
        validate_required(opt.issue, "Issue")

    def validate_component_tags_opt(self, opt: IssuesComponentTagsOption) -> None:
        validate_required(opt.component_uuid, "ComponentUuid")

    def validate_delete_comment_opt(self, opt: IssuesDeleteCommentOption) -> None:
        validate_required(opt.comment, "Comment")

    def validate_do_transition_opt(self, opt: IssuesDoTransitionOption) -> None:
        validate_required(opt.issue, "Issue")
        validate_required(opt.transition, "Transition")
        is_value_authorized(opt.transition, ALLOWED_ISSUE_TRANSITIONS, "Transition")

    def validate_edit_comment_opt(self, opt: IssuesEditCommentOption) -> None:
        validate_required(opt.comment, "Comment")
        validate_required(opt.text, "Text")

    def validate_list_opt(self, opt: IssuesListOption) -> None:
        if not opt.project and not opt.component:
            raise ValidationError("Project", "either Project or Component is required", MISSING_REQUIRED)
        opt.pagination.validate_pagination()
        are_values_authorized(opt.types, ALLOWED_ISSUE_TYPES, "Types")

    def validate_pull_opt(self, opt: IssuesPullOption) -> None:
        validate_required(opt.project_key, "ProjectKey")

    def validate_pull_taint_opt(self, opt: IssuesPullTaintOption) -> None:
        validate_required(opt.project_key, "ProjectKey")

    def validate_reindex_opt(self, opt: IssuesReindexOption) -> None:
        validate_required(opt.project, "Project")

    def validate_search_opt(self, opt: IssuesSearchOption) -> None:
        opt.validate_pagination()
        are_values_authorized(opt.impact_severities, ALLOWED_IMPACT_SEVERITIES, "ImpactSeverities")
        are_values_authorized(
            opt.impact_software_qualities, ALLOWED_IMPACT_SOFTWARE_QUALITIES, "ImpactSoftwareQualities"
        )
        are_values_authorized(
            opt.clean_code_attribute_categories,
            ALLOWED_CLEAN_CODE_ATTRIBUTE_CATEGORIES,
            "CleanCodeAttributeCategories",
        )
        are_values_authorized(opt.severities, ALLOWED_SEVERITIES, "Severities")
        are_values_authorized(opt.types, ALLOWED_ISSUE_TYPES, "Types")
        are_values_authorized(opt.statuses, ALLOWED_ISSUE_STATUSES, "Statuses")
        are_values_authorized(opt.issue_statuses, ALLOWED_ISSUE_STATUSES, "IssueStatuses")
        are_values_authorized(opt.resolutions, ALLOWED_ISSUE_RESOLUTIONS, "Resolutions")
        are_values_authorized(opt.scopes, ALLOWED_ISSUE_SCOPES, "Scopes")
        are_values_authorized(opt.owasp_top10, ALLOWED_OWASP_CATEGORIES, "OwaspTop10")
        are_values_authorized(opt.owasp_top10_2021, ALLOWED_OWASP_CATEGORIES, "OwaspTop102021")
        are_values_authorized(opt.owasp_mobile_top10_2024, ALLOWED_OWASP_MOBILE_CATEGORIES, "OwaspMobileTop102024")
        are_values_authorized(opt.sans_top25, ALLOWED_SANS_TOP25_CATEGORIES, "SansTop25")

    def validate_set_severity_opt(self, opt: IssuesSetSeverityOption) -> None:
        validate_required(opt.issue, "Issue")
        is_value_authorized(opt.severity, ALLOWED_SEVERITIES, "Severity")

    def validate_set_tags_opt(self, opt: IssuesSetTagsOption) -> None:
        validate_required(opt.issue, "Issue")

    def validate_set_type_opt(self, opt: IssuesSetTypeOption) -> None:
        validate_required(opt.issue, "Issue")
        validate_required(opt.type, "Type")
        is_value_authorized(opt.type, ALLOWED_ISSUE_TYPES, "Type")

    def validate_tags_opt(self, opt: IssuesTagsOption) -> None:
        if opt.page_size != 0:
            validate_range(opt.page_size, MIN_PAGE_SIZE, MAX_PAGE_SIZE, "PageSize")

    # ------------------------------------------------------------------ #

    def _change(self, path: str, opt: BaseModel) -> tuple[Optional[IssueChange], httpx.Response]:
        return self._client.do(self._client.new_request("POST", path, opt), IssueChange)

    def add_comment(self, opt: IssuesAddCommentOption) -> tuple[Optional[IssueChange], httpx.Response]:
        """Add a comment to an issue."""
        self.validate_add_comment_opt(opt)
        return self._change("issues/add_comment", opt)

    def assign(self, opt: IssuesAssignOption) -> tuple[Optional[IssueChange], httpx.Response]:
        self.validate_assign_opt(opt)
        return self._change("issues/assign", opt)

    def authors(self, opt: IssuesAuthorsOption) -> tuple[Optional[IssuesAuthors], httpx.Response]:
        """Search SCM accounts which match a given query."""
        self.validate_authors_opt(opt)
        return self._client.do(self._client.new_request("GET", "issues/authors", opt), IssuesAuthors)

    def bulk_change(self, opt: IssuesBulkChangeOption) -> tuple[Optional[IssuesBulkChange], httpx.Response]:
        self.validate_bulk_change_opt(opt)
        return self._client.do(self._client.new_request("POST", "issues/bulk_change", opt), IssuesBulkChange)

    def changelog(self, opt: IssuesChangelogOption) -> tuple[Optional[IssuesChangelog], httpx.Response]:
        self.validate_changelog_opt(opt)
        return self._client.do(self._client.new_request("GET", "issues/changelog", opt), IssuesChangelog)

    def component_tags(self, opt: IssuesComponentTagsOption) -> tuple[Optional[IssuesComponentTags], httpx.Response]:
        self.validate_component_tags_opt(opt)
        request = self._client.new_request("GET", "issues/component_tags", opt)
        return self._client.do(request, IssuesComponentTags)

    def delete_comment(self, opt: IssuesDeleteCommentOption) -> tuple[Optional[IssueChange], httpx.Response]:
        self.validate_delete_comment_opt(opt)
        return self._change("issues/delete_comment", opt)

    def do_transition(self, opt: IssuesDoTransitionOption) -> tuple[Optional[IssueChange], httpx.Response]:
        """Apply a workflow transition (confirm, resolve, accept...) to an issue."""
        self.validate_do_transition_opt(opt)
        return self._change("issues/do_transition", opt)

    def edit_comment(self, opt: IssuesEditCommentOption) -> tuple[Optional[IssueChange], httpx.Response]:
        self.validate_edit_comment_opt(opt)
        return self._change("issues/edit_comment", opt)

    def list(self, opt: IssuesListOption) -> tuple[Optional[IssuesList], httpx.Response]:
        self.validate_list_opt(opt)
        return self._client.do(self._client.new_request("GET", "issues/list", opt), IssuesList)

    def pull(self, opt: IssuesPullOption) -> tuple[Optional[bytes], httpx.Response]:
        """Fetch issues as a protobuf stream, used by SonarLint to synchronise."""
        self.validate_pull_opt(opt)
        return self._client.do(self._client.new_request("GET", "issues/pull", opt), bytes)

    def pull_taint(self, opt: IssuesPullTaintOption) -> tuple[Optional[bytes], httpx.Response]:
        self.validate_pull_taint_opt(opt)
        return self._client.do(self._client.new_request("GET", "issues/pull_taint", opt), bytes)

    def reindex(self, opt: IssuesReindexOption) -> httpx.Response:
        self.validate_reindex_opt(opt)
        _, response = self._client.do(self._client.new_request("POST", "issues/reindex", opt))
        return response

    def search(self, opt: IssuesSearchOption) -> tuple[Optional[IssuesSearch], httpx.Response]:
        """Search issues.

        At most one page of at most 500 issues is returned per call; the
        CLI's ``--all`` walks every page.
        """
        self.validate_search_opt(opt)
        return self._client.do(self._client.new_request("GET", "issues/search", opt), IssuesSearch)

    def set_severity(self, opt: IssuesSetSeverityOption) -> tuple[Optional[IssueChange], httpx.Response]:
        self.validate_set_severity_opt(opt)
        return self._change("issues/set_severity", opt)

    def set_tags(self, opt: IssuesSetTagsOption) -> tuple[Optional[IssueChange], httpx.Response]:
        self.validate_set_tags_opt(opt)
        return self._change("issues/set_tags", opt)

    def set_type(self, opt: IssuesSetTypeOption) -> tuple[Optional[IssueChange], httpx.Response]:
        self.validate_set_type_opt(opt)
        return self._change("issues/set_type", opt)

    def tags(self, opt: IssuesTagsOption) -> tuple[Optional[IssuesTags], httpx.Response]:
        self.validate_tags_opt(opt)
        return self._client.do(self._client.new_request("GET", "issues/tags", opt), IssuesTags)
