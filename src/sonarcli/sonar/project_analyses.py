"""Project analysis endpoints (``api/project_analyses``)."""

from __future__ import annotations

import re
from typing import Annotated, Optional

import httpx
from pydantic import BaseModel, Field

from sonarcli.exceptions import ValidationError
from sonarcli.sonar.common import (
    DEFAULT_PAGE_SIZE,
    INVALID_FORMAT,
    PaginationArgs,
    Paging,
    SonarModel,
    is_value_authorized,
    validate_required,
)
from sonarcli.sonar.query import UrlTag
from sonarcli.sonar.service import Service

ALLOWED_EVENT_CATEGORIES = frozenset({"VERSION", "OTHER"})
ALLOWED_SEARCH_CATEGORIES = frozenset(
    {"VERSION", "OTHER", "QUALITY_PROFILE", "QUALITY_GATE", "DEFINITION_CHANGE", "SQ_UPGRADE"}
)

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_DATETIME_MIN_LENGTH = 20


class ProjectAnalysesCondition(SonarModel):
    branch: Optional[str] = None
    error_threshold: Optional[str] = Field(default=None, alias="errorThreshold")
    metric: Optional[str] = None
    pull_request: Optional[str] = Field(default=None, alias="pullRequest")


class ProjectAnalysesQualityGate(SonarModel):
    failing: Optional[list[ProjectAnalysesCondition]] = None
    status: Optional[str] = None
    still_failing: Optional[bool] = Field(default=None, alias="stillFailing")


class ProjectAnalysesEvent(SonarModel):
    analysis: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    key: Optional[str] = None
    name: Optional[str] = None
    quality_gate: Optional[ProjectAnalysesQualityGate] = Field(default=None, alias="qualityGate")


class ProjectAnalysesEventResult(SonarModel):
    event: Optional[ProjectAnalysesEvent] = None


class ProjectAnalysis(SonarModel):
    build_string: Optional[str] = Field(default=None, alias="buildString")
    date: Optional[str] = None
    detected_ci: Optional[str] = Field(default=None, alias="detectedCI")
    events: Optional[list[ProjectAnalysesEvent]] = None
    key: Optional[str] = None
    manual_new_code_period_baseline: Optional[bool] = Field(default=None, alias="manualNewCodePeriodBaseline")
    project_version: Optional[str] = Field(default=None, alias="projectVersion")
    revision: Optional[str] = None


class ProjectAnalysesSearch(SonarModel):
    analyses: list[ProjectAnalysis] = Field(default_factory=list)
    paging: Optional[Paging] = None


class ProjectAnalysesCreateEventOption(BaseModel):
    analysis: Annotated[str, UrlTag("analysis,omitempty")] = Field(default="", description="Analysis key")
    category: Annotated[str, UrlTag("category,omitempty")] = Field(
        default="", description="Event category: VERSION or OTHER"
    )
    name: Annotated[str, UrlTag("name,omitempty")] = Field(default="", description="Event name")


class ProjectAnalysesDeleteOption(BaseModel):
    analysis: Annotated[str, UrlTag("analysis,omitempty")] = Field(default="", description="Analysis key")


class ProjectAnalysesDeleteEventOption(BaseModel):
    event: Annotated[str, UrlTag("event,omitempty")] = Field(default="", description="Event key")


class ProjectAnalysesSearchOption(PaginationArgs):
    branch: Annotated[str, UrlTag("branch,omitempty")] = Field(default="", description="Branch key")
    category: Annotated[str, UrlTag("category,omitempty")] = Field(default="", description="Event category")
    from_: Annotated[str, UrlTag("from,omitempty")] = Field(
        default="", description="Filter analyses created after this date (YYYY-MM-DD or datetime)"
    )
    project: Annotated[str, UrlTag("project,omitempty")] = Field(default="", description="Project key")
    pull_request: Annotated[str, UrlTag("pullRequest,omitempty")] = Field(default="", description="Pull request id")
    to: Annotated[str, UrlTag("to,omitempty")] = Field(
        default="", description="Filter analyses created before this date (YYYY-MM-DD or datetime)"
    )


class ProjectAnalysesUpdateEventOption(BaseModel):
    event: Annotated[str, UrlTag("event,omitempty")] = Field(default="", description="Event key")
    name: Annotated[str, UrlTag("name,omitempty")] = Field(default="", description="New event name")


def _is_valid_date(value: str) -> bool:
    return bool(_DATE_RE.match(value))


def _is_valid_datetime(value: str) -> bool:
    if len(value) < _DATETIME_MIN_LENGTH:
        return False
    parts = value.split("T")
    return len(parts) == 2 and _is_valid_date(parts[0])


def validate_date_format(value: str, field: str) -> None:
    if value and not _is_valid_date(value) and not _is_valid_datetime(value):
        raise ValidationError(
            field, "must be a valid date (YYYY-MM-DD) or datetime (YYYY-MM-DDTHH:mm:ssZ)", INVALID_FORMAT
        )


class ProjectAnalysesService(Service):
    """Project analyses and their events."""

    def validate_create_event_opt(self, opt: ProjectAnalysesCreateEventOption) -> None:
        validate_required(opt.analysis, "Analysis")
        validate_required(opt.name, "Name")
        is_value_authorized(opt.category, ALLOWED_EVENT_CATEGORIES, "Category")

    def validate_delete_opt(self, opt: ProjectAnalysesDeleteOption) -> None:
        validate_required(opt.analysis, "Analysis")

    def validate_delete_event_opt(self, opt: ProjectAnalysesDeleteEventOption) -> None:
        validate_required(opt.event, "Event")

    def validate_search_opt(self, opt: ProjectAnalysesSearchOption) -> None:
        validate_required(opt.project, "Project")
        is_value_authorized(opt.category, ALLOWED_SEARCH_CATEGORIES, "Category")
        validate_date_format(opt.from_, "From")
        validate_date_format(opt.to, "To")

    def validate_update_event_opt(self, opt: ProjectAnalysesUpdateEventOption) -> None:
        validate_required(opt.event, "Event")
        validate_required(opt.name, "Name")

    # ------------------------------------------------------------------ #

    def create_event(
        self, opt: ProjectAnalysesCreateEventOption
    ) -> tuple[Optional[ProjectAnalysesEventResult], httpx.Response]:
        """Create a project analysis event; only VERSION and OTHER events can be created."""
        self.validate_create_event_opt(opt)
        request = self._client.new_request("POST", "project_analyses/create_event", opt)
        return self._client.do(request, ProjectAnalysesEventResult)

    def delete(self, opt: ProjectAnalysesDeleteOption) -> httpx.Response:
        self.validate_delete_opt(opt)
        _, response = self._client.do(self._client.new_request("POST", "project_analyses/delete", opt))
        return response

    def delete_event(self, opt: ProjectAnalysesDeleteEventOption) -> httpx.Response:
        self.validate_delete_event_opt(opt)
        _, response = self._client.do(self._client.new_request("POST", "project_analyses/delete_event", opt))
        return response

    def search(self, opt: ProjectAnalysesSearchOption) -> tuple[Optional[ProjectAnalysesSearch], httpx.Response]:
        """Search the analyses of a project, most recent first."""
        self.validate_search_opt(opt)
        request = self._client.new_request("GET", "project_analyses/search", opt)
        return self._client.do(request, ProjectAnalysesSearch)

    def search_all(self, opt: ProjectAnalysesSearchOption) -> tuple[list[ProjectAnalysis], httpx.Response]:
        """Search analyses and walk every page, returning the merged list.

        Starts at page 1 with the requested page size (100 when unset) and
        stops once the number of analyses reaches the reported total.
        """
        self.validate_search_opt(opt)
        page_opt = opt.model_copy(update={"page": 1, "page_size": opt.page_size or DEFAULT_PAGE_SIZE})

        analyses: list[ProjectAnalysis] = []
        while True:
            result, response = self.search(page_opt)
            page = result.analyses if result is not None else []
            analyses.extend(page)
            total = result.paging.total if result is not None and result.paging is not None else 0
            if len(analyses) >= total:
                return analyses, response
            page_opt = page_opt.model_copy(update={"page": page_opt.page + 1})

    def update_event(
        self, opt: ProjectAnalysesUpdateEventOption
    ) -> tuple[Optional[ProjectAnalysesEventResult], httpx.Response]:
        self.validate_update_event_opt(opt)
        request = self._client.new_request("POST", "project_analyses/update_event", opt)
        return self._client.do(request, ProjectAnalysesEventResult)
