"""Project management endpoints (``api/projects``)."""

from __future__ import annotations

from typing import Annotated, Optional

import httpx
from pydantic import BaseModel, Field

from sonarcli.exceptions import ValidationError
from sonarcli.sonar.common import (
    MAX_PROJECT_KEY_LENGTH,
    MAX_PROJECT_NAME_LENGTH,
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

ALLOWED_PROJECT_QUALIFIERS = frozenset({"TRK", "VW", "APP"})
ALLOWED_PROJECT_VISIBILITY = frozenset({"private", "public"})


class Project(SonarModel):
    key: Optional[str] = None
    name: Optional[str] = None
    qualifier: Optional[str] = None
    visibility: Optional[str] = None


class ProjectsCreate(SonarModel):
    project: Optional[Project] = None


class ProjectComponent(SonarModel):
    key: Optional[str] = None
    name: Optional[str] = None
    qualifier: Optional[str] = None
    visibility: Optional[str] = None
    last_analysis_date: Optional[str] = Field(default=None, alias="lastAnalysisDate")
    revision: Optional[str] = None
    managed: Optional[bool] = None


class ProjectsSearch(SonarModel):
    components: list[ProjectComponent] = Field(default_factory=list)
    paging: Optional[Paging] = None


class MyProjectLink(SonarModel):
    name: Optional[str] = None
    type: Optional[str] = None
    href: Optional[str] = None


class MyProject(SonarModel):
    key: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    last_analysis_date: Optional[str] = Field(default=None, alias="lastAnalysisDate")
    quality_gate: Optional[str] = Field(default=None, alias="qualityGate")
    links: Optional[list[MyProjectLink]] = None


class ProjectsSearchMyProjects(SonarModel):
    projects: list[MyProject] = Field(default_factory=list)
    paging: Optional[Paging] = None


class ScannableProject(SonarModel):
    key: Optional[str] = None
    name: Optional[str] = None


class ProjectsSearchMyScannableProjects(SonarModel):
    projects: list[ScannableProject] = Field(default_factory=list)


class ProjectsBulkDeleteOption(BaseModel):
    analyzed_before: Annotated[str, UrlTag("analyzedBefore,omitempty")] = Field(
        default="", description="Delete projects whose last analysis is older than this date"
    )
    projects: Annotated[list[str], UrlTag("projects,omitempty,comma")] = Field(
        default_factory=list, description="Comma-separated list of project keys"
    )
    query: Annotated[str, UrlTag("q,omitempty")] = Field(
        default="", description="Limit to projects whose name or key contains this text"
    )
    qualifiers: Annotated[list[str], UrlTag("qualifiers,omitempty,comma")] = Field(
        default_factory=list, description="Component qualifiers: TRK, VW, APP"
    )
    on_provisioned_only: Annotated[bool, UrlTag("onProvisionedOnly,omitempty")] = Field(
        default=False, description="Only provisioned projects"
    )


class ProjectsCreateOption(BaseModel):
    name: Annotated[str, UrlTag("name,omitempty")] = Field(default="", description="Project name")
    project: Annotated[str, UrlTag("project,omitempty")] = Field(default="", description="Project key")
    main_branch: Annotated[str, UrlTag("mainBranch,omitempty")] = Field(
        default="", description="Name of the main branch"
    )
    new_code_definition_type: Annotated[str, UrlTag("newCodeDefinitionType,omitempty")] = Field(
        default="", description="New code definition type"
    )
    new_code_definition_value: Annotated[str, UrlTag("newCodeDefinitionValue,omitempty")] = Field(
        default="", description="New code definition value"
    )
    visibility: Annotated[str, UrlTag("visibility,omitempty")] = Field(
        default="", description="Project visibility: private or public"
    )


class ProjectsDeleteOption(BaseModel):
    project: Annotated[str, UrlTag("project,omitempty")] = Field(default="", description="Project key")


class ProjectsSearchOption(PaginationArgs):
    analyzed_before: Annotated[str, UrlTag("analyzedBefore,omitempty")] = Field(
        default="", description="Only projects last analysed before this date"
    )
    on_provisioned_only: Annotated[bool, UrlTag("onProvisionedOnly,omitempty")] = Field(
        default=False, description="Only provisioned projects"
    )
    projects: Annotated[list[str], UrlTag("projects,omitempty,comma")] = Field(
        default_factory=list, description="Comma-separated list of project keys"
    )
    query: Annotated[str, UrlTag("q,omitempty")] = Field(
        default="", description="Limit to projects whose name or key contains this text"
    )
    qualifiers: Annotated[list[str], UrlTag("qualifiers,omitempty,comma")] = Field(
        default_factory=list, description="Component qualifiers: TRK, VW, APP"
    )


class ProjectsSearchMyProjectsOption(PaginationArgs):
    pass


class ProjectsUpdateDefaultVisibilityOption(BaseModel):
    project_visibility: Annotated[str, UrlTag("projectVisibility,omitempty")] = Field(
        default="", description="Default visibility for new projects: private or public"
    )


class ProjectsUpdateKeyOption(BaseModel):
    from_: Annotated[str, UrlTag("from,omitempty")] = Field(default="", description="Current project key")
    to: Annotated[str, UrlTag("to,omitempty")] = Field(default="", description="New project key")


class ProjectsUpdateVisibilityOption(BaseModel):
    project: Annotated[str, UrlTag("project,omitempty")] = Field(default="", description="Project key")
    visibility: Annotated[str, UrlTag("visibility,omitempty")] = Field(
        default="", description="New visibility: private or public"
    )


class ProjectsService(Service):
    """Create, search, update and delete projects."""

    def validate_bulk_delete_opt(self, opt: ProjectsBulkDeleteOption) -> None:
        if not opt.analyzed_before and not opt.projects and not opt.query:
            raise ValidationError(
                "Projects", "at least one of analyzedBefore, projects or q is required", MISSING_REQUIRED
            )
        are_values_authorized(opt.qualifiers, ALLOWED_PROJECT_QUALIFIERS, "Qualifiers")

    def validate_create_opt(self, opt: ProjectsCreateOption) -> None:
        validate_required(opt.name, "Name")
        validate_max_length(opt.name, MAX_PROJECT_NAME_LENGTH, "Name")
        validate_required(opt.project, "Project")
        validate_max_length(opt.project, MAX_PROJECT_KEY_LENGTH, "Project")
        is_value_authorized(opt.visibility, ALLOWED_PROJECT_VISIBILITY, "Visibility")

    def validate_delete_opt(self, opt: ProjectsDeleteOption) -> None:
        validate_required(opt.project, "Project")

    def validate_search_opt(self, opt: ProjectsSearchOption) -> None:
        opt.validate_pagination()
        are_values_authorized(opt.qualifiers, ALLOWED_PROJECT_QUALIFIERS, "Qualifiers")

    def validate_update_default_visibility_opt(self, opt: ProjectsUpdateDefaultVisibilityOption) -> None:
        validate_required(opt.project_visibility, "ProjectVisibility")
        is_value_authorized(opt.project_visibility, ALLOWED_PROJECT_VISIBILITY, "ProjectVisibility")

    def validate_update_key_opt(self, opt: ProjectsUpdateKeyOption) -> None:
        validate_required(opt.from_, "From")
        validate_required(opt.to, "To")

    def validate_update_visibility_opt(self, opt: ProjectsUpdateVisibilityOption) -> None:
        validate_required(opt.project, "Project")
        validate_required(opt.visibility, "Visibility")
        is_value_authorized(opt.visibility, ALLOWED_PROJECT_VISIBILITY, "Visibility")

    # ------------------------------------------------------------------ #

    def bulk_delete(self, opt: ProjectsBulkDeleteOption) -> httpx.Response:
        """Delete one or several projects matching the filters."""
        self.validate_bulk_delete_opt(opt)
        _, response = self._client.do(self._client.new_request("POST", "projects/bulk_delete", opt))
        return response

    def create(self, opt: ProjectsCreateOption) -> tuple[Optional[ProjectsCreate], httpx.Response]:
        self.validate_create_opt(opt)
        return self._client.do(self._client.new_request("POST", "projects/create", opt), ProjectsCreate)

    def delete(self, opt: ProjectsDeleteOption) -> httpx.Response:
        self.validate_delete_opt(opt)
        _, response = self._client.do(self._client.new_request("POST", "projects/delete", opt))
        return response

    def search(self, opt: ProjectsSearchOption) -> tuple[Optional[ProjectsSearch], httpx.Response]:
        """Search for projects or views."""
        self.validate_search_opt(opt)
        return self._client.do(self._client.new_request("GET", "projects/search", opt), ProjectsSearch)

    def search_my_projects(
        self, opt: ProjectsSearchMyProjectsOption
    ) -> tuple[Optional[ProjectsSearchMyProjects], httpx.Response]:
        opt.validate_pagination()
        request = self._client.new_request("GET", "projects/search_my_projects", opt)
        return self._client.do(request, ProjectsSearchMyProjects)

    def search_my_scannable_projects(self) -> tuple[Optional[ProjectsSearchMyScannableProjects], httpx.Response]:
        request = self._client.new_request("GET", "projects/search_my_scannable_projects")
        return self._client.do(request, ProjectsSearchMyScannableProjects)

    def update_default_visibility(self, opt: ProjectsUpdateDefaultVisibilityOption) -> httpx.Response:
        self.validate_update_default_visibility_opt(opt)
        request = self._client.new_request("POST", "projects/update_default_visibility", opt)
        _, response = self._client.do(request)
        return response

    def update_key(self, opt: ProjectsUpdateKeyOption) -> httpx.Response:
        """Change the key of a project."""
        self.validate_update_key_opt(opt)
        _, response = self._client.do(self._client.new_request("POST", "projects/update_key", opt))
        return response

    def update_visibility(self, opt: ProjectsUpdateVisibilityOption) -> httpx.Response:
        self.validate_update_visibility_opt(opt)
        _, response = self._client.do(self._client.new_request("POST", "projects/update_visibility", opt))
        return response
