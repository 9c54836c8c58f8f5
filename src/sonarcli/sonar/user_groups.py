"""User group endpoints (``api/user_groups``)."""

from __future__ import annotations

from typing import Annotated, Optional

import httpx
from pydantic import BaseModel, Field

from sonarcli.sonar.common import (
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

MAX_GROUP_NAME_LENGTH = 255
MAX_GROUP_DESCRIPTION_LENGTH = 200

ALLOWED_SEARCH_FIELDS = frozenset({"name", "description", "membersCount", "managed"})
ALLOWED_USERS_SELECTED = frozenset({"all", "deselected", "selected"})


class UserGroupDetail(SonarModel):
    description: Optional[str] = None
    id: Optional[str] = None
    name: Optional[str] = None
    organization: Optional[str] = None
    members_count: Optional[int] = Field(default=None, alias="membersCount")
    default: Optional[bool] = None
    managed: Optional[bool] = None


class UserGroupsCreate(SonarModel):
    group: Optional[UserGroupDetail] = None


class UserGroupsSearch(SonarModel):
    groups: list[UserGroupDetail] = Field(default_factory=list)
    paging: Optional[Paging] = None


class UserGroupUser(SonarModel):
    login: Optional[str] = None
    name: Optional[str] = None
    managed: Optional[bool] = None
    selected: Optional[bool] = None


class UserGroupsUsers(SonarModel):
    users: list[UserGroupUser] = Field(default_factory=list)
    paging: Optional[Paging] = None


class UserGroupsAddUserOption(BaseModel):
    login: Annotated[str, UrlTag("login,omitempty")] = Field(default="", description="User login")
    name: Annotated[str, UrlTag("name,omitempty")] = Field(default="", description="Group name")


class UserGroupsCreateOption(BaseModel):
    description: Annotated[str, UrlTag("description,omitempty")] = Field(
        default="", description="Description of the group"
    )
    name: Annotated[str, UrlTag("name,omitempty")] = Field(default="", description="Name of the group")


class UserGroupsDeleteOption(BaseModel):
    name: Annotated[str, UrlTag("name,omitempty")] = Field(default="", description="Group name")


class UserGroupsRemoveUserOption(BaseModel):
    login: Annotated[str, UrlTag("login,omitempty")] = Field(default="", description="User login")
    name: Annotated[str, UrlTag("name,omitempty")] = Field(default="", description="Group name")


class UserGroupsSearchOption(PaginationArgs):
    managed: Annotated[Optional[bool], UrlTag("managed,omitempty")] = Field(
        default=None, description="Only managed (true) or only local (false) groups"
    )
    fields: Annotated[list[str], UrlTag("f,omitempty,comma")] = Field(
        default_factory=list, description="Fields to return: name, description, membersCount, managed"
    )
    query: Annotated[str, UrlTag("q,omitempty")] = Field(
        default="", description="Limit to names that contain this text"
    )


class UserGroupsUpdateOption(BaseModel):
    current_name: Annotated[str, UrlTag("currentName,omitempty")] = Field(
        default="", description="Current name of the group"
    )
    description: Annotated[str, UrlTag("description,omitempty")] = Field(
        default="", description="New description of the group"
    )
    name: Annotated[str, UrlTag("name,omitempty")] = Field(default="", description="New name of the group")


class UserGroupsUsersOption(PaginationArgs):
    name: Annotated[str, UrlTag("name,omitempty")] = Field(default="", description="Group name")
    query: Annotated[str, UrlTag("q,omitempty")] = Field(
        default="", description="Limit to logins or names that contain this text"
    )
    selected: Annotated[str, UrlTag("selected,omitempty")] = Field(
        default="", description="Which users to return: all, deselected or selected"
    )


class UserGroupsService(Service):
    """User groups and their members."""

    def validate_add_user_opt(self, opt: UserGroupsAddUserOption) -> None:
        validate_required(opt.name, "Name")

    def validate_create_opt(self, opt: UserGroupsCreateOption) -> None:
        validate_required(opt.name, "Name")
        validate_max_length(opt.name, MAX_GROUP_NAME_LENGTH, "Name")
        validate_max_length(opt.description, MAX_GROUP_DESCRIPTION_LENGTH, "Description")

    def validate_delete_opt(self, opt: UserGroupsDeleteOption) -> None:
        validate_required(opt.name, "Name")

    def validate_remove_user_opt(self, opt: UserGroupsRemoveUserOption) -> None:
        validate_required(opt.name, "Name")

    def validate_search_opt(self, opt: UserGroupsSearchOption) -> None:
        opt.validate_pagination()
        are_values_authorized(opt.fields, ALLOWED_SEARCH_FIELDS, "Fields")

    def validate_update_opt(self, opt: UserGroupsUpdateOption) -> None:
        validate_required(opt.current_name, "CurrentName")
        validate_max_length(opt.name, MAX_GROUP_NAME_LENGTH, "Name")
        validate_max_length(opt.description, MAX_GROUP_DESCRIPTION_LENGTH, "Description")

    def validate_users_opt(self, opt: UserGroupsUsersOption) -> None:
        opt.validate_pagination()
        validate_required(opt.name, "Name")
        is_value_authorized(opt.selected, ALLOWED_USERS_SELECTED, "Selected")

    # ------------------------------------------------------------------ #

    def add_user(self, opt: UserGroupsAddUserOption) -> httpx.Response:
        """Add a user to a group; without ``login`` the current user is added."""
        self.validate_add_user_opt(opt)
        _, response = self._client.do(self._client.new_request("POST", "user_groups/add_user", opt))
        return response

    def create(self, opt: UserGroupsCreateOption) -> tuple[Optional[UserGroupsCreate], httpx.Response]:
        self.validate_create_opt(opt)
        return self._client.do(self._client.new_request("POST", "user_groups/create", opt), UserGroupsCreate)

    def delete(self, opt: UserGroupsDeleteOption) -> httpx.Response:
        self.validate_delete_opt(opt)
        _, response = self._client.do(self._client.new_request("POST", "user_groups/delete", opt))
        return response

    def remove_user(self, opt: UserGroupsRemoveUserOption) -> httpx.Response:
        self.validate_remove_user_opt(opt)
        _, response = self._client.do(self._client.new_request("POST", "user_groups/remove_user", opt))
        return response

    def search(self, opt: UserGroupsSearchOption) -> tuple[Optional[UserGroupsSearch], httpx.Response]:
        """Search for user groups."""
        self.validate_search_opt(opt)
        return self._client.do(self._client.new_request("GET", "user_groups/search", opt), UserGroupsSearch)

    def update(self, opt: UserGroupsUpdateOption) -> httpx.Response:
        self.validate_update_opt(opt)
        _, response = self._client.do(self._client.new_request("POST", "user_groups/update", opt))
        return response

    def users(self, opt: UserGroupsUsersOption) -> tuple[Optional[UserGroupsUsers], httpx.Response]:
        """List the members of a group."""
        self.validate_users_opt(opt)
        return self._client.do(self._client.new_request("GET", "user_groups/users", opt), UserGroupsUsers)
