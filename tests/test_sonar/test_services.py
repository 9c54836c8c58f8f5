"""Tests for the SDK service groups.

Covers:
- Client-side validation raising ValidationError before any request
- HTTP method, path and query of representative calls
- Decoded response models
- ProjectAnalyses.search_all page walking
- Push event stream
"""

from __future__ import annotations

import httpx
import pytest

from sonarcli.exceptions import ValidationError
from sonarcli.exit_codes import EXIT_INVALID_USAGE
from sonarcli.sonar import SonarClient
from sonarcli.sonar.common import PaginationArgs
from sonarcli.sonar.hotspots import HotspotsAddCommentOption, HotspotsPullOption, HotspotsSearchOption
from sonarcli.sonar.issues import IssuesAssignOption, IssuesListOption, IssuesSearchOption
from sonarcli.sonar.languages import LanguagesListOption
from sonarcli.sonar.project_analyses import (
    ProjectAnalysesCreateEventOption,
    ProjectAnalysesSearchOption,
)
from sonarcli.sonar.projects import (
    ProjectsBulkDeleteOption,
    ProjectsCreateOption,
    ProjectsSearchOption,
    ProjectsUpdateKeyOption,
)
from sonarcli.sonar.push import PushSonarlintEventsOption
from sonarcli.sonar.qualityprofiles import QualityprofilesActivateRuleOption
from sonarcli.sonar.settings import SettingsResetOption, SettingsSetOption
from sonarcli.sonar.system import SystemChangeLogLevelOption, SystemLogsOption
from sonarcli.sonar.user_groups import UserGroupsCreateOption, UserGroupsSearchOption
from sonarcli.sonar.webservices import WebservicesListOption, WebservicesResponseExampleOption


def _query(request: httpx.Request) -> list[tuple[str, str]]:
    return list(request.url.params.multi_items())


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class TestValidation:
    """Invalid options are rejected locally."""

    @pytest.mark.parametrize(
        ("call", "field"),
        [
            (lambda c: c.projects.create(ProjectsCreateOption(project="k")), "Name"),
            (lambda c: c.projects.create(ProjectsCreateOption(name="n", project="k", visibility="hidden")), "Visibility"),
            (lambda c: c.projects.bulk_delete(ProjectsBulkDeleteOption()), "Projects"),
            (lambda c: c.projects.search(ProjectsSearchOption(page_size=501)), "PageSize"),
            (lambda c: c.projects.search(ProjectsSearchOption(qualifiers=["TRK", "XYZ"])), "Qualifiers"),
            (lambda c: c.projects.update_key(ProjectsUpdateKeyOption(to="new")), "From"),
            (lambda c: c.hotspots.add_comment(HotspotsAddCommentOption(hotspot="h")), "Comment"),
            (lambda c: c.hotspots.search(HotspotsSearchOption()), "Project"),
            (lambda c: c.hotspots.pull(HotspotsPullOption(project_key="p")), "BranchName"),
            (lambda c: c.issues.list(IssuesListOption()), "Project"),
            (lambda c: c.issues.search(IssuesSearchOption(severities=["HUGE"])), "Severities"),
            (lambda c: c.issues.search(IssuesSearchOption(page=-1)), "Page"),
            (
                lambda c: c.project_analyses.create_event(ProjectAnalysesCreateEventOption(analysis="a", name="n", category="QUALITY_GATE")),
                "Category",
            ),
            (lambda c: c.project_analyses.search(ProjectAnalysesSearchOption(project="p", from_="01/02/2024")), "From"),
            (
                lambda c: c.qualityprofiles.activate_rule(
                    QualityprofilesActivateRuleOption(key="k", rule="r", impacts={"SECURITY": "HIGH"}, severity="MAJOR")
                ),
                "QualityprofilesActivateRuleOption",
            ),
            (
                lambda c: c.qualityprofiles.activate_rule(
                    QualityprofilesActivateRuleOption(key="k", rule="r", impacts={"SPEED": "HIGH"})
                ),
                "Impacts",
            ),
            (lambda c: c.settings.reset(SettingsResetOption()), "Keys"),
            (lambda c: c.settings.set(SettingsSetOption(key="k", value="x" * 4001)), "Value"),
            (lambda c: c.system.change_log_level(SystemChangeLogLevelOption(level="WARN")), "Level"),
            (lambda c: c.system.logs(SystemLogsOption(name="kernel")), "Name"),
            (lambda c: c.user_groups.create(UserGroupsCreateOption(name="g" * 256)), "Name"),
            (lambda c: c.webservices.response_example(WebservicesResponseExampleOption(controller="api/issues")), "Action"),
            (lambda c: c.push.sonarlint_events(PushSonarlintEventsOption(languages=["java"])), "ProjectKeys"),
        ],
    )
    def test_rejected_before_request(self, client: SonarClient, handler, call, field: str) -> None:
        with pytest.raises(ValidationError) as exc_info:
            call(client)

        assert exc_info.value.field == field
        assert exc_info.value.exit_code == EXIT_INVALID_USAGE
        assert handler.requests == []

    def test_message_format(self, client: SonarClient) -> None:
        with pytest.raises(ValidationError) as exc_info:
            client.projects.create(ProjectsCreateOption(project="k"))
        assert str(exc_info.value) == 'validation error for field "Name": is required (missing required parameter)'

    def test_allowed_values_listed(self, client: SonarClient) -> None:
        with pytest.raises(ValidationError, match="must be one of: DEBUG, INFO, TRACE"):
            client.system.change_log_level(SystemChangeLogLevelOption(level="WARN"))


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class TestProjects:
    def test_search(self, client: SonarClient, handler) -> None:
        handler.add_json(
            "/api/projects/search",
            {
                "paging": {"pageIndex": 2, "pageSize": 50, "total": 51},
                "components": [{"key": "core", "name": "Core", "qualifier": "TRK", "visibility": "public"}],
            },
        )

        result, _ = client.projects.search(ProjectsSearchOption(query="co", qualifiers=["TRK", "APP"], page=2, page_size=50))

        assert handler.last.method == "GET"
        assert _query(handler.last) == [("p", "2"), ("ps", "50"), ("q", "co"), ("qualifiers", "TRK,APP")]
        assert result.components[0].key == "core"
        assert result.paging.page_index == 2

    def test_create(self, client: SonarClient, handler) -> None:
        handler.add_json("/api/projects/create", {"project": {"key": "k", "name": "n", "qualifier": "TRK"}})

        result, _ = client.projects.create(ProjectsCreateOption(name="n", project="k"))

        assert handler.last.method == "POST"
        assert dict(_query(handler.last)) == {"name": "n", "project": "k"}
        assert result.project.qualifier == "TRK"

    def test_update_key_uses_from_parameter(self, client: SonarClient, handler) -> None:
        handler.add("/api/projects/update_key", lambda request: httpx.Response(204))

        response = client.projects.update_key(ProjectsUpdateKeyOption(from_="old", to="new"))

        assert response.status_code == 204
        assert dict(_query(handler.last)) == {"from": "old", "to": "new"}


class TestIssues:
    def test_search_with_filters(self, client: SonarClient, handler) -> None:
        handler.add_json("/api/issues/search", {"issues": [{"key": "AX1"}], "paging": {"pageIndex": 1, "pageSize": 100, "total": 1}})

        result, _ = client.issues.search(
            IssuesSearchOption(projects=["core"], severities=["MAJOR", "BLOCKER"], impact_severities=["HIGH"])
        )

        query = dict(_query(handler.last))
        assert query["projects"] == "core"
        assert query["severities"] == "MAJOR,BLOCKER"
        assert query["impactSeverities"] == "HIGH"
        assert result.issues[0].key == "AX1"

    def test_list_inline_pagination(self, client: SonarClient, handler) -> None:
        handler.add_json("/api/issues/list", {"issues": []})

        client.issues.list(IssuesListOption(project="core", pagination=PaginationArgs(page=3)))

        assert dict(_query(handler.last)) == {"p": "3", "project": "core"}

    def test_assign_is_post(self, client: SonarClient, handler) -> None:
        handler.add_json("/api/issues/assign", {"issue": {"key": "AX1", "assignee": "bob"}})

        result, response = client.issues.assign(IssuesAssignOption(issue="AX1", assignee="bob"))

        assert handler.last.method == "POST"
        assert response.status_code == 200
        assert result.issue.key == "AX1"


class TestHotspots:
    def test_pull_returns_bytes(self, client: SonarClient, handler) -> None:
        handler.add("/api/hotspots/pull", lambda request: httpx.Response(200, content=b"\x0a\x02ok"))

        data, _ = client.hotspots.pull(HotspotsPullOption(project_key="core", branch_name="main"))

        assert data == b"\x0a\x02ok"
        assert dict(_query(handler.last)) == {"branchName": "main", "projectKey": "core"}


class TestProjectAnalyses:
    def test_search_all_walks_pages(self, client: SonarClient, handler) -> None:
        handler.add_json(
            "/api/project_analyses/search",
            {"analyses": [{"key": "a1"}, {"key": "a2"}], "paging": {"pageIndex": 1, "pageSize": 2, "total": 3}},
        )
        handler.add_json(
            "/api/project_analyses/search",
            {"analyses": [{"key": "a3"}], "paging": {"pageIndex": 2, "pageSize": 2, "total": 3}},
        )

        analyses, _ = client.project_analyses.search_all(ProjectAnalysesSearchOption(project="core", page_size=2))

        assert [a.key for a in analyses] == ["a1", "a2", "a3"]
        pages = [request.url.params["p"] for request in handler.requests]
        assert pages == ["1", "2"]

    def test_search_all_continues_past_empty_page(self, client: SonarClient, handler) -> None:
        for page, keys in ((1, ["a1"]), (2, []), (3, ["a2"])):
            handler.add_json(
                "/api/project_analyses/search",
                {"analyses": [{"key": k} for k in keys], "paging": {"pageIndex": page, "pageSize": 1, "total": 2}},
            )

        analyses, _ = client.project_analyses.search_all(ProjectAnalysesSearchOption(project="core", page_size=1))

        assert [a.key for a in analyses] == ["a1", "a2"]
        assert [request.url.params["p"] for request in handler.requests] == ["1", "2", "3"]

    def test_search_all_default_page_size(self, client: SonarClient, handler) -> None:
        handler.add_json("/api/project_analyses/search", {"analyses": [], "paging": {"pageIndex": 1, "pageSize": 100, "total": 0}})

        analyses, _ = client.project_analyses.search_all(ProjectAnalysesSearchOption(project="core"))

        assert analyses == []
        assert handler.last.url.params["ps"] == "100"

    def test_accepts_datetime(self, client: SonarClient, handler) -> None:
        handler.add_json("/api/project_analyses/search", {"analyses": []})
        client.project_analyses.search(ProjectAnalysesSearchOption(project="core", from_="2024-01-01T00:00:00+0000"))
        assert handler.last.url.params["from"] == "2024-01-01T00:00:00+0000"


class TestQualityprofiles:
    def test_activate_rule_encodes_maps(self, client: SonarClient, handler) -> None:
        handler.add("/api/qualityprofiles/activate_rule", lambda request: httpx.Response(204))

        client.qualityprofiles.activate_rule(
            QualityprofilesActivateRuleOption(key="k", rule="java:S1", params={"max": "200", "min": "10"})
        )

        query = dict(_query(handler.last))
        assert query["params"] == "max=200;min=10"
        assert "impacts" not in query


class TestSettings:
    def test_set_multi_value(self, client: SonarClient, handler) -> None:
        handler.add("/api/settings/set", lambda request: httpx.Response(204))

        client.settings.set(SettingsSetOption(key="sonar.exclusions", values=["a/**", "b/**"]))

        assert _query(handler.last) == [("key", "sonar.exclusions"), ("values", "a/**"), ("values", "b/**")]

    def test_reset_keys(self, client: SonarClient, handler) -> None:
        handler.add("/api/settings/reset", lambda request: httpx.Response(204))
        client.settings.reset(SettingsResetOption(keys=["a", "b"]))
        assert dict(_query(handler.last)) == {"keys": "a,b"}


class TestSystem:
    def test_status(self, client: SonarClient, handler) -> None:
        handler.add_json("/api/system/status", {"id": "x", "status": "UP", "version": "10.4"})
        status, _ = client.system.status()
        assert status.status == "UP"

    def test_ping_is_text(self, client: SonarClient, handler) -> None:
        handler.add("/api/system/ping", lambda request: httpx.Response(200, text="pong"))
        text, _ = client.system.ping()
        assert text == "pong"

    def test_restart_no_body(self, client: SonarClient, handler) -> None:
        handler.add("/api/system/restart", lambda request: httpx.Response(200))
        response = client.system.restart()
        assert handler.last.method == "POST"
        assert response.status_code == 200


class TestUserGroups:
    def test_search_tri_state_and_fields(self, client: SonarClient, handler) -> None:
        handler.add_json("/api/user_groups/search", {"groups": [{"name": "devs", "membersCount": 3}], "paging": {"total": 1}})

        result, _ = client.user_groups.search(UserGroupsSearchOption(managed=True, fields=["name", "membersCount"]))

        query = dict(_query(handler.last))
        assert query["managed"] == "true"
        assert query["f"] == "name,membersCount"
        assert result.groups[0].members_count == 3


class TestSmallServices:
    def test_languages(self, client: SonarClient, handler) -> None:
        handler.add_json("/api/languages/list", {"languages": [{"key": "java", "name": "Java"}]})
        result, _ = client.languages.list(LanguagesListOption(query="ja"))
        assert result.languages[0].name == "Java"
        assert dict(_query(handler.last)) == {"q": "ja"}

    def test_server_version(self, client: SonarClient, handler) -> None:
        handler.add("/api/server/version", lambda request: httpx.Response(200, text="10.4.1.88267"))
        version, _ = client.server.version()
        assert version == "10.4.1.88267"

    def test_webservices_list(self, client: SonarClient, handler) -> None:
        handler.add_json("/api/webservices/list", {"webServices": [{"path": "api/issues", "actions": []}]})
        result, _ = client.webservices.list(WebservicesListOption(include_internals=True))
        assert result.webservices[0].path == "api/issues"
        assert dict(_query(handler.last)) == {"include_internals": "true"}


class TestPush:
    def test_sonarlint_events_stream(self, client: SonarClient, handler) -> None:
        handler.add(
            "/api/push/sonarlint_events",
            lambda request: httpx.Response(200, content=b"event: IssueChanged\ndata: {}\n\n"),
        )

        response = client.push.sonarlint_events(PushSonarlintEventsOption(languages=["java"], project_keys=["core"]))
        try:
            assert b"".join(response.iter_bytes()).startswith(b"event: IssueChanged")
        finally:
            response.close()

        assert dict(_query(handler.last)) == {"languages": "java", "projectKeys": "core"}
