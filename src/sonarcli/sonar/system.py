"""System administration endpoints (``api/system``)."""

from __future__ import annotations

from typing import Annotated, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field, JsonValue

from sonarcli.sonar.common import SonarModel, is_value_authorized, validate_required
from sonarcli.sonar.query import UrlTag
from sonarcli.sonar.service import Service

ALLOWED_LOG_LEVELS = frozenset({"TRACE", "DEBUG", "INFO"})
ALLOWED_LOG_NAMES = frozenset({"access", "app", "ce", "deprecation", "es", "web"})


class HealthCause(SonarModel):
    message: Optional[str] = None


class HealthNode(SonarModel):
    causes: Optional[list[HealthCause]] = None
    health: Optional[str] = None
    host: Optional[str] = None
    name: Optional[str] = None
    port: Optional[int] = None
    started_at: Optional[str] = Field(default=None, alias="startedAt")
    type: Optional[str] = None


class SystemHealth(SonarModel):
    causes: Optional[list[HealthCause]] = None
    health: Optional[str] = None
    nodes: Optional[list[HealthNode]] = None


class SystemDbMigrationStatus(SonarModel):
    message: Optional[str] = None
    started_at: Optional[str] = Field(default=None, alias="startedAt")
    state: Optional[str] = None


class SystemMigrateDb(SystemDbMigrationStatus):
    pass


class SystemInfo(SonarModel):
    """Detailed system information.

    The server returns many free-form sections keyed by display names
    (``"Web JVM State"``, ``"Search Indexes"``...); the ones not modelled
    here are kept as extra fields.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    health: Optional[str] = Field(default=None, alias="Health")
    health_causes: Optional[list[JsonValue]] = Field(default=None, alias="Health Causes")
    plugins: Optional[dict[str, str]] = Field(default=None, alias="Plugins")
    system: Optional[dict[str, JsonValue]] = Field(default=None, alias="System")


class SystemStatus(SonarModel):
    id: Optional[str] = None
    status: Optional[str] = None
    version: Optional[str] = None


class SystemChangeLogLevelOption(BaseModel):
    level: Annotated[str, UrlTag("level,omitempty")] = Field(
        default="", description="New log level: TRACE, DEBUG or INFO"
    )


class SystemLogsOption(BaseModel):
    name: Annotated[str, UrlTag("name,omitempty")] = Field(
        default="", description="Process to get logs from: access, app, ce, deprecation, es, web"
    )


class SystemService(Service):
    """Server health, status, logs and lifecycle."""

    def validate_change_log_level_opt(self, opt: SystemChangeLogLevelOption) -> None:
        validate_required(opt.level, "Level")
        is_value_authorized(opt.level, ALLOWED_LOG_LEVELS, "Level")

    def validate_logs_opt(self, opt: SystemLogsOption) -> None:
        is_value_authorized(opt.name, ALLOWED_LOG_NAMES, "Name")

    # ------------------------------------------------------------------ #

    def change_log_level(self, opt: SystemChangeLogLevelOption) -> httpx.Response:
        """Temporarily change the log level; it is reset on restart."""
        self.validate_change_log_level_opt(opt)
        _, response = self._client.do(self._client.new_request("POST", "system/change_log_level", opt))
        return response

    def db_migration_status(self) -> tuple[Optional[SystemDbMigrationStatus], httpx.Response]:
        request = self._client.new_request("GET", "system/db_migration_status")
        return self._client.do(request, SystemDbMigrationStatus)

    def health(self) -> tuple[Optional[SystemHealth], httpx.Response]:
        """Return the health status: GREEN, YELLOW or RED."""
        return self._client.do(self._client.new_request("GET", "system/health"), SystemHealth)

    def info(self) -> tuple[Optional[SystemInfo], httpx.Response]:
        return self._client.do(self._client.new_request("GET", "system/info"), SystemInfo)

    def liveness(self) -> httpx.Response:
        """Check that the web process is alive; answers 204 without a body."""
        _, response = self._client.do(self._client.new_request("GET", "system/liveness"))
        return response

    def logs(self, opt: SystemLogsOption) -> tuple[Optional[str], httpx.Response]:
        self.validate_logs_opt(opt)
        return self._client.do(self._client.new_request("GET", "system/logs", opt), str)

    def migrate_db(self) -> tuple[Optional[SystemMigrateDb], httpx.Response]:
        return self._client.do(self._client.new_request("POST", "system/migrate_db"), SystemMigrateDb)

    def ping(self) -> tuple[Optional[str], httpx.Response]:
        """Answer ``pong`` as plain text."""
        return self._client.do(self._client.new_request("GET", "system/ping"), str)

    def restart(self) -> httpx.Response:
        _, response = self._client.do(self._client.new_request("POST", "system/restart"))
        return response

    def status(self) -> tuple[Optional[SystemStatus], httpx.Response]:
        return self._client.do(self._client.new_request("GET", "system/status"), SystemStatus)
