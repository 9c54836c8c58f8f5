"""Scanner bootstrap endpoints (``api/batch``)."""

from __future__ import annotations

from typing import Annotated, Optional

import httpx
from pydantic import BaseModel, Field

from sonarcli.sonar.common import SonarModel
from sonarcli.sonar.query import UrlTag
from sonarcli.sonar.service import Service


class BatchFileOption(BaseModel):
    name: Annotated[str, UrlTag("name,omitempty")] = Field(
        default="", description="File name, e.g. batch-library-2.3.jar"
    )


class BatchProjectOption(BaseModel):
    branch: Annotated[str, UrlTag("branch,omitempty")] = Field(default="", description="Branch key")
    key: Annotated[str, UrlTag("key,omitempty")] = Field(default="", description="Project key")
    profile: Annotated[str, UrlTag("profile,omitempty")] = Field(default="", description="Profile name")
    pull_request: Annotated[str, UrlTag("pullRequest,omitempty")] = Field(
        default="", description="Pull request id"
    )


class BatchFileData(SonarModel):
    hash: Optional[str] = None
    revision: Optional[str] = None


class BatchProject(SonarModel):
    file_data_by_module_and_path: Optional[dict[str, dict[str, BatchFileData]]] = Field(
        default=None, alias="fileDataByModuleAndPath"
    )
    last_analysis_date: Optional[int] = Field(default=None, alias="lastAnalysisDate")
    timestamp: Optional[int] = None


class BatchService(Service):
    """Files and project data used by the scanner to bootstrap an analysis."""

    def file(self, opt: BatchFileOption) -> tuple[Optional[str], httpx.Response]:
        """Download a JAR file required by the scanner."""
        request = self._client.new_request("GET", "batch/file", opt)
        return self._client.do(request, str)

    def index(self) -> tuple[Optional[str], httpx.Response]:
        """List the JAR files to be downloaded by the scanner."""
        request = self._client.new_request("GET", "batch/index")
        return self._client.do(request, str)

    def project(self, opt: BatchProjectOption) -> tuple[Optional[BatchProject], httpx.Response]:
        request = self._client.new_request("GET", "batch/project", opt)
        return self._client.do(request, BatchProject)
