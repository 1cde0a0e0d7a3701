"""Higher-level GitLab operations backing the MCP tools."""

from __future__ import annotations

import logging
import threading
from datetime import datetime

import requests

from gl_mcp.cleanup import PipelineCleaner
from gl_mcp.client import GitLabClient
from gl_mcp.errors import GitLabOperationError, require_identifier
from gl_mcp.hierarchy import HierarchyWalker
from gl_mcp.models import DeletionOutcome, PipelineSummary, Project, Subgroup
from gl_mcp.pipelines import Clock, PipelineFilter


class GitLabService:
    """Wraps a GitLabClient; every call gets its own walker/filter/cleaner."""

    def __init__(self, client: GitLabClient, logger: logging.Logger | None = None, clock: Clock | None = None):
        self.client = client
        self.logger = logger or logging.getLogger("gl-mcp")
        self.clock = clock

    def list_group_projects_all(
        self, group_id_or_path: str, archived: bool = False, cancel: threading.Event | None = None
    ) -> list[Project]:
        return HierarchyWalker(self.client, self.logger, cancel).list_all_projects(group_id_or_path, archived)

    def list_group_projects(self, group_id_or_path: str, cancel: threading.Event | None = None) -> list[Project]:
        return HierarchyWalker(self.client, self.logger, cancel).list_direct_projects(group_id_or_path)

    def list_group_subgroups(self, group_id_or_path: str, cancel: threading.Event | None = None) -> list[Subgroup]:
        return HierarchyWalker(self.client, self.logger, cancel).list_subgroups(group_id_or_path)

    def list_old_pipelines(
        self, project_id_or_path: str, before: datetime, cancel: threading.Event | None = None
    ) -> list[PipelineSummary]:
        return PipelineFilter(self.client, self.clock, cancel).list_old_pipelines(project_id_or_path, before)

    def delete_old_pipelines(
        self, project_id_or_path: str, before: datetime, cancel: threading.Event | None = None
    ) -> DeletionOutcome:
        cleaner = PipelineCleaner(
            self.client, PipelineFilter(self.client, self.clock, cancel), logger=self.logger, cancel=cancel
        )
        return cleaner.delete_old_pipelines(project_id_or_path, before)

    def archive_project(self, project_id_or_path: str) -> dict:
        project_id_or_path = require_identifier(project_id_or_path, "project_id_or_path")
        try:
            return self.client.archive_project(project_id_or_path)
        except requests.RequestException as e:
            raise GitLabOperationError("archive project", e) from e

    def get_project(self, project_id_or_path: str) -> dict:
        project_id_or_path = require_identifier(project_id_or_path, "project_id_or_path")
        try:
            return self.client.get_project(project_id_or_path)
        except requests.RequestException as e:
            raise GitLabOperationError("get project", e) from e
