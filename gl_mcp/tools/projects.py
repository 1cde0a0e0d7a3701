"""Single-project tools."""

from __future__ import annotations

import argparse

from gl_mcp.errors import GitLabMCPError
from gl_mcp.tools.base import Tool, format_rfc3339, register_tool, to_json

STATUS_FIELDS = (
    "id",
    "name",
    "path",
    "path_with_namespace",
    "description",
    "web_url",
    "visibility",
    "archived",
    "created_at",
    "last_activity_at",
    "default_branch",
    "forks_count",
    "star_count",
    "open_issues_count",
    "topics",
    "readme_url",
)


def _add_project_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("project_id_or_path", help="GitLab project ID or path with namespace")


@register_tool("archive_project")
class ArchiveProjectTool(Tool):
    """Archive a GitLab project (requires Owner role or admin permissions)"""

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        _add_project_argument(parser)

    def run(self, project_id_or_path: str) -> str:
        try:
            project = self.service.archive_project(project_id_or_path)
        except GitLabMCPError as e:
            return f"Error archiving project: {e}"

        result = {
            "success": True,
            "project_id": project.get("id"),
            "project_name": project.get("name"),
            "project_path": project.get("path_with_namespace"),
            "archived": project.get("archived"),
            "web_url": project.get("web_url"),
            "archived_timestamp": format_rfc3339(self.now()),
        }
        self.logger.info(f"Archived project {result['project_path']}")
        return f"Project '{result['project_path']}' archived successfully:\n\n{to_json(result)}"


@register_tool("get_project_status")
class GetProjectStatusTool(Tool):
    """Get detailed status and metadata for a single GitLab project"""

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        _add_project_argument(parser)

    def run(self, project_id_or_path: str) -> str:
        try:
            project = self.service.get_project(project_id_or_path)
        except GitLabMCPError as e:
            return f"Error fetching project: {e}"

        result = {key: project.get(key) for key in STATUS_FIELDS}
        result["clone_url_http"] = project.get("http_url_to_repo")
        result["clone_url_ssh"] = project.get("ssh_url_to_repo")

        namespace = project.get("namespace")
        if namespace:
            result["namespace"] = {key: namespace.get(key) for key in ("id", "name", "path", "full_path", "kind")}

        statistics = project.get("statistics")
        if statistics:
            result["size"] = statistics.get("repository_size")
            result["commit_count"] = statistics.get("commit_count")
            result["storage_size"] = statistics.get("storage_size")

        return f"Project status for '{project.get('path_with_namespace')}':\n\n{to_json(result)}"
