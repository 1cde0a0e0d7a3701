"""Pipeline listing and cleanup tools."""

from __future__ import annotations

import argparse

from gl_mcp.errors import GitLabMCPError, InvalidArgumentError, OperationCancelled, require_identifier
from gl_mcp.pipelines import cutoff_for_years
from gl_mcp.tools.base import Tool, format_rfc3339, register_tool, to_json


def _add_pipeline_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("project_id_or_path", help="GitLab project ID or path with namespace")
    parser.add_argument(
        "--older-than-years",
        dest="older_than_years",
        type=int,
        required=True,
        help="Age threshold in years",
    )


@register_tool("list_old_pipelines")
class ListOldPipelinesTool(Tool):
    """List all pipelines in a project older than the provided age threshold"""

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        _add_pipeline_arguments(parser)

    def run(self, project_id_or_path: str, older_than_years: int) -> str:
        try:
            project_id_or_path = require_identifier(project_id_or_path, "project_id_or_path")
            cutoff = cutoff_for_years(older_than_years, self.now())
        except InvalidArgumentError as e:
            return str(e)

        try:
            pipelines = self.service.list_old_pipelines(project_id_or_path, cutoff)
        except GitLabMCPError as e:
            return f"Error listing old pipelines: {e}"

        if not pipelines:
            return (
                f"No pipelines in project {project_id_or_path} are older than {older_than_years} years "
                f"(cutoff {format_rfc3339(cutoff)})."
            )

        return (
            f"Found {len(pipelines)} pipelines in project {project_id_or_path} created before "
            f"{format_rfc3339(cutoff)} (older than {older_than_years} years):\n\n"
            f"{to_json([p.to_dict() for p in pipelines])}"
        )


@register_tool("delete_old_pipelines")
class DeleteOldPipelinesTool(Tool):
    """Delete all pipelines in a project older than the provided age threshold"""

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        _add_pipeline_arguments(parser)
        parser.add_argument(
            "--confirm", action="store_true", help="Actually delete pipelines; without it nothing is deleted"
        )

    def run(self, project_id_or_path: str, older_than_years: int, confirm: bool = False) -> str:
        try:
            project_id_or_path = require_identifier(project_id_or_path, "project_id_or_path")
            cutoff = cutoff_for_years(older_than_years, self.now())
        except InvalidArgumentError as e:
            return str(e)

        if not confirm:
            return (
                "Deletion not performed: set confirm=true to delete pipelines after reviewing "
                "list_old_pipelines output."
            )

        try:
            outcome = self.service.delete_old_pipelines(project_id_or_path, cutoff)
        except OperationCancelled as e:
            partial = to_json(e.partial.to_dict()) if e.partial else "{}"
            return f"Deletion cancelled before completion:\n\n{partial}"
        except GitLabMCPError as e:
            return f"Error deleting old pipelines: {e}"

        if outcome.total_candidates == 0:
            return (
                f"No pipelines in project {project_id_or_path} are older than {older_than_years} years "
                f"(cutoff {format_rfc3339(cutoff)})."
            )

        result = {
            "project": project_id_or_path,
            "cutoff": format_rfc3339(cutoff),
            "older_than_years": older_than_years,
            **outcome.to_dict(),
        }
        self.logger.info(
            f"Deleted {len(outcome.deleted_ids)}/{outcome.total_candidates} pipelines in {project_id_or_path}"
        )

        header = (
            f"Deleted {len(outcome.deleted_ids)}/{outcome.total_candidates} pipelines older than "
            f"{older_than_years} years in project {project_id_or_path} (cutoff {format_rfc3339(cutoff)})"
        )
        if outcome.failed:
            return f"{header}. Some deletions failed:\n\n{to_json(result)}"
        return f"{header}:\n\n{to_json(result)}"
