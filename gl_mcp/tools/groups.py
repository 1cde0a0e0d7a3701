"""Group listing tools."""

from __future__ import annotations

import argparse

from gl_mcp.errors import GitLabMCPError
from gl_mcp.tools.base import Tool, register_tool, to_json


def _add_group_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("group_id_or_path", help="GitLab group ID or path")


@register_tool("list_all_group_projects")
class ListAllGroupProjectsTool(Tool):
    """List all projects in a group and its subgroups recursively"""

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        _add_group_argument(parser)
        parser.add_argument(
            "--archived", action="store_true", help="Only list archived projects (default: archived and active)"
        )

    def run(self, group_id_or_path: str, archived: bool = False) -> str:
        try:
            projects = self.service.list_group_projects_all(group_id_or_path, archived)
        except GitLabMCPError as e:
            return f"Error fetching projects: {e}"

        status_text = "archived" if archived else "all"
        return (
            f"Found {len(projects)} {status_text} projects in group {group_id_or_path} and its subgroups:\n\n"
            f"{to_json([p.to_dict() for p in projects])}"
        )


@register_tool("list_direct_group_projects")
class ListDirectGroupProjectsTool(Tool):
    """List only the projects that belong directly to a group (excluding subgroups)"""

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        _add_group_argument(parser)

    def run(self, group_id_or_path: str) -> str:
        try:
            projects = self.service.list_group_projects(group_id_or_path)
        except GitLabMCPError as e:
            return f"Error fetching direct projects: {e}"

        return (
            f"Found {len(projects)} direct projects in group {group_id_or_path}:\n\n"
            f"{to_json([p.to_dict() for p in projects])}"
        )


@register_tool("list_subgroups")
class ListSubgroupsTool(Tool):
    """List all subgroups in a group"""

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        _add_group_argument(parser)

    def run(self, group_id_or_path: str) -> str:
        try:
            subgroups = self.service.list_group_subgroups(group_id_or_path)
        except GitLabMCPError as e:
            return f"Error fetching subgroups: {e}"

        return (
            f"Found {len(subgroups)} subgroups in group {group_id_or_path}:\n\n"
            f"{to_json([s.to_dict() for s in subgroups])}"
        )
