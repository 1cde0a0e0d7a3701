"""Group hierarchy traversal: direct projects, subgroups and everything below."""

from __future__ import annotations

import logging
import threading
from functools import partial

import requests

from gl_mcp.client import GitLabClient
from gl_mcp.errors import GitLabOperationError, require_identifier
from gl_mcp.models import Group, Project, Subgroup
from gl_mcp.pagination import paginate


class HierarchyWalker:
    """
    Collect projects and subgroups under a GitLab group.

    The tree is never materialised: GitLab's descendant_groups listing already
    returns every nested subgroup flat, so the walk is one listing for the
    descendants plus one project listing per descendant.
    """

    def __init__(
        self,
        client: GitLabClient,
        logger: logging.Logger | None = None,
        cancel: threading.Event | None = None,
    ):
        self.client = client
        self.logger = logger or logging.getLogger("gl-mcp")
        self.cancel = cancel

    def resolve_group(self, group_id_or_path: str | int) -> Group:
        group_id_or_path = require_identifier(group_id_or_path, "group_id_or_path")
        try:
            return Group.from_api(self.client.get_group(group_id_or_path))
        except requests.RequestException as e:
            raise GitLabOperationError("get group", e) from e

    def _project_items(self, group_id: int, archived: bool | None, operation: str) -> list[dict]:
        return paginate(
            partial(self.client.group_projects_page, group_id, archived=archived),
            cancel=self.cancel,
            operation=operation,
        )

    def list_all_projects(self, group_id_or_path: str | int, archived_only: bool = False) -> list[Project]:
        """
        List the group's direct projects followed by the projects of every descendant subgroup.

        ``archived_only`` narrows both listings to archived projects; when it is
        false archived and active projects are returned alike. A subgroup whose
        projects cannot be listed is logged and skipped.
        """
        group = self.resolve_group(group_id_or_path)
        archived = True if archived_only else None

        try:
            direct = self._project_items(group.id, archived, "list group projects")
        except requests.RequestException as e:
            raise GitLabOperationError("list group projects", e) from e

        projects = [Project.from_api(item, group_path=group.path) for item in direct]

        try:
            descendants = paginate(
                partial(self.client.descendant_groups_page, group.id),
                cancel=self.cancel,
                operation="list descendant groups",
            )
        except requests.RequestException as e:
            raise GitLabOperationError("list descendant groups", e) from e

        for subgroup in descendants:
            full_path = subgroup.get("full_path", "")
            try:
                items = self._project_items(subgroup["id"], archived, "list subgroup projects")
            except requests.RequestException as e:
                self.logger.warning(
                    f"error listing projects for subgroup {full_path}: {e}",
                    extra={"event": {"event": "subgroup_skipped", "subgroup": full_path, "error": str(e)}},
                )
                continue

            projects.extend(
                Project.from_api(item, group_path=subgroup.get("path", ""), subgroup_full_path=full_path)
                for item in items
            )

        return projects

    def list_direct_projects(self, group_id_or_path: str | int) -> list[Project]:
        group = self.resolve_group(group_id_or_path)
        try:
            items = self._project_items(group.id, None, "list group projects")
        except requests.RequestException as e:
            raise GitLabOperationError("list group projects", e) from e
        return [Project.from_api(item, group_path=group.path) for item in items]

    def list_subgroups(self, group_id_or_path: str | int) -> list[Subgroup]:
        """Immediate children only, unlike the descendant walk in list_all_projects."""
        group = self.resolve_group(group_id_or_path)
        try:
            items = paginate(
                partial(self.client.subgroups_page, group.id),
                cancel=self.cancel,
                operation="list subgroups",
            )
        except requests.RequestException as e:
            raise GitLabOperationError("list subgroups", e) from e
        return [Subgroup.from_api(item, parent_id=group.id) for item in items]
