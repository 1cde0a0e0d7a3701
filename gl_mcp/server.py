"""MCP server exposing the registered tools over stdio or streamable HTTP."""

from __future__ import annotations

import logging
from typing import Annotated

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from gl_mcp.models import DEFAULT_HTTP_ADDR, SERVER_NAME
from gl_mcp.service import GitLabService
from gl_mcp.tools import get_tool_registry

GroupRef = Annotated[str, Field(description="GitLab group ID or path")]
ProjectRef = Annotated[str, Field(description="GitLab project ID or path with namespace")]


def parse_addr(addr: str) -> tuple[str, int]:
    """Split ``host:port`` (host optional, as in ``:8000``) into its parts."""
    host, _, port = addr.rpartition(":")
    if not port.isdigit():
        raise ValueError(f"invalid listen address: {addr!r}")
    return host or "0.0.0.0", int(port)


def create_server(
    service: GitLabService, addr: str = DEFAULT_HTTP_ADDR, logger: logging.Logger | None = None
) -> FastMCP:
    logger = logger or logging.getLogger("gl-mcp")
    host, port = parse_addr(addr)
    mcp = FastMCP(SERVER_NAME, host=host, port=port)
    registry = get_tool_registry()
    tools = {name: cls(service, logger) for name, cls in registry.items()}

    def describe(name: str) -> str:
        return registry[name].description()

    @mcp.tool(name="health_check", description=describe("health_check"))
    def health_check() -> str:
        return tools["health_check"].run()

    @mcp.tool(name="list_all_group_projects", description=describe("list_all_group_projects"))
    def list_all_group_projects(
        group_id_or_path: GroupRef,
        archived: Annotated[bool, Field(description="Filter by archived status (default: false)")] = False,
    ) -> str:
        return tools["list_all_group_projects"].run(group_id_or_path=group_id_or_path, archived=archived)

    @mcp.tool(name="list_direct_group_projects", description=describe("list_direct_group_projects"))
    def list_direct_group_projects(group_id_or_path: GroupRef) -> str:
        return tools["list_direct_group_projects"].run(group_id_or_path=group_id_or_path)

    @mcp.tool(name="list_subgroups", description=describe("list_subgroups"))
    def list_subgroups(group_id_or_path: GroupRef) -> str:
        return tools["list_subgroups"].run(group_id_or_path=group_id_or_path)

    @mcp.tool(name="archive_project", description=describe("archive_project"))
    def archive_project(project_id_or_path: ProjectRef) -> str:
        return tools["archive_project"].run(project_id_or_path=project_id_or_path)

    @mcp.tool(name="get_project_status", description=describe("get_project_status"))
    def get_project_status(project_id_or_path: ProjectRef) -> str:
        return tools["get_project_status"].run(project_id_or_path=project_id_or_path)

    @mcp.tool(name="list_old_pipelines", description=describe("list_old_pipelines"))
    def list_old_pipelines(
        project_id_or_path: ProjectRef,
        older_than_years: Annotated[
            int,
            Field(description="Age threshold in years; pipelines created before this many years ago will be included"),
        ],
    ) -> str:
        return tools["list_old_pipelines"].run(
            project_id_or_path=project_id_or_path, older_than_years=older_than_years
        )

    @mcp.tool(name="delete_old_pipelines", description=describe("delete_old_pipelines"))
    def delete_old_pipelines(
        project_id_or_path: ProjectRef,
        older_than_years: Annotated[
            int,
            Field(description="Age threshold in years; pipelines created before this many years ago will be deleted"),
        ],
        confirm: Annotated[
            bool, Field(description="Set to true to actually delete pipelines; defaults to false for safety")
        ] = False,
    ) -> str:
        return tools["delete_old_pipelines"].run(
            project_id_or_path=project_id_or_path, older_than_years=older_than_years, confirm=confirm
        )

    for name in registry:
        logger.info(f"Registered MCP tool {name} - {describe(name)}")

    return mcp
