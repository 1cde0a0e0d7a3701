"""MCP tools for gl-mcp."""

from gl_mcp.tools.base import Tool, get_tool_registry, register_tool

# Import all tools to register them
from gl_mcp.tools.health import HealthCheckTool
from gl_mcp.tools.groups import ListAllGroupProjectsTool, ListDirectGroupProjectsTool, ListSubgroupsTool
from gl_mcp.tools.projects import ArchiveProjectTool, GetProjectStatusTool
from gl_mcp.tools.pipelines import DeleteOldPipelinesTool, ListOldPipelinesTool

__all__ = [
    "Tool",
    "register_tool",
    "get_tool_registry",
    "HealthCheckTool",
    "ListAllGroupProjectsTool",
    "ListDirectGroupProjectsTool",
    "ListSubgroupsTool",
    "ArchiveProjectTool",
    "GetProjectStatusTool",
    "ListOldPipelinesTool",
    "DeleteOldPipelinesTool",
]
