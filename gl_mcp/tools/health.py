from __future__ import annotations

from gl_mcp.models import SERVER_NAME, SERVER_VERSION
from gl_mcp.tools.base import Tool, format_rfc3339, register_tool, to_json


@register_tool("health_check")
class HealthCheckTool(Tool):
    """Simple health check to verify the MCP server is working"""

    def run(self) -> str:
        result = {
            "status": "healthy",
            "timestamp": format_rfc3339(self.now()),
            "server": SERVER_NAME,
            "version": SERVER_VERSION,
        }
        return f"Health check successful: {to_json(result)}"
