"""Base class and registry for MCP tools."""

from __future__ import annotations

import argparse
import inspect
import json
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import TYPE_CHECKING, Any

from gl_mcp.pipelines import to_utc, utc_now

if TYPE_CHECKING:
    from gl_mcp.service import GitLabService

# ---------------------------------------------------------------------------
# Tool Registry
# ---------------------------------------------------------------------------

_tool_registry: dict[str, type[Tool]] = {}


def register_tool(name: str):
    """Decorator to register a tool class under its MCP tool name."""

    def decorator(cls):
        _tool_registry[name] = cls
        cls.tool_name = name
        return cls

    return decorator


def get_tool_registry() -> dict[str, type[Tool]]:
    """Get the tool registry."""
    return _tool_registry


# ---------------------------------------------------------------------------
# Tool Base Class
# ---------------------------------------------------------------------------


def to_json(data: Any) -> str:
    return json.dumps(data, indent=2, default=str)


def format_rfc3339(value: datetime) -> str:
    return to_utc(value).strftime("%Y-%m-%dT%H:%M:%SZ")


class Tool(ABC):
    """Base class for all tools. The class docstring is the tool description."""

    tool_name: str = ""

    def __init__(self, service: GitLabService, logger: logging.Logger | None = None):
        self.service = service
        self.logger = logger or logging.getLogger("gl-mcp")

    @classmethod
    def description(cls) -> str:
        return inspect.getdoc(cls) or ""

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        """Add tool-specific CLI arguments."""

    @abstractmethod
    def run(self, **arguments: Any) -> str:
        """Execute the tool and return the text shown to the client."""
        ...

    def run_from_args(self, args: argparse.Namespace) -> str:
        """Call run() with the CLI arguments that match its signature."""
        accepted = inspect.signature(self.run).parameters
        return self.run(**{k: v for k, v in vars(args).items() if k in accepted})

    def now(self) -> datetime:
        clock = getattr(self.service, "clock", None)
        return to_utc(clock() if clock else utc_now())
