"""CLI entry point for gl-mcp."""

from __future__ import annotations

import argparse
import os
import sys
from typing import Mapping, Sequence

# Ensure all tools are registered by importing the tools package
import gl_mcp.tools  # noqa: F401
from gl_mcp.client import GitLabClient
from gl_mcp.errors import InvalidArgumentError
from gl_mcp.logging_utils import setup_logging
from gl_mcp.models import DEFAULT_GITLAB_URL, DEFAULT_HTTP_ADDR, DEFAULT_MAX_RETRIES
from gl_mcp.server import create_server
from gl_mcp.service import GitLabService
from gl_mcp.tools import get_tool_registry

LEGACY_FLAGS = {"-http": "--http", "-addr": "--addr"}


def normalize_legacy_flags(args: Sequence[str]) -> list[str]:
    """Accept the single-dash -http / -addr spellings."""
    return [LEGACY_FLAGS.get(arg, arg) for arg in args]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gl-mcp",
        description="GitLab MCP server: list group projects and subgroups, archive projects, clean up old pipelines.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment:
    GITLAB_ACCESS_TOKEN - GitLab Personal Access Token (required)
    GITLAB_SERVER_URL   - GitLab instance URL (default: https://gitlab.com)

Examples:
    # Serve MCP over stdio (default)
    gl-mcp

    # Serve MCP over streamable HTTP
    gl-mcp --http --addr 127.0.0.1:8000

    # Run a single tool once
    gl-mcp tool list_old_pipelines myorg/myproject --older-than-years 2
    gl-mcp tool delete_old_pipelines myorg/myproject --older-than-years 2 --confirm
""",
    )
    parser.add_argument("--http", action="store_true", help="Expose the MCP server over HTTP instead of stdio")
    parser.add_argument(
        "--addr", default=DEFAULT_HTTP_ADDR, help=f"HTTP listen address when using --http (default: {DEFAULT_HTTP_ADDR})"
    )
    parser.add_argument("--json", action="store_true", dest="json_output", help="Output logs as JSON lines (to stderr)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--gitlab-url",
        default=None,
        help="GitLab instance URL (default: from GITLAB_SERVER_URL env or https://gitlab.com)",
    )
    parser.add_argument(
        "--max-retries",
        type=int,
        default=DEFAULT_MAX_RETRIES,
        help=f"Maximum retry attempts for transient errors (default: {DEFAULT_MAX_RETRIES})",
    )

    subparsers = parser.add_subparsers(dest="command")
    tool_parser = subparsers.add_parser("tool", help="Run a single tool and print its output")
    tool_subparsers = tool_parser.add_subparsers(dest="tool", required=True, help="Tool to run")

    registry = get_tool_registry()
    for name, tool_cls in sorted(registry.items()):
        sub = tool_subparsers.add_parser(name, help=tool_cls.description())
        tool_cls.add_arguments(sub)

    return parser


def main(argv: Sequence[str] | None = None, environ: Mapping[str, str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(normalize_legacy_flags(sys.argv[1:] if argv is None else argv))
    environ = os.environ if environ is None else environ

    logger = setup_logging(json_mode=args.json_output, verbose=args.verbose)

    token = environ.get("GITLAB_ACCESS_TOKEN", "").strip()
    if not token:
        logger.error("GITLAB_ACCESS_TOKEN environment variable not set")
        return 1
    logger.info("GitLab access token detected")

    gitlab_url = (args.gitlab_url or environ.get("GITLAB_SERVER_URL", "")).strip()
    if not gitlab_url:
        gitlab_url = DEFAULT_GITLAB_URL
        logger.info(f"GITLAB_SERVER_URL not set, defaulting to {gitlab_url}")
    else:
        logger.info(f"Using GitLab server: {gitlab_url}")

    try:
        client = GitLabClient(base_url=gitlab_url, token=token, max_retries=args.max_retries)
    except InvalidArgumentError as e:
        logger.error(f"Failed to create GitLab client: {e}")
        return 1
    service = GitLabService(client, logger=logger)

    if args.command == "tool":
        tool = get_tool_registry()[args.tool](service, logger)
        print(tool.run_from_args(args))
        return 0

    try:
        server = create_server(service, addr=args.addr, logger=logger)
    except ValueError as e:
        logger.error(str(e))
        return 1

    try:
        if args.http:
            logger.info(f"Serving MCP over HTTP on {args.addr}")
            server.run(transport="streamable-http")
        else:
            logger.info("Serving MCP over stdio")
            server.run(transport="stdio")
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130

    return 0


if __name__ == "__main__":
    sys.exit(main())
