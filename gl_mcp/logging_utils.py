"""Logging utilities for gl-mcp."""

from __future__ import annotations

import json
import logging
import sys


class StructuredFormatter(logging.Formatter):
    """Formatter that can emit JSON lines when configured."""

    def __init__(self, json_mode: bool = False):
        super().__init__()
        self.json_mode = json_mode

    def format(self, record: logging.LogRecord) -> str:
        if self.json_mode:
            payload = {"level": record.levelname, "message": record.getMessage()}
            event = getattr(record, "event", None)
            if event:
                payload.update(event)
            return json.dumps(payload)
        return f"[{record.levelname:<7}] {record.getMessage()}"


def setup_logging(json_mode: bool = False, verbose: bool = False) -> logging.Logger:
    # stderr only: stdout carries the MCP stdio transport
    logger = logging.getLogger("gl-mcp")
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(StructuredFormatter(json_mode=json_mode))
    logger.handlers = [handler]
    return logger
