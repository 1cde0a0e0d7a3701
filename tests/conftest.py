"""Shared test fixtures for gl-mcp tests."""

import logging
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from gl_mcp.client import GitLabClient
from gl_mcp.service import GitLabService

# Constants for use in tests - pytest makes conftest.py fixtures available,
# but these constants need to be imported directly from tests
MOCK_GITLAB_URL = "https://gitlab.example.com"
MOCK_API_URL = f"{MOCK_GITLAB_URL}/api/v4"
FIXED_NOW = datetime(2026, 6, 15, 12, 0, 0, tzinfo=timezone.utc)


def iso(value: datetime) -> str:
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.000Z")


def make_pipeline(pipeline_id: int, created_at: datetime | None, /, **overrides) -> dict[str, Any]:
    """Pipeline JSON as returned by GET /projects/:id/pipelines."""
    data = {
        "id": pipeline_id,
        "iid": pipeline_id % 1000,
        "project_id": 42,
        "status": "success",
        "source": "push",
        "ref": "main",
        "sha": f"sha{pipeline_id}",
        "web_url": f"{MOCK_GITLAB_URL}/group/project/-/pipelines/{pipeline_id}",
        "created_at": iso(created_at) if created_at else None,
        "updated_at": iso(created_at) if created_at else None,
    }
    data.update(overrides)
    return data


@pytest.fixture
def mock_client():
    """GitLabClient pointing at mock server."""
    return GitLabClient(MOCK_GITLAB_URL, "test-token", max_retries=0)


@pytest.fixture
def clock():
    return lambda: FIXED_NOW


@pytest.fixture
def test_logger():
    """Logger that propagates to the root logger so caplog sees it."""
    return logging.getLogger("gl-mcp-tests")


@pytest.fixture
def service(mock_client, clock, test_logger):
    return GitLabService(mock_client, logger=test_logger, clock=clock)


@pytest.fixture
def root_group() -> dict[str, Any]:
    return {"id": 1, "name": "Org", "path": "org", "full_path": "org", "web_url": f"{MOCK_GITLAB_URL}/org"}


@pytest.fixture
def three_level_hierarchy() -> dict[str, Any]:
    """org -> team-a -> team-a/infra, org -> team-b."""
    return {
        "direct_subgroups": [
            {
                "id": 2,
                "name": "Team A",
                "path": "team-a",
                "full_path": "org/team-a",
                "web_url": f"{MOCK_GITLAB_URL}/org/team-a",
            },
            {
                "id": 3,
                "name": "Team B",
                "path": "team-b",
                "full_path": "org/team-b",
                "web_url": f"{MOCK_GITLAB_URL}/org/team-b",
            },
        ],
        "descendants": [
            {
                "id": 2,
                "name": "Team A",
                "path": "team-a",
                "full_path": "org/team-a",
                "web_url": f"{MOCK_GITLAB_URL}/org/team-a",
            },
            {
                "id": 4,
                "name": "Infra",
                "path": "infra",
                "full_path": "org/team-a/infra",
                "web_url": f"{MOCK_GITLAB_URL}/org/team-a/infra",
            },
            {
                "id": 3,
                "name": "Team B",
                "path": "team-b",
                "full_path": "org/team-b",
                "web_url": f"{MOCK_GITLAB_URL}/org/team-b",
            },
        ],
    }


def make_project(project_id: int, path_with_namespace: str) -> dict[str, Any]:
    path = path_with_namespace.rsplit("/", 1)[-1]
    return {
        "id": project_id,
        "name": path,
        "path": path,
        "path_with_namespace": path_with_namespace,
        "web_url": f"{MOCK_GITLAB_URL}/{path_with_namespace}",
        "http_url_to_repo": f"{MOCK_GITLAB_URL}/{path_with_namespace}.git",
    }


def days_ago(days: float) -> datetime:
    return FIXED_NOW - timedelta(days=days)
