"""Data models and constants for gl-mcp."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_GITLAB_URL = "https://gitlab.com"
API_V4 = "/api/v4"
PER_PAGE = 100

# Retry configuration
DEFAULT_MAX_RETRIES = 3
RETRY_BACKOFF_FACTOR = 0.5  # seconds
RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}

SERVER_NAME = "GitLab Project Manager"
SERVER_VERSION = "1.0.0"
DEFAULT_HTTP_ADDR = ":8000"

# Age value for pipelines without a usable creation timestamp
AGE_UNKNOWN = -1

_FRACTION = re.compile(r"\.(\d+)(?=[+-]\d{2}:\d{2}$|$)")


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse a GitLab ISO-8601 timestamp into an aware UTC datetime."""
    if not value:
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    # fromisoformat before 3.11 only takes 3 or 6 fractional digits
    value = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), value)
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_timestamp(value: datetime | None) -> str | None:
    if value is None:
        return None
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


# ---------------------------------------------------------------------------
# Data Classes
# ---------------------------------------------------------------------------


@dataclass
class Page:
    """One page of a listing. ``next_page is None`` is the only end-of-pages signal."""

    items: list[dict]
    next_page: int | None = None


@dataclass
class Group:
    """Resolved GitLab group, the root of a traversal."""

    id: int
    path: str
    full_path: str
    name: str = ""
    web_url: str = ""

    @classmethod
    def from_api(cls, data: dict) -> Group:
        return cls(
            id=data["id"],
            path=data.get("path", ""),
            full_path=data.get("full_path", data.get("path", "")),
            name=data.get("name", ""),
            web_url=data.get("web_url", ""),
        )


@dataclass
class Project:
    """Project as reported to MCP clients."""

    id: int
    name: str
    path: str
    path_with_namespace: str
    web_url: str
    clone_url: str
    group_path: str
    is_subgroup_project: bool = False
    subgroup_full_path: str = ""

    @classmethod
    def from_api(cls, data: dict, group_path: str, subgroup_full_path: str | None = None) -> Project:
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            path=data.get("path", ""),
            path_with_namespace=data.get("path_with_namespace", ""),
            web_url=data.get("web_url", ""),
            clone_url=data.get("http_url_to_repo", ""),
            group_path=group_path,
            is_subgroup_project=subgroup_full_path is not None,
            subgroup_full_path=subgroup_full_path or "",
        )

    def to_dict(self) -> dict:
        d = {
            "id": self.id,
            "name": self.name,
            "path": self.path,
            "path_with_namespace": self.path_with_namespace,
            "web_url": self.web_url,
            "clone_url": self.clone_url,
            "group_path": self.group_path,
            "is_subgroup_project": self.is_subgroup_project,
        }
        if self.subgroup_full_path:
            d["subgroup_full_path"] = self.subgroup_full_path
        return d


@dataclass
class Subgroup:
    id: int
    name: str
    path: str
    full_path: str
    web_url: str
    parent_id: int

    @classmethod
    def from_api(cls, data: dict, parent_id: int) -> Subgroup:
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            path=data.get("path", ""),
            full_path=data.get("full_path", ""),
            web_url=data.get("web_url", ""),
            parent_id=parent_id,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "path": self.path,
            "full_path": self.full_path,
            "web_url": self.web_url,
            "parent_id": self.parent_id,
        }


@dataclass
class PipelineSummary:
    """
    Pipeline metadata plus derived age.

    Both ages are AGE_UNKNOWN when created_at is missing or in the future,
    otherwise both are non-negative.
    """

    id: int
    iid: int
    project_id: int
    status: str
    source: str
    ref: str
    sha: str
    web_url: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    age_days: int = AGE_UNKNOWN
    age_years: float = AGE_UNKNOWN

    @property
    def age_known(self) -> bool:
        return self.age_days != AGE_UNKNOWN

    def to_dict(self) -> dict:
        d: dict[str, Any] = {
            "id": self.id,
            "iid": self.iid,
            "project_id": self.project_id,
            "status": self.status,
            "source": self.source,
            "ref": self.ref,
            "sha": self.sha,
            "web_url": self.web_url,
        }
        if self.created_at is not None:
            d["created_at"] = format_timestamp(self.created_at)
        if self.updated_at is not None:
            d["updated_at"] = format_timestamp(self.updated_at)
        d["age_days"] = self.age_days
        d["age_years"] = self.age_years
        return d


@dataclass
class DeletionFailure:
    pipeline_id: int
    error: str

    def to_dict(self) -> dict:
        return {"pipeline_id": self.pipeline_id, "error": self.error}


@dataclass
class DeletionOutcome:
    """Accounting of a bulk pipeline deletion."""

    total_candidates: int
    deleted_ids: list[int] = field(default_factory=list)
    failed: list[DeletionFailure] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return len(self.deleted_ids) + len(self.failed) == self.total_candidates

    def to_dict(self) -> dict:
        d: dict[str, Any] = {
            "total_candidates": self.total_candidates,
            "deleted_count": len(self.deleted_ids),
            "deleted_ids": list(self.deleted_ids),
        }
        if self.failed:
            d["failed_deletions"] = [f.to_dict() for f in self.failed]
        if not self.complete:
            d["complete"] = False
        return d
