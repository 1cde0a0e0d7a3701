"""GitLab API client with pagination and retry support."""

from __future__ import annotations

import logging
import time
import urllib.parse
from datetime import datetime
from typing import Any

import requests

from gl_mcp.errors import InvalidArgumentError
from gl_mcp.models import (
    API_V4,
    DEFAULT_MAX_RETRIES,
    PER_PAGE,
    RETRY_BACKOFF_FACTOR,
    RETRYABLE_STATUS_CODES,
    Page,
    format_timestamp,
)


def extract_path(value: str | int) -> str:
    """
    Normalize a project/group reference to an ID or namespace path.

    Accepts numeric IDs, bare paths (``org/team/project``) and GitLab web URLs
    (``https://gitlab.com/org/team/project/-/pipelines``).
    """
    value = str(value).strip()
    parsed = urllib.parse.urlparse(value)
    if parsed.scheme and parsed.netloc:
        path = parsed.path.strip("/")
        # Strip common suffixes
        for suffix in ("/-/", "/-", ".git"):
            if suffix in path:
                path = path[: path.index(suffix)]
        return path
    return value.strip("/")


def encode_id(value: str | int) -> str:
    """URL-encode an ID or namespace path for use in an API path segment."""
    return urllib.parse.quote(extract_path(value), safe="")


class GitLabClient:
    """Thin wrapper around GitLab REST API v4 with pagination support and retry logic."""

    def __init__(self, base_url: str, token: str, max_retries: int = DEFAULT_MAX_RETRIES):
        token = (token or "").strip()
        if not token:
            raise InvalidArgumentError("gitlab token cannot be empty")
        self.base_url = base_url.rstrip("/")
        self.api_url = f"{self.base_url}{API_V4}"
        self.session = requests.Session()
        self.session.headers.update(
            {
                "PRIVATE-TOKEN": token,
                "Content-Type": "application/json",
            }
        )
        self.max_retries = max_retries
        self.logger = logging.getLogger("gl-mcp")

    def _request(self, method: str, endpoint: str, **kwargs) -> requests.Response:
        """Make an HTTP request with retry logic for transient failures."""
        url = f"{self.api_url}{endpoint}"
        last_exception: Exception | None = None

        for attempt in range(self.max_retries + 1):
            try:
                self.logger.debug(
                    f"{method.upper()} {url} {kwargs.get('params', '')} "
                    f"(attempt {attempt + 1}/{self.max_retries + 1})"
                )
                resp = self.session.request(method, url, **kwargs)

                # Retry on rate limit or server errors
                if resp.status_code in RETRYABLE_STATUS_CODES and attempt < self.max_retries:
                    wait_time = self._calculate_backoff(resp, attempt)
                    self.logger.warning(f"Retryable error {resp.status_code}, waiting {wait_time:.1f}s before retry")
                    time.sleep(wait_time)
                    continue

                if resp.status_code >= 400:
                    self.logger.debug(f"API error {resp.status_code}: {resp.text[:500]}")
                resp.raise_for_status()
                return resp

            except requests.exceptions.ConnectionError as e:
                last_exception = e
                if attempt < self.max_retries:
                    wait_time = RETRY_BACKOFF_FACTOR * (2**attempt)
                    self.logger.warning(f"Connection error, retrying in {wait_time:.1f}s: {e}")
                    time.sleep(wait_time)
                    continue
                raise

        if last_exception:
            raise last_exception
        raise RuntimeError("Unexpected retry loop exit")

    def _calculate_backoff(self, resp: requests.Response, attempt: int) -> float:
        """Calculate backoff time, respecting Retry-After header for 429s."""
        if resp.status_code == 429:
            retry_after = resp.headers.get("Retry-After")
            if retry_after:
                try:
                    return float(retry_after)
                except ValueError:
                    pass  # Fall through to exponential backoff
        return RETRY_BACKOFF_FACTOR * (2**attempt)

    def get(self, endpoint: str, params: dict | None = None) -> Any:
        return self._request("GET", endpoint, params=params).json()

    def post(self, endpoint: str, data: dict | None = None) -> Any:
        return self._request("POST", endpoint, json=data).json()

    def delete(self, endpoint: str, params: dict | None = None) -> requests.Response:
        return self._request("DELETE", endpoint, params=params)

    # -- Pagination --

    def get_page(self, endpoint: str, page: int, params: dict | None = None) -> Page:
        """Fetch a single page; the next page comes from the X-Next-Page header."""
        params = dict(params or {})
        params["per_page"] = PER_PAGE
        params["page"] = page
        resp = self._request("GET", endpoint, params=params)
        next_page = (resp.headers.get("x-next-page") or "").strip()
        return Page(items=resp.json() or [], next_page=int(next_page) if next_page else None)

    # -- Groups --

    def get_group(self, group_id_or_path: str | int) -> dict:
        return self.get(f"/groups/{encode_id(group_id_or_path)}", params={"with_projects": "false"})

    def group_projects_page(self, group_id: int, page: int, archived: bool | None = None) -> Page:
        params: dict[str, Any] = {"include_subgroups": "false"}
        if archived is not None:
            params["archived"] = str(archived).lower()
        return self.get_page(f"/groups/{group_id}/projects", page, params=params)

    def descendant_groups_page(self, group_id: int, page: int) -> Page:
        return self.get_page(f"/groups/{group_id}/descendant_groups", page)

    def subgroups_page(self, group_id: int, page: int) -> Page:
        return self.get_page(f"/groups/{group_id}/subgroups", page)

    # -- Projects --

    def get_project(self, project_id_or_path: str | int) -> dict:
        """Get project details (with statistics when the token may see them)."""
        return self.get(f"/projects/{encode_id(project_id_or_path)}", params={"statistics": "true"})

    def archive_project(self, project_id_or_path: str | int) -> dict:
        return self.post(f"/projects/{encode_id(project_id_or_path)}/archive")

    # -- Pipelines --

    def project_pipelines_page(
        self,
        project_id_or_path: str | int,
        page: int,
        created_before: datetime | None = None,
        order_by: str = "created_at",
        sort: str = "asc",
    ) -> Page:
        params: dict[str, Any] = {"order_by": order_by, "sort": sort}
        if created_before is not None:
            params["created_before"] = format_timestamp(created_before)
        return self.get_page(f"/projects/{encode_id(project_id_or_path)}/pipelines", page, params=params)

    def delete_pipeline(self, project_id_or_path: str | int, pipeline_id: int) -> requests.Response:
        return self.delete(f"/projects/{encode_id(project_id_or_path)}/pipelines/{pipeline_id}")
