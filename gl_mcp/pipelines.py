"""Listing project pipelines older than a cutoff."""

from __future__ import annotations

import threading
from datetime import datetime, timezone
from functools import partial
from typing import Callable

import requests

from gl_mcp.client import GitLabClient
from gl_mcp.errors import GitLabOperationError, InvalidArgumentError, require_identifier
from gl_mcp.models import AGE_UNKNOWN, PipelineSummary, parse_timestamp
from gl_mcp.pagination import paginate

Clock = Callable[[], datetime]

SECONDS_PER_DAY = 86400
DAYS_PER_YEAR = 365.25


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_utc(value: datetime) -> datetime:
    """Naive datetimes are taken to be UTC already."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def pipeline_age(created_at: datetime | None, now: datetime) -> tuple[int, float]:
    """Return (whole days, years to 2 decimals) since created_at, or (-1, -1) if unknown or in the future."""
    if created_at is None:
        return AGE_UNKNOWN, AGE_UNKNOWN

    seconds = (to_utc(now) - to_utc(created_at)).total_seconds()
    if seconds < 0:
        return AGE_UNKNOWN, AGE_UNKNOWN

    days = seconds / SECONDS_PER_DAY
    return int(days), round(days / DAYS_PER_YEAR, 2)


def cutoff_for_years(years: int, now: datetime | None = None) -> datetime:
    """UTC timestamp ``years`` calendar years before now."""
    if years <= 0:
        raise InvalidArgumentError("older_than_years must be greater than zero")
    now = to_utc(now or utc_now())
    if years >= now.year:
        raise InvalidArgumentError(f"older_than_years must be less than {now.year}")
    try:
        return now.replace(year=now.year - years)
    except ValueError:
        # Feb 29 in a non-leap target year
        return now.replace(year=now.year - years, day=28)


class PipelineFilter:
    """Select a project's pipelines created strictly before a cutoff, oldest first."""

    def __init__(
        self,
        client: GitLabClient,
        clock: Clock | None = None,
        cancel: threading.Event | None = None,
    ):
        self.client = client
        self.clock = clock or utc_now
        self.cancel = cancel

    def list_old_pipelines(self, project_id_or_path: str | int, cutoff: datetime) -> list[PipelineSummary]:
        project_id_or_path = require_identifier(project_id_or_path, "project_id_or_path")
        cutoff = to_utc(cutoff)

        try:
            items = paginate(
                partial(self.client.project_pipelines_page, project_id_or_path, created_before=cutoff),
                cancel=self.cancel,
                operation="list project pipelines",
            )
        except requests.RequestException as e:
            raise GitLabOperationError("list project pipelines", e) from e

        now = to_utc(self.clock())
        results = []
        # The server-side created_before filter is not trusted on its own.
        for item in items:
            try:
                created_at = parse_timestamp(item.get("created_at"))
                updated_at = parse_timestamp(item.get("updated_at"))
            except ValueError as e:
                raise GitLabOperationError("list project pipelines", e) from e
            if created_at is None or created_at >= cutoff:
                continue

            age_days, age_years = pipeline_age(created_at, now)
            if age_days == AGE_UNKNOWN:
                continue

            results.append(
                PipelineSummary(
                    id=item["id"],
                    iid=item.get("iid", 0),
                    project_id=item.get("project_id", 0),
                    status=item.get("status", ""),
                    source=item.get("source", ""),
                    ref=item.get("ref", ""),
                    sha=item.get("sha", ""),
                    web_url=item.get("web_url", ""),
                    created_at=created_at,
                    updated_at=updated_at,
                    age_days=age_days,
                    age_years=age_years,
                )
            )

        return results
