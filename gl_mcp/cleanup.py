"""Bulk deletion of old pipelines."""

from __future__ import annotations

import logging
import threading
from datetime import datetime

import requests

from gl_mcp.client import GitLabClient
from gl_mcp.errors import OperationCancelled
from gl_mcp.models import DeletionFailure, DeletionOutcome
from gl_mcp.pipelines import PipelineFilter


class PipelineCleaner:
    """
    Delete every pipeline the filter selects, one call at a time, oldest first.

    A failed delete is recorded in the outcome and the batch carries on; only a
    failure to list the candidates is fatal. Confirmation is left to the caller.
    """

    def __init__(
        self,
        client: GitLabClient,
        pipeline_filter: PipelineFilter,
        logger: logging.Logger | None = None,
        cancel: threading.Event | None = None,
    ):
        self.client = client
        self.pipeline_filter = pipeline_filter
        self.logger = logger or logging.getLogger("gl-mcp")
        self.cancel = cancel

    def delete_old_pipelines(self, project_id_or_path: str | int, cutoff: datetime) -> DeletionOutcome:
        candidates = self.pipeline_filter.list_old_pipelines(project_id_or_path, cutoff)
        outcome = DeletionOutcome(total_candidates=len(candidates))

        for pipeline in candidates:
            if self.cancel is not None and self.cancel.is_set():
                raise OperationCancelled("delete old pipelines", partial=outcome)

            try:
                self.client.delete_pipeline(project_id_or_path, pipeline.id)
            except requests.RequestException as e:
                self.logger.warning(
                    f"error deleting pipeline {pipeline.id} in project {project_id_or_path}: {e}",
                    extra={
                        "event": {
                            "event": "pipeline_delete_failed",
                            "project": str(project_id_or_path),
                            "pipeline_id": pipeline.id,
                            "error": str(e),
                        }
                    },
                )
                outcome.failed.append(DeletionFailure(pipeline_id=pipeline.id, error=str(e)))
                continue

            outcome.deleted_ids.append(pipeline.id)

        return outcome
