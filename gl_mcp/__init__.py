"""
gl-mcp: a Model Context Protocol server for GitLab group and pipeline housekeeping.

Lists the projects of a group hierarchy, lists direct subgroups, archives
projects, and finds or bulk-deletes pipelines older than an age threshold.

Environment:
    GITLAB_ACCESS_TOKEN - GitLab Personal Access Token (required)
    GITLAB_SERVER_URL   - GitLab instance URL (default: https://gitlab.com)
"""

from gl_mcp.cleanup import PipelineCleaner
from gl_mcp.client import GitLabClient, encode_id, extract_path
from gl_mcp.errors import (
    GitLabMCPError,
    GitLabOperationError,
    InvalidArgumentError,
    OperationCancelled,
    require_identifier,
)
from gl_mcp.hierarchy import HierarchyWalker
from gl_mcp.models import (
    DEFAULT_MAX_RETRIES,
    PER_PAGE,
    RETRY_BACKOFF_FACTOR,
    RETRYABLE_STATUS_CODES,
    DeletionFailure,
    DeletionOutcome,
    Group,
    Page,
    PipelineSummary,
    Project,
    Subgroup,
)
from gl_mcp.pagination import paginate
from gl_mcp.pipelines import PipelineFilter, cutoff_for_years, pipeline_age
from gl_mcp.service import GitLabService

__version__ = "1.0.0"
__all__ = [
    "__version__",
    "DEFAULT_MAX_RETRIES",
    "PER_PAGE",
    "RETRY_BACKOFF_FACTOR",
    "RETRYABLE_STATUS_CODES",
    "DeletionFailure",
    "DeletionOutcome",
    "GitLabClient",
    "GitLabMCPError",
    "GitLabOperationError",
    "GitLabService",
    "Group",
    "HierarchyWalker",
    "InvalidArgumentError",
    "OperationCancelled",
    "Page",
    "PipelineCleaner",
    "PipelineFilter",
    "PipelineSummary",
    "Project",
    "Subgroup",
    "cutoff_for_years",
    "encode_id",
    "extract_path",
    "paginate",
    "pipeline_age",
    "require_identifier",
]
