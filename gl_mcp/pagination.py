"""Page-by-page accumulation of GitLab listings."""

from __future__ import annotations

import threading
from typing import Callable

from gl_mcp.errors import OperationCancelled
from gl_mcp.models import Page

PageFetcher = Callable[[int], Page]


def paginate(
    fetch_page: PageFetcher, cancel: threading.Event | None = None, operation: str = "paginate"
) -> list[dict]:
    """
    Fetch every page starting at page 1 and return all items in remote order.

    Only a missing next page ends the loop; an empty page that still points to a
    next page is followed. Errors from ``fetch_page`` propagate and whatever was
    accumulated so far is dropped.
    """
    results: list[dict] = []
    page: int | None = 1
    while page is not None:
        if cancel is not None and cancel.is_set():
            raise OperationCancelled(operation)
        batch = fetch_page(page)
        results.extend(batch.items)
        page = batch.next_page
    return results
