"""Pagination arithmetic for index queries.

Callers speak in 1-indexed pages; the index speaks in offsets. Page numbers
come straight from user input, so anything below 1 is clamped rather than
rejected.
"""

import math
from dataclasses import dataclass
from typing import Optional

from ...constants import RESULTS_PER_PAGE


@dataclass(frozen=True)
class PageWindow:
    """Offset/limit pair for one page plus the page actually served."""

    offset: int
    limit: int
    page: int


def clamp_page(requested: Optional[int]) -> int:
    if requested is None or requested <= 0:
        return 1
    return requested


def resolve_page(requested: Optional[int], page_size: int = RESULTS_PER_PAGE) -> PageWindow:
    """Translate a requested page into an index window.

    Args:
        requested: Caller-supplied page number (untrusted)
        page_size: Results per page

    Returns:
        PageWindow whose ``page`` must be echoed back to the caller
    """
    page = clamp_page(requested)
    return PageWindow(offset=page_size * (page - 1), limit=page_size, page=page)


def total_pages(total_hits: int, page_size: int = RESULTS_PER_PAGE) -> int:
    """Number of pages needed for ``total_hits`` results (0 when there are none)."""
    if total_hits <= 0:
        return 0
    return math.ceil(total_hits / page_size)
