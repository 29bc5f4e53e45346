"""Pagination calculator.

Converts a (page, limit) request into an offset/limit window.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class PageSpec:
    """Page requested by a caller.

    Attributes:
        page: Page number (1-indexed); values below 1 are treated as 1.
        limit: Rows per page; 0 or negative returns every matching row.
    """

    page: int = 1
    limit: int = 0


@dataclass(frozen=True)
class PageWindow:
    """Offset/limit applied to the row fetch.

    Attributes:
        offset: Rows to skip, never negative.
        limit: Rows to return, None when unbounded.
    """

    offset: int = 0
    limit: int | None = None

    @property
    def bounded(self) -> bool:
        """Check if the window limits the result set."""
        return self.limit is not None


# No OFFSET/LIMIT: the full filtered result set is returned
UNBOUNDED = PageWindow()


def compute_window(page: int, limit: int) -> PageWindow:
    """Compute the offset/limit window for a page.

    Args:
        page: Requested page; zero and negative pages clamp to page 1.
        limit: Requested page size; ``limit <= 0`` selects ``UNBOUNDED``.

    Returns:
        The page window.
    """
    if limit <= 0:
        return UNBOUNDED

    page = max(page, 1)
    return PageWindow(offset=(page - 1) * limit, limit=limit)
