"""Tests for the pagination calculator."""

import pytest

from product_svc.querying.pagination import UNBOUNDED, PageWindow, compute_window


class TestComputeWindow:
    """Tests for compute_window."""

    @pytest.mark.parametrize("limit", [0, -1, -50])
    def test_non_positive_limit_is_unbounded(self, limit: int) -> None:
        """limit <= 0 selects the unbounded window."""
        window = compute_window(3, limit)
        assert window is UNBOUNDED
        assert window.bounded is False
        assert window.offset == 0
        assert window.limit is None

    @pytest.mark.parametrize(
        ("page", "limit", "offset"),
        [
            (1, 10, 0),
            (2, 10, 10),
            (5, 20, 80),
            (3, 1, 2),
        ],
    )
    def test_bounded_window(self, page: int, limit: int, offset: int) -> None:
        """offset = (page - 1) * limit."""
        assert compute_window(page, limit) == PageWindow(offset=offset, limit=limit)

    @pytest.mark.parametrize("page", [0, -1, -100])
    def test_page_clamps_to_first(self, page: int) -> None:
        """Zero and negative pages never produce a negative offset."""
        window = compute_window(page, 10)
        assert window.offset == 0
        assert window.limit == 10
        assert window.bounded is True
