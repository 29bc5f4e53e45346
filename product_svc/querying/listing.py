"""List query orchestrator.

Composes the filter, sort and pagination builders against a query
executor to produce one page of rows plus the total number of matching
rows. Shared by every entity that needs list/search semantics.

Count and fetch are two sequential statements over the same predicate
and are not wrapped in a snapshot: with concurrent writers ``total`` may
be stale relative to the returned page.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

import structlog
from sqlalchemy import ColumnElement

from product_svc.querying.columns import ColumnRegistry
from product_svc.querying.executor import QueryExecutor
from product_svc.querying.filters import FilterSpec, build_filter_clause
from product_svc.querying.pagination import PageSpec, compute_window
from product_svc.querying.sorting import SortSpec, build_sort_clause

T = TypeVar("T")

logger = structlog.get_logger()


@dataclass
class ListResult(Generic[T]):
    """Page of rows plus the filtered total.

    Attributes:
        items: Rows after filtering, sorting and paging.
        total: Rows matching the filter, before paging.
        page: Requested page.
        limit: Requested page size (0 or negative when unbounded).
    """

    items: list[T]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        """Calculate total pages (an unbounded listing is a single page)."""
        if self.limit <= 0:
            return 1 if self.total else 0
        return (self.total + self.limit - 1) // self.limit

    @property
    def has_next(self) -> bool:
        """Check if there's a next page."""
        return max(self.page, 1) < self.total_pages

    @property
    def has_prev(self) -> bool:
        """Check if there's a previous page."""
        return self.limit > 0 and self.page > 1


class ListQuery(Generic[T]):
    """Filterable, sortable, paginated listing over one entity.

    Example usage:
        async with get_session() as session:
            listing = ListQuery(Product, SqlAlchemyQueryExecutor(session), column_registry)
            result = await listing.list(
                FilterSpec(column="price", operator="gte", value="10"),
                SortSpec(column="name", order="desc"),
                PageSpec(page=1, limit=20),
            )
    """

    def __init__(
        self,
        model: type[T],
        executor: QueryExecutor,
        registry: ColumnRegistry,
        default_sort: SortSpec | None = None,
    ) -> None:
        """Initialize listing.

        Args:
            model: Mapped class to list.
            executor: Store capability for count and fetch.
            registry: Column registry that holds the model allowlist.
            default_sort: Server-side ordering used when the caller does
                not sort; without it the store's natural order applies.
        """
        self.model = model
        self.executor = executor
        self.registry = registry
        self.default_sort = default_sort

    async def list(
        self,
        filter_spec: FilterSpec | None = None,
        sort_spec: SortSpec | None = None,
        page_spec: PageSpec | None = None,
        scope: Sequence[ColumnElement[bool]] = (),
    ) -> ListResult[T]:
        """Run the list query.

        Validation happens before any statement is executed, and the count
        runs before the paged fetch with the exact same criteria.

        Args:
            filter_spec: Caller filter.
            sort_spec: Caller sort.
            page_spec: Caller page; defaults to an unbounded listing.
            scope: Server-side criteria applied to both count and fetch.

        Returns:
            Page of rows and the filtered total.

        Raises:
            InvalidColumnError: Filter or sort column not in the allowlist.
            InvalidOperatorError: Unknown filter operator.
            InvalidFilterValueError: Filter value does not fit the column.
            ExecutionFailureError: The store failed during count or fetch.
        """
        page_spec = page_spec or PageSpec()
        allowlist = self.registry.allowed_columns(self.model)

        filter_clause = build_filter_clause(filter_spec, self.model, allowlist)

        if sort_spec is None or not sort_spec.column:
            sort_spec = self.default_sort
        sort_clause = build_sort_clause(sort_spec, self.model, allowlist)

        criteria = list(scope)
        if filter_clause.expression is not None:
            criteria.append(filter_clause.expression)

        total = await self.executor.count(self.model, criteria)

        window = compute_window(page_spec.page, page_spec.limit)
        order_by = [sort_clause.expression] if sort_clause is not None else []
        items = await self.executor.fetch(self.model, criteria, order_by, window)

        logger.debug(
            "List query executed",
            entity=self.model.__name__,
            filter=filter_clause.sql or None,
            sort=sort_clause.sql if sort_clause is not None else None,
            offset=window.offset,
            limit=window.limit,
            total=total,
            returned=len(items),
        )

        return ListResult(
            items=items,
            total=total,
            page=page_spec.page,
            limit=page_spec.limit,
        )
