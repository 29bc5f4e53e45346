"""Filterable list query engine.

Turns an untrusted filter/sort/pagination request into a parameterized
query over any registered entity and returns a page of rows plus the
filtered total.
"""

from product_svc.querying.columns import ColumnRegistry, listable_columns
from product_svc.querying.executor import QueryExecutor, SqlAlchemyQueryExecutor
from product_svc.querying.filters import FilterClause, FilterSpec, build_filter_clause
from product_svc.querying.listing import ListQuery, ListResult
from product_svc.querying.operators import OPERATORS, Operator, OperatorKind, resolve_operator
from product_svc.querying.pagination import UNBOUNDED, PageSpec, PageWindow, compute_window
from product_svc.querying.sorting import SortClause, SortSpec, build_sort_clause

__all__ = [
    # Columns
    "ColumnRegistry",
    "listable_columns",
    # Operators
    "OPERATORS",
    "Operator",
    "OperatorKind",
    "resolve_operator",
    # Filters
    "FilterClause",
    "FilterSpec",
    "build_filter_clause",
    # Sorting
    "SortClause",
    "SortSpec",
    "build_sort_clause",
    # Pagination
    "UNBOUNDED",
    "PageSpec",
    "PageWindow",
    "compute_window",
    # Execution
    "QueryExecutor",
    "SqlAlchemyQueryExecutor",
    "ListQuery",
    "ListResult",
]
