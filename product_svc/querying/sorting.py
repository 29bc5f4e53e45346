"""Sort clause builder."""

from dataclasses import dataclass
from typing import Any

from sqlalchemy import UnaryExpression, inspect

from product_svc.domain.exceptions import InvalidColumnError

ASC = "asc"
DESC = "desc"


@dataclass(frozen=True)
class SortSpec:
    """Single-column sort requested by a caller.

    Attributes:
        column: Column to sort by; empty means no caller ordering.
        order: Sort direction; anything other than "desc" sorts ascending.
    """

    column: str = ""
    order: str = ASC


@dataclass(frozen=True)
class SortClause:
    """Validated ORDER BY term.

    Attributes:
        column: Validated column name.
        direction: Normalized direction ("asc" or "desc").
        expression: SQLAlchemy ordering expression.
    """

    column: str
    direction: str
    expression: UnaryExpression[Any]

    @property
    def sql(self) -> str:
        """ORDER BY term as text."""
        return str(self.expression.compile())


def normalize_direction(order: str | None) -> str:
    """Normalize a caller sort direction.

    Unknown directions fall back to ascending without an error.
    """
    if order and order.lower() == DESC:
        return DESC
    return ASC


def build_sort_clause(
    spec: SortSpec | None,
    model: type[Any],
    allowlist: frozenset[str],
) -> SortClause | None:
    """Validate a sort request and build its ORDER BY term.

    Args:
        spec: Caller sort; None or an empty column means no ordering.
        model: Mapped class being listed.
        allowlist: Columns the caller may sort on.

    Returns:
        The sort clause, or None when no ordering was requested.

    Raises:
        InvalidColumnError: If the sort column is not in the allowlist.
    """
    if spec is None or not spec.column:
        return None

    if spec.column not in allowlist:
        raise InvalidColumnError(spec.column, "sort")

    direction = normalize_direction(spec.order)
    column = inspect(model).columns[spec.column]
    expression = column.desc() if direction == DESC else column.asc()

    return SortClause(column=spec.column, direction=direction, expression=expression)
