"""Filter clause builder.

Turns one caller-supplied filter (column, operator, value) into a
parameterized SQLAlchemy predicate. Column objects are taken from the model
mapping after the allowlist check and operators from the operator table;
caller values only ever reach the query as bound parameters.
"""

import math
import uuid
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from sqlalchemy import BigInteger, BindParameter, ColumnElement, SmallInteger, bindparam, inspect

from product_svc.domain.exceptions import (
    InvalidColumnError,
    InvalidFilterValueError,
    InvalidOperatorError,
)
from product_svc.querying.operators import Operator, OperatorKind, resolve_operator

LIKE_ESCAPE = "/"

_TRUE_VALUES = {"1", "true", "t", "yes", "y"}
_FALSE_VALUES = {"0", "false", "f", "no", "n"}


@dataclass(frozen=True)
class FilterSpec:
    """Single-column filter requested by a caller.

    The zero value (all fields empty) means no filtering.

    Attributes:
        column: Column to filter on.
        operator: Operator token (see ``OPERATORS``).
        value: Raw value; comma-separated for ``in``, ignored for
            ``null``/``notnull``.
    """

    column: str = ""
    operator: str = ""
    value: str = ""

    @property
    def is_empty(self) -> bool:
        """Check if this is the no-op filter."""
        return not (self.column or self.operator or self.value)


@dataclass(frozen=True)
class FilterClause:
    """Validated, parameterized filter predicate.

    Attributes:
        column: Validated column name, None for the empty clause.
        operator: Resolved operator, None for the empty clause.
        expression: SQLAlchemy predicate, None for the empty clause.
    """

    column: str | None = None
    operator: Operator | None = None
    expression: ColumnElement[bool] | None = None

    @property
    def is_empty(self) -> bool:
        """Check if the clause filters nothing."""
        return self.expression is None

    @property
    def sql(self) -> str:
        """Predicate text with bind placeholders (empty for no filter)."""
        if self.expression is None:
            return ""
        return str(self.expression.compile())

    @property
    def params(self) -> dict[str, Any]:
        """Bound values keyed by placeholder name."""
        if self.expression is None:
            return {}
        return dict(self.expression.compile().params)


EMPTY_FILTER = FilterClause()


def escape_like(value: str) -> str:
    """Escape LIKE wildcards in a caller-supplied value.

    Args:
        value: Raw caller value.

    Returns:
        Value safe to embed between ``%`` sentinels with ``ESCAPE '/'``.
    """
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", f"{LIKE_ESCAPE}%")
        .replace("_", f"{LIKE_ESCAPE}_")
    )


def _python_type(column: Any) -> type | None:
    try:
        return column.type.python_type
    except NotImplementedError:
        return None


def _integer_bounds(column: Any) -> tuple[int, int]:
    if isinstance(column.type, BigInteger):
        bits = 64
    elif isinstance(column.type, SmallInteger):
        bits = 16
    else:
        bits = 32
    return -(2 ** (bits - 1)), 2 ** (bits - 1) - 1


def coerce_value(column_name: str, column: Any, value: str) -> Any:
    """Convert a raw filter value to the column's Python type.

    Strings pass through unchanged. Whitespace handling is left to the
    underlying constructor (``int(" 2")`` is 2, ``UUID(" ...")`` fails).
    Integers must fit the column's storage width and floats must be finite.

    Args:
        column_name: Column name, for error reporting.
        column: SQLAlchemy column.
        value: Raw caller value.

    Returns:
        The converted value.

    Raises:
        InvalidFilterValueError: If the value does not fit the column type.
    """
    python_type = _python_type(column)
    if python_type is None or python_type is str:
        return value

    try:
        if python_type is bool:
            lowered = value.strip().lower()
            if lowered in _TRUE_VALUES:
                return True
            if lowered in _FALSE_VALUES:
                return False
            raise ValueError(value)
        if python_type is datetime:
            return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        if python_type is date:
            return date.fromisoformat(value.strip())
        if python_type is int:
            number = int(value)
            low, high = _integer_bounds(column)
            if not low <= number <= high:
                raise ValueError(value)
            return number
        if python_type is float:
            real = float(value)
            if not math.isfinite(real):
                raise ValueError(value)
            return real
        if python_type is Decimal:
            decimal = Decimal(value)
            if not decimal.is_finite():
                raise ValueError(value)
            return decimal
        if python_type is uuid.UUID:
            return uuid.UUID(value)
    except (ValueError, TypeError, InvalidOperation):
        raise InvalidFilterValueError(column_name, value, python_type.__name__) from None

    return value


def _bind(column: Any, value: Any, expanding: bool = False) -> BindParameter[Any]:
    # Explicit bind so constants like True are never inlined as literals
    return bindparam(column.key, value, type_=column.type, unique=True, expanding=expanding)


def build_filter_clause(
    spec: FilterSpec | None,
    model: type[Any],
    allowlist: frozenset[str],
) -> FilterClause:
    """Validate a filter and build its predicate.

    Args:
        spec: Caller filter; None or the zero value means no filtering.
        model: Mapped class being listed.
        allowlist: Columns the caller may filter on.

    Returns:
        The filter clause (``EMPTY_FILTER`` when there is nothing to filter).

    Raises:
        InvalidColumnError: If the column is not in the allowlist.
        InvalidOperatorError: If the operator token is unknown, or is a
            pattern operator on a non-text column.
        InvalidFilterValueError: If the value does not fit the column type.
    """
    if spec is None or spec.is_empty:
        return EMPTY_FILTER

    if spec.column not in allowlist:
        raise InvalidColumnError(spec.column, "filter")

    operator = resolve_operator(spec.operator)
    if operator is None:
        raise InvalidOperatorError(spec.operator)

    column = inspect(model).columns[spec.column]
    build = getattr(column, operator.method)

    if operator.kind is OperatorKind.UNARY:
        expression = build(None)
    elif operator.kind is OperatorKind.PATTERN:
        # LIKE only applies to text columns
        if _python_type(column) is not str:
            raise InvalidOperatorError(spec.operator, spec.column)
        expression = build(_bind(column, f"%{escape_like(spec.value)}%"), escape=LIKE_ESCAPE)
    elif operator.kind is OperatorKind.LIST:
        # Segments are kept as-is: no trimming, empty segments included
        values = [coerce_value(spec.column, column, part) for part in spec.value.split(",")]
        expression = build(_bind(column, values, expanding=True))
    else:
        expression = build(_bind(column, coerce_value(spec.column, column, spec.value)))

    return FilterClause(column=spec.column, operator=operator, expression=expression)
