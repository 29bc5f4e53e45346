"""Filter operator table.

Maps the operator tokens accepted from callers to the SQL comparison they
stand for. The table is fixed at import time and read-only.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType


class OperatorKind(str, Enum):
    """How an operator consumes the filter value."""

    COMPARISON = "comparison"  # column <op> :value
    PATTERN = "pattern"  # column LIKE :%value%
    LIST = "list"  # column IN (:v1, :v2, ...)
    UNARY = "unary"  # column IS [NOT] NULL, value ignored


@dataclass(frozen=True)
class Operator:
    """A recognized filter operator.

    Attributes:
        token: Token used by callers (e.g. "gte").
        sql: SQL fragment the token stands for (e.g. ">=").
        kind: How the filter value is bound.
        method: Column method that builds the expression.
    """

    token: str
    sql: str
    kind: OperatorKind
    method: str


OPERATORS = MappingProxyType(
    {
        "eq": Operator("eq", "=", OperatorKind.COMPARISON, "__eq__"),  # Equal
        "neq": Operator("neq", "!=", OperatorKind.COMPARISON, "__ne__"),  # Not equal
        "gt": Operator("gt", ">", OperatorKind.COMPARISON, "__gt__"),  # Greater than
        "gte": Operator("gte", ">=", OperatorKind.COMPARISON, "__ge__"),  # Greater than or equal
        "lt": Operator("lt", "<", OperatorKind.COMPARISON, "__lt__"),  # Less than
        "lte": Operator("lte", "<=", OperatorKind.COMPARISON, "__le__"),  # Less than or equal
        "like": Operator("like", "LIKE", OperatorKind.PATTERN, "like"),  # Pattern match
        "ilike": Operator("ilike", "ILIKE", OperatorKind.PATTERN, "ilike"),  # Case-insensitive pattern match
        "in": Operator("in", "IN", OperatorKind.LIST, "in_"),  # Comma-separated list of values
        "null": Operator("null", "IS NULL", OperatorKind.UNARY, "is_"),
        "notnull": Operator("notnull", "IS NOT NULL", OperatorKind.UNARY, "is_not"),
    }
)


def resolve_operator(token: str) -> Operator | None:
    """Look up an operator by its token.

    Args:
        token: Operator token supplied by the caller.

    Returns:
        The operator, or None if the token is not recognized.
    """
    return OPERATORS.get(token)
