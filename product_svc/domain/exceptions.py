"""Domain exceptions.

All domain-level errors raised by the catalog and the list query engine.
Caller-input errors and infrastructure errors share one base class so the
API layer can translate them into a single error envelope.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain exceptions.

    All domain errors should inherit from this class to allow
    catching domain-specific errors at the application layer.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize domain error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# List Query Errors
# ============================================================================


class QueryError(DomainError):
    """Base class for list query errors."""

    pass


class InvalidColumnError(QueryError):
    """Raised when a filter or sort references a column outside the allowlist."""

    def __init__(self, column: str, purpose: str = "filter") -> None:
        """Initialize invalid column error.

        Args:
            column: The rejected column name.
            purpose: Where the column was used ("filter" or "sort").
        """
        super().__init__(
            f"invalid {purpose} column: {column}",
            details={"column": column, "purpose": purpose},
        )
        self.column = column


class InvalidOperatorError(QueryError):
    """Raised when a filter operator is unknown or does not fit the column."""

    def __init__(self, operator: str, column: str | None = None) -> None:
        """Initialize invalid operator error.

        Args:
            operator: The rejected operator token.
            column: Column the operator was applied to, when the token is
                known but does not apply to that column type.
        """
        if column is None:
            message = f"invalid filter operator: {operator}"
            details = {"operator": operator}
        else:
            message = f"filter operator {operator} not supported for column {column}"
            details = {"operator": operator, "column": column}
        super().__init__(message, details=details)
        self.operator = operator
        self.column = column


class InvalidFilterValueError(QueryError):
    """Raised when a filter value cannot be converted to the column type."""

    def __init__(self, column: str, value: str, expected: str) -> None:
        """Initialize invalid filter value error.

        Args:
            column: Column being filtered.
            value: The raw value that failed conversion.
            expected: Name of the expected value type.
        """
        super().__init__(
            f"invalid filter value for column {column}: expected {expected}",
            details={"column": column, "value": value, "expected": expected},
        )
        self.column = column


class ExecutionFailureError(QueryError):
    """Raised when the store could not complete a count or fetch.

    The message is deliberately opaque; the underlying exception is kept
    as ``__cause__`` for internal diagnostics only.
    """

    def __init__(self, operation: str) -> None:
        """Initialize execution failure error.

        Args:
            operation: Name of the failed step (e.g. "count", "fetch").
        """
        super().__init__(
            "An internal error occurred",
            details={"operation": operation},
        )
        self.operation = operation


# ============================================================================
# Product Errors
# ============================================================================


class ProductError(DomainError):
    """Base class for product-related errors."""

    pass


class ValidationError(ProductError):
    """Raised when product or stock input fails validation."""

    def __init__(self, errors: dict[str, str]) -> None:
        """Initialize validation error.

        Args:
            errors: Mapping of field name to error message.
        """
        super().__init__("Validation failed", details=dict(errors))
        self.errors = dict(errors)


class ProductNotFoundError(ProductError):
    """Raised when a product does not exist."""

    def __init__(self, product_id: str) -> None:
        """Initialize product not found error.

        Args:
            product_id: ID of the missing product.
        """
        super().__init__(
            f"Product with ID '{product_id}' not found",
            details={"product_id": product_id},
        )


class ConflictError(ProductError):
    """Raised when a product name is already taken."""

    def __init__(self, name: str) -> None:
        """Initialize conflict error.

        Args:
            name: The conflicting product name.
        """
        super().__init__(
            f"Product with name '{name}' already exists",
            details={"name": name},
        )


class InsufficientStockError(ProductError):
    """Raised when a stock adjustment would make stock negative."""

    def __init__(self, product_id: str, quantity_change: int) -> None:
        """Initialize insufficient stock error.

        Args:
            product_id: ID of the product.
            quantity_change: The rejected stock delta.
        """
        super().__init__(
            f"Insufficient stock for product '{product_id}' to apply change {quantity_change}",
            details={"product_id": product_id, "quantity_change": quantity_change},
        )
