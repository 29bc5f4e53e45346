"""Domain layer module.

Contains the domain error hierarchy shared by the catalog and the
list query engine.
"""

from product_svc.domain.exceptions import (
    ConflictError,
    DomainError,
    ExecutionFailureError,
    InsufficientStockError,
    InvalidColumnError,
    InvalidFilterValueError,
    InvalidOperatorError,
    ProductNotFoundError,
    QueryError,
    ValidationError,
)

__all__ = [
    "DomainError",
    # Query errors
    "QueryError",
    "InvalidColumnError",
    "InvalidOperatorError",
    "InvalidFilterValueError",
    "ExecutionFailureError",
    # Product errors
    "ValidationError",
    "ProductNotFoundError",
    "ConflictError",
    "InsufficientStockError",
]
