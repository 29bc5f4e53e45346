"""API schemas for the product service.

Pydantic models for request/response validation and serialization.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


# ============================================================================
# Common Schemas
# ============================================================================


class ErrorDetail(BaseModel):
    """Detailed error information."""

    field: str | None = Field(default=None, description="Field that caused the error")
    message: str = Field(..., description="Error message")


class ErrorResponse(BaseModel):
    """Standard error response.

    All API errors follow this format for consistency.
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: list[ErrorDetail] = Field(
        default_factory=list, description="Additional error details"
    )
    request_id: str | None = Field(
        default=None, description="Request ID for correlation"
    )

    @classmethod
    def details_from_dict(cls, details: dict[str, Any]) -> list[ErrorDetail]:
        """Flatten a domain error's details into error detail entries."""
        return [ErrorDetail(field=key, message=str(value)) for key, value in details.items()]


class PaginatedResponse(BaseModel):
    """Base paginated response."""

    total: int = Field(..., description="Rows matching the filter, before paging")
    page: int = Field(..., description="Requested page number")
    limit: int = Field(..., description="Requested page size (0 or less returns every row)")
    has_more: bool = Field(..., description="Whether there are more pages")


# ============================================================================
# Product Schemas
# ============================================================================


class ProductCreateRequest(BaseModel):
    """Request to create a product."""

    name: str = Field(..., max_length=255, description="Product name (unique)")
    description: str | None = Field(default=None, description="Product description")
    price: float = Field(..., description="Unit price")
    stock: int = Field(default=0, description="Initial stock")
    requires_prescription: bool = Field(
        default=False, description="Whether a prescription is required"
    )
    image_url: str | None = Field(default=None, description="S3 image URL")


class ProductUpdateRequest(BaseModel):
    """Request to update a product."""

    name: str = Field(..., max_length=255, description="Product name (unique)")
    description: str | None = Field(default=None, description="Product description")
    price: float = Field(..., description="Unit price")
    image_url: str | None = Field(default=None, description="S3 image URL")


class ProductResponse(BaseModel):
    """Product representation."""

    id: str = Field(..., description="Product identifier")
    name: str
    description: str | None = None
    price: float
    stock: int
    requires_prescription: bool
    image_url: str | None = None
    created_at: datetime
    updated_at: datetime


class ProductsListResponse(PaginatedResponse):
    """Paginated list of products."""

    items: list[ProductResponse] = Field(..., description="List of products")


class MessageResponse(BaseModel):
    """Simple acknowledgement."""

    message: str


# ============================================================================
# Inventory Schemas
# ============================================================================


class StockUpdateRequest(BaseModel):
    """Request to adjust a product's stock."""

    quantity_change: int = Field(..., description="Signed stock delta")
    reason: str = Field(
        ...,
        description="Change type: order_placed, order_cancelled or stock_added",
    )


class InventoryLogResponse(BaseModel):
    """Inventory log entry."""

    id: str
    product_id: str
    change_type: str
    quantity: int
    created_at: datetime


class InventoryLogsListResponse(PaginatedResponse):
    """Paginated list of inventory log entries."""

    items: list[InventoryLogResponse] = Field(..., description="List of inventory logs")
