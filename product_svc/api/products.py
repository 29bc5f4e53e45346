"""Product API endpoints.

Provides endpoints for product CRUD, stock adjustments and the
filterable product and inventory-log listings.
"""

from dataclasses import dataclass
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from product_svc.api.schemas import (
    ErrorResponse,
    InventoryLogResponse,
    InventoryLogsListResponse,
    MessageResponse,
    ProductCreateRequest,
    ProductResponse,
    ProductsListResponse,
    ProductUpdateRequest,
    StockUpdateRequest,
)
from product_svc.catalog.models import InventoryLog, Product
from product_svc.catalog.service import CatalogService
from product_svc.infrastructure.config import settings
from product_svc.infrastructure.database import get_session
from product_svc.querying import FilterSpec, PageSpec, SortSpec

router = APIRouter(prefix="/products", tags=["Products"])


# ============================================================================
# Dependencies
# ============================================================================


def get_service(session: Annotated[AsyncSession, Depends(get_session)]) -> CatalogService:
    """Get catalog service bound to the request session."""
    return CatalogService(session)


@dataclass(frozen=True)
class ListParams:
    """Filter, sort and page parsed from query parameters."""

    filter: FilterSpec
    sort: SortSpec
    page: PageSpec


def get_list_params(
    filter_column: str = Query(default="", description="Column to filter on"),
    filter_operator: str = Query(
        default="",
        description="eq, neq, gt, gte, lt, lte, like, ilike, in, null or notnull",
    ),
    filter_value: str = Query(default="", description="Filter value (comma-separated for 'in')"),
    sort_by: str = Query(default="", description="Column to sort by"),
    sort_order: str = Query(default="asc", description="asc or desc"),
    page: int = Query(default=1, description="Page number (1-based)"),
    limit: int | None = Query(default=None, description="Items per page; 0 or less returns all"),
) -> ListParams:
    """Parse list query parameters."""
    return ListParams(
        filter=FilterSpec(column=filter_column, operator=filter_operator, value=filter_value),
        sort=SortSpec(column=sort_by, order=sort_order),
        page=PageSpec(
            page=page,
            limit=settings.default_page_limit if limit is None else limit,
        ),
    )


# ============================================================================
# Converters
# ============================================================================


def product_to_response(product: Product) -> ProductResponse:
    """Convert Product model to response schema."""
    return ProductResponse(
        id=str(product.id),
        name=product.name,
        description=product.description,
        price=product.price,
        stock=product.stock,
        requires_prescription=product.requires_prescription,
        image_url=product.image_url,
        created_at=product.created_at,
        updated_at=product.updated_at,
    )


def inventory_log_to_response(log: InventoryLog) -> InventoryLogResponse:
    """Convert InventoryLog model to response schema."""
    return InventoryLogResponse(
        id=str(log.id),
        product_id=str(log.product_id),
        change_type=log.change_type,
        quantity=log.quantity,
        created_at=log.created_at,
    )


# ============================================================================
# Endpoints
# ============================================================================

BAD_REQUEST_RESPONSES = {400: {"model": ErrorResponse}}
NOT_FOUND_RESPONSES = {404: {"model": ErrorResponse}}


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
    summary="Create product",
)
async def create_product(
    request: ProductCreateRequest,
    service: Annotated[CatalogService, Depends(get_service)],
) -> ProductResponse:
    """Create a product.

    Args:
        request: Product fields.
        service: Catalog service.

    Returns:
        The created product.
    """
    product = await service.create_product(
        name=request.name,
        description=request.description,
        price=request.price,
        stock=request.stock,
        requires_prescription=request.requires_prescription,
        image_url=request.image_url,
    )
    return product_to_response(product)


@router.get(
    "",
    response_model=ProductsListResponse,
    responses=BAD_REQUEST_RESPONSES,
    summary="List products",
    description="List products with a single-column filter, sort and pagination.",
)
async def list_products(
    service: Annotated[CatalogService, Depends(get_service)],
    params: Annotated[ListParams, Depends(get_list_params)],
) -> ProductsListResponse:
    """List products.

    Args:
        service: Catalog service.
        params: Filter, sort and page.

    Returns:
        Page of products with the filtered total.
    """
    result = await service.list_products(params.filter, params.sort, params.page)

    return ProductsListResponse(
        items=[product_to_response(p) for p in result.items],
        total=result.total,
        page=result.page,
        limit=result.limit,
        has_more=result.has_next,
    )


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    responses=NOT_FOUND_RESPONSES,
    summary="Get product",
)
async def get_product(
    product_id: UUID,
    service: Annotated[CatalogService, Depends(get_service)],
) -> ProductResponse:
    """Get a product by ID."""
    product = await service.get_product(product_id)
    return product_to_response(product)


@router.put(
    "/{product_id}",
    response_model=ProductResponse,
    responses={**NOT_FOUND_RESPONSES, 409: {"model": ErrorResponse}},
    summary="Update product",
)
async def update_product(
    product_id: UUID,
    request: ProductUpdateRequest,
    service: Annotated[CatalogService, Depends(get_service)],
) -> ProductResponse:
    """Update a product's name, description, price and image."""
    product = await service.update_product(
        product_id,
        name=request.name,
        description=request.description,
        price=request.price,
        image_url=request.image_url,
    )
    return product_to_response(product)


@router.delete(
    "/{product_id}",
    response_model=MessageResponse,
    responses=NOT_FOUND_RESPONSES,
    summary="Delete product",
)
async def delete_product(
    product_id: UUID,
    service: Annotated[CatalogService, Depends(get_service)],
) -> MessageResponse:
    """Delete a product and its inventory logs."""
    await service.delete_product(product_id)
    return MessageResponse(message="Product deleted successfully")


@router.post(
    "/{product_id}/stock",
    response_model=InventoryLogResponse,
    responses={**NOT_FOUND_RESPONSES, 409: {"model": ErrorResponse}},
    summary="Adjust stock",
)
async def update_stock(
    product_id: UUID,
    request: StockUpdateRequest,
    service: Annotated[CatalogService, Depends(get_service)],
) -> InventoryLogResponse:
    """Apply a stock change and return the inventory log entry.

    Args:
        product_id: Product identifier.
        request: Stock delta and reason.
        service: Catalog service.

    Returns:
        The recorded inventory log entry.
    """
    log = await service.update_stock(product_id, request.quantity_change, request.reason)
    return inventory_log_to_response(log)


@router.get(
    "/{product_id}/inventory-logs",
    response_model=InventoryLogsListResponse,
    responses={**BAD_REQUEST_RESPONSES, **NOT_FOUND_RESPONSES},
    summary="List inventory logs",
    description="List one product's stock changes, newest first unless sorted.",
)
async def list_inventory_logs(
    product_id: UUID,
    service: Annotated[CatalogService, Depends(get_service)],
    params: Annotated[ListParams, Depends(get_list_params)],
) -> InventoryLogsListResponse:
    """List a product's inventory logs."""
    result = await service.list_inventory_logs(
        product_id,
        params.filter,
        params.sort,
        params.page,
    )

    return InventoryLogsListResponse(
        items=[inventory_log_to_response(log) for log in result.items],
        total=result.total,
        page=result.page,
        limit=result.limit,
        has_more=result.has_next,
    )
