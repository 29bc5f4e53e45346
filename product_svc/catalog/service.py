"""Catalog service for product operations.

High-level service that combines repository operations with
validation and business rules for the product catalog.
"""

from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from product_svc.catalog.models import InventoryLog, Product
from product_svc.catalog.repository import InventoryLogRepository, ProductRepository
from product_svc.catalog.validation import validate_change_type, validate_product_input
from product_svc.domain.exceptions import (
    ConflictError,
    InsufficientStockError,
    ProductNotFoundError,
)
from product_svc.querying import FilterSpec, ListResult, PageSpec, SortSpec

logger = structlog.get_logger()


class CatalogService:
    """Service for catalog operations.

    Example usage:
        async with async_session_factory() as session:
            service = CatalogService(session)
            product = await service.create_product(
                name="Ibuprofen 200mg",
                description="Pain relief",
                price=4.99,
                stock=100,
            )
            await service.update_stock(product.id, -2, "order_placed")
            await session.commit()
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session
        self.products = ProductRepository(session)
        self.inventory_logs = InventoryLogRepository(session)

    async def create_product(
        self,
        name: str,
        description: str | None,
        price: float,
        stock: int = 0,
        requires_prescription: bool = False,
        image_url: str | None = None,
    ) -> Product:
        """Create a product.

        Returns:
            The created product.

        Raises:
            ValidationError: If the input is invalid.
            ConflictError: If another product has the same name.
        """
        validate_product_input(name, description, price, stock, image_url)

        if await self.products.get_by_name(name) is not None:
            raise ConflictError(name)

        product = Product(
            name=name,
            description=description,
            price=price,
            stock=stock,
            requires_prescription=requires_prescription,
            image_url=image_url,
        )

        # Concurrent creates with the same name fail on the unique index
        try:
            product = await self.products.save(product)
        except IntegrityError as e:
            raise ConflictError(name) from e

        logger.info("Product created", product_id=str(product.id), name=name)
        return product

    async def get_product(self, product_id: UUID) -> Product:
        """Get product by ID.

        Raises:
            ProductNotFoundError: If the product does not exist.
        """
        product = await self.products.get_by_id(product_id)
        if product is None:
            raise ProductNotFoundError(str(product_id))
        return product

    async def list_products(
        self,
        filter_spec: FilterSpec | None = None,
        sort_spec: SortSpec | None = None,
        page_spec: PageSpec | None = None,
    ) -> ListResult[Product]:
        """List products with filtering, sorting and pagination.

        Args:
            filter_spec: Caller filter.
            sort_spec: Caller sort.
            page_spec: Caller page.

        Returns:
            Page of products and the filtered total.
        """
        return await self.products.list(filter_spec, sort_spec, page_spec)

    async def update_product(
        self,
        product_id: UUID,
        name: str,
        description: str | None,
        price: float,
        image_url: str | None = None,
    ) -> Product:
        """Update a product's descriptive fields and price.

        Stock is not editable here; use ``update_stock``.

        Returns:
            The updated product.

        Raises:
            ProductNotFoundError: If the product does not exist.
            ValidationError: If the input is invalid.
            ConflictError: If another product already has the new name.
        """
        product = await self.get_product(product_id)

        validate_product_input(name, description, price, product.stock, image_url)

        existing = await self.products.get_by_name(name)
        if existing is not None and existing.id != product.id:
            raise ConflictError(name)

        product.name = name
        product.description = description
        product.price = price
        product.image_url = image_url

        try:
            product = await self.products.save(product)
        except IntegrityError as e:
            raise ConflictError(name) from e

        logger.info("Product updated", product_id=str(product.id))
        return product

    async def delete_product(self, product_id: UUID) -> None:
        """Delete a product.

        Raises:
            ProductNotFoundError: If the product does not exist.
        """
        product = await self.get_product(product_id)
        await self.products.delete(product)

        logger.info("Product deleted", product_id=str(product_id))

    async def update_stock(
        self,
        product_id: UUID,
        quantity_change: int,
        change_type: str,
    ) -> InventoryLog:
        """Apply a stock change and record it in the inventory log.

        Args:
            product_id: Product ID.
            quantity_change: Signed stock delta.
            change_type: Reason for the change.

        Returns:
            The inventory log entry.

        Raises:
            ValidationError: If the change type is not recognized.
            ProductNotFoundError: If the product does not exist.
            InsufficientStockError: If stock would become negative.
        """
        validate_change_type(change_type)

        await self.get_product(product_id)

        if not await self.products.adjust_stock(product_id, quantity_change):
            raise InsufficientStockError(str(product_id), quantity_change)

        log = await self.inventory_logs.log_change(
            InventoryLog(
                product_id=product_id,
                change_type=change_type,
                quantity=quantity_change,
            )
        )

        logger.info(
            "Stock updated",
            product_id=str(product_id),
            quantity_change=quantity_change,
            change_type=change_type,
        )
        return log

    async def list_inventory_logs(
        self,
        product_id: UUID,
        filter_spec: FilterSpec | None = None,
        sort_spec: SortSpec | None = None,
        page_spec: PageSpec | None = None,
    ) -> ListResult[InventoryLog]:
        """List a product's inventory logs.

        Raises:
            ProductNotFoundError: If the product does not exist.
        """
        await self.get_product(product_id)
        return await self.inventory_logs.list_for_product(
            product_id,
            filter_spec,
            sort_spec,
            page_spec,
        )
