"""Repositories for catalog database operations.

Provides CRUD operations for products and inventory logs. Both listing
paths go through the shared ``ListQuery`` engine.
"""

from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from product_svc.catalog.models import InventoryLog, Product, column_registry
from product_svc.querying import (
    FilterSpec,
    ListQuery,
    ListResult,
    PageSpec,
    SortSpec,
    SqlAlchemyQueryExecutor,
)

# Newest stock changes first unless the caller sorts
INVENTORY_LOG_DEFAULT_SORT = SortSpec(column="created_at", order="desc")


class ProductRepository:
    """Repository for Product database operations.

    Example usage:
        async with async_session_factory() as session:
            repo = ProductRepository(session)
            result = await repo.list(
                FilterSpec(column="price", operator="gte", value="10"),
                SortSpec(column="name"),
                PageSpec(page=1, limit=20),
            )
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session
        self.listing = ListQuery(Product, SqlAlchemyQueryExecutor(session), column_registry)

    async def save(self, product: Product) -> Product:
        """Save a product to database.

        Args:
            product: Product to save.

        Returns:
            Saved product.
        """
        self.session.add(product)
        await self.session.flush()
        await self.session.refresh(product)
        return product

    async def get_by_id(self, product_id: UUID) -> Product | None:
        """Get product by ID.

        Args:
            product_id: Product ID.

        Returns:
            Product if found, None otherwise.
        """
        result = await self.session.execute(select(Product).where(Product.id == product_id))
        return result.scalar_one_or_none()

    async def get_by_name(self, name: str) -> Product | None:
        """Get product by name.

        Args:
            name: Product name.

        Returns:
            Product if found, None otherwise.
        """
        result = await self.session.execute(select(Product).where(Product.name == name))
        return result.scalars().first()

    async def list(
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
        return await self.listing.list(filter_spec, sort_spec, page_spec)

    async def delete(self, product: Product) -> None:
        """Delete a product and its inventory logs.

        Args:
            product: Product to delete.
        """
        await self.session.delete(product)
        await self.session.flush()

    async def adjust_stock(self, product_id: UUID, quantity_change: int) -> bool:
        """Atomically add a delta to a product's stock.

        The update only applies when the resulting stock stays non-negative.

        Args:
            product_id: Product ID.
            quantity_change: Signed stock delta.

        Returns:
            True if a row was updated.
        """
        query = (
            update(Product)
            .where(
                Product.id == product_id,
                Product.stock + quantity_change >= 0,
            )
            .values(stock=Product.stock + quantity_change)
            .execution_options(synchronize_session="fetch")
        )
        result = await self.session.execute(query)
        return result.rowcount == 1


class InventoryLogRepository:
    """Repository for InventoryLog database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session
        self.listing = ListQuery(
            InventoryLog,
            SqlAlchemyQueryExecutor(session),
            column_registry,
            default_sort=INVENTORY_LOG_DEFAULT_SORT,
        )

    async def log_change(self, log: InventoryLog) -> InventoryLog:
        """Record a stock change.

        Args:
            log: Inventory log entry.

        Returns:
            Saved entry.
        """
        self.session.add(log)
        await self.session.flush()
        return log

    async def list_for_product(
        self,
        product_id: UUID,
        filter_spec: FilterSpec | None = None,
        sort_spec: SortSpec | None = None,
        page_spec: PageSpec | None = None,
    ) -> ListResult[InventoryLog]:
        """List one product's stock changes.

        Args:
            product_id: Product ID; applied to both count and fetch.
            filter_spec: Caller filter.
            sort_spec: Caller sort.
            page_spec: Caller page.

        Returns:
            Page of inventory logs and the filtered total.
        """
        return await self.listing.list(
            filter_spec,
            sort_spec,
            page_spec,
            scope=[InventoryLog.product_id == product_id],
        )
