"""Tests for the catalog service."""

import uuid
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from product_svc.catalog import CatalogService
from product_svc.catalog.models import InventoryLog, Product
from product_svc.domain.exceptions import (
    ConflictError,
    InsufficientStockError,
    InvalidColumnError,
    ProductNotFoundError,
    ValidationError,
)
from product_svc.querying import FilterSpec, PageSpec, SortSpec

S3_IMAGE = "https://pharmakart.s3.ap-south-1.amazonaws.com/ibuprofen.png"


@pytest.fixture
def service(session: AsyncSession) -> CatalogService:
    return CatalogService(session)


@pytest.fixture
async def ibuprofen(service: CatalogService, session: AsyncSession) -> Product:
    product = await service.create_product(
        name="Ibuprofen 200mg",
        description="Pain relief",
        price=4.99,
        stock=10,
    )
    await session.commit()
    return product


class TestCreateProduct:
    """Tests for product creation."""

    @pytest.mark.asyncio
    async def test_create(self, service: CatalogService) -> None:
        product = await service.create_product(
            name="Paracetamol 500mg",
            description="Fever reducer",
            price=2.5,
            stock=40,
            requires_prescription=False,
            image_url=S3_IMAGE,
        )

        assert isinstance(product.id, uuid.UUID)
        assert product.name == "Paracetamol 500mg"
        assert product.stock == 40
        assert product.image_url == S3_IMAGE
        assert product.created_at is not None
        assert product.updated_at is not None

    @pytest.mark.asyncio
    async def test_default_stock_is_zero(self, service: CatalogService) -> None:
        product = await service.create_product(name="Cetirizine", description="Allergy", price=3.0)
        assert product.stock == 0
        assert product.requires_prescription is False

    @pytest.mark.asyncio
    async def test_duplicate_name(self, service: CatalogService, ibuprofen: Product) -> None:
        with pytest.raises(ConflictError):
            await service.create_product(name="Ibuprofen 200mg", description="Again", price=1.0)

    @pytest.mark.asyncio
    async def test_duplicate_name_caught_by_unique_index(
        self, service: CatalogService, ibuprofen: Product
    ) -> None:
        """A create that slips past the name lookup still conflicts."""
        service.products.get_by_name = AsyncMock(return_value=None)  # type: ignore[method-assign]

        with pytest.raises(ConflictError) as exc_info:
            await service.create_product(name="Ibuprofen 200mg", description="Race", price=1.0)
        assert isinstance(exc_info.value.__cause__, IntegrityError)

    @pytest.mark.asyncio
    async def test_invalid_input(self, service: CatalogService) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await service.create_product(name=" ", description="", price=0, stock=-1)

    @pytest.mark.asyncio
    async def test_nan_price(self, service: CatalogService) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await service.create_product(name="Placebo", description="Sugar pill", price=float("nan"))
        assert set(exc_info.value.errors) == {"price"}

        assert set(exc_info.value.errors) == {"name", "description", "price", "stock"}


class TestGetProduct:
    """Tests for product lookup."""

    @pytest.mark.asyncio
    async def test_get(self, service: CatalogService, ibuprofen: Product) -> None:
        product = await service.get_product(ibuprofen.id)
        assert product.name == "Ibuprofen 200mg"

    @pytest.mark.asyncio
    async def test_not_found(self, service: CatalogService) -> None:
        missing = uuid.uuid4()
        with pytest.raises(ProductNotFoundError) as exc_info:
            await service.get_product(missing)
        assert str(missing) in exc_info.value.message


class TestUpdateProduct:
    """Tests for product updates."""

    @pytest.mark.asyncio
    async def test_update(self, service: CatalogService, ibuprofen: Product) -> None:
        product = await service.update_product(
            ibuprofen.id,
            name="Ibuprofen 400mg",
            description="Stronger pain relief",
            price=6.49,
            image_url=S3_IMAGE,
        )

        assert product.name == "Ibuprofen 400mg"
        assert product.price == 6.49
        assert product.image_url == S3_IMAGE
        assert product.stock == 10

    @pytest.mark.asyncio
    async def test_keep_own_name(self, service: CatalogService, ibuprofen: Product) -> None:
        product = await service.update_product(
            ibuprofen.id, name="Ibuprofen 200mg", description="Same name", price=5.0
        )
        assert product.description == "Same name"

    @pytest.mark.asyncio
    async def test_name_taken(self, service: CatalogService, ibuprofen: Product) -> None:
        other = await service.create_product(name="Aspirin", description="Blood thinner", price=1.0)
        with pytest.raises(ConflictError):
            await service.update_product(
                other.id, name="Ibuprofen 200mg", description="Clash", price=1.0
            )

    @pytest.mark.asyncio
    async def test_rename_caught_by_unique_index(
        self, service: CatalogService, ibuprofen: Product
    ) -> None:
        other = await service.create_product(name="Aspirin", description="Blood thinner", price=1.0)
        service.products.get_by_name = AsyncMock(return_value=None)  # type: ignore[method-assign]

        with pytest.raises(ConflictError):
            await service.update_product(
                other.id, name="Ibuprofen 200mg", description="Clash", price=1.0
            )

    @pytest.mark.asyncio
    async def test_invalid_image_url(self, service: CatalogService, ibuprofen: Product) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await service.update_product(
                ibuprofen.id,
                name="Ibuprofen 200mg",
                description="Pain relief",
                price=4.99,
                image_url="http://example.com/a.png",
            )
        assert exc_info.value.errors == {"image_url": "Invalid S3 image URL"}

    @pytest.mark.asyncio
    async def test_not_found(self, service: CatalogService) -> None:
        with pytest.raises(ProductNotFoundError):
            await service.update_product(uuid.uuid4(), name="X", description="Y", price=1.0)


class TestDeleteProduct:
    """Tests for product deletion."""

    @pytest.mark.asyncio
    async def test_delete_removes_logs(
        self, service: CatalogService, session: AsyncSession, ibuprofen: Product
    ) -> None:
        await service.update_stock(ibuprofen.id, 5, "stock_added")
        await service.delete_product(ibuprofen.id)
        await session.commit()

        with pytest.raises(ProductNotFoundError):
            await service.get_product(ibuprofen.id)
        logs = (await session.execute(select(InventoryLog))).scalars().all()
        assert logs == []

    @pytest.mark.asyncio
    async def test_not_found(self, service: CatalogService) -> None:
        with pytest.raises(ProductNotFoundError):
            await service.delete_product(uuid.uuid4())


class TestUpdateStock:
    """Tests for stock adjustments."""

    @pytest.mark.asyncio
    async def test_order_placed(self, service: CatalogService, ibuprofen: Product) -> None:
        log = await service.update_stock(ibuprofen.id, -3, "order_placed")

        assert log.product_id == ibuprofen.id
        assert log.quantity == -3
        assert log.change_type == "order_placed"
        assert (await service.get_product(ibuprofen.id)).stock == 7

    @pytest.mark.asyncio
    async def test_stock_can_reach_zero(self, service: CatalogService, ibuprofen: Product) -> None:
        await service.update_stock(ibuprofen.id, -10, "order_placed")
        assert (await service.get_product(ibuprofen.id)).stock == 0

    @pytest.mark.asyncio
    async def test_insufficient_stock(
        self, service: CatalogService, session: AsyncSession, ibuprofen: Product
    ) -> None:
        with pytest.raises(InsufficientStockError):
            await service.update_stock(ibuprofen.id, -11, "order_placed")

        assert (await service.get_product(ibuprofen.id)).stock == 10
        logs = (await session.execute(select(InventoryLog))).scalars().all()
        assert logs == []

    @pytest.mark.asyncio
    async def test_invalid_change_type(self, service: CatalogService, ibuprofen: Product) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await service.update_stock(ibuprofen.id, 1, "restock")
        assert exc_info.value.errors == {"change_type": "Invalid change type"}

    @pytest.mark.asyncio
    async def test_not_found(self, service: CatalogService) -> None:
        with pytest.raises(ProductNotFoundError):
            await service.update_stock(uuid.uuid4(), 1, "stock_added")


class TestListProducts:
    """Tests for product listing through the service."""

    @pytest.mark.asyncio
    async def test_list(self, service: CatalogService, price_products: list[Product]) -> None:
        result = await service.list_products(
            FilterSpec("price", "lt", "20"), SortSpec("price", "desc"), PageSpec(1, 2)
        )
        assert [p.name for p in result.items] == ["C", "B"]
        assert result.total == 3

    @pytest.mark.asyncio
    async def test_invalid_column(self, service: CatalogService) -> None:
        with pytest.raises(InvalidColumnError):
            await service.list_products(FilterSpec("secret", "eq", "1"))


class TestListInventoryLogs:
    """Tests for inventory log listing."""

    @pytest.fixture
    async def history(self, service: CatalogService, ibuprofen: Product) -> list[InventoryLog]:
        return [
            await service.update_stock(ibuprofen.id, 20, "stock_added"),
            await service.update_stock(ibuprofen.id, -4, "order_placed"),
            await service.update_stock(ibuprofen.id, 4, "order_cancelled"),
            await service.update_stock(ibuprofen.id, -1, "order_placed"),
        ]

    @pytest.mark.asyncio
    async def test_newest_first_by_default(
        self, service: CatalogService, ibuprofen: Product, history: list[InventoryLog]
    ) -> None:
        result = await service.list_inventory_logs(ibuprofen.id)

        assert result.total == 4
        created = [log.created_at for log in result.items]
        assert created == sorted(created, reverse=True)

    @pytest.mark.asyncio
    async def test_filter_and_sort(
        self, service: CatalogService, ibuprofen: Product, history: list[InventoryLog]
    ) -> None:
        result = await service.list_inventory_logs(
            ibuprofen.id,
            FilterSpec("change_type", "eq", "order_placed"),
            SortSpec("quantity", "asc"),
        )
        assert [log.quantity for log in result.items] == [-4, -1]
        assert result.total == 2

    @pytest.mark.asyncio
    async def test_scoped_to_product(
        self, service: CatalogService, ibuprofen: Product, history: list[InventoryLog]
    ) -> None:
        other = await service.create_product(name="Aspirin", description="Blood thinner", price=1.0)
        await service.update_stock(other.id, 3, "stock_added")

        result = await service.list_inventory_logs(other.id, page_spec=PageSpec(1, 10))
        assert result.total == 1
        assert result.items[0].product_id == other.id

    @pytest.mark.asyncio
    async def test_empty(self, service: CatalogService, ibuprofen: Product) -> None:
        result = await service.list_inventory_logs(ibuprofen.id)
        assert result.items == []
        assert result.total == 0

    @pytest.mark.asyncio
    async def test_product_not_found(self, service: CatalogService) -> None:
        with pytest.raises(ProductNotFoundError):
            await service.list_inventory_logs(uuid.uuid4())
