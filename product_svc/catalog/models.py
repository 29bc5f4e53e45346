"""SQLAlchemy models for the product catalog.

Defines Product and InventoryLog tables for persistent storage.
"""

from datetime import datetime, timezone
from uuid import UUID, uuid4

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from product_svc.infrastructure.database import Base
from product_svc.querying.columns import ColumnRegistry

CHANGE_TYPES = ("order_placed", "order_cancelled", "stock_added")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Product(Base):
    """Product entity in the catalog.

    Attributes:
        id: Unique product identifier (UUID).
        name: Product name, unique across the catalog.
        description: Product description.
        price: Unit price.
        stock: Available quantity, never negative.
        requires_prescription: Whether the product needs a prescription.
        image_url: Product image URL (S3).
        created_at: Creation timestamp.
        updated_at: Last update timestamp.
    """

    __tablename__ = "products"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    requires_prescription: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    image_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
    )

    # Relationships
    inventory_logs: Mapped[list["InventoryLog"]] = relationship(
        "InventoryLog",
        back_populates="product",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        CheckConstraint("stock >= 0", name="ck_products_stock_non_negative"),
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Product(id={self.id}, name={self.name[:30]})>"


class InventoryLog(Base):
    """Audit record of one stock change.

    Attributes:
        id: Unique log identifier.
        product_id: Product whose stock changed.
        change_type: Reason for the change (see ``CHANGE_TYPES``).
        quantity: Signed stock delta.
        created_at: When the change was applied.
    """

    __tablename__ = "inventory_logs"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    product_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    change_type: Mapped[str] = mapped_column(String(50), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )

    # Relationships
    product: Mapped["Product"] = relationship("Product", back_populates="inventory_logs")

    __table_args__ = (
        CheckConstraint(
            "change_type IN ('order_placed', 'order_cancelled', 'stock_added')",
            name="ck_inventory_logs_change_type",
        ),
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<InventoryLog(id={self.id}, change_type={self.change_type}, quantity={self.quantity})>"


# Allowlists for list queries, fixed for the life of the process
column_registry = ColumnRegistry([Product, InventoryLog])
