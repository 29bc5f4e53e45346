"""Product Catalog Service.

Provides product CRUD, stock adjustments with an inventory audit log,
and filterable listings for both.
"""

from product_svc.catalog.models import CHANGE_TYPES, InventoryLog, Product, column_registry
from product_svc.catalog.repository import InventoryLogRepository, ProductRepository
from product_svc.catalog.service import CatalogService

__all__ = [
    # Models
    "CHANGE_TYPES",
    "InventoryLog",
    "Product",
    "column_registry",
    # Repositories
    "InventoryLogRepository",
    "ProductRepository",
    # Service
    "CatalogService",
]
