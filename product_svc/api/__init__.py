"""API layer module.

Contains FastAPI routers and request/response schemas.
"""

from product_svc.api.health import router as health_router
from product_svc.api.products import router as products_router

__all__ = [
    "health_router",
    "products_router",
]
