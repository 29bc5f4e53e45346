"""Run the product service with uvicorn."""

import uvicorn

from product_svc.infrastructure.config import settings


def main() -> None:
    """Main entry point."""
    uvicorn.run(
        "product_svc.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
