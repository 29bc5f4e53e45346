"""Input validation for products and stock changes."""

import math
import re

from product_svc.catalog.models import CHANGE_TYPES
from product_svc.domain.exceptions import ValidationError

S3_URL_PATTERN = re.compile(r"^https://[^.]+\.s3\.[^.]+\.amazonaws\.com/")


def validate_product_input(
    name: str,
    description: str | None,
    price: float,
    stock: int,
    image_url: str | None,
) -> None:
    """Validate product fields.

    Raises:
        ValidationError: With one message per invalid field.
    """
    errors: dict[str, str] = {}

    if not name.strip():
        errors["name"] = "Name is required"

    if description is None or not description.strip():
        errors["description"] = "Description is required"

    if not math.isfinite(price) or price <= 0:
        errors["price"] = "Price must be greater than 0"

    if stock < 0:
        errors["stock"] = "Stock must be greater than or equal to 0"

    if image_url and not S3_URL_PATTERN.match(image_url.strip()):
        errors["image_url"] = "Invalid S3 image URL"

    if errors:
        raise ValidationError(errors)


def validate_change_type(change_type: str) -> None:
    """Validate a stock change reason.

    Raises:
        ValidationError: If the change type is not recognized.
    """
    if change_type not in CHANGE_TYPES:
        raise ValidationError({"change_type": "Invalid change type"})
