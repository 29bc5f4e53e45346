"""Column registry.

Derives, per mapped model, the set of column names callers may filter and
sort on. Allowlists come from the model mapping only, never from request
input, and are computed once when the registry is built.
"""

from collections.abc import Iterable
from types import MappingProxyType
from typing import Any

from sqlalchemy import inspect


def listable_columns(model: type[Any]) -> frozenset[str]:
    """Derive the allowlist of a mapped model.

    Every mapped column attribute is listable unless the column was declared
    with ``info={"listable": False}``.

    Args:
        model: SQLAlchemy mapped class.

    Returns:
        Column attribute names eligible for filtering and sorting.
    """
    mapper = inspect(model)
    return frozenset(
        key
        for key, column in mapper.columns.items()
        if column.info.get("listable", True)
    )


class ColumnRegistry:
    """Read-only mapping from entity model to its column allowlist.

    Example usage:
        registry = ColumnRegistry([Product, InventoryLog])
        registry.allowed_columns(Product)
        # frozenset({"id", "name", "price", ...})
    """

    def __init__(self, models: Iterable[type[Any]]) -> None:
        """Build allowlists for the given models.

        Args:
            models: Mapped classes that support list queries.
        """
        self._allowlists = MappingProxyType(
            {model: listable_columns(model) for model in models}
        )

    def allowed_columns(self, model: type[Any]) -> frozenset[str]:
        """Get the allowlist for a model.

        Args:
            model: Registered mapped class.

        Returns:
            Immutable set of allowed column names.

        Raises:
            LookupError: If the model was never registered.
        """
        try:
            return self._allowlists[model]
        except KeyError:
            raise LookupError(f"{model.__name__} is not registered for list queries") from None

    def __contains__(self, model: object) -> bool:
        return model in self._allowlists
