"""Query execution.

The list engine only needs two capabilities from the store: count the rows
matching a set of criteria, and fetch them with ordering and an
offset/limit window. ``SqlAlchemyQueryExecutor`` provides both over an
async SQLAlchemy session.
"""

from collections.abc import Sequence
from typing import Any, Protocol

import structlog
from sqlalchemy import ColumnElement, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from product_svc.domain.exceptions import ExecutionFailureError
from product_svc.querying.pagination import UNBOUNDED, PageWindow

logger = structlog.get_logger()


class QueryExecutor(Protocol):
    """Store capability consumed by ``ListQuery``.

    Implementations raise ``ExecutionFailureError`` when the store cannot
    complete a request.
    """

    async def count(
        self,
        model: type[Any],
        criteria: Sequence[ColumnElement[bool]],
    ) -> int:
        """Count rows of ``model`` matching all criteria."""
        ...

    async def fetch(
        self,
        model: type[Any],
        criteria: Sequence[ColumnElement[bool]],
        order_by: Sequence[Any] = (),
        window: PageWindow = UNBOUNDED,
    ) -> list[Any]:
        """Fetch rows of ``model`` matching all criteria."""
        ...


class SqlAlchemyQueryExecutor:
    """Query executor backed by an async SQLAlchemy session.

    Example usage:
        async with async_session_factory() as session:
            executor = SqlAlchemyQueryExecutor(session)
            total = await executor.count(Product, [Product.price >= 10])
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize executor with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    async def count(
        self,
        model: type[Any],
        criteria: Sequence[ColumnElement[bool]],
    ) -> int:
        """Count rows matching the criteria.

        Args:
            model: Mapped class to count.
            criteria: Predicates combined with AND.

        Returns:
            Number of matching rows.

        Raises:
            ExecutionFailureError: If the store fails.
        """
        query = select(func.count()).select_from(model).where(*criteria)

        try:
            result = await self.session.execute(query)
        except SQLAlchemyError as e:
            logger.exception(
                "List count failed",
                entity=model.__name__,
                error=str(e),
            )
            raise ExecutionFailureError("count") from e

        return result.scalar_one()

    async def fetch(
        self,
        model: type[Any],
        criteria: Sequence[ColumnElement[bool]],
        order_by: Sequence[Any] = (),
        window: PageWindow = UNBOUNDED,
    ) -> list[Any]:
        """Fetch rows matching the criteria.

        Args:
            model: Mapped class to fetch.
            criteria: Predicates combined with AND.
            order_by: Ordering expressions, applied in order.
            window: Offset/limit window; ``UNBOUNDED`` fetches every row.

        Returns:
            Matching model instances.

        Raises:
            ExecutionFailureError: If the store fails.
        """
        query = select(model).where(*criteria)

        if order_by:
            query = query.order_by(*order_by)

        if window.bounded:
            query = query.offset(window.offset).limit(window.limit)

        try:
            result = await self.session.execute(query)
        except SQLAlchemyError as e:
            logger.exception(
                "List fetch failed",
                entity=model.__name__,
                error=str(e),
            )
            raise ExecutionFailureError("fetch") from e

        return list(result.scalars().all())
