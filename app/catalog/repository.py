"""Product repository for database operations.

Every method runs in its own transaction on the ``Database`` handle and
returns immutable ``Product`` snapshots. Driver faults and timeouts are
reported as ``StorageUnavailableError``.
"""

import asyncio
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from typing import TypeVar

import structlog
from sqlalchemy import and_, delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncSession

from app.catalog.entities import STORE_INT_MAX, PageRequest, Product, ProductPage
from app.catalog.exceptions import (
    CatalogError,
    ConflictError,
    ProductNotFoundError,
    StorageUnavailableError,
)
from app.catalog.models import ProductRecord
from app.infrastructure.database import Database

logger = structlog.get_logger()

T = TypeVar("T")

# Dialects that need an explicit isolation level for count + page to agree
_SNAPSHOT_ISOLATION = {
    "postgresql": "REPEATABLE READ",
    "mysql": "REPEATABLE READ",
}


class ProductRepository:
    """Repository for Product database operations.

    Example usage:
        repo = ProductRepository(database, timeout_seconds=5.0)
        product = await repo.insert("electronics", "laptop")
        page = await repo.query_by_category(
            PageRequest(category="electronics", page=0, size=10)
        )
    """

    def __init__(self, database: Database, timeout_seconds: float | None = None) -> None:
        """Initialize repository with a database handle.

        Args:
            database: Database handle that owns the engine.
            timeout_seconds: Upper bound for a single store call, or None.
        """
        self.database = database
        self.timeout_seconds = timeout_seconds

    async def insert(self, category: str, name: str) -> Product:
        """Persist a new product.

        Args:
            category: Validated category.
            name: Validated name.

        Returns:
            Snapshot with the assigned id.
        """

        async def work(session: AsyncSession) -> Product:
            record = ProductRecord(category=category, name=name, version=1)
            session.add(record)
            await session.flush()
            return record.to_snapshot()

        return await self._run("insert", work)

    async def find_by_id(self, product_id: int) -> Product:
        """Get product by ID.

        Args:
            product_id: Product ID.

        Returns:
            Product snapshot.

        Raises:
            ProductNotFoundError: If no row has this ID.
        """

        async def work(session: AsyncSession) -> Product:
            record = await session.get(ProductRecord, product_id)
            if record is None:
                raise ProductNotFoundError(product_id)
            return record.to_snapshot()

        return await self._run("find_by_id", work)

    async def replace(
        self,
        product_id: int,
        category: str,
        name: str,
        expected_version: int | None = None,
    ) -> Product:
        """Overwrite both fields of an existing product in one statement.

        Args:
            product_id: Product ID.
            category: New category.
            name: New name.
            expected_version: If given, only write when the stored version matches.

        Returns:
            Snapshot of the row as written.

        Raises:
            ProductNotFoundError: If no row has this ID.
            ConflictError: If the stored version differs from expected_version.
        """

        async def work(session: AsyncSession) -> Product:
            conditions = [ProductRecord.id == product_id]
            if expected_version is not None:
                conditions.append(ProductRecord.version == expected_version)

            stmt = (
                update(ProductRecord)
                .where(and_(*conditions))
                .values(
                    category=category,
                    name=name,
                    version=ProductRecord.version + 1,
                    updated_at=datetime.now(timezone.utc),
                )
                .execution_options(synchronize_session=False)
            )
            result = await session.execute(stmt)

            if result.rowcount == 0:
                current_version = await session.scalar(
                    select(ProductRecord.version).where(ProductRecord.id == product_id)
                )
                if current_version is None:
                    raise ProductNotFoundError(product_id)
                raise ConflictError(product_id, expected_version, current_version)

            # Same transaction, so this reads our own write
            record = await session.get(ProductRecord, product_id, populate_existing=True)
            return record.to_snapshot()

        return await self._run("replace", work)

    async def delete_by_id(self, product_id: int) -> None:
        """Delete a product in a single statement.

        Args:
            product_id: Product ID.

        Raises:
            ProductNotFoundError: If no row has this ID.
        """

        async def work(session: AsyncSession) -> None:
            stmt = (
                delete(ProductRecord)
                .where(ProductRecord.id == product_id)
                .execution_options(synchronize_session=False)
            )
            result = await session.execute(stmt)
            if result.rowcount == 0:
                raise ProductNotFoundError(product_id)

        await self._run("delete_by_id", work)

    async def query_by_category(self, page_request: PageRequest) -> ProductPage:
        """Find one page of products, optionally filtered by category.

        The count and the page are read in the same transaction so the
        totals always describe the returned items.

        Args:
            page_request: Normalized page request.

        Returns:
            Page of product snapshots with totals.
        """

        async def work(session: AsyncSession) -> ProductPage:
            isolation_level = _SNAPSHOT_ISOLATION.get(self.database.dialect_name)
            if isolation_level:
                await session.connection(
                    execution_options={"isolation_level": isolation_level}
                )

            conditions = []
            if page_request.category is not None:
                conditions.append(ProductRecord.category == page_request.category)

            count_query = select(func.count(ProductRecord.id))
            query = select(ProductRecord)
            if conditions:
                count_query = count_query.where(and_(*conditions))
                query = query.where(and_(*conditions))

            total = (await session.execute(count_query)).scalar_one()

            # An offset the store cannot represent is past any real row
            records = []
            if page_request.offset <= STORE_INT_MAX:
                query = (
                    query.order_by(ProductRecord.id.asc())
                    .limit(page_request.limit)
                    .offset(page_request.offset)
                )
                records = (await session.execute(query)).scalars().all()

            return ProductPage(
                items=tuple(record.to_snapshot() for record in records),
                total_elements=total,
                page=page_request.page,
                size=page_request.size,
            )

        return await self._run("query_by_category", work)

    async def distinct_categories(self) -> list[str]:
        """Get list of unique categories.

        Returns:
            Category names, sorted.
        """

        async def work(session: AsyncSession) -> list[str]:
            query = select(ProductRecord.category).distinct().order_by(ProductRecord.category)
            result = await session.execute(query)
            return list(result.scalars().all())

        return await self._run("distinct_categories", work)

    async def _run(
        self,
        operation: str,
        work: Callable[[AsyncSession], Awaitable[T]],
    ) -> T:
        """Run work in one transaction, bounded by the store timeout.

        Args:
            operation: Operation name for diagnostics.
            work: Coroutine function receiving the session.

        Returns:
            Whatever work returns.

        Raises:
            StorageUnavailableError: On driver faults or timeout.
        """

        async def in_transaction() -> T:
            async with self.database.transaction() as session:
                return await work(session)

        try:
            if self.timeout_seconds is None:
                return await in_transaction()
            return await asyncio.wait_for(in_transaction(), timeout=self.timeout_seconds)
        except CatalogError:
            raise
        except (asyncio.TimeoutError, PoolTimeoutError) as e:
            logger.error("Store call timed out", operation=operation)
            raise StorageUnavailableError(
                operation, f"timed out after {self.timeout_seconds}s"
            ) from e
        except (SQLAlchemyError, OSError) as e:
            logger.error("Store call failed", operation=operation, error=str(e))
            raise StorageUnavailableError(operation, str(e)) from e
