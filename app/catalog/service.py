"""Product application service.

Orchestrates product lifecycle management:
- Validating input before anything touches the store
- Full-replacement updates with optional optimistic version check
- Category-filtered, bounded pagination
- Classifying failures into result objects
"""

from dataclasses import dataclass, field
from typing import Any

import structlog

from app.catalog.entities import (
    CATEGORY_MAX_LENGTH,
    NAME_MAX_LENGTH,
    STORE_INT_MAX,
    Product,
    ProductPage,
)
from app.catalog.exceptions import CatalogError, StorageUnavailableError, ValidationError
from app.catalog.pagination import PaginationEngine
from app.catalog.repository import ProductRepository

logger = structlog.get_logger()


# ============================================================================
# Service Result Types
# ============================================================================


@dataclass
class ServiceResult:
    """Common shape of all service results.

    Exactly one of the payload or ``error`` is meaningful.
    """

    error: CatalogError | None = None

    @property
    def success(self) -> bool:
        """Whether the operation succeeded."""
        return self.error is None

    @property
    def error_code(self) -> str | None:
        """Machine-readable code of the error, if any."""
        return self.error.error_code if self.error else None


@dataclass
class ProductResult(ServiceResult):
    """Result of creating, getting or updating a product."""

    product: Product | None = None


@dataclass
class DeleteResult(ServiceResult):
    """Result of deleting a product."""

    product_id: int | None = None


@dataclass
class ProductPageResult(ServiceResult):
    """Result of listing products."""

    page: ProductPage | None = None


@dataclass
class CategoriesResult(ServiceResult):
    """Result of listing categories."""

    categories: list[str] = field(default_factory=list)


# ============================================================================
# Validation
# ============================================================================


def _validate_text(field_name: str, value: Any, max_length: int) -> str:
    """Check a required text field.

    Args:
        field_name: Field name for the error.
        value: Raw value.
        max_length: Maximum allowed length.

    Returns:
        The value, unchanged.

    Raises:
        ValidationError: If missing, not a string, blank or too long.
    """
    if value is None:
        raise ValidationError(field_name, "is required")
    if not isinstance(value, str):
        raise ValidationError(field_name, "must be a string")
    if not value.strip():
        raise ValidationError(field_name, "must not be blank")
    if len(value) > max_length:
        raise ValidationError(field_name, f"must be at most {max_length} characters")
    return value


def _validate_positive_int(field_name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(field_name, "must be an integer")
    if value <= 0:
        raise ValidationError(field_name, "must be positive")
    if value > STORE_INT_MAX:
        raise ValidationError(field_name, f"must be at most {STORE_INT_MAX}")
    return value


# ============================================================================
# Product Service
# ============================================================================


class ProductService:
    """Application service for managing catalog products.

    Operations never raise for classified failures; they return a result
    whose ``error`` is a ``ValidationError``, ``ProductNotFoundError``,
    ``ConflictError`` or ``StorageUnavailableError``.

    Example usage:
        service = ProductService(ProductRepository(database))
        result = await service.create("electronics", "laptop")
        if result.success:
            print(result.product.id)
    """

    def __init__(
        self,
        repository: ProductRepository,
        pagination: PaginationEngine | None = None,
        request_id: str | None = None,
    ) -> None:
        """Initialize service.

        Args:
            repository: Product repository.
            pagination: Pagination engine (defaults to 10 per page, max 100).
            request_id: Request ID for correlation.
        """
        self.repository = repository
        self.pagination = pagination or PaginationEngine()
        self.request_id = request_id

    async def create(self, category: Any, name: Any) -> ProductResult:
        """Create a new product.

        Args:
            category: Product category.
            name: Product name.

        Returns:
            ProductResult with the created product.
        """
        try:
            category = _validate_text("category", category, CATEGORY_MAX_LENGTH)
            name = _validate_text("name", name, NAME_MAX_LENGTH)

            product = await self.repository.insert(category, name)
        except CatalogError as e:
            return ProductResult(error=self._failed("Failed to create product", e))

        logger.info(
            "Product created",
            product_id=product.id,
            category=product.category,
            request_id=self.request_id,
        )
        return ProductResult(product=product)

    async def get_by_id(self, product_id: Any) -> ProductResult:
        """Get a product by ID.

        Args:
            product_id: Product ID.

        Returns:
            ProductResult with the product, or a not-found error carrying the ID.
        """
        try:
            product_id = _validate_positive_int("id", product_id)
            product = await self.repository.find_by_id(product_id)
        except CatalogError as e:
            return ProductResult(error=self._failed("Failed to get product", e))

        return ProductResult(product=product)

    async def update(
        self,
        product_id: Any,
        category: Any,
        name: Any,
        expected_version: Any = None,
    ) -> ProductResult:
        """Replace both fields of an existing product.

        Both fields are required; there is no partial merge. The write is
        a single statement, so concurrent updates of the same product are
        applied one after another and never mix fields.

        Args:
            product_id: Product ID.
            category: New category.
            name: New name.
            expected_version: Version the caller last saw, for a
                check-and-set write. None writes unconditionally.

        Returns:
            ProductResult with the updated product.
        """
        try:
            product_id = _validate_positive_int("id", product_id)
            category = _validate_text("category", category, CATEGORY_MAX_LENGTH)
            name = _validate_text("name", name, NAME_MAX_LENGTH)
            if expected_version is not None:
                expected_version = _validate_positive_int("version", expected_version)

            product = await self.repository.replace(
                product_id,
                category,
                name,
                expected_version=expected_version,
            )
        except CatalogError as e:
            return ProductResult(error=self._failed("Failed to update product", e))

        logger.info(
            "Product updated",
            product_id=product.id,
            version=product.version,
            request_id=self.request_id,
        )
        return ProductResult(product=product)

    async def delete(self, product_id: Any) -> DeleteResult:
        """Delete a product.

        Args:
            product_id: Product ID.

        Returns:
            DeleteResult with the deleted ID.
        """
        try:
            product_id = _validate_positive_int("id", product_id)
            await self.repository.delete_by_id(product_id)
        except CatalogError as e:
            return DeleteResult(error=self._failed("Failed to delete product", e))

        logger.info("Product deleted", product_id=product_id, request_id=self.request_id)
        return DeleteResult(product_id=product_id)

    async def list_by_category(
        self,
        category: Any = None,
        raw_page: Any = None,
        raw_size: Any = None,
    ) -> ProductPageResult:
        """List products in a category, one page at a time.

        Args:
            category: Category filter, or None for all products.
            raw_page: Zero-based page index (default 0).
            raw_size: Page size (default 10, max 100).

        Returns:
            ProductPageResult with the page and totals.
        """
        try:
            page_request = self.pagination.normalize(raw_page, raw_size, category=category)
            page = await self.repository.query_by_category(page_request)
        except CatalogError as e:
            return ProductPageResult(error=self._failed("Failed to list products", e))

        return ProductPageResult(page=page)

    async def list_categories(self) -> CategoriesResult:
        """List distinct categories.

        Returns:
            CategoriesResult with category names.
        """
        try:
            categories = await self.repository.distinct_categories()
        except CatalogError as e:
            return CategoriesResult(error=self._failed("Failed to list categories", e))

        return CategoriesResult(categories=categories)

    def _failed(self, event: str, error: CatalogError) -> CatalogError:
        """Log a classified failure and hand it back."""
        log = logger.error if isinstance(error, StorageUnavailableError) else logger.warning
        log(
            event,
            error_code=error.error_code,
            error=error.message,
            request_id=self.request_id,
            **error.details,
        )
        return error
