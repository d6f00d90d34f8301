"""Product Catalog.

Provides product persistence, pagination and the product service
used by the HTTP layer.
"""

from app.catalog.entities import PageRequest, Product, ProductPage, SortDirection, SortOrder
from app.catalog.exceptions import (
    CatalogError,
    ConflictError,
    ProductNotFoundError,
    StorageUnavailableError,
    ValidationError,
)
from app.catalog.models import ProductRecord
from app.catalog.pagination import PaginationEngine
from app.catalog.repository import ProductRepository
from app.catalog.service import (
    CategoriesResult,
    DeleteResult,
    ProductPageResult,
    ProductResult,
    ProductService,
)

__all__ = [
    # Entities
    "PageRequest",
    "Product",
    "ProductPage",
    "SortDirection",
    "SortOrder",
    # Errors
    "CatalogError",
    "ConflictError",
    "ProductNotFoundError",
    "StorageUnavailableError",
    "ValidationError",
    # Models
    "ProductRecord",
    # Pagination
    "PaginationEngine",
    # Repository
    "ProductRepository",
    # Service
    "CategoriesResult",
    "DeleteResult",
    "ProductPageResult",
    "ProductResult",
    "ProductService",
]
