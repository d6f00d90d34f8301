"""Catalog value objects.

Immutable snapshots handed to callers. The ORM row never leaves the
repository; these are what everything above it sees.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

CATEGORY_MAX_LENGTH = 100
NAME_MAX_LENGTH = 200

# Largest value a 64-bit signed INTEGER column or LIMIT/OFFSET accepts
STORE_INT_MAX = 2**63 - 1


@dataclass(frozen=True)
class Product:
    """Snapshot of a stored product.

    Attributes:
        id: Store-assigned identifier, never reused.
        category: Product category (1-100 chars, non-blank).
        name: Product name (1-200 chars, non-blank).
        version: Row version, bumped on every update.
    """

    id: int
    category: str
    name: str
    version: int = 1

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "category": self.category,
            "name": self.name,
            "version": self.version,
        }


class SortDirection(str, Enum):
    """Sort direction."""

    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class SortOrder:
    """Sort order for product listings.

    Only ``id`` is sortable: listings are filtered by category, so sorting
    by category would carry no order.
    """

    field: str = "id"
    direction: SortDirection = SortDirection.ASC


@dataclass(frozen=True)
class PageRequest:
    """Normalized, bounded query plan for one listing call.

    Attributes:
        category: Category filter, or None for all products.
        page: Zero-based page index.
        size: Page size.
        sort: Fixed sort order.
    """

    category: str | None
    page: int
    size: int
    sort: SortOrder = field(default_factory=SortOrder)

    @property
    def offset(self) -> int:
        """Calculate offset from page number."""
        return self.page * self.size

    @property
    def limit(self) -> int:
        """Get limit (alias for size)."""
        return self.size


@dataclass(frozen=True)
class ProductPage:
    """One page of a category listing.

    Attributes:
        items: Products on this page, in sort order.
        total_elements: Number of products matching the filter.
        page: Zero-based page index that was requested.
        size: Page size that was requested.
    """

    items: tuple[Product, ...]
    total_elements: int
    page: int
    size: int

    @property
    def total_pages(self) -> int:
        """Calculate total pages."""
        return (self.total_elements + self.size - 1) // self.size
