"""API schemas for the product catalog.

Pydantic models for request/response serialization. Field-level rules
(blank, length, page bounds) are enforced by ``ProductService`` so every
surface reports them the same way.
"""

from typing import Any

from pydantic import BaseModel, Field

from app.catalog.entities import Product, ProductPage


# ============================================================================
# Common Schemas
# ============================================================================


class ErrorDetail(BaseModel):
    """Detailed error information."""

    field: str | None = Field(default=None, description="Field that caused the error")
    message: str = Field(..., description="Error message")


class ErrorResponse(BaseModel):
    """Standard error response.

    All API errors follow this format for consistency.
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: list[ErrorDetail] = Field(
        default_factory=list, description="Additional error details"
    )
    request_id: str | None = Field(
        default=None, description="Request ID for correlation"
    )


# ============================================================================
# Product Schemas
# ============================================================================


class CreateProductRequest(BaseModel):
    """Request to create a product."""

    category: Any = Field(default=None, description="Product category (1-100 chars)")
    name: Any = Field(default=None, description="Product name (1-200 chars)")


class UpdateProductRequest(BaseModel):
    """Request to replace a product's fields.

    Both fields are required; omitting one is a validation error.
    """

    category: Any = Field(default=None, description="New category (1-100 chars)")
    name: Any = Field(default=None, description="New name (1-200 chars)")
    version: int | None = Field(
        default=None,
        description="Version last seen by the client; enables a conflict check",
    )


class ProductResponse(BaseModel):
    """Product representation."""

    id: int
    category: str
    name: str
    version: int

    @classmethod
    def from_entity(cls, product: Product) -> "ProductResponse":
        """Convert Product snapshot to response schema."""
        return cls(**product.to_dict())


class ProductListResponse(BaseModel):
    """One page of products."""

    products: list[ProductResponse]
    total_pages: int
    total_elements: int
    page: int
    size: int

    @classmethod
    def from_page(cls, page: ProductPage) -> "ProductListResponse":
        """Convert ProductPage to response schema."""
        return cls(
            products=[ProductResponse.from_entity(p) for p in page.items],
            total_pages=page.total_pages,
            total_elements=page.total_elements,
            page=page.page,
            size=page.size,
        )


class CategoryListResponse(BaseModel):
    """Distinct categories."""

    categories: list[str]
