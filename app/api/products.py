"""Product API endpoints.

Thin transport over ``ProductService``: every result error is mapped to
an HTTP status and the standard error envelope.
"""

from typing import Annotated, NoReturn

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status

from app.api.schemas import (
    CategoryListResponse,
    CreateProductRequest,
    ErrorResponse,
    ProductListResponse,
    ProductResponse,
    UpdateProductRequest,
)
from app.catalog.exceptions import CatalogError, ValidationError
from app.catalog.service import ProductService

router = APIRouter(prefix="/products", tags=["Products"])

ERROR_STATUS = {
    "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
    "PRODUCT_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "CONFLICT": status.HTTP_409_CONFLICT,
    "STORAGE_UNAVAILABLE": status.HTTP_503_SERVICE_UNAVAILABLE,
}

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}


# ============================================================================
# Dependencies
# ============================================================================


def get_service(request: Request) -> ProductService:
    """Get product service bound to the app's repository and request ID."""
    request_id = getattr(request.state, "request_id", None)
    return ProductService(
        repository=request.app.state.product_repository,
        pagination=request.app.state.pagination,
        request_id=request_id,
    )


# ============================================================================
# Converters
# ============================================================================


def raise_for_error(error: CatalogError) -> NoReturn:
    """Translate a service error into an HTTPException."""
    details = []
    if isinstance(error, ValidationError):
        details.append({"field": error.field, "message": error.reason})

    raise HTTPException(
        status_code=ERROR_STATUS.get(error.error_code, status.HTTP_500_INTERNAL_SERVER_ERROR),
        detail={
            "error_code": error.error_code,
            "message": error.message,
            "details": details,
        },
    )


# ============================================================================
# Endpoints
# ============================================================================


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
    summary="Create product",
)
async def create_product(
    body: CreateProductRequest,
    service: Annotated[ProductService, Depends(get_service)],
) -> ProductResponse:
    """Create a product.

    Args:
        body: Category and name.
        service: Product service.

    Returns:
        Created product.
    """
    result = await service.create(body.category, body.name)
    if not result.success:
        raise_for_error(result.error)
    return ProductResponse.from_entity(result.product)


@router.get(
    "",
    response_model=ProductListResponse,
    responses=ERROR_RESPONSES,
    summary="List products by category",
)
async def list_products(
    service: Annotated[ProductService, Depends(get_service)],
    category: Annotated[str | None, Query(description="Category filter")] = None,
    page: Annotated[int | None, Query(description="Zero-based page index")] = None,
    size: Annotated[int | None, Query(description="Page size (max 100)")] = None,
) -> ProductListResponse:
    """List one page of products, optionally filtered by category.

    Returns:
        Page of products with totals.
    """
    result = await service.list_by_category(category, page, size)
    if not result.success:
        raise_for_error(result.error)
    return ProductListResponse.from_page(result.page)


@router.get(
    "/categories",
    response_model=CategoryListResponse,
    responses={503: {"model": ErrorResponse}},
    summary="List distinct categories",
)
async def list_categories(
    service: Annotated[ProductService, Depends(get_service)],
) -> CategoryListResponse:
    """List distinct product categories."""
    result = await service.list_categories()
    if not result.success:
        raise_for_error(result.error)
    return CategoryListResponse(categories=result.categories)


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    responses=ERROR_RESPONSES,
    summary="Get product",
)
async def get_product(
    product_id: int,
    service: Annotated[ProductService, Depends(get_service)],
) -> ProductResponse:
    """Get a product by ID.

    Raises:
        HTTPException: If product not found.
    """
    result = await service.get_by_id(product_id)
    if not result.success:
        raise_for_error(result.error)
    return ProductResponse.from_entity(result.product)


@router.put(
    "/{product_id}",
    response_model=ProductResponse,
    responses={**ERROR_RESPONSES, 409: {"model": ErrorResponse}},
    summary="Replace product fields",
)
async def update_product(
    product_id: int,
    body: UpdateProductRequest,
    service: Annotated[ProductService, Depends(get_service)],
) -> ProductResponse:
    """Replace category and name of a product.

    Sending ``version`` turns the write into a check-and-set; a stale
    version yields 409.
    """
    result = await service.update(
        product_id,
        body.category,
        body.name,
        expected_version=body.version,
    )
    if not result.success:
        raise_for_error(result.error)
    return ProductResponse.from_entity(result.product)


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=ERROR_RESPONSES,
    summary="Delete product",
)
async def delete_product(
    product_id: int,
    service: Annotated[ProductService, Depends(get_service)],
) -> Response:
    """Delete a product by ID."""
    result = await service.delete(product_id)
    if not result.success:
        raise_for_error(result.error)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
