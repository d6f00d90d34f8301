"""Catalog exceptions.

Errors raised by the product store and pagination engine. The service
layer catches them and hands them back inside result objects, so callers
of ``ProductService`` branch on ``result.error`` instead of catching.
"""

from typing import Any


class CatalogError(Exception):
    """Base class for all catalog errors.

    Attributes:
        message: Human-readable error message.
        details: Additional error context.
    """

    error_code = "CATALOG_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize catalog error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(CatalogError):
    """Raised when input is malformed or out of bounds.

    Always detected before any store call.
    """

    error_code = "VALIDATION_ERROR"

    def __init__(self, field: str, reason: str) -> None:
        """Initialize validation error.

        Args:
            field: Name of the offending field.
            reason: Why the value was rejected.
        """
        super().__init__(
            f"Invalid {field}: {reason}",
            details={"field": field, "reason": reason},
        )
        self.field = field
        self.reason = reason


class ProductNotFoundError(CatalogError):
    """Raised when the referenced product does not exist."""

    error_code = "PRODUCT_NOT_FOUND"

    def __init__(self, product_id: int) -> None:
        """Initialize product not found error.

        Args:
            product_id: ID that was requested.
        """
        super().__init__(
            f"Product not found: {product_id}",
            details={"product_id": product_id},
        )
        self.product_id = product_id


class ConflictError(CatalogError):
    """Raised when an optimistic version check loses to a concurrent writer.

    The caller is expected to re-read and retry.
    """

    error_code = "CONFLICT"

    def __init__(
        self,
        product_id: int,
        expected_version: int,
        actual_version: int | None = None,
    ) -> None:
        """Initialize conflict error.

        Args:
            product_id: ID of the contested product.
            expected_version: Version the caller based its write on.
            actual_version: Version currently stored, if known.
        """
        super().__init__(
            f"Product {product_id} was modified concurrently "
            f"(expected version {expected_version}, found {actual_version})",
            details={
                "product_id": product_id,
                "expected_version": expected_version,
                "actual_version": actual_version,
            },
        )
        self.product_id = product_id
        self.expected_version = expected_version
        self.actual_version = actual_version


class StorageUnavailableError(CatalogError):
    """Raised on I/O faults or timeouts talking to the database.

    Never used for a missing row. The core does not retry.
    """

    error_code = "STORAGE_UNAVAILABLE"

    def __init__(self, operation: str, reason: str) -> None:
        """Initialize storage unavailable error.

        Args:
            operation: Store operation that failed.
            reason: Underlying failure description.
        """
        super().__init__(
            f"Storage unavailable during {operation}: {reason}",
            details={"operation": operation, "reason": reason},
        )
        self.operation = operation
        self.reason = reason
