"""Pagination parameter normalization.

Turns raw page/size input into a bounded ``PageRequest`` before it
reaches the repository.
"""

from typing import Any

from app.catalog.entities import PageRequest, SortOrder
from app.catalog.exceptions import ValidationError


class PaginationEngine:
    """Validates and normalizes listing parameters.

    Absent values fall back to defaults. Explicit out-of-range values are
    rejected, never clamped.
    """

    def __init__(self, default_size: int = 10, max_size: int = 100) -> None:
        """Initialize engine.

        Args:
            default_size: Page size used when none is given.
            max_size: Hard cap on page size.
        """
        if not 0 < default_size <= max_size:
            raise ValueError("default_size must be within 1..max_size")
        self.default_size = default_size
        self.max_size = max_size
        self.sort = SortOrder()

    def normalize(
        self,
        raw_page: Any = None,
        raw_size: Any = None,
        category: Any = None,
    ) -> PageRequest:
        """Build a page request from raw input.

        Args:
            raw_page: Zero-based page index, or None for the first page.
            raw_size: Page size, or None for the default.
            category: Optional category filter.

        Returns:
            Normalized page request.

        Raises:
            ValidationError: If any explicit value is out of range.
        """
        page = 0 if raw_page is None else self._as_int("page", raw_page)
        if page < 0:
            raise ValidationError("page", "must be >= 0")

        size = self.default_size if raw_size is None else self._as_int("size", raw_size)
        if size <= 0:
            raise ValidationError("size", "must be > 0")
        if size > self.max_size:
            raise ValidationError("size", f"must be <= {self.max_size}")

        return PageRequest(
            category=self._normalize_category(category),
            page=page,
            size=size,
            sort=self.sort,
        )

    @staticmethod
    def _as_int(field: str, value: Any) -> int:
        # bool is an int subclass
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError(field, "must be an integer")
        return value

    @staticmethod
    def _normalize_category(category: Any) -> str | None:
        if category is None:
            return None
        if not isinstance(category, str):
            raise ValidationError("category", "must be a string")
        stripped = category.strip()
        if not stripped:
            raise ValidationError("category", "must not be blank")
        return stripped
