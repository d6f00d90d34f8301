"""Tests for ProductService."""

from pathlib import Path

import pytest

from app.catalog.exceptions import (
    ConflictError,
    ProductNotFoundError,
    StorageUnavailableError,
    ValidationError,
)
from app.catalog.repository import ProductRepository
from app.catalog.service import ProductService
from app.infrastructure.database import Database


class TestCreate:
    """Tests for create."""

    async def test_round_trip(self, service: ProductService) -> None:
        """Created product reads back with identical fields."""
        created = await service.create("전자제품", "노트북")
        assert created.success
        assert created.error is None

        fetched = await service.get_by_id(created.product.id)
        assert fetched.success
        assert fetched.product.category == "전자제품"
        assert fetched.product.name == "노트북"

    async def test_blank_category_rejected(self, service: ProductService) -> None:
        """Empty category fails and nothing is persisted."""
        result = await service.create("", "X")

        assert not result.success
        assert result.error_code == "VALIDATION_ERROR"
        assert isinstance(result.error, ValidationError)
        assert result.error.field == "category"

        categories = await service.list_categories()
        assert categories.categories == []

    @pytest.mark.parametrize(
        ("category", "name", "field"),
        [
            ("   ", "X", "category"),
            (None, "X", "category"),
            (123, "X", "category"),
            ("가구", "", "name"),
            ("가구", None, "name"),
            ("a" * 101, "X", "category"),
            ("가구", "n" * 201, "name"),
        ],
    )
    async def test_invalid_fields(
        self,
        service: ProductService,
        category: object,
        name: object,
        field: str,
    ) -> None:
        """Missing, blank, non-string or oversize fields are rejected."""
        result = await service.create(category, name)
        assert result.error_code == "VALIDATION_ERROR"
        assert result.error.field == field

    async def test_length_bounds_inclusive(self, service: ProductService) -> None:
        """Values at the maximum length are accepted."""
        result = await service.create("c" * 100, "n" * 200)
        assert result.success


class TestGetById:
    """Tests for get_by_id."""

    async def test_not_found_carries_id(self, service: ProductService) -> None:
        """Missing product yields a not-found result with the id."""
        result = await service.get_by_id(404)
        assert not result.success
        assert result.error_code == "PRODUCT_NOT_FOUND"
        assert isinstance(result.error, ProductNotFoundError)
        assert result.error.product_id == 404

    @pytest.mark.parametrize("product_id", [0, -3, "1", True, 2**63, 2**70])
    async def test_invalid_id(self, service: ProductService, product_id: object) -> None:
        """Non-positive or non-integer ids are validation errors."""
        result = await service.get_by_id(product_id)
        assert result.error_code == "VALIDATION_ERROR"
        assert result.error.field == "id"


class TestUpdate:
    """Tests for update."""

    async def test_full_replacement(self, service: ProductService) -> None:
        """Both fields are replaced."""
        created = await service.create("전자제품", "마우스")
        result = await service.update(created.product.id, "가구", "책상")

        assert result.success
        assert result.product.category == "가구"
        assert result.product.name == "책상"
        assert result.product.version == 2

    async def test_omitted_field_rejected(self, service: ProductService) -> None:
        """Updates are full replacements, so a missing field is invalid."""
        created = await service.create("전자제품", "마우스")
        result = await service.update(created.product.id, "가구", None)

        assert result.error_code == "VALIDATION_ERROR"
        assert result.error.field == "name"
        unchanged = await service.get_by_id(created.product.id)
        assert unchanged.product.category == "전자제품"

    async def test_blank_field_rejected(self, service: ProductService) -> None:
        """Blank values are rejected before any write."""
        created = await service.create("전자제품", "마우스")
        result = await service.update(created.product.id, " ", "마우스")
        assert result.error.field == "category"

    async def test_missing_product(self, service: ProductService) -> None:
        """Updating a missing product is not-found."""
        result = await service.update(99, "가구", "책상")
        assert result.error_code == "PRODUCT_NOT_FOUND"

    async def test_stale_version_conflicts(self, service: ProductService) -> None:
        """An outdated expected version yields ConflictError."""
        created = await service.create("전자제품", "마우스")
        first = await service.update(created.product.id, "전자제품", "무선 마우스", expected_version=1)
        assert first.success

        second = await service.update(created.product.id, "가구", "책상", expected_version=1)
        assert second.error_code == "CONFLICT"
        assert isinstance(second.error, ConflictError)
        assert second.error.actual_version == 2

    async def test_invalid_version(self, service: ProductService) -> None:
        """Expected version must be a positive integer."""
        created = await service.create("전자제품", "마우스")
        result = await service.update(created.product.id, "가구", "책상", expected_version=0)
        assert result.error.field == "version"

    async def test_id_beyond_integer_range(self, service: ProductService) -> None:
        """Ids the store cannot hold are rejected before any write."""
        result = await service.update(2**63, "가구", "책상")
        assert result.error_code == "VALIDATION_ERROR"
        assert result.error.field == "id"


class TestDelete:
    """Tests for delete."""

    async def test_delete_then_read(self, service: ProductService) -> None:
        """After delete, reads and repeat deletes are not-found."""
        created = await service.create("가구", "책상")
        product_id = created.product.id

        deleted = await service.delete(product_id)
        assert deleted.success
        assert deleted.product_id == product_id

        assert (await service.get_by_id(product_id)).error_code == "PRODUCT_NOT_FOUND"
        assert (await service.delete(product_id)).error_code == "PRODUCT_NOT_FOUND"

    async def test_update_after_delete(self, service: ProductService) -> None:
        """Deleted is terminal: updates are not-found."""
        created = await service.create("가구", "책상")
        await service.delete(created.product.id)

        result = await service.update(created.product.id, "가구", "의자")
        assert result.error_code == "PRODUCT_NOT_FOUND"

    async def test_id_beyond_integer_range(self, service: ProductService) -> None:
        """Oversized ids are a validation error, not a crash."""
        result = await service.delete(2**70)
        assert result.error_code == "VALIDATION_ERROR"
        assert result.error.field == "id"


class TestListing:
    """Tests for list_by_category and list_categories."""

    async def test_category_scenario(self, service: ProductService) -> None:
        """Listing one category returns only its products."""
        await service.create("전자제품", "노트북")
        await service.create("전자제품", "마우스")
        await service.create("가구", "책상")

        result = await service.list_by_category("전자제품", 0, 10)
        assert result.success
        assert result.page.total_elements == 2
        assert {p.name for p in result.page.items} == {"노트북", "마우스"}

        categories = await service.list_categories()
        assert set(categories.categories) == {"전자제품", "가구"}

    async def test_size_bound(self, service: ProductService) -> None:
        """Size 100 is accepted, 101 rejected."""
        rejected = await service.list_by_category("전자제품", 0, 101)
        assert rejected.error_code == "VALIDATION_ERROR"
        assert rejected.error.field == "size"

        accepted = await service.list_by_category("전자제품", 0, 100)
        assert accepted.success

    async def test_defaults(self, service: ProductService) -> None:
        """Absent page and size use defaults."""
        result = await service.list_by_category("가구")
        assert result.page.page == 0
        assert result.page.size == 10

    async def test_empty_page_beyond_end(self, service: ProductService) -> None:
        """Beyond the last page, items are empty and totals unchanged."""
        for i in range(3):
            await service.create("가구", f"의자 {i}")

        in_range = await service.list_by_category("가구", 0, 2)
        beyond = await service.list_by_category("가구", 4, 2)

        assert beyond.page.items == ()
        assert beyond.page.total_elements == 3
        assert beyond.page.total_pages == in_range.page.total_pages == 2

    async def test_page_offset_past_integer_range(self, service: ProductService) -> None:
        """A page far past the end is empty even when its offset overflows 64 bits."""
        await service.create("가구", "책상")

        result = await service.list_by_category("가구", 10**17, 100)

        assert result.success
        assert result.page.items == ()
        assert result.page.total_elements == 1
        assert result.page.total_pages == 1


class TestStorageUnavailable:
    """Tests for storage failures surfacing through results."""

    async def test_classified_not_raised(self, tmp_path: Path) -> None:
        """Storage faults come back as results, never as not-found."""
        database = Database(f"sqlite+aiosqlite:///{tmp_path / 'nope' / 'catalog.db'}")
        service = ProductService(ProductRepository(database))
        try:
            result = await service.get_by_id(1)
            assert result.error_code == "STORAGE_UNAVAILABLE"
            assert isinstance(result.error, StorageUnavailableError)

            created = await service.create("가구", "책상")
            assert created.error_code == "STORAGE_UNAVAILABLE"

            categories = await service.list_categories()
            assert categories.error_code == "STORAGE_UNAVAILABLE"
        finally:
            await database.dispose()
