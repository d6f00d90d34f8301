"""SQLAlchemy models for product catalog.

Defines the products table for persistent storage.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.catalog.entities import CATEGORY_MAX_LENGTH, NAME_MAX_LENGTH, Product
from app.infrastructure.database import Base


class ProductRecord(Base):
    """Stored product row.

    Attributes:
        id: Autoincrement identifier (never reused after deletion).
        category: Product category.
        name: Product name.
        version: Row version for optimistic concurrency.
        created_at: Creation timestamp.
        updated_at: Last update timestamp.
    """

    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    category: Mapped[str] = mapped_column(
        String(CATEGORY_MAX_LENGTH), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # SQLite reuses rowids without AUTOINCREMENT
    __table_args__ = {"sqlite_autoincrement": True}

    def __repr__(self) -> str:
        """String representation."""
        return f"<ProductRecord(id={self.id}, category={self.category}, name={self.name[:30]})>"

    def to_snapshot(self) -> Product:
        """Detach into an immutable snapshot.

        Returns:
            Product value object.
        """
        return Product(
            id=self.id,
            category=self.category,
            name=self.name,
            version=self.version,
        )
