# app/models/product.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Product(SQLModel, table=True):
    """
    Product catalog entry.

    - Never physically deleted; is_active=False hides it from the storefront
      and from checkout.
    - stock_quantity / sold_count are adjusted by order placement and
      cancellation only through OrderService.
    """

    __tablename__ = "products"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        max_length=200,
        index=True,
        description="Display name of the product",
    )

    slug: str = Field(
        max_length=255,
        unique=True,
        index=True,
        description="URL-friendly identifier (unique)",
    )

    description: str | None = Field(
        default=None,
        max_length=2000,
    )

    price: float = Field(
        gt=0,
        description="List unit price",
    )

    # Only counts as a discount when lower than price
    discount_price: float | None = Field(
        default=None,
        description="Optional sale price",
    )

    stock_quantity: int = Field(
        default=0,
        ge=0,
        description="How many units currently in stock",
    )

    sold_count: int = Field(
        default=0,
        ge=0,
        description="Units sold across non-cancelled orders",
    )

    image_url: str | None = Field(
        default=None,
        description="Main image URL (Supabase Storage)",
    )

    category_id: uuid.UUID | None = Field(
        default=None,
        foreign_key="categories.id",
        index=True,
    )

    brand_id: uuid.UUID | None = Field(
        default=None,
        foreign_key="brands.id",
        index=True,
    )

    is_active: bool = Field(
        default=True,
        index=True,
        description="Whether this product is visible on the storefront",
    )

    is_featured: bool = Field(default=False, index=True)

    created_at: datetime = Field(
        default_factory=_utcnow,
        description="Creation timestamp (UTC)",
    )
    updated_at: datetime = Field(
        default_factory=_utcnow,
        sa_column_kwargs={"onupdate": _utcnow},
    )

    def has_discount(self) -> bool:
        return self.discount_price is not None and self.discount_price < self.price

    @property
    def effective_price(self) -> float:
        return self.discount_price if self.has_discount() else self.price
