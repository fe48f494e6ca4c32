# app/schemas/product.py
import uuid
from datetime import datetime

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field


class ProductCreate(SQLModel):
    """
    Payload for creating a product.

    - slug is optional: if omitted, generated from `name`.
    - discount_price only takes effect when lower than price.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=200)
    slug: str | None = None
    description: str | None = Field(default=None, max_length=2000)
    price: float = Field(gt=0)
    discount_price: float | None = Field(default=None, gt=0)
    stock_quantity: int = Field(default=0, ge=0)
    category_id: uuid.UUID | None = None
    brand_id: uuid.UUID | None = None
    is_active: bool = True
    is_featured: bool = False

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v

    @field_validator("slug")
    @classmethod
    def normalize_slug(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        if not v:
            raise ValueError("slug cannot be empty if provided")
        return v


class ProductUpdate(SQLModel):
    """
    Partial update payload for products.
    All fields are optional.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=200)
    slug: str | None = None
    description: str | None = Field(default=None, max_length=2000)
    price: float | None = Field(default=None, gt=0)
    discount_price: float | None = Field(default=None, gt=0)
    stock_quantity: int | None = Field(default=None, ge=0)
    category_id: uuid.UUID | None = None
    brand_id: uuid.UUID | None = None
    is_active: bool | None = None
    is_featured: bool | None = None
    image_url: str | None = None  # allow manual override if needed

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v

    @field_validator("slug")
    @classmethod
    def normalize_slug(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("slug cannot be empty")
        return v


class ProductRead(SQLModel):
    """
    Product representation for clients.
    """

    id: uuid.UUID
    name: str
    slug: str
    description: str | None
    price: float
    discount_price: float | None
    effective_price: float
    stock_quantity: int
    sold_count: int
    image_url: str | None
    category_id: uuid.UUID | None
    brand_id: uuid.UUID | None
    is_active: bool
    is_featured: bool
    created_at: datetime
    updated_at: datetime
