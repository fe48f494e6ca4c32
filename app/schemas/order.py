# app/schemas/order.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, EmailStr, field_validator
from sqlmodel import SQLModel, Field

OrderStatus = Literal["pending", "confirmed", "shipped", "delivered", "cancelled"]
PaymentMethod = Literal["card", "cash_on_delivery"]
PaymentStatus = Literal["pending", "paid", "failed"]


class OrderItemCreate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    product_id: uuid.UUID
    quantity: int = Field(gt=0)


class OrderCreate(SQLModel):
    """
    Payload for placing an order.

    User provides:
      - items (product_id, quantity), at least one
      - payment method
      - shipping address (all fields required)
      - customer name / phone (required), email / notes (optional)

    Backend derives:
      - user_id from token
      - order_number
      - status = 'pending', payment_status = 'pending'
      - unit prices and total_amount from the catalog
    """

    model_config = ConfigDict(extra="forbid")

    items: list[OrderItemCreate]
    payment_method: PaymentMethod

    shipping_address: str
    shipping_city: str
    shipping_state: str
    shipping_zip_code: str
    shipping_country: str

    customer_name: str
    customer_phone: str
    customer_email: EmailStr | None = None
    notes: str | None = None

    @field_validator("items")
    @classmethod
    def items_not_empty(cls, v: list[OrderItemCreate]) -> list[OrderItemCreate]:
        if not v:
            raise ValueError("Order items cannot be empty")
        return v

    @field_validator(
        "shipping_address",
        "shipping_city",
        "shipping_state",
        "shipping_zip_code",
        "shipping_country",
        "customer_name",
        "customer_phone",
    )
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v

    @field_validator("notes", mode="before")
    @classmethod
    def normalize_notes(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None


class OrderItemRead(SQLModel):
    """
    Representation of a single order line item.
    """

    id: uuid.UUID
    order_id: uuid.UUID
    product_id: uuid.UUID
    product_name: str
    quantity: int
    unit_price: float
    subtotal: float


class OrderRead(SQLModel):
    """
    Full order view including items.
    """

    id: uuid.UUID
    order_number: str
    user_id: uuid.UUID
    status: OrderStatus
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    total_amount: float
    shipping_address: str
    shipping_city: str
    shipping_state: str
    shipping_zip_code: str
    shipping_country: str
    customer_name: str
    customer_phone: str
    customer_email: str | None
    notes: str | None
    created_at: datetime
    updated_at: datetime
    items: list[OrderItemRead]


class OrderSummary(SQLModel):
    """
    Lightweight info for the admin "recent orders" widget.
    """

    id: uuid.UUID
    order_number: str
    total_amount: float
    status: OrderStatus
    item_count: int
    created_at: datetime


class OrderStatusUpdate(SQLModel):
    """
    Admin payload to change order status.
    """

    model_config = ConfigDict(extra="forbid")

    status: OrderStatus
