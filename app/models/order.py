# app/models/order.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Order(SQLModel, table=True):
    """
    Customer order.

    - order_number and user_id are assigned at creation and never change.
    - total_amount is the sum of item subtotals, fixed at creation.
    - Only status / payment_status change afterwards.
    """

    __tablename__ = "orders"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    order_number: str = Field(
        max_length=32,
        unique=True,
        index=True,
        description="Human-readable order number, e.g. ORD-20250101-1A2B3C4D",
    )

    user_id: uuid.UUID = Field(
        foreign_key="users.id",
        index=True,
    )

    # pending | confirmed | shipped | delivered | cancelled
    status: str = Field(
        default="pending",
        index=True,
        description="Order status lifecycle",
    )

    # card | cash_on_delivery
    payment_method: str = Field(description="How the customer pays")

    # pending | paid | failed
    payment_status: str = Field(default="pending", index=True)

    total_amount: float = Field(
        description="Sum of item subtotals at creation time",
    )

    shipping_address: str
    shipping_city: str
    shipping_state: str
    shipping_zip_code: str
    shipping_country: str

    customer_name: str
    customer_phone: str
    customer_email: str | None = None

    notes: str | None = Field(
        default=None,
        description="Optional note / special instructions",
    )

    created_at: datetime = Field(
        default_factory=_utcnow,
        index=True,
        description="Creation timestamp (UTC)",
    )
    updated_at: datetime = Field(
        default_factory=_utcnow,
        sa_column_kwargs={"onupdate": _utcnow},
    )


class OrderItem(SQLModel, table=True):
    """
    Line item inside an order. Immutable once created.

    unit_price is the product's effective price at order time and does
    not follow later catalog price changes.
    """

    __tablename__ = "order_items"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    order_id: uuid.UUID = Field(
        foreign_key="orders.id",
        index=True,
    )

    product_id: uuid.UUID = Field(
        foreign_key="products.id",
        index=True,
    )

    product_name: str = Field(description="Product name at time of order")

    quantity: int = Field(
        gt=0,
        description="Quantity ordered (>=1)",
    )

    unit_price: float = Field(
        description="Effective unit price at time of order",
    )

    subtotal: float = Field(description="unit_price * quantity")
