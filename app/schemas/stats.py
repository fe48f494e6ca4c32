# app/schemas/stats.py
import uuid
from datetime import date

from pydantic import ConfigDict
from sqlmodel import SQLModel


class OrderStats(SQLModel):
    """
    Order counters and paid revenue for the admin dashboard.
    """
    model_config = ConfigDict(extra="forbid")

    total_orders: int
    pending_orders: int
    confirmed_orders: int
    shipped_orders: int
    delivered_orders: int
    cancelled_orders: int
    total_revenue: float
    today_revenue: float
    month_revenue: float


class DailySales(SQLModel):
    """
    Paid revenue for one calendar day (UTC).
    """
    model_config = ConfigDict(extra="forbid")

    date: date
    total_revenue: float
    order_count: int


class TopProduct(SQLModel):
    """
    Best sellers by sold_count.
    """
    model_config = ConfigDict(extra="forbid")

    product_id: uuid.UUID
    name: str
    sold_count: int
    revenue: float
    category: str
    brand: str


class CategorySales(SQLModel):
    model_config = ConfigDict(extra="forbid")

    category: str
    sold_count: int


class RevenueSummary(SQLModel):
    """
    Paid revenue: today, last 7 days, this month, all time.
    """
    model_config = ConfigDict(extra="forbid")

    today: float
    week: float
    month: float
    total: float


class BrandPerformance(SQLModel):
    model_config = ConfigDict(extra="forbid")

    brand: str
    total_sold: int
    total_revenue: float
    product_count: int


class DashboardStats(SQLModel):
    """
    Headline numbers for the admin dashboard.
    """
    model_config = ConfigDict(extra="forbid")

    total_orders: int
    pending_orders: int
    delivered_orders: int
    total_products: int
    low_stock_products: int
    out_of_stock_products: int
    total_revenue: float


class MonthlySales(SQLModel):
    model_config = ConfigDict(extra="forbid")

    month: str  # YYYY-MM
    total_revenue: float
    order_count: int
