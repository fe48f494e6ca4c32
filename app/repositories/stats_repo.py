# app/repositories/stats_repo.py
from datetime import datetime

from sqlalchemy import func
from sqlmodel import Session, select

from app.models.catalog import Brand, Category
from app.models.order import Order
from app.models.product import Product


class StatsRepository:
    """
    Read-only aggregated queries for admin dashboard.

    Revenue only counts orders whose payment_status is 'paid'.
    """

    def count_orders(self, session: Session) -> int:
        stmt = select(func.count()).select_from(Order)
        value = session.exec(stmt).one()
        return int(value or 0)

    def count_orders_by_status(self, session: Session) -> dict[str, int]:
        stmt = select(Order.status, func.count()).group_by(Order.status)
        return {status: int(n) for status, n in session.exec(stmt).all()}

    def paid_revenue(
        self,
        session: Session,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> float:
        """
        Sum of total_amount for paid orders, optionally restricted to
        start <= created_at < end.
        """
        stmt = select(func.coalesce(func.sum(Order.total_amount), 0.0)).where(
            Order.payment_status == "paid"
        )
        if start is not None:
            stmt = stmt.where(Order.created_at >= start)
        if end is not None:
            stmt = stmt.where(Order.created_at < end)
        value = session.exec(stmt).one()
        return float(value or 0.0)

    def paid_orders_since(self, session: Session, start: datetime) -> list[Order]:
        stmt = (
            select(Order)
            .where(Order.payment_status == "paid", Order.created_at >= start)
            .order_by(Order.created_at)
        )
        return list(session.exec(stmt).all())

    def top_products(self, session: Session, limit: int = 10) -> list[tuple]:
        """
        Active products ranked by sold_count, with category/brand names.
        """
        stmt = (
            select(Product, Category.name, Brand.name)
            .join(Category, Category.id == Product.category_id, isouter=True)
            .join(Brand, Brand.id == Product.brand_id, isouter=True)
            .where(Product.is_active == True)  # noqa: E712
            .order_by(Product.sold_count.desc())
            .limit(limit)
        )
        return list(session.exec(stmt).all())

    def category_distribution(self, session: Session) -> list[tuple]:
        """
        Units sold per category, only categories with sales.
        """
        sold = func.sum(Product.sold_count)
        stmt = (
            select(Category.name, sold.label("sold_count"))
            .join(Product, Product.category_id == Category.id)
            .where(Product.sold_count > 0)
            .group_by(Category.name)
            .order_by(sold.desc())
        )
        return list(session.exec(stmt).all())

    def brand_sales(self, session: Session) -> list[tuple]:
        """
        (product, brand name) for every branded product that has sold.
        """
        stmt = (
            select(Product, Brand.name)
            .join(Brand, Brand.id == Product.brand_id)
            .where(Product.sold_count > 0)
        )
        return list(session.exec(stmt).all())

    def count_active_products(
        self,
        session: Session,
        max_stock: int | None = None,
    ) -> int:
        """
        Active products, optionally only those with stock <= max_stock.
        """
        stmt = (
            select(func.count())
            .select_from(Product)
            .where(Product.is_active == True)  # noqa: E712
        )
        if max_stock is not None:
            stmt = stmt.where(Product.stock_quantity <= max_stock)
        return int(session.exec(stmt).one() or 0)
