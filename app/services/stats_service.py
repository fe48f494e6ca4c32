# app/services/stats_service.py
from collections import OrderedDict
from datetime import date, datetime, timedelta, timezone
from typing import get_args

from fastapi import HTTPException, status
from sqlmodel import Session

from app.core.config import get_settings
from app.repositories.stats_repo import StatsRepository
from app.schemas.order import OrderStatus
from app.schemas.stats import (
    BrandPerformance,
    CategorySales,
    DailySales,
    DashboardStats,
    MonthlySales,
    OrderStats,
    RevenueSummary,
    TopProduct,
)

MAX_TREND_DAYS = 365
MAX_COMPARISON_MONTHS = 24


class StatsService:
    """
    Orchestrates aggregated admin dashboard statistics.

    Revenue figures only count paid orders. Day / month windows are UTC.
    """

    def __init__(self, repo: StatsRepository):
        self.repo = repo

    def get_order_statistics(
        self,
        session: Session,
        now: datetime | None = None,
    ) -> OrderStats:
        now = now or datetime.now(timezone.utc)
        start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)
        start_of_month = start_of_day.replace(day=1)

        by_status = self.repo.count_orders_by_status(session)

        return OrderStats(
            total_orders=self.repo.count_orders(session),
            pending_orders=by_status.get("pending", 0),
            confirmed_orders=by_status.get("confirmed", 0),
            shipped_orders=by_status.get("shipped", 0),
            delivered_orders=by_status.get("delivered", 0),
            cancelled_orders=by_status.get("cancelled", 0),
            total_revenue=self.repo.paid_revenue(session),
            today_revenue=self.repo.paid_revenue(
                session, start=start_of_day, end=start_of_day + timedelta(days=1)
            ),
            month_revenue=self.repo.paid_revenue(session, start=start_of_month, end=now),
        )

    def get_sales_trend(
        self,
        session: Session,
        days: int = 30,
        now: datetime | None = None,
    ) -> list[DailySales]:
        """
        Paid revenue per day over the last `days` days, oldest first.
        Days without sales are omitted.
        """
        if not 1 <= days <= MAX_TREND_DAYS:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"days must be between 1 and {MAX_TREND_DAYS}",
            )

        now = now or datetime.now(timezone.utc)
        buckets: "OrderedDict[date, list[float]]" = OrderedDict()
        for order in self.repo.paid_orders_since(session, now - timedelta(days=days)):
            buckets.setdefault(order.created_at.date(), []).append(order.total_amount)

        return [
            DailySales(date=day, total_revenue=sum(amounts), order_count=len(amounts))
            for day, amounts in buckets.items()
        ]

    def get_top_products(self, session: Session, limit: int = 10) -> list[TopProduct]:
        top: list[TopProduct] = []
        for product, category_name, brand_name in self.repo.top_products(session, limit=limit):
            top.append(
                TopProduct(
                    product_id=product.id,
                    name=product.name,
                    sold_count=product.sold_count,
                    revenue=product.sold_count * product.effective_price,
                    category=category_name or "Unknown",
                    brand=brand_name or "Unknown",
                )
            )
        return top

    def get_category_distribution(self, session: Session) -> list[CategorySales]:
        return [
            CategorySales(category=name, sold_count=int(sold or 0))
            for name, sold in self.repo.category_distribution(session)
        ]

    def get_revenue_summary(
        self,
        session: Session,
        now: datetime | None = None,
    ) -> RevenueSummary:
        now = now or datetime.now(timezone.utc)
        start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)

        return RevenueSummary(
            today=self.repo.paid_revenue(session, start=start_of_day),
            week=self.repo.paid_revenue(session, start=now - timedelta(days=7)),
            month=self.repo.paid_revenue(session, start=start_of_day.replace(day=1)),
            total=self.repo.paid_revenue(session),
        )

    def get_brand_performance(self, session: Session) -> list[BrandPerformance]:
        """
        Units sold, revenue (sold_count x effective price) and number of
        selling products per brand, best revenue first.
        """
        brands: dict[str, BrandPerformance] = {}
        for product, brand_name in self.repo.brand_sales(session):
            row = brands.setdefault(
                brand_name,
                BrandPerformance(
                    brand=brand_name, total_sold=0, total_revenue=0.0, product_count=0
                ),
            )
            row.total_sold += product.sold_count
            row.total_revenue += product.sold_count * product.effective_price
            row.product_count += 1

        return sorted(brands.values(), key=lambda b: b.total_revenue, reverse=True)

    def get_dashboard_stats(self, session: Session) -> DashboardStats:
        by_status = self.repo.count_orders_by_status(session)
        return DashboardStats(
            total_orders=self.repo.count_orders(session),
            pending_orders=by_status.get("pending", 0),
            delivered_orders=by_status.get("delivered", 0),
            total_products=self.repo.count_active_products(session),
            low_stock_products=self.repo.count_active_products(
                session, max_stock=get_settings().LOW_STOCK_THRESHOLD
            ),
            out_of_stock_products=self.repo.count_active_products(session, max_stock=0),
            total_revenue=self.repo.paid_revenue(session),
        )

    def get_order_status_distribution(self, session: Session) -> dict[str, int]:
        """
        Order count for every status, zero included.
        """
        by_status = self.repo.count_orders_by_status(session)
        return {s: by_status.get(s, 0) for s in get_args(OrderStatus)}

    def get_monthly_sales(
        self,
        session: Session,
        months: int = 6,
        now: datetime | None = None,
    ) -> list[MonthlySales]:
        """
        Paid revenue per calendar month (UTC), covering the current month
        and the `months - 1` before it. Months without sales are omitted.
        """
        if not 1 <= months <= MAX_COMPARISON_MONTHS:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"months must be between 1 and {MAX_COMPARISON_MONTHS}",
            )

        now = now or datetime.now(timezone.utc)
        year, month_index = divmod(now.year * 12 + now.month - months, 12)
        start = now.replace(
            year=year, month=month_index + 1, day=1,
            hour=0, minute=0, second=0, microsecond=0,
        )

        buckets: "OrderedDict[str, list[float]]" = OrderedDict()
        for order in self.repo.paid_orders_since(session, start):
            buckets.setdefault(order.created_at.strftime("%Y-%m"), []).append(
                order.total_amount
            )

        return [
            MonthlySales(month=month, total_revenue=sum(amounts), order_count=len(amounts))
            for month, amounts in buckets.items()
        ]
