# app/routers/admin.py
import uuid

from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlmodel import Session

from app.core.auth import require_admin
from app.database import get_session
from app.models.user import User
from app.repositories.stats_repo import StatsRepository
from app.routers.orders import service as order_service
from app.routers.users import service as user_service
from app.schemas.order import OrderRead, OrderStatus, OrderStatusUpdate, OrderSummary
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
from app.schemas.user import AdminCreate, AdminUpdate, UserRead
from app.services.stats_service import StatsService

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(require_admin)],
)

stats_service = StatsService(StatsRepository())


# -------- Orders --------


@router.get("/orders", response_model=list[OrderRead])
def list_all_orders(
    session: Session = Depends(get_session),
    status: OrderStatus | None = None,
    skip: int = 0,
    limit: int = 10,
):
    """
    List all orders, optionally filtered by status.
    """
    return order_service.list_all_orders(session, skip, limit, status=status)


@router.get("/orders/recent", response_model=list[OrderSummary])
def get_recent_orders(session: Session = Depends(get_session)):
    """
    Ten most recent orders.
    """
    return order_service.get_recent_orders(session)


@router.patch("/orders/{order_id}/status", response_model=OrderRead)
def update_order_status(
    order_id: uuid.UUID,
    payload: OrderStatusUpdate,
    background_tasks: BackgroundTasks,
    session: Session = Depends(get_session),
):
    """
    Update order status.

      pending -> confirmed -> shipped -> delivered

      pending | confirmed -> cancelled (restores stock)

    Delivered cash-on-delivery orders are marked paid.
    """
    return order_service.update_status(
        session, order_id, payload.status, background_tasks
    )


# -------- Statistics --------


@router.get("/stats/orders", response_model=OrderStats)
def get_order_statistics(session: Session = Depends(get_session)):
    """
    Order counts per status and paid revenue (all time, today, this month).
    """
    return stats_service.get_order_statistics(session)


@router.get("/analytics/sales-trend", response_model=list[DailySales])
def get_sales_trend(
    days: int = 30,
    session: Session = Depends(get_session),
):
    return stats_service.get_sales_trend(session, days=days)


@router.get("/analytics/top-products", response_model=list[TopProduct])
def get_top_products(
    limit: int = 10,
    session: Session = Depends(get_session),
):
    return stats_service.get_top_products(session, limit=limit)


@router.get("/analytics/category-distribution", response_model=list[CategorySales])
def get_category_distribution(session: Session = Depends(get_session)):
    return stats_service.get_category_distribution(session)


@router.get("/analytics/revenue-summary", response_model=RevenueSummary)
def get_revenue_summary(session: Session = Depends(get_session)):
    """
    Paid revenue today, over the last 7 days, this month and all time.
    """
    return stats_service.get_revenue_summary(session)


@router.get("/analytics/brand-performance", response_model=list[BrandPerformance])
def get_brand_performance(session: Session = Depends(get_session)):
    return stats_service.get_brand_performance(session)


@router.get("/analytics/dashboard-stats", response_model=DashboardStats)
def get_dashboard_stats(session: Session = Depends(get_session)):
    return stats_service.get_dashboard_stats(session)


@router.get("/analytics/order-status-distribution", response_model=dict[str, int])
def get_order_status_distribution(session: Session = Depends(get_session)):
    return stats_service.get_order_status_distribution(session)


@router.get("/analytics/monthly-comparison", response_model=list[MonthlySales])
def get_monthly_sales_comparison(
    months: int = 6,
    session: Session = Depends(get_session),
):
    return stats_service.get_monthly_sales(session, months=months)


# -------- Administrators --------


@router.get("/admins", response_model=list[UserRead])
def list_admins(session: Session = Depends(get_session)):
    return user_service.list_admins(session)


@router.post(
    "/admins",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
)
def create_admin(
    payload: AdminCreate,
    background_tasks: BackgroundTasks,
    session: Session = Depends(get_session),
    current_admin: User = Depends(require_admin),
):
    """
    Create another administrator (Supabase Auth login + approved profile).
    """
    return user_service.create_admin(session, current_admin, payload, background_tasks)


@router.patch("/admins/{admin_id}", response_model=UserRead)
def update_admin(
    admin_id: uuid.UUID,
    payload: AdminUpdate,
    session: Session = Depends(get_session),
):
    return user_service.update_admin(session, admin_id, payload)


@router.delete("/admins/{admin_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_admin(
    admin_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_admin: User = Depends(require_admin),
):
    """
    Admins cannot delete themselves; the last admin is kept.
    """
    user_service.delete_admin(session, current_admin, admin_id)
    return None
