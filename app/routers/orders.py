# app/routers/orders.py
import uuid

from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlmodel import Session

from app.core.auth import require_approved
from app.database import get_session
from app.models.user import User
from app.repositories.order_repo import OrderRepository
from app.repositories.product_repo import ProductRepository
from app.repositories.user_repo import UserRepository
from app.schemas.order import OrderCreate, OrderRead
from app.services.notification_service import NotificationService
from app.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"])

service = OrderService(
    OrderRepository(),
    ProductRepository(),
    UserRepository(),
    NotificationService(),
)


@router.post(
    "",
    response_model=OrderRead,
    status_code=status.HTTP_201_CREATED,
)
def create_order(
    payload: OrderCreate,
    background_tasks: BackgroundTasks,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_approved),
):
    """
    Place an order.

    - All items must be in stock, otherwise nothing is written.
    - Confirmation email is sent after the response.
    """
    return service.create_order(session, current_user, payload, background_tasks)


@router.get("/me", response_model=list[OrderRead])
def list_my_orders(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_approved),
    skip: int = 0,
    limit: int = 10,
):
    """
    List the authenticated user's orders, newest first.
    """
    return service.list_user_orders(session, current_user, skip, limit)


@router.get("/number/{order_number}", response_model=OrderRead)
def get_order_by_number(
    order_number: str,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_approved),
):
    """
    Get an order by its human-readable number (owner or admin).
    """
    return service.get_order_by_number(session, current_user, order_number)


@router.get("/{order_id}", response_model=OrderRead)
def get_order(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_approved),
):
    """
    Get a single order with items (owner or admin).
    """
    return service.get_order(session, current_user, order_id)


@router.post("/{order_id}/cancel", response_model=OrderRead)
def cancel_order(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_approved),
):
    """
    Cancel a pending or confirmed order (owner or admin).
    Stock is restored for every item.
    """
    return service.cancel_order(session, current_user, order_id)
