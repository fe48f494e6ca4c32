# app/services/order_service.py
import logging
import secrets
import uuid
from datetime import datetime, timezone

from fastapi import BackgroundTasks
from sqlmodel import Session

from app.core.config import get_settings
from app.core.errors import (
    AccessDeniedError,
    InsufficientStockError,
    InvalidStateTransitionError,
    NotFoundError,
)
from app.models.order import Order, OrderItem
from app.models.product import Product
from app.models.user import User
from app.repositories.order_repo import OrderRepository
from app.repositories.product_repo import ProductRepository
from app.repositories.user_repo import UserRepository
from app.schemas.order import (
    OrderCreate,
    OrderItemRead,
    OrderRead,
    OrderSummary,
)
from app.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

# Forward-only fulfilment path; cancelled is reachable only from CANCELLABLE
STATUS_SEQUENCE: tuple[str, ...] = ("pending", "confirmed", "shipped", "delivered")
CANCELLABLE: frozenset[str] = frozenset({"pending", "confirmed"})

RECENT_ORDERS_LIMIT = 10


class OrderService:
    """
    Business logic for the order lifecycle.

    Responsibilities:
      - Place orders: validate stock, snapshot prices, reserve stock
      - Status transitions (admin) with cash-on-delivery settlement
      - Cancellation with exact stock / sold_count restore
      - Owner-or-admin access checks on reads

    Every write happens in the caller's Session and is committed once;
    any error rolls the whole operation back.
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        user_repo: UserRepository,
        notifier: NotificationService,
    ):
        self.order_repo = order_repo
        self.product_repo = product_repo
        self.user_repo = user_repo
        self.notifier = notifier

    # -------- User-facing operations --------

    def create_order(
        self,
        session: Session,
        current_user: User,
        payload: OrderCreate,
        background_tasks: BackgroundTasks | None = None,
    ) -> OrderRead:
        """
        Place an order for `current_user`.

        Steps, per requested item in order:
          1. Load product; 404 if missing or inactive.
          2. Reject if quantity > stock_quantity (nothing is written).
          3. Snapshot effective price into the line item.
          4. stock_quantity -= quantity, sold_count += quantity.
        Then persist order + items + products in one commit and queue the
        confirmation email (and low stock alerts).
        """
        order = Order(
            order_number=self._generate_order_number(session),
            user_id=current_user.id,
            status="pending",
            payment_method=payload.payment_method,
            payment_status="pending",
            total_amount=0.0,
            shipping_address=payload.shipping_address,
            shipping_city=payload.shipping_city,
            shipping_state=payload.shipping_state,
            shipping_zip_code=payload.shipping_zip_code,
            shipping_country=payload.shipping_country,
            customer_name=payload.customer_name,
            customer_phone=payload.customer_phone,
            customer_email=payload.customer_email,
            notes=payload.notes,
        )

        order_items: list[OrderItem] = []
        touched: dict[uuid.UUID, Product] = {}
        total_amount = 0.0

        try:
            for requested in payload.items:
                product = self.product_repo.get_by_id(session, requested.product_id)
                if product is None or not product.is_active:
                    raise NotFoundError(
                        "Product",
                        f"Product not found: {requested.product_id}",
                    )

                if requested.quantity > product.stock_quantity:
                    raise InsufficientStockError(
                        product_id=product.id,
                        product_name=product.name,
                        requested=requested.quantity,
                        available=product.stock_quantity,
                    )

                unit_price = product.effective_price
                subtotal = unit_price * requested.quantity
                order_items.append(
                    OrderItem(
                        order_id=order.id,
                        product_id=product.id,
                        product_name=product.name,
                        quantity=requested.quantity,
                        unit_price=unit_price,
                        subtotal=subtotal,
                    )
                )
                total_amount += subtotal

                product.stock_quantity -= requested.quantity
                product.sold_count += requested.quantity
                self.product_repo.stage(session, product)
                touched[product.id] = product

            order.total_amount = total_amount
            order = self.order_repo.create_order(session, order)
            order_items = self.order_repo.create_items(session, order_items)

            threshold = get_settings().LOW_STOCK_THRESHOLD
            low_stock = [
                (p.name, p.stock_quantity)
                for p in touched.values()
                if p.stock_quantity <= threshold
            ]

            session.commit()
        except Exception:
            session.rollback()
            raise

        session.refresh(order)
        result = self._build_order_dto(order, order_items)

        logger.info(
            "Order %s created by user %s: %d item(s), total %.2f",
            order.order_number,
            current_user.id,
            len(order_items),
            order.total_amount,
        )

        self.notifier.dispatch(
            background_tasks,
            self.notifier.order_confirmation,
            current_user.email,
            current_user.name,
            result,
        )
        for name, stock in low_stock:
            self.notifier.dispatch(
                background_tasks, self.notifier.low_stock_alert, name, stock
            )

        return result

    def list_user_orders(
        self,
        session: Session,
        current_user: User,
        skip: int = 0,
        limit: int = 10,
    ) -> list[OrderRead]:
        orders = self.order_repo.list_for_user(session, current_user.id, skip, limit)
        return [self._load_order_dto(session, o) for o in orders]

    def get_order(
        self,
        session: Session,
        current_user: User,
        order_id: uuid.UUID,
    ) -> OrderRead:
        """
        Get a single order with items.

        - 404 if the order does not exist.
        - 403 if the caller is neither the owner nor an admin.
        """
        order = self._get_or_404(session, order_id)
        self._ensure_can_access(current_user, order)
        return self._load_order_dto(session, order)

    def get_order_by_number(
        self,
        session: Session,
        current_user: User,
        order_number: str,
    ) -> OrderRead:
        order = self.order_repo.get_by_order_number(session, order_number)
        if order is None:
            raise NotFoundError(
                "Order", f"Order not found with order number: {order_number}"
            )
        self._ensure_can_access(current_user, order)
        return self._load_order_dto(session, order)

    def cancel_order(
        self,
        session: Session,
        current_user: User,
        order_id: uuid.UUID,
    ) -> OrderRead:
        """
        Cancel an order (owner or admin).

        Only pending / confirmed orders can be cancelled. Stock and
        sold_count of every item are restored. No email is sent.
        """
        order = self._get_or_404(session, order_id)
        self._ensure_can_access(current_user, order)
        items = self._cancel(session, order)
        logger.info("Order %s cancelled by user %s", order.order_number, current_user.id)
        return self._build_order_dto(order, items)

    # -------- Admin operations --------

    def list_all_orders(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 10,
        status: str | None = None,
    ) -> list[OrderRead]:
        orders = self.order_repo.list_all(session, skip, limit, status=status)
        return [self._load_order_dto(session, o) for o in orders]

    def get_recent_orders(
        self,
        session: Session,
        limit: int = RECENT_ORDERS_LIMIT,
    ) -> list[OrderSummary]:
        return [
            OrderSummary(
                id=o.id,
                order_number=o.order_number,
                total_amount=o.total_amount,
                status=o.status,
                item_count=self.order_repo.count_items_for_order(session, o.id),
                created_at=o.created_at,
            )
            for o in self.order_repo.latest(session, limit)
        ]

    def update_status(
        self,
        session: Session,
        order_id: uuid.UUID,
        new_status: str,
        background_tasks: BackgroundTasks | None = None,
    ) -> OrderRead:
        """
        Admin-only status update.

          pending -> confirmed -> shipped -> delivered   (skipping ahead is allowed)
          pending | confirmed -> cancelled              (restores stock)

        Going backwards or leaving delivered / cancelled raises 400, and
        cancelling an already cancelled order raises like cancel_order does.
        Re-sending any other current status is a no-op.
        Delivering a cash_on_delivery order marks it paid.
        """
        order = self._get_or_404(session, order_id)
        previous = order.status

        if new_status == "cancelled":
            items = self._cancel(session, order)
        else:
            if previous == new_status:
                return self._load_order_dto(session, order)
            self._ensure_forward(previous, new_status)
            order.status = new_status
            if new_status == "delivered" and order.payment_method == "cash_on_delivery":
                order.payment_status = "paid"
            try:
                self.order_repo.update_order(session, order)
                session.commit()
            except Exception:
                session.rollback()
                raise
            session.refresh(order)
            items = self.order_repo.list_items_for_order(session, order.id)

        logger.info(
            "Order %s status %s -> %s", order.order_number, previous, new_status
        )

        owner = self.user_repo.get_by_id(session, order.user_id)
        if owner is not None:
            self.notifier.dispatch(
                background_tasks,
                self.notifier.order_status_changed,
                owner.email,
                owner.name,
                order.order_number,
                previous,
                new_status,
            )

        return self._build_order_dto(order, items)

    # -------- Helpers --------

    def _get_or_404(self, session: Session, order_id: uuid.UUID) -> Order:
        order = self.order_repo.get_by_id(session, order_id)
        if order is None:
            raise NotFoundError("Order", f"Order not found with id: {order_id}")
        return order

    @staticmethod
    def _ensure_can_access(current_user: User, order: Order) -> None:
        if order.user_id != current_user.id and not current_user.is_admin:
            raise AccessDeniedError()

    @staticmethod
    def _ensure_forward(current: str, new: str) -> None:
        if (
            current not in STATUS_SEQUENCE
            or new not in STATUS_SEQUENCE
            or STATUS_SEQUENCE.index(new) <= STATUS_SEQUENCE.index(current)
        ):
            raise InvalidStateTransitionError(current, new)

    def _cancel(self, session: Session, order: Order) -> list[OrderItem]:
        """
        Restore stock for every item and mark the order cancelled, in one commit.
        """
        if order.status not in CANCELLABLE:
            raise InvalidStateTransitionError(order.status, "cancelled")

        items = self.order_repo.list_items_for_order(session, order.id)
        try:
            for item in items:
                product = self.product_repo.get_by_id(session, item.product_id)
                product.stock_quantity += item.quantity
                product.sold_count -= item.quantity
                self.product_repo.stage(session, product)

            order.status = "cancelled"
            self.order_repo.update_order(session, order)
            session.commit()
        except Exception:
            session.rollback()
            raise

        session.refresh(order)
        return items

    def _generate_order_number(self, session: Session) -> str:
        """
        ORD-<yyyymmdd>-<8 hex chars>, retried until unique.
        """
        today = datetime.now(timezone.utc).strftime("%Y%m%d")
        while True:
            candidate = f"ORD-{today}-{secrets.token_hex(4).upper()}"
            if self.order_repo.get_by_order_number(session, candidate) is None:
                return candidate

    def _load_order_dto(self, session: Session, order: Order) -> OrderRead:
        items = self.order_repo.list_items_for_order(session, order.id)
        return self._build_order_dto(order, items)

    def _build_order_dto(
        self,
        order: Order,
        items: list[OrderItem],
    ) -> OrderRead:
        """
        Compose OrderRead from ORM models.
        """
        return OrderRead(
            id=order.id,
            order_number=order.order_number,
            user_id=order.user_id,
            status=order.status,
            payment_method=order.payment_method,
            payment_status=order.payment_status,
            total_amount=order.total_amount,
            shipping_address=order.shipping_address,
            shipping_city=order.shipping_city,
            shipping_state=order.shipping_state,
            shipping_zip_code=order.shipping_zip_code,
            shipping_country=order.shipping_country,
            customer_name=order.customer_name,
            customer_phone=order.customer_phone,
            customer_email=order.customer_email,
            notes=order.notes,
            created_at=order.created_at,
            updated_at=order.updated_at,
            items=[
                OrderItemRead(
                    id=it.id,
                    order_id=it.order_id,
                    product_id=it.product_id,
                    product_name=it.product_name,
                    quantity=it.quantity,
                    unit_price=it.unit_price,
                    subtotal=it.subtotal,
                )
                for it in items
            ],
        )
