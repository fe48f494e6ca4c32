# app/services/notification_service.py
import logging

from fastapi import BackgroundTasks

from app.core.config import get_settings
from app.core.email_client import send_email
from app.schemas.order import OrderRead

logger = logging.getLogger(__name__)


class NotificationService:
    """
    Best-effort email side effects.

    Every public method is safe to run as a background task: failures are
    logged and swallowed, never raised into the request that scheduled them.
    Arguments are plain values / DTOs so nothing depends on an open Session.
    """

    def dispatch(self, background_tasks: BackgroundTasks | None, func, *args) -> None:
        """
        Queue `func(*args)` to run after the response, or run it inline
        when there is no request (scripts, tests).
        """
        if background_tasks is not None:
            background_tasks.add_task(func, *args)
        else:
            func(*args)

    def _deliver(self, to_email: str | None, subject: str, text_body: str, html_body: str | None = None) -> None:
        if not to_email:
            logger.warning("Skipping email %r: no recipient", subject)
            return
        try:
            send_email(to_email, subject, text_body, html_body)
        except Exception:
            logger.exception("Failed to send email %r to %s", subject, to_email)

    # ----- Orders -----

    def order_confirmation(self, to_email: str, name: str, order: OrderRead) -> None:
        lines = [
            f"- {it.product_name} x{it.quantity}: {it.subtotal:.2f}" for it in order.items
        ]
        text_body = (
            f"Hi {name},\n\n"
            f"Thank you for your order {order.order_number}.\n\n"
            + "\n".join(lines)
            + f"\n\nTotal: {order.total_amount:.2f}\n"
            f"Ship to: {order.shipping_address}, {order.shipping_city}, "
            f"{order.shipping_state}\n"
        )
        rows = "".join(
            f"<tr><td>{it.product_name}</td><td>{it.quantity}</td>"
            f"<td>{it.subtotal:.2f}</td></tr>"
            for it in order.items
        )
        html_body = (
            f"<p>Hi {name},</p>"
            f"<p>Thank you for your order <b>{order.order_number}</b>.</p>"
            f"<table>{rows}</table>"
            f"<p>Total: <b>{order.total_amount:.2f}</b></p>"
        )
        self._deliver(
            to_email,
            f"Order Confirmation - {order.order_number}",
            text_body,
            html_body,
        )

    def order_status_changed(
        self,
        to_email: str,
        name: str,
        order_number: str,
        previous_status: str,
        new_status: str,
    ) -> None:
        text_body = (
            f"Hi {name},\n\n"
            f"Your order {order_number} moved from {previous_status} "
            f"to {new_status}.\n"
        )
        self._deliver(to_email, f"Order Update - {order_number}", text_body)

    def low_stock_alert(self, product_name: str, current_stock: int) -> None:
        text_body = (
            f"Warning: Product '{product_name}' is running low on stock.\n\n"
            f"Current Stock: {current_stock} units\n\n"
            "Please restock soon to avoid stockouts."
        )
        self._deliver(
            get_settings().ADMIN_ALERT_EMAIL,
            f"Low Stock Alert - {product_name}",
            text_body,
        )

    # ----- Accounts -----

    def account_approved(self, to_email: str, name: str) -> None:
        text_body = (
            f"Hi {name},\n\n"
            "Your account has been approved. You can now sign in and place orders.\n"
        )
        self._deliver(to_email, "Your account has been approved", text_body)

    def account_rejected(self, to_email: str, name: str, reason: str) -> None:
        text_body = (
            f"Hi {name},\n\n"
            "Unfortunately your account registration was not approved.\n"
            f"Reason: {reason}\n"
        )
        self._deliver(to_email, "Your account registration", text_body)

    def admin_welcome(self, to_email: str, name: str) -> None:
        text_body = (
            f"Hi {name},\n\n"
            "An administrator account has been created for you.\n"
            "Sign in with this email address and the password you were given, "
            "then change it.\n"
        )
        self._deliver(to_email, "Welcome as Admin", text_body)
