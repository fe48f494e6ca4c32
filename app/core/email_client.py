# app/core/email_client.py
"""
SMTP email client.

Responsibilities:
  - Read SMTP configuration from Settings (.env).
  - Provide a single send_email(...) function for the notification service.
  - Support both TLS (STARTTLS) and SSL connections.

Typical .env configuration:

    SMTP_HOST=smtp.gmail.com
    SMTP_PORT=465
    SMTP_USERNAME=shop@example.com
    SMTP_PASSWORD=<app password>
    SMTP_FROM_EMAIL=shop@example.com
    SMTP_FROM_NAME=Glow Beauty
    SMTP_USE_TLS=false
    SMTP_USE_SSL=true
"""
from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage

from app.core.config import Settings, get_settings

logger = logging.getLogger(__name__)


class EmailNotConfiguredError(RuntimeError):
    pass


def _create_smtp_client(settings: Settings) -> smtplib.SMTP:
    """
    Create and return an SMTP client configured for TLS or SSL.

    - SMTP_USE_SSL=True  -> smtplib.SMTP_SSL (e.g. port 465)
    - otherwise          -> smtplib.SMTP + optional STARTTLS (e.g. port 587)
    """
    if settings.SMTP_USE_SSL:
        server: smtplib.SMTP = smtplib.SMTP_SSL(
            settings.SMTP_HOST, settings.SMTP_PORT, timeout=30
        )
    else:
        server = smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=30)
        if settings.SMTP_USE_TLS:
            server.starttls()

    return server


def send_email(
    to_email: str,
    subject: str,
    text_body: str,
    html_body: str | None = None,
) -> None:
    """
    Send an email to a single recipient.

    Parameters
    ----------
    to_email:
        Recipient email address.
    subject:
        Email subject line.
    text_body:
        Plain-text body, also the fallback for clients without HTML.
    html_body:
        Optional HTML alternative part.

    Raises
    ------
    EmailNotConfiguredError:
        If SMTP_HOST / SMTP_USERNAME / SMTP_PASSWORD are missing.
    smtplib.SMTPException:
        If the underlying SMTP connection or send fails.
    """
    settings = get_settings()
    if not (settings.SMTP_HOST and settings.SMTP_USERNAME and settings.SMTP_PASSWORD):
        raise EmailNotConfiguredError(
            "SMTP is not configured. "
            "Set SMTP_HOST, SMTP_USERNAME, and SMTP_PASSWORD in .env."
        )

    msg = EmailMessage()
    from_email = settings.SMTP_FROM_EMAIL or settings.SMTP_USERNAME
    msg["From"] = f"{settings.SMTP_FROM_NAME} <{from_email}>"
    msg["To"] = to_email
    msg["Subject"] = subject
    msg.set_content(text_body)
    if html_body:
        msg.add_alternative(html_body, subtype="html")

    server = _create_smtp_client(settings)
    try:
        server.login(settings.SMTP_USERNAME, settings.SMTP_PASSWORD)
        server.send_message(msg)
        logger.info("Sent email %r to %s", subject, to_email)
    finally:
        try:
            server.quit()
        except smtplib.SMTPException:
            # Connection is being torn down anyway.
            pass
