"""Outbound email broadcasts for event announcements.

Messages go to an SMTP relay with every recipient in BCC. Broadcasts run
after the triggering write has committed; a delivery failure is logged and
never undoes that write.
"""
import logging
import smtplib
from datetime import datetime
from email.message import EmailMessage
from html import escape
from typing import Optional

import pytz

from ensemble.config import settings

logger = logging.getLogger(__name__)


def send_email(to: list[str], subject: str, html: str) -> bool:
    """Send one message to ``to`` (as BCC). Returns False when SMTP is not configured."""
    if not settings.SMTP_HOST:
        logger.warning("SMTP_HOST is not set. Email '%s' not sent.", subject)
        return False

    message = EmailMessage()
    message["Subject"] = " ".join(subject.splitlines())
    message["From"] = settings.MAIL_FROM
    message["To"] = settings.MAIL_TO_PLACEHOLDER or settings.MAIL_FROM
    message["Bcc"] = ", ".join(to)
    message.set_content("This message requires an HTML-capable mail client.")
    message.add_alternative(html, subtype="html")

    with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=30) as server:
        if settings.SMTP_USE_TLS:
            server.starttls()
        if settings.SMTP_USERNAME:
            server.login(settings.SMTP_USERNAME, settings.SMTP_PASSWORD)
        server.send_message(message)

    logger.info("Email '%s' sent to %d recipients", subject, len(to))
    return True


def format_event_date(value: datetime) -> str:
    """Render an event date in the organization's timezone (naive values are UTC)."""
    if value.tzinfo is None:
        value = pytz.utc.localize(value)
    return value.astimezone(pytz.timezone(settings.TIMEZONE)).strftime("%d/%m/%Y %H:%M")


def event_created_message(title: str, date: datetime, location: Optional[str]) -> tuple[str, str]:
    subject = f"New event: {title}"
    html = (
        "<h1>New event added</h1>"
        f"<p>A new event <strong>{escape(title)}</strong> has been added to the calendar.</p>"
        f"<p><strong>Date:</strong> {format_event_date(date)}</p>"
        f"<p><strong>Location:</strong> {escape(location or 'Not specified')}</p>"
        "<p>Please sign in to record your attendance.</p>"
        f'<a href="{escape(settings.APP_URL)}">Open the application</a>'
    )
    return subject, html


def event_closed_message(title: str, date: datetime) -> tuple[str, str]:
    subject = f"Registration closed: {title}"
    html = (
        "<h1>Registration closed</h1>"
        f"<p>Registration for <strong>{escape(title)}</strong> is now closed.</p>"
        f"<p><strong>Date:</strong> {format_event_date(date)}</p>"
        "<p>If you have not recorded your attendance, you are considered absent.</p>"
        f'<a href="{escape(settings.APP_URL)}">View the schedule</a>'
    )
    return subject, html


def broadcast(recipients: list[str], subject: str, html: str) -> None:
    """Fire-and-forget send, meant to run as a background task."""
    if not recipients:
        return
    try:
        send_email(recipients, subject, html)
    except (smtplib.SMTPException, OSError, ValueError):
        logger.exception("Failed to send email '%s' to %d recipients", subject, len(recipients))


def broadcast_event_created(recipients: list[str], title: str, date: datetime, location: Optional[str]) -> None:
    subject, html = event_created_message(title, date, location)
    broadcast(recipients, subject, html)


def broadcast_event_closed(recipients: list[str], title: str, date: datetime) -> None:
    subject, html = event_closed_message(title, date)
    broadcast(recipients, subject, html)
