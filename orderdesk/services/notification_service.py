# orderdesk/services/notification_service.py
import logging
import uuid
from html import escape
from typing import Callable

from orderdesk.core.config import get_settings
from orderdesk.core.email_client import send_email

logger = logging.getLogger(__name__)

EmailSender = Callable[..., None]

NEXT_STEPS = (
    "Our estimating team will review your files and specifications",
    "We'll prepare a detailed quote for your project",
    "Expect to hear from us within 1-2 business days",
)


def render_order_received(
    shop_name: str,
    order_code: str,
    customer_name: str | None,
    request_type: str,
    filenames: list[str] | None = None,
) -> tuple[str, str, str]:
    """
    Build (subject, text_body, html_body) for the "request received" email.
    """
    label = "Reorder Request" if request_type == "Reorder" else "Estimate Request"
    name = customer_name or "Valued Customer"
    filenames = filenames or []

    subject = f"{label} Received - {order_code}"

    text_lines = [
        f"Hi {name},",
        "",
        f"We've received your {label.lower()} and our team is reviewing the details.",
        "",
        f"Order Reference: {order_code}",
    ]
    if filenames:
        text_lines += ["", "Files Received:"] + [f"  - {f}" for f in filenames]
    text_lines += ["", "What's Next?"] + [f"  - {step}" for step in NEXT_STEPS]
    text_lines += ["", "Have questions? Reply to this email or call us directly.", "", shop_name]
    text_body = "\n".join(text_lines)

    files_html = ""
    if filenames:
        items = "".join(f"<li>{escape(f)}</li>" for f in filenames)
        files_html = f"<p><strong>Files Received:</strong></p><ul>{items}</ul>"
    steps_html = "".join(f"<li>{escape(step)}</li>" for step in NEXT_STEPS)

    html_body = (
        f"<h1>{escape(shop_name)}</h1>"
        f"<h2>Thank You for Your {label}!</h2>"
        f"<p>Hi {escape(name)},</p>"
        f"<p>We've received your {label.lower()} and our team is reviewing "
        f"the details. Here's your confirmation:</p>"
        f"<p>Order Reference<br><strong>{escape(order_code)}</strong></p>"
        f"{files_html}"
        f"<h3>What's Next?</h3><ul>{steps_html}</ul>"
        f"<p>Have questions? Reply to this email or call us directly.</p>"
    )
    return subject, text_body, html_body


class OrderNotifier:
    """
    Customer-facing notifications.

    Sending is fire-and-forget: every public method logs failures and
    returns False instead of raising, so an unreachable mail server never
    turns a stored order into an error response.
    """

    def __init__(self, sender: EmailSender = send_email, shop_name: str = "NYC Metal Maker"):
        self.sender = sender
        self.shop_name = shop_name

    def send_order_received(
        self,
        order_id: uuid.UUID,
        order_code: str,
        customer_email: str,
        request_type: str,
        customer_name: str | None = None,
        filenames: list[str] | None = None,
    ) -> bool:
        try:
            subject, text_body, html_body = render_order_received(
                self.shop_name,
                order_code,
                customer_name,
                request_type,
                filenames,
            )
            self.sender(
                to_email=customer_email,
                subject=subject,
                text_body=text_body,
                html_body=html_body,
            )
        except Exception:
            logger.exception(
                "Error sending order confirmation email for %s (order %s)",
                order_code,
                order_id,
            )
            return False

        logger.info("Confirmation email sent for %s", order_code)
        return True


def get_notifier() -> OrderNotifier:
    return OrderNotifier(shop_name=get_settings().SHOP_NAME)
