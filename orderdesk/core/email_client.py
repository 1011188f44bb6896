# orderdesk/core/email_client.py
"""
Email client utilities for the order desk.

Responsibilities:
  - Read SMTP configuration from Settings (.env).
  - Provide a single send_email(...) function for services to use.
  - Support both TLS (STARTTLS) and SSL connections.

Typical .env configuration:

    SMTP_HOST=smtp.gmail.com
    SMTP_PORT=465
    SMTP_USERNAME=orders@example.com
    SMTP_PASSWORD=<app password>
    SMTP_FROM_EMAIL=orders@example.com
    SMTP_FROM_NAME=NYC Metal Maker
    SMTP_USE_TLS=false
    SMTP_USE_SSL=true
"""

import smtplib
from email.message import EmailMessage

from orderdesk.core.config import Settings, get_settings


def _create_smtp_client(settings: Settings) -> smtplib.SMTP:
    """
    Create and return an SMTP client configured for TLS or SSL.

    Priority:
      - If SMTP_USE_SSL is True → use smtplib.SMTP_SSL (e.g., Gmail on 465).
      - Else → use smtplib.SMTP + optional STARTTLS if SMTP_USE_TLS is True.

    NOTE:
      - Typical configs:
          * SSL: SMTP_PORT=465, SMTP_USE_SSL=true,  SMTP_USE_TLS=false
          * TLS: SMTP_PORT=587, SMTP_USE_SSL=false, SMTP_USE_TLS=true
    """
    if not settings.SMTP_HOST:
        raise RuntimeError("SMTP_HOST is not configured. Please set it in .env.")

    if settings.SMTP_USE_SSL:
        # Direct SSL connection (commonly port 465)
        server: smtplib.SMTP = smtplib.SMTP_SSL(
            settings.SMTP_HOST, settings.SMTP_PORT, timeout=30
        )
    else:
        # Plain connection, optionally upgraded via STARTTLS (commonly port 587)
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
        Plain-text body (required, used as the fallback for clients that
        do not support HTML).
    html_body:
        Optional HTML body; if provided, is sent as an alternative part.

    Raises
    ------
    RuntimeError:
        If required SMTP configuration is missing.
    smtplib.SMTPException:
        If the underlying SMTP connection or send fails.
    """
    settings = get_settings()
    if not (settings.SMTP_HOST and settings.SMTP_USERNAME and settings.SMTP_PASSWORD):
        raise RuntimeError(
            "SMTP is not configured correctly. "
            "Please set SMTP_HOST, SMTP_USERNAME, and SMTP_PASSWORD in .env."
        )

    msg = EmailMessage()

    from_email = settings.SMTP_FROM_EMAIL or settings.SMTP_USERNAME
    msg["From"] = f"{settings.SMTP_FROM_NAME} <{from_email}>"
    msg["To"] = to_email
    msg["Subject"] = subject

    # Always add a plain-text part
    msg.set_content(text_body)

    if html_body:
        msg.add_alternative(html_body, subtype="html")

    server = _create_smtp_client(settings)
    try:
        server.login(settings.SMTP_USERNAME, settings.SMTP_PASSWORD)
        server.send_message(msg)
    finally:
        try:
            server.quit()
        except smtplib.SMTPException:
            # Connection is being torn down anyway.
            pass
