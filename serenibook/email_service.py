"""
Email Service using Resend, with an optional SMTP relay as fallback
Templates are written in MJML and compiled to HTML before sending
"""

import logging
import smtplib
import ssl
from datetime import datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional, Union
from urllib.parse import quote

import resend
from mjml import mjml_to_html

from .config import (
    EMAIL_FROM_ADDRESS,
    FRONTEND_URL,
    RESEND_API_KEY,
    SMTP_HOST,
    SMTP_PASSWORD,
    SMTP_PORT,
    SMTP_USE_TLS,
    SMTP_USERNAME,
)
from .email_templates import (
    password_reset_template,
    verification_email_template,
    welcome_email_template,
)

logger = logging.getLogger(__name__)

resend.api_key = RESEND_API_KEY


class EmailDeliveryError(Exception):
    """Raised when no transport could deliver a message"""


def build_frontend_link(path: str, token: str) -> str:
    return f"{FRONTEND_URL.rstrip('/')}{path}?token={quote(token)}"


def compile_mjml_to_html(mjml_content: str) -> str:
    """Compile MJML template to production-ready HTML"""
    try:
        result = mjml_to_html(mjml_content)
        # Recent releases return an object with html/errors, older ones a dict
        errors = getattr(result, "errors", None)
        if errors is None and isinstance(result, dict):
            errors = result.get("errors")
        if errors:
            logger.warning(f"MJML compilation warnings: {errors}")

        html = getattr(result, "html", None)
        if html is None and isinstance(result, dict):
            html = result.get("html", "")
        return html if html is not None else str(result)
    except Exception as e:
        logger.error(f"MJML compilation error: {e}")
        raise EmailDeliveryError(f"Failed to compile MJML template: {str(e)}") from e


def send_via_smtp(
    to: list[str],
    subject: str,
    html_content: str,
    from_address: str,
) -> dict:
    """Send email via the configured SMTP relay"""
    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = from_address
    msg["To"] = ", ".join(to)
    msg.attach(MIMEText(html_content, "html"))

    try:
        if SMTP_PORT == 465:
            context = ssl.create_default_context()
            server = smtplib.SMTP_SSL(SMTP_HOST, SMTP_PORT, context=context, timeout=30)
        else:
            server = smtplib.SMTP(SMTP_HOST, SMTP_PORT, timeout=30)
            if SMTP_USE_TLS:
                server.starttls(context=ssl.create_default_context())

        try:
            if SMTP_USERNAME:
                server.login(SMTP_USERNAME, SMTP_PASSWORD or "")
            server.sendmail(from_address.split("<")[-1].rstrip(">"), to, msg.as_string())
        finally:
            server.quit()
    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"❌ SMTP send failed: {e}")
        raise EmailDeliveryError(f"SMTP failed: {str(e)}") from e

    logger.info(f"✅ SMTP email sent successfully via {SMTP_HOST}")
    return {"id": f"smtp-{datetime.utcnow().timestamp()}", "success": True}


async def send_email(
    to: Union[str, list[str]],
    subject: str,
    mjml_content: str,
    from_address: Optional[str] = None,
) -> dict:
    """
    Send an email using Resend, falling back to the SMTP relay

    Args:
        to: Recipient email(s)
        subject: Email subject line
        mjml_content: MJML template content (will be compiled to HTML)
        from_address: Optional custom from address

    Returns:
        Send response dict
    """
    html_content = compile_mjml_to_html(mjml_content)

    recipients = [to] if isinstance(to, str) else to
    sender = from_address or EMAIL_FROM_ADDRESS

    if RESEND_API_KEY:
        try:
            logger.info(f"📧 Sending email via Resend to: {recipients}")
            response = resend.Emails.send(
                {
                    "from": sender,
                    "to": recipients,
                    "subject": subject,
                    "html": html_content,
                }
            )
            logger.info(f"✅ Email sent successfully via Resend: {response}")
            return response
        except Exception as e:
            if not SMTP_HOST:
                logger.error(f"❌ Email send error to {recipients}: {e}")
                raise EmailDeliveryError(f"Failed to send email: {str(e)}") from e
            logger.warning(f"⚠️ Resend failed, falling back to SMTP: {e}")

    if SMTP_HOST:
        logger.info(f"📧 Sending email via SMTP: {SMTP_HOST}")
        return send_via_smtp(recipients, subject, html_content, sender)

    logger.error("❌ No email service configured - RESEND_API_KEY and SMTP_HOST missing")
    raise EmailDeliveryError("Email service not configured")


# ============================================
# Account lifecycle emails
# ============================================


async def send_verification_email(to: str, user_name: Optional[str], token: str) -> dict:
    """Send the email address confirmation link"""
    mjml_content = verification_email_template(user_name, build_frontend_link("/verify-email", token))
    return await send_email(
        to=to,
        subject="Confirm your email - SereniBook",
        mjml_content=mjml_content,
    )


async def send_password_reset_email(to: str, user_name: Optional[str], token: str) -> dict:
    """Send password reset email"""
    mjml_content = password_reset_template(user_name, build_frontend_link("/reset-password", token))
    return await send_email(
        to=to,
        subject="Reset your password - SereniBook",
        mjml_content=mjml_content,
    )


async def send_welcome_email(to: str, user_name: Optional[str], role: str) -> dict:
    """Send welcome email once onboarding is complete"""
    mjml_content = welcome_email_template(user_name, role)
    return await send_email(
        to=to,
        subject="Welcome to SereniBook",
        mjml_content=mjml_content,
    )
