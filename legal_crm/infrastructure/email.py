"""Send notification emails through the SendGrid REST API."""

from __future__ import annotations

import json
import logging
from html import escape
from typing import Any

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from legal_crm.config import get_settings
from legal_crm.domain.exceptions import DeliveryTimeoutError, EmailDeliveryError

logger = logging.getLogger(__name__)

_EMAIL_TEMPLATE = (
    '<!DOCTYPE html><html><body style="font-family: Arial, sans-serif; color: #1f2933;">'
    '<div style="max-width: 600px; margin: 0 auto; padding: 24px;">'
    '<h2 style="margin-top: 0;">{title}</h2>'
    "{paragraphs}"
    "{action}"
    '<p style="color: #7b8794; font-size: 12px; margin-top: 32px;">'
    "Αυτό το μήνυμα στάλθηκε αυτόματα από το σύστημα διαχείρισης του γραφείου."
    "</p></div></body></html>"
)


def extract_sendgrid_error_details(body: Any) -> str | None:
    """Return a human readable description for a SendGrid error payload."""

    if body in (None, ""):
        return None

    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError:
            return None

    if isinstance(body, str):
        body = body.strip()
        if not body:
            return None
        try:
            parsed = json.loads(body)
        except json.JSONDecodeError:
            return body
    else:
        parsed = body

    if isinstance(parsed, dict):
        errors = parsed.get("errors")
        if isinstance(errors, list):
            messages: list[str] = []
            for item in errors:
                if not isinstance(item, dict) or not item.get("message"):
                    continue
                help_link = item.get("help")
                if help_link:
                    messages.append(f"{item['message']} (help: {help_link})")
                else:
                    messages.append(str(item["message"]))
            if messages:
                return "; ".join(messages)
        try:
            return json.dumps(parsed)
        except (TypeError, ValueError):
            return None

    if isinstance(parsed, list):
        return "; ".join(str(item) for item in parsed)

    return None


def _describe_failure(status_code: Any, body: Any) -> str:
    details = extract_sendgrid_error_details(body)
    if status_code and details:
        return f"SendGrid request failed with status {status_code}: {details}"
    if status_code:
        return f"SendGrid request failed with status {status_code}"
    if details:
        return f"SendGrid request failed: {details}"
    return "SendGrid request failed"


def render_notification_html(
    title: str,
    message: str,
    *,
    action_url: str | None = None,
    action_text: str | None = None,
) -> str:
    """Wrap a plain text notification in the office email layout."""

    paragraphs = "".join(
        f"<p>{escape(line)}</p>" for line in message.splitlines() if line.strip()
    )
    action = ""
    if action_url:
        action = (
            f'<p><a href="{escape(action_url, quote=True)}" '
            'style="background: #1d4ed8; color: #ffffff; padding: 10px 18px; '
            'border-radius: 4px; text-decoration: none;">'
            f"{escape(action_text or 'Προβολή')}</a></p>"
        )
    return _EMAIL_TEMPLATE.format(title=escape(title), paragraphs=paragraphs, action=action)


def send_email(subject: str, html_content: str, recipient: str) -> None:
    """Send an email with the configured SendGrid credentials.

    Raises :class:`EmailDeliveryError` (or :class:`DeliveryTimeoutError`) with
    the provider's explanation when the message is not accepted.
    """

    settings = get_settings()
    if not (settings.sendgrid_api_key and settings.sendgrid_sender):
        logger.info("SendGrid configuration incomplete; skipping email delivery")
        raise EmailDeliveryError("email delivery is not configured", channel="email")

    message = Mail(
        from_email=settings.sendgrid_sender,
        to_emails=recipient,
        subject=subject,
        html_content=html_content,
    )

    client = SendGridAPIClient(settings.sendgrid_api_key)
    # python_http_client propagates this to every request built from the client.
    client.client.timeout = settings.email_timeout_seconds
    try:
        response = client.send(message)
    except TimeoutError as exc:
        logger.error("SendGrid request to %s timed out", recipient)
        raise DeliveryTimeoutError(
            f"email delivery timed out after {settings.email_timeout_seconds:g}s",
            channel="email",
        ) from exc
    except Exception as exc:
        description = _describe_failure(
            getattr(exc, "status_code", None), getattr(exc, "body", None)
        )
        if description == "SendGrid request failed":
            description = f"{description}: {exc}"
        logger.error(description)
        raise EmailDeliveryError(description, channel="email") from exc

    status_code = getattr(response, "status_code", None)
    if not isinstance(status_code, int) or not 200 <= status_code < 300:
        description = _describe_failure(status_code, getattr(response, "body", None))
        logger.error(description)
        raise EmailDeliveryError(description, channel="email")


__all__ = [
    "extract_sendgrid_error_details",
    "render_notification_html",
    "send_email",
]
