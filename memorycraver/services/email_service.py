import logging
import re
from typing import List, Optional

import requests

from memorycraver.config import settings

logger = logging.getLogger(__name__)

BREVO_API_URL = "https://api.brevo.com/v3/smtp/email"


class EmailDeliveryError(Exception):
    pass


def is_valid_email(email):
    if not email:
        return False

    return re.match(r"[^@]+@[^@]+\.[^@]+", email) is not None


def send_email(to: str, subject: str, html: str, to_name: Optional[str] = None) -> None:
    """
    Send one transactional email via Brevo.

    Raises EmailDeliveryError when the address is unusable or Brevo
    refuses the message, so callers can record per-recipient outcomes.
    """

    if not settings.BREVO_API_KEY:
        raise EmailDeliveryError("Missing BREVO_API_KEY environment variable")

    if not is_valid_email(to):
        raise EmailDeliveryError(f"Invalid email address: {to}")

    recipient = {"email": to}
    if to_name:
        recipient["name"] = to_name

    payload = {
        "sender": {
            "email": settings.MAIL_FROM,
            "name": settings.STORE_NAME,
        },
        "to": [recipient],
        "subject": subject,
        "htmlContent": html,
    }

    headers = {
        "api-key": settings.BREVO_API_KEY,
        "Content-Type": "application/json",
    }

    try:
        response = requests.post(
            BREVO_API_URL,
            json=payload,
            headers=headers,
            timeout=10,
        )
    except requests.RequestException as e:
        raise EmailDeliveryError(f"Brevo request failed: {e}") from e

    if response.status_code >= 400:
        logger.error(
            f"Brevo email failed ({response.status_code}): {response.text}"
        )
        raise EmailDeliveryError(_brevo_error_message(response))

    logger.info(f"Brevo email sent to {to}")


def _brevo_error_message(response) -> str:
    try:
        return response.json().get("message") or "Failed to send email"
    except ValueError:
        return "Failed to send email"


def chunked(items: List, size: int):
    for start in range(0, len(items), size):
        yield items[start:start + size]
