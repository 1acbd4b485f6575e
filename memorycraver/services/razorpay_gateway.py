import logging
from typing import Optional

import razorpay
import requests

from memorycraver.config import settings
from memorycraver.errors import HandlerError

logger = logging.getLogger(__name__)

razorpay_client = razorpay.Client(
    auth=(settings.RAZORPAY_KEY_ID, settings.RAZORPAY_KEY_SECRET)
)

# Razorpay rejects receipts longer than this
MAX_RECEIPT_LENGTH = 40


def to_subunits(amount: float) -> int:
    """Rupees → paise."""
    return int(round(amount * 100))


def create_gateway_order(amount: float, receipt: str, notes: Optional[dict] = None) -> dict:
    """
    Create a Razorpay order for ``amount`` (in rupees).

    Any SDK or transport failure is logged and surfaced as a HandlerError;
    the caller's transaction is expected to roll back.
    """
    try:
        return razorpay_client.order.create({
            "amount": to_subunits(amount),
            "currency": settings.CURRENCY,
            "receipt": receipt[:MAX_RECEIPT_LENGTH],
            "notes": notes or {},
        })
    except (
        razorpay.errors.BadRequestError,
        razorpay.errors.GatewayError,
        razorpay.errors.ServerError,
        requests.RequestException,
    ) as e:
        logger.exception(f"Razorpay order creation failed for receipt {receipt}: {e}")
        raise HandlerError("Failed to create payment order")


def verify_payment_signature(order_id: str, payment_id: str, signature: str) -> bool:
    """
    Check ``signature`` against HMAC-SHA256("<order_id>|<payment_id>") keyed
    with the Razorpay key secret. The SDK compares digests in constant time.
    """
    # hmac.compare_digest only accepts ASCII strings
    if not signature.isascii():
        return False

    try:
        razorpay_client.utility.verify_payment_signature({
            "razorpay_order_id": order_id,
            "razorpay_payment_id": payment_id,
            "razorpay_signature": signature,
        })
    except razorpay.errors.SignatureVerificationError:
        return False
    return True
