# payment/gateway.py: the only module that talks to Stripe
import logging

import stripe
from django.conf import settings

from boneplus.errors import ServiceError

logger = logging.getLogger(__name__)


class GatewayError(ServiceError):
    status = 502
    message = "Payment processor error"


class InvalidSignature(ServiceError):
    message = "Invalid signature"


def _client_key() -> str:
    return getattr(settings, "STRIPE_SECRET_KEY", "")


def create_payment_intent(amount_cents: int, currency: str, metadata: dict, receipt_email: str = "") -> dict:
    """Create a PaymentIntent with automatic payment methods; returns it as a plain dict."""
    params = {
        "amount": int(amount_cents),
        "currency": currency,
        "automatic_payment_methods": {"enabled": True},
        "metadata": metadata,
        "api_key": _client_key(),
    }
    if receipt_email:
        params["receipt_email"] = receipt_email
    try:
        intent = stripe.PaymentIntent.create(**params)
    except stripe.StripeError as exc:
        logger.warning("PaymentIntent create failed: %s", exc)
        raise GatewayError(getattr(exc, "user_message", None) or str(exc))
    return intent.to_dict()


def retrieve_payment_intent(intent_id: str) -> dict | None:
    """The intent as a plain dict, or None when Stripe does not know it."""
    try:
        intent = stripe.PaymentIntent.retrieve(intent_id, api_key=_client_key())
    except stripe.InvalidRequestError as exc:
        if getattr(exc, "http_status", None) == 404:
            return None
        raise GatewayError(str(exc))
    except stripe.StripeError as exc:
        logger.warning("PaymentIntent retrieve failed for %s: %s", intent_id, exc)
        raise GatewayError(str(exc))
    return intent.to_dict()


def construct_event(payload: bytes, signature: str) -> dict:
    """Verify the Stripe-Signature header against the raw body and parse the event."""
    try:
        event = stripe.Webhook.construct_event(
            payload, signature, getattr(settings, "STRIPE_WEBHOOK_SECRET", ""),
        )
    except (ValueError, stripe.SignatureVerificationError) as exc:
        logger.warning("Webhook signature rejected: %s", exc)
        raise InvalidSignature()
    return event.to_dict()
