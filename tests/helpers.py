import hashlib
import hmac
import json
import time

WEBHOOK_SECRET = "whsec_test_secret"


def stripe_signature(payload: bytes, secret: str = WEBHOOK_SECRET, timestamp: int | None = None) -> str:
    """Stripe-Signature header the way Stripe computes it (HMAC-SHA256 over "t.payload")."""
    ts = timestamp or int(time.time())
    signed = f"{ts}.".encode() + payload
    digest = hmac.new(secret.encode(), signed, hashlib.sha256).hexdigest()
    return f"t={ts},v1={digest}"


def intent_dict(intent_id="pi_123", amount=39998, items=None, status="succeeded", **extra):
    items = items if items is not None else []
    metadata = {"order_items": json.dumps(items), **extra.pop("metadata", {})}
    return {
        "id": intent_id,
        "object": "payment_intent",
        "amount": amount,
        "amount_received": amount if status == "succeeded" else 0,
        "currency": "usd",
        "status": status,
        "receipt_email": extra.pop("receipt_email", "buyer@example.com"),
        "payment_method": "pm_card_visa",
        "metadata": metadata,
        **extra,
    }


def event_payload(event_type: str, intent: dict) -> bytes:
    return json.dumps({
        "id": "evt_test",
        "object": "event",
        "type": event_type,
        "data": {"object": intent},
    }).encode()
