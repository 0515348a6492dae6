# payment/views.py: Stripe payment intents, webhook reconciliation and return-page verification
import json
import logging

from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from boneplus.errors import ServiceError
from boneplus.utils import json_error, read_json

from . import gateway
from .models import Order
from .orders import (
    collect_checkout_items, default_currency, mark_failed, order_payload, price_checkout,
    reconcile_paid, record_successful_payment,
)

logger = logging.getLogger(__name__)


# ----------------------------- Create -----------------------------

@csrf_exempt
@require_POST
def create_payment_intent(request):
    """
    Server-authoritative create:
    - prices the cart from the catalogue (client prices are ignored)
    - creates a Stripe PaymentIntent carrying the lines in metadata
    - returns { clientSecret, paymentIntentId, amount }
    """
    try:
        body = read_json(request)
    except ValueError:
        return json_error("Invalid JSON")

    session_id = str(body.get("sessionId") or "").strip()
    try:
        rows = collect_checkout_items(body.get("items"), session_id)
        if not rows:
            return json_error("No items in cart")
        lines, amount = price_checkout(rows)

        metadata = {"order_items": json.dumps(lines)}
        if session_id:
            metadata["cart_session"] = session_id

        currency = default_currency()
        intent = gateway.create_payment_intent(
            amount, currency, metadata, receipt_email=str(body.get("email") or "").strip(),
        )
    except ServiceError as exc:
        return JsonResponse(exc.as_dict(), status=exc.status)
    except Exception:
        logger.exception("Payment intent error")
        return json_error("Failed to create payment intent", status=500)

    return JsonResponse({
        "clientSecret": intent.get("client_secret"),
        "paymentIntentId": intent.get("id"),
        "amount": amount,
    })


# ----------------------------- Webhook -----------------------------

@csrf_exempt
@require_POST
def stripe_webhook(request):
    """
    Handle Stripe webhooks. Signature verified against the raw body.
    We care about:
      - payment_intent.succeeded       -> record paid order (idempotent)
      - payment_intent.payment_failed  -> mark a pending order failed
    Anything else is acknowledged so Stripe stops retrying.
    """
    signature = request.headers.get("Stripe-Signature")
    if not signature:
        logger.error("No stripe signature found in webhook request")
        return json_error("No stripe signature found")

    try:
        event = gateway.construct_event(request.body, signature)
    except ServiceError as exc:
        return JsonResponse(exc.as_dict(), status=exc.status)

    event_type = event.get("type", "")
    intent = (event.get("data") or {}).get("object") or {}
    try:
        if event_type == "payment_intent.succeeded":
            logger.info("Processing successful payment: %s", intent.get("id"))
            record_successful_payment(intent)
        elif event_type == "payment_intent.payment_failed":
            mark_failed(intent)
    except Exception as exc:
        logger.exception("Webhook handler failed for %s", event_type)
        return json_error("Webhook handler failed", message=str(exc))

    return JsonResponse({"received": True, "type": event_type})


# ----------------------------- Verify (return page) -----------------------------

@require_GET
def payment_verify(request):
    """
    Return-page check (?payment_intent=...).
    Stripe is the source of truth; if the webhook has not landed yet but the
    intent succeeded, the order is recorded here instead.
    """
    intent_id = request.GET.get("payment_intent")
    if not intent_id:
        return json_error("Payment intent ID is required")

    try:
        intent = gateway.retrieve_payment_intent(intent_id)
    except ServiceError as exc:
        return JsonResponse({"success": False, **exc.as_dict()}, status=exc.status)
    if intent is None:
        return json_error("Payment intent not found", status=404)

    stripe_status = intent.get("status")
    try:
        order = Order.objects.filter(payment_intent_id=intent_id).first()
        if order is None:
            if stripe_status != "succeeded":
                logger.warning("Order not found for payment_intent: %s", intent_id)
                return JsonResponse(
                    {"success": False, "error": "Order not found", "paymentStatus": stripe_status},
                    status=404,
                )
            logger.info("Creating order for successful payment: %s", intent_id)
            order, _ = record_successful_payment(intent, via_verification=True)
        elif stripe_status == "succeeded" and order.status != "paid":
            reconcile_paid(order)
    except Exception as exc:
        logger.exception("Payment verification failed for %s", intent_id)
        return JsonResponse(
            {"success": False, "error": str(exc) or "Failed to verify payment", "paymentId": intent_id},
            status=500,
        )

    return JsonResponse({"success": True, "order": order_payload(order, stripe_status)})
