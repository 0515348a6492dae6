# payment/orders.py
import json
import logging

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import F
from django.db.models.functions import Greatest
from django.utils import timezone

from boneplus.errors import ServiceError
from boneplus.utils import short_id
from cart.models import CartItem, CartSession
from catalog.models import Headphone
from catalog.stock import parse_quantity, require_stock

from .emails import send_order_emails
from .models import Order, OrderItem, Payment
from .utils import _from_cents, _to_cents

logger = logging.getLogger(__name__)

def default_currency() -> str:
    return (getattr(settings, "PAYMENT_CURRENCY", "usd") or "usd").lower()


class CheckoutError(ServiceError):
    pass


def collect_checkout_items(items=None, session_id=None) -> list[dict]:
    """
    Normalise the checkout request into [{"product_id", "quantity"}], one row per product.
    Explicit `items` win; otherwise the server-side cart named by `session_id` is used.
    Repeated lines for the same product are merged so stock is checked on the total.
    """
    merged = {}
    if items:
        if not isinstance(items, list):
            raise CheckoutError("Invalid item")
        for it in items:
            if not isinstance(it, dict):
                raise CheckoutError("Invalid item")
            pid = _safe_int(it.get("product_id", it.get("id")))
            qty = parse_quantity(it.get("quantity"))
            if not pid or qty is None:
                raise CheckoutError("Invalid item")
            merged[pid] = merged.get(pid, 0) + qty
    elif session_id:
        cart = CartSession.objects.filter(user_identifier=str(session_id)).first()
        if cart:
            for ci in cart.items():
                merged[ci.product_id] = merged.get(ci.product_id, 0) + ci.quantity
    return [{"product_id": pid, "quantity": qty} for pid, qty in merged.items()]


def price_checkout(rows) -> tuple[list[dict], int]:
    """
    Server-authoritative pricing: unit prices come from the catalogue, never the client.
    Returns (lines, amount_cents); raises ProductNotFound / InsufficientStock.
    """
    lines, total = [], 0
    for r in rows:
        product = require_stock(r["product_id"], r["quantity"])
        unit = _to_cents(product.price)
        lines.append({
            "id": product.product_id,
            "name": product.name,
            "quantity": r["quantity"],
            "price": str(product.price),
        })
        total += unit * r["quantity"]
    return lines, total


def _metadata_items(intent: dict) -> list[dict]:
    raw = (intent.get("metadata") or {}).get("order_items") or "[]"
    try:
        items = json.loads(raw)
    except (TypeError, ValueError):
        logger.error("Unparseable order_items metadata on %s", intent.get("id"))
        return []
    return items if isinstance(items, list) else []


def _payment_method(intent: dict) -> dict:
    pm = intent.get("payment_method")
    if isinstance(pm, dict):
        return pm
    return {"id": pm} if pm else {}


def record_successful_payment(intent: dict, *, via_verification: bool = False) -> tuple[Order, bool]:
    """
    Turn a succeeded PaymentIntent into a paid order in one transaction:
    order + items at catalogue prices, stock decrement (floored at zero),
    payment record, and the originating cart emptied.

    Idempotent by payment intent id: returns (order, created).
    """
    intent_id = intent["id"]
    existing = Order.objects.filter(payment_intent_id=intent_id).first()
    if existing:
        return existing, False

    try:
        with transaction.atomic():
            order = _create_paid_order(intent, via_verification)
    except IntegrityError:
        # concurrent delivery of the same intent won the insert
        order = Order.objects.filter(payment_intent_id=intent_id).first()
        if order is None:
            raise
        return order, False

    transaction.on_commit(lambda: send_order_emails(order))
    logger.info("Order %s recorded for intent %s", order.display_number, intent_id)
    return order, True


def _create_paid_order(intent: dict, via_verification: bool) -> Order:
    metadata = intent.get("metadata") or {}
    amount = _from_cents(intent.get("amount") or 0)
    received = _from_cents(intent.get("amount_received") or intent.get("amount") or 0)

    order = Order.objects.create(
        email=intent.get("receipt_email") or "",
        currency=(intent.get("currency") or default_currency()).lower(),
        total_price=amount,
        status="paid",
        payment_intent_id=intent["id"],
        metadata=dict(metadata),
        created_by_verification=via_verification,
    )

    for it in _metadata_items(intent):
        qty = parse_quantity(it.get("quantity")) or 1
        product = Headphone.objects.select_for_update().filter(pk=_safe_int(it.get("id"))).first()
        # price quoted at intent creation wins over a later catalogue change
        if it.get("price") not in (None, ""):
            price = _from_cents(_to_cents(it["price"]))
        else:
            price = product.price if product else _from_cents(0)
        if product:
            name = product.name
        else:
            logger.warning("Order %s references unknown product %r", order.display_number, it.get("id"))
            name = it.get("name") or "Product"

        OrderItem.objects.create(
            order=order, product=product, product_name=name, quantity=qty, price_at_time=price,
        )
        if product:
            Headphone.objects.filter(pk=product.pk).update(
                stock_quantity=Greatest(F("stock_quantity") - qty, 0),
                updated_at=timezone.now(),
            )

    Payment.objects.create(
        order=order,
        stripe_payment_id=intent["id"],
        payment_status="succeeded",
        amount_received=received,
        payment_method_details=_payment_method(intent),
        payment_date=timezone.now(),
    )

    cart_session = metadata.get("cart_session")
    if cart_session:
        CartItem.objects.filter(session__user_identifier=cart_session).delete()
        logger.info("Cart %s emptied after payment", short_id(cart_session))

    return order


def _safe_int(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@transaction.atomic
def reconcile_paid(order: Order) -> None:
    """Bring a known order in line with a succeeded intent."""
    order.mark_paid()
    payment = Payment.objects.filter(order=order).first()
    if payment:
        payment.mark_succeeded()


def mark_failed(intent: dict) -> Order | None:
    order = Order.objects.filter(payment_intent_id=intent.get("id"), status="pending").first()
    if order:
        order.mark_failed()
    return order


def order_payload(order: Order, stripe_status: str | None = None) -> dict:
    payment = Payment.objects.filter(order=order).first()
    items = [
        {
            "product_id": oi.product_id,
            "name": oi.product_name,
            "quantity": oi.quantity,
            "price_at_time": oi.price_at_time,
            "image_url": oi.product.image_url if oi.product else "",
        }
        for oi in order.items.select_related("product").order_by("id")
    ]
    return {
        "order_id": order.order_id,
        "order_number": order.display_number,
        "payment_intent_id": order.payment_intent_id,
        "email": order.email,
        "status": order.status,
        "payment_status": payment.payment_status if payment else None,
        "total_price": order.total_price,
        "currency": order.currency,
        "created_at": order.created_at,
        "created_by_verification": order.created_by_verification,
        "items": items,
        "stripe_status": stripe_status,
    }
