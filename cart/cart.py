# cart/cart.py
import logging
from datetime import timedelta

from django.conf import settings
from django.db import OperationalError, transaction
from django.utils import timezone

from boneplus.errors import ServiceError
from boneplus.utils import retry, short_id
from catalog.stock import InsufficientStock, get_product

from .models import CartItem, CartSession

logger = logging.getLogger(__name__)

MAX_IDENTIFIER_LENGTH = 255


class CartError(ServiceError):
    pass


class SessionRequired(CartError):
    message = "Session ID is required"


class InvalidQuantity(CartError):
    message = "Invalid quantity"


class CartItemNotFound(CartError):
    status = 404
    message = "Cart item not found or doesn't belong to session"


def _identifier(value) -> str:
    ident = str(value or "").strip()
    if not ident or len(ident) > MAX_IDENTIFIER_LENGTH:
        raise SessionRequired()
    return ident


def _max_quantity() -> int:
    return int(getattr(settings, "CART_MAX_QUANTITY", 10))


def _touch_session(identifier: str) -> CartSession:
    session, created = CartSession.objects.get_or_create(user_identifier=identifier)
    if not created:
        session.save(update_fields=["last_modified"])
    return session


def _rows(session_filter) -> list[dict]:
    qs = (
        CartItem.objects.filter(**session_filter)
        .select_related("product")
        .order_by("cart_item_id")
    )
    return [ci.as_row() for ci in qs]


def _check_line(product, quantity: int) -> None:
    if quantity > _max_quantity():
        raise InvalidQuantity(f"Quantity cannot exceed {_max_quantity()} per item")
    if quantity > product.stock_quantity:
        raise InsufficientStock(
            available=product.stock_quantity, requested=quantity, name=product.name,
        )


@retry(
    OperationalError,
    attempts=lambda: getattr(settings, "CART_READ_RETRIES", 3),
    delay=lambda: getattr(settings, "CART_READ_RETRY_DELAY", 0.3),
)
def load_items(identifier) -> list[dict]:
    """
    Items of the cart keyed by `identifier`; creates the cart on first sight.
    Transient database errors are retried with backoff.
    """
    ident = _identifier(identifier)
    with transaction.atomic():
        session = _touch_session(ident)
        return _rows({"session": session})


@transaction.atomic
def add_item(identifier, product_id, quantity: int) -> list[dict]:
    """
    Add `quantity` units of a product, merging with an existing line.
    The merged quantity must fit CART_MAX_QUANTITY (checked first) and the stock on hand.
    """
    ident = _identifier(identifier)
    session = _touch_session(ident)
    product = get_product(product_id, lock=True)

    item = (
        CartItem.objects.select_for_update()
        .filter(session=session, product=product)
        .first()
    )
    new_qty = quantity + (item.quantity if item else 0)
    _check_line(product, new_qty)

    if item:
        item.quantity = new_qty
        item.save(update_fields=["quantity"])
    else:
        CartItem.objects.create(session=session, product=product, quantity=new_qty)

    logger.info("Cart %s: product %s -> qty %d", short_id(ident), product.pk, new_qty)
    return _rows({"session": session})


@transaction.atomic
def update_quantity(identifier, cart_item_id, quantity: int) -> list[dict]:
    ident = _identifier(identifier)
    try:
        item_pk = int(cart_item_id)
    except (TypeError, ValueError):
        raise CartItemNotFound()

    item = (
        CartItem.objects.select_for_update()
        .select_related("product", "session")
        .filter(pk=item_pk, session__user_identifier=ident)
        .first()
    )
    if not item:
        raise CartItemNotFound()

    _check_line(item.product, quantity)
    item.quantity = quantity
    item.save(update_fields=["quantity"])
    item.session.save(update_fields=["last_modified"])
    return _rows({"session": item.session})


@transaction.atomic
def remove_item(identifier, cart_item_id) -> list[dict]:
    ident = _identifier(identifier)
    try:
        item_pk = int(cart_item_id)
    except (TypeError, ValueError):
        raise CartItemNotFound("Item not found or doesn't belong to session")

    deleted, _ = CartItem.objects.filter(pk=item_pk, session__user_identifier=ident).delete()
    if not deleted:
        raise CartItemNotFound("Item not found or doesn't belong to session")

    logger.info("Cart %s: removed line %s", short_id(ident), item_pk)
    return _rows({"session__user_identifier": ident})


@transaction.atomic
def clear(identifier) -> int:
    """Empty the cart. Unknown carts are a no-op. Returns the number of lines removed."""
    ident = _identifier(identifier)
    deleted, _ = CartItem.objects.filter(session__user_identifier=ident).delete()
    return deleted


def purge_stale(days: int | None = None) -> int:
    """Drop carts untouched for `days` (default CART_STALE_DAYS). Returns carts removed."""
    days = int(days if days is not None else getattr(settings, "CART_STALE_DAYS", 30))
    cutoff = timezone.now() - timedelta(days=days)
    stale = CartSession.objects.filter(last_modified__lt=cutoff)
    n = stale.count()
    stale.delete()
    return n
