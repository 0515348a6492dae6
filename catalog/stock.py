# catalog/stock.py
import logging

from boneplus.errors import ServiceError

from .models import Headphone

logger = logging.getLogger(__name__)


class StockError(ServiceError):
    pass


class ProductNotFound(StockError):
    status = 404
    message = "Product not found"


class InsufficientStock(StockError):
    message = "Insufficient stock"


def parse_quantity(value) -> int | None:
    """Positive integer quantity, or None when `value` is not one."""
    if isinstance(value, bool):
        return None
    try:
        qty = int(str(value).strip())
    except (TypeError, ValueError):
        return None
    return qty if qty >= 1 else None


def get_product(product_id, *, lock: bool = False) -> Headphone:
    qs = Headphone.objects.all()
    if lock:
        qs = qs.select_for_update()
    try:
        return qs.get(pk=int(product_id))
    except (TypeError, ValueError, Headphone.DoesNotExist):
        raise ProductNotFound()


def require_stock(product_id, quantity: int, *, lock: bool = False) -> Headphone:
    """
    Return the product when `quantity` units are on hand.
    Raises ProductNotFound / InsufficientStock otherwise.
    """
    product = get_product(product_id, lock=lock)
    if product.stock_quantity < quantity:
        raise InsufficientStock(
            available=product.stock_quantity,
            requested=quantity,
            name=product.name,
        )
    return product


def check_items(items) -> list[dict]:
    """
    Availability report for [{"id", "quantity"}] rows, one entry per row.
    """
    ids = set()
    for it in items:
        try:
            ids.add(int(it.get("id")))
        except (TypeError, ValueError, AttributeError):
            continue
    stock = dict(Headphone.objects.filter(pk__in=ids).values_list("pk", "stock_quantity"))

    checks = []
    for it in items:
        raw_id = it.get("id") if isinstance(it, dict) else None
        try:
            pid = int(raw_id)
        except (TypeError, ValueError):
            pid = None
        if pid is None or pid not in stock:
            checks.append({"id": raw_id, "available": False, "message": "Product not found"})
            continue
        qty = parse_quantity(it.get("quantity"))
        checks.append({
            "id": raw_id,
            "available": qty is not None and stock[pid] >= qty,
            "requested": it.get("quantity"),
            "inStock": stock[pid],
        })
    return checks
