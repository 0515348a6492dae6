# catalog/views.py
import logging

from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from boneplus.utils import json_error, read_json

from .models import Headphone
from .stock import StockError, check_items, parse_quantity, require_stock

logger = logging.getLogger(__name__)


@require_GET
def product_list(request):
    """Everything currently purchasable."""
    try:
        rows = [h.as_row() for h in Headphone.objects.filter(stock_quantity__gt=0)]
    except Exception:
        logger.exception("Error fetching products")
        return json_error("Failed to fetch products", status=500)
    return JsonResponse(rows, safe=False)


@csrf_exempt
@require_POST
def stock_check(request):
    """
    Pre-checkout availability for the whole cart.
    Body: {"items": [{"id": <product_id>, "quantity": <n>}, ...]}
    """
    try:
        body = read_json(request)
    except ValueError:
        return json_error("Invalid JSON")

    items = body.get("items")
    if not isinstance(items, list):
        return json_error("Items are required")

    try:
        checks = check_items(items)
    except Exception:
        logger.exception("Error checking stock")
        return json_error("Failed to check stock", status=500)

    unavailable = [c for c in checks if not c["available"]]
    if unavailable:
        return json_error("Some items are out of stock", unavailableItems=unavailable)
    return JsonResponse({"success": True, "stockChecks": checks})


@csrf_exempt
@require_POST
def check_stock(request):
    try:
        body = read_json(request)
    except ValueError:
        return json_error("Invalid JSON")

    product_id = body.get("id")
    if not product_id:
        logger.warning("Stock check without product id")
        return json_error("Product ID is required")

    quantity = parse_quantity(body.get("quantity"))
    if quantity is None:
        return json_error("Invalid quantity")

    try:
        product = require_stock(product_id, quantity)
    except StockError as exc:
        return JsonResponse(exc.as_dict(), status=exc.status)
    except Exception as exc:
        logger.exception("Stock check failed for product %s", product_id)
        return json_error("Failed to check stock", status=500, details=str(exc))

    return JsonResponse({"success": True, "available": product.stock_quantity})
