# cart/views.py
import logging

from django.db import OperationalError
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from boneplus.errors import ServiceError
from boneplus.utils import json_error, read_json, short_id
from catalog.stock import parse_quantity

from . import cart as cart_service

logger = logging.getLogger(__name__)


@csrf_exempt
@require_http_methods(["GET", "POST"])
def cart_view(request):
    if request.method == "POST":
        return _cart_add(request)

    session_id = request.GET.get("sessionId")
    if not session_id:
        return json_error("Session ID is required")

    try:
        items = cart_service.load_items(session_id)
    except ServiceError as exc:
        return JsonResponse(exc.as_dict(), status=exc.status)
    except OperationalError:
        logger.exception("Cart %s unavailable after retries", short_id(session_id))
        return json_error("Failed to fetch cart", status=500)
    except Exception:
        logger.exception("Error fetching cart %s", short_id(session_id))
        return json_error("Failed to fetch cart", status=500)
    return JsonResponse({"items": items})


def _cart_add(request):
    try:
        body = read_json(request)
    except ValueError:
        return json_error("Invalid JSON")

    session_id = body.get("sessionId")
    product_id = body.get("productId")
    raw_qty = body.get("quantity")
    if not session_id or not product_id or not raw_qty:
        logger.warning("Add to cart with missing fields")
        return json_error("Missing required fields")

    quantity = parse_quantity(raw_qty)
    if quantity is None:
        return json_error("Invalid quantity")

    try:
        items = cart_service.add_item(session_id, product_id, quantity)
    except ServiceError as exc:
        return JsonResponse(exc.as_dict(), status=exc.status)
    except Exception:
        logger.exception("Error adding to cart %s", short_id(session_id))
        return json_error("Failed to add to cart", status=500)
    return JsonResponse({"items": items})


@csrf_exempt
@require_http_methods(["PUT"])
def cart_update(request):
    try:
        body = read_json(request)
    except ValueError:
        return json_error("Invalid JSON", items=[])

    session_id = body.get("sessionId")
    cart_item_id = body.get("cartItemId")
    raw_qty = body.get("quantity")
    if not session_id or not cart_item_id or raw_qty is None:
        return json_error("Missing required fields", items=[])

    quantity = parse_quantity(raw_qty)
    if quantity is None:
        return json_error("Invalid quantity", items=[])

    try:
        items = cart_service.update_quantity(session_id, cart_item_id, quantity)
    except ServiceError as exc:
        return JsonResponse(exc.as_dict(), status=exc.status)
    except Exception:
        logger.exception("Error updating cart %s", short_id(session_id))
        return json_error("Failed to update cart", status=500, items=[])
    return JsonResponse({"items": items})


@csrf_exempt
@require_http_methods(["DELETE"])
def cart_remove(request):
    session_id = request.GET.get("sessionId")
    cart_item_id = request.GET.get("cartItemId")
    if not session_id or not cart_item_id:
        return json_error(
            "Missing required parameters",
            details={"sessionId": bool(session_id), "cartItemId": bool(cart_item_id)},
            items=[],
        )

    try:
        items = cart_service.remove_item(session_id, cart_item_id)
    except ServiceError as exc:
        return JsonResponse({**exc.as_dict(), "items": []}, status=exc.status)
    except Exception as exc:
        logger.exception("Cart remove error for %s", short_id(session_id))
        return json_error("Failed to remove item from cart", status=500, details=str(exc), items=[])
    return JsonResponse({"items": items})


@csrf_exempt
@require_http_methods(["DELETE"])
def cart_clear(request):
    body = {}
    if request.body:
        try:
            body = read_json(request)
        except ValueError:
            return json_error("Invalid JSON")
    session_id = body.get("sessionId") or request.GET.get("sessionId")
    if not session_id:
        return json_error("Session ID is required")

    try:
        removed = cart_service.clear(session_id)
    except ServiceError as exc:
        return JsonResponse(exc.as_dict(), status=exc.status)
    except Exception:
        logger.exception("Error clearing cart %s", short_id(session_id))
        return json_error("Failed to clear cart", status=500)

    logger.info("Cart %s cleared (%d lines)", short_id(session_id), removed)
    return JsonResponse({"success": True})
