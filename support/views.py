# support/views.py
import logging

from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from access.decorators import admin_required
from boneplus.errors import ServiceError
from boneplus.utils import json_error, read_json

from . import inbox
from .emails import development_mode
from .forms import ContactForm
from .models import ContactMessage

logger = logging.getLogger(__name__)


@csrf_exempt
@require_POST
def contact(request):
    try:
        body = read_json(request)
    except ValueError:
        return json_error("Invalid JSON")

    if not body.get("email") or not str(body.get("message") or "").strip():
        return json_error("Email and message are required")

    form = ContactForm({
        "name": str(body.get("name") or "").strip(),
        "email": str(body.get("email")).strip(),
        "message": body.get("message"),
    })
    if not form.is_valid():
        return json_error("Invalid contact details", fields=form.errors.get_json_data())

    try:
        msg = form.save()
    except Exception:
        logger.exception("Error saving contact message")
        return json_error("Failed to save message", status=500)

    logger.info("Contact message %s received", msg.pk)
    return JsonResponse({"success": True, "messageId": msg.pk}, status=201)


# ----------------------------- Admin inbox -----------------------------

@admin_required
@require_GET
def message_list(request):
    try:
        rows = [m.as_row() for m in ContactMessage.objects.order_by("-message_date", "-message_id")]
    except Exception:
        logger.exception("Error fetching messages")
        return json_error("Failed to fetch messages", status=500)
    return JsonResponse(rows, safe=False)


@admin_required
@require_http_methods(["PATCH"])
def message_status(request, pk: int):
    try:
        body = read_json(request)
    except ValueError:
        return json_error("Invalid JSON")

    try:
        msg = inbox.set_status(pk, body.get("status"))
    except ServiceError as exc:
        return JsonResponse(exc.as_dict(), status=exc.status)
    except Exception:
        logger.exception("Error updating message %s status", pk)
        return json_error("Failed to update message status", status=500)

    return JsonResponse({"message_id": msg.message_id, "status": msg.status, "updated_at": msg.updated_at})


@admin_required
@require_POST
def message_respond(request, pk: int):
    try:
        body = read_json(request)
    except ValueError:
        return json_error("Invalid JSON")

    response = str(body.get("response") or "").strip()
    if not response:
        return json_error("Response is required")

    try:
        msg = inbox.respond(pk, response)
    except ServiceError as exc:
        return JsonResponse(exc.as_dict(), status=exc.status)
    except Exception:
        logger.exception("Error responding to message %s", pk)
        return json_error("Failed to send response", status=500)

    return JsonResponse({**msg.as_row(), "developmentMode": development_mode()})
