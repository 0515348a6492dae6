# access/views.py
import logging

from django.conf import settings
from django.contrib.auth import authenticate, login, logout
from django.http import JsonResponse
from django.utils.crypto import constant_time_compare
from django.views.decorators.csrf import csrf_exempt, ensure_csrf_cookie
from django.views.decorators.http import require_POST

from boneplus.utils import json_error, read_json

logger = logging.getLogger(__name__)


@csrf_exempt
@require_POST
def verify_password(request):
    """Site-wide gate: the right password earns a 24h site_session cookie."""
    try:
        body = read_json(request)
    except ValueError:
        return json_error("Invalid JSON")

    password = str(body.get("password") or "")
    if not password or not constant_time_compare(password, settings.SITE_PASSWORD):
        return json_error("Invalid password", status=401)

    resp = JsonResponse({"success": True})
    resp.set_cookie(
        getattr(settings, "SITE_SESSION_COOKIE", "site_session"),
        "authenticated",
        max_age=settings.SITE_SESSION_SECONDS,
        path="/",
        httponly=True,
        secure=not settings.DEBUG,
        samesite="Strict",
    )
    return resp


@csrf_exempt
@ensure_csrf_cookie
@require_POST
def admin_login(request):
    try:
        body = read_json(request)
    except ValueError:
        return json_error("Invalid JSON")

    username = str(body.get("username") or "").strip()
    password = str(body.get("password") or "")
    user = authenticate(request, username=username, password=password) if username and password else None
    if user is None or not user.is_staff:
        logger.warning("Rejected admin login for %r", username)
        return json_error("Invalid credentials", status=401)

    login(request, user)
    request.session.set_expiry(settings.ADMIN_SESSION_SECONDS)
    logger.info("Admin %s logged in", user.get_username())
    return JsonResponse({"success": True})


@require_POST
def admin_logout(request):
    logout(request)
    return JsonResponse({"success": True})
