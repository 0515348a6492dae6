# payment/emails.py
from __future__ import annotations

import logging

from django.conf import settings
from django.core.cache import cache
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string

logger = logging.getLogger(__name__)


def _idempotency_key(order_id: int) -> str:
    return f"order_email_sent:{order_id}"


def send_order_emails(order) -> None:
    """
    Send: (1) receipt to buyer, (2) notification to staff.
    Idempotent via cache, so safe to call multiple times.
    """
    if not getattr(order, "pk", None) or order.status != "paid":
        return

    key = _idempotency_key(order.pk)
    if cache.get(key):
        return

    context = {
        "order": order,
        "items": list(order.items.all()),
        "site_name": getattr(settings, "SITE_NAME", "Bone+"),
        "support_email": getattr(settings, "SUPPORT_EMAIL", settings.DEFAULT_FROM_EMAIL),
    }

    # ----- Buyer receipt -----
    to_email = (order.email or "").strip()
    if to_email:
        subject = render_to_string("payment/emails/receipt_subject.txt", context).strip()
        text_body = render_to_string("payment/emails/receipt_body.txt", context)
        html_body = render_to_string("payment/emails/receipt_body.html", context)

        msg = EmailMultiAlternatives(
            subject=subject,
            body=text_body,
            from_email=settings.DEFAULT_FROM_EMAIL,
            to=[to_email],
            reply_to=[context["support_email"]],
        )
        msg.attach_alternative(html_body, "text/html")
        try:
            msg.send()
        except Exception:
            logger.exception("Receipt email failed for %s", order.display_number)

    # ----- Staff notify -----
    staff_to = getattr(settings, "ORDER_NOTIFICATION_EMAIL", "")
    if staff_to:
        subject = f"[New Paid Order] {order.display_number}"
        body = render_to_string("payment/emails/admin_body.txt", context)
        try:
            EmailMultiAlternatives(subject, body, settings.DEFAULT_FROM_EMAIL, [staff_to]).send()
        except Exception:
            logger.exception("Staff notification failed for %s", order.display_number)

    # mark as sent for 24h
    cache.set(key, True, timeout=60 * 60 * 24)
