# support/emails.py
import logging

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string

logger = logging.getLogger(__name__)


def development_mode() -> bool:
    return bool(settings.DEBUG and getattr(settings, "SUPPORT_TEST_EMAIL", ""))


def send_response_email(message, response: str) -> str:
    """
    Email the admin reply to the customer. Returns the address actually used.
    In development mode the mail goes to SUPPORT_TEST_EMAIL with a notice.
    Delivery errors propagate.
    """
    dev = development_mode()
    to_addr = settings.SUPPORT_TEST_EMAIL if dev else message.email
    site_name = getattr(settings, "SITE_NAME", "Bone+")

    ctx = {
        "name": message.name or "there",
        "original": message.message,
        "response": response,
        "site_name": site_name,
        "development_mode": dev,
        "original_recipient": message.email,
        "test_recipient": to_addr,
    }
    text_body = render_to_string("support/emails/response.txt", ctx)
    html_body = render_to_string("support/emails/response.html", ctx)

    if dev:
        logger.debug("Development mode: reply for %s redirected to %s", message.email, to_addr)

    msg = EmailMultiAlternatives(
        subject=f"Response to Your Inquiry - {site_name}",
        body=text_body,
        from_email=settings.DEFAULT_FROM_EMAIL,
        to=[to_addr],
        reply_to=[getattr(settings, "SUPPORT_EMAIL", settings.DEFAULT_FROM_EMAIL)],
    )
    msg.attach_alternative(html_body, "text/html")
    msg.send(fail_silently=False)
    return to_addr
