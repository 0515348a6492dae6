# support/inbox.py
import logging

from django.db import transaction
from django.utils import timezone

from boneplus.errors import ServiceError

from .emails import send_response_email
from .models import ContactMessage

logger = logging.getLogger(__name__)

VALID_STATUSES = {c for c, _ in ContactMessage.STATUS_CHOICES}


class InboxError(ServiceError):
    pass


class MessageNotFound(InboxError):
    status = 404
    message = "Message not found"


class StatusError(InboxError):
    message = "Invalid status"


class EmailDeliveryError(InboxError):
    status = 502
    message = "Failed to send email"


def _locked(message_id) -> ContactMessage:
    msg = ContactMessage.objects.select_for_update().filter(pk=message_id).first()
    if msg is None:
        raise MessageNotFound()
    return msg


@transaction.atomic
def set_status(message_id, status) -> ContactMessage:
    msg = _locked(message_id)
    if not isinstance(status, str) or status not in VALID_STATUSES:
        raise StatusError()
    # responded is terminal
    if msg.status == ContactMessage.RESPONDED:
        raise StatusError("Cannot change status of responded messages")
    msg.status = status
    msg.save(update_fields=["status", "updated_at"])
    return msg


@transaction.atomic
def respond(message_id, response: str) -> ContactMessage:
    """
    Email the reply, then record it. A delivery failure rolls the whole thing back.
    """
    msg = _locked(message_id)
    try:
        send_response_email(msg, response)
    except Exception as exc:
        logger.exception("Reply to message %s could not be delivered", msg.pk)
        raise EmailDeliveryError(details=str(exc))

    msg.admin_response = response
    msg.responded_at = timezone.now()
    msg.status = ContactMessage.RESPONDED
    msg.save(update_fields=["admin_response", "responded_at", "status", "updated_at"])
    logger.info("Message %s responded", msg.pk)
    return msg
