import logging

from celery import shared_task
from django.conf import settings
from django.core.mail import send_mail

logger = logging.getLogger(__name__)


@shared_task
def deliver_notification_email(notification_id):
    """
    Sends the e-mail copy of a notification.
    Delivery failures stay here; they never reach the code that emitted it.
    """
    from notifications.models import Notification

    try:
        notification = Notification.objects.select_related("user").get(id=notification_id)
    except Notification.DoesNotExist:
        logger.warning("Notification %s vanished before e-mail delivery", notification_id)
        return "missing"

    recipient = notification.user.email
    if not recipient:
        return "no-recipient"

    try:
        send_mail(
            subject=notification.title,
            message=notification.body,
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[recipient],
        )
    except Exception:
        logger.exception("E-mail delivery failed for notification %s", notification_id)
        return "failed"

    logger.info("Delivered notification %s to %s", notification_id, recipient)
    return "sent"
