"""
Notification emitter and read path.

Emission is best-effort: a failed insert is logged and swallowed so that the
business transaction which triggered it (points, completions, draws) commits.
"""

import logging
from functools import partial

from django.conf import settings
from django.db import DatabaseError, transaction

from notifications.models import Notification
from notifications.tasks import deliver_notification_email

logger = logging.getLogger(__name__)


def emit(user_id, notification_type, title, body="", data=None, channel=Notification.CHANNEL_IN_APP):
    """
    Appends a notification for `user_id`.

    The insert runs in its own savepoint, so a database error here rolls back
    only the notification, never the caller's work.

    Returns:
        The created Notification, or None if it could not be written.
    """
    try:
        with transaction.atomic():
            notification = Notification.objects.create(
                user_id=user_id,
                type=notification_type,
                title=title,
                body=body or "",
                data=data or {},
                channel=channel,
            )
    except DatabaseError:
        logger.exception("Failed to write %s notification for user %s", notification_type, user_id)
        return None

    if notification.wants_email:
        # Hand off to the transport only once the owning transaction is durable.
        transaction.on_commit(partial(deliver_notification_email.delay, str(notification.id)))

    return notification


def list_for_user(user, unread_only=False):
    queryset = Notification.objects.filter(user=user)
    if unread_only:
        queryset = queryset.filter(is_read=False)
    return queryset.order_by("-created_at")[: settings.NOTIFICATIONS_PAGE_SIZE]


def mark_read(user, notification_id):
    """
    Marks one of the user's notifications as read.
    Raises Notification.DoesNotExist for unknown ids or other users' notifications.
    """
    notification = Notification.objects.get(id=notification_id, user=user)
    if not notification.is_read:
        notification.is_read = True
        notification.save(update_fields=["is_read"])
    return notification


def mark_all_read(user):
    """
    Returns the number of notifications that were flipped to read.
    """
    return Notification.objects.filter(user=user, is_read=False).update(is_read=True)
