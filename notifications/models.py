"""
Models for the Notifications application.
"""

from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.db import models

from core.models import UUIDModel


class Notification(UUIDModel):
    """
    A user-facing message produced by a state transition
    (review, goal completion, ticket issuance, draw).
    Delivery is handled elsewhere; this row is the in-app inbox entry.
    """

    GOAL_COMPLETED = "goal_completed"
    COUPON_APPROVED = "coupon_approved"
    COUPON_REJECTED = "coupon_rejected"
    LUCKY_NUMBER = "lucky_number"
    DRAW_WINNER = "draw_winner"
    CAMPAIGN_NEW = "campaign_new"
    GENERAL = "general"

    TYPES = [
        (GOAL_COMPLETED, "Goal completed"),
        (COUPON_APPROVED, "Coupon approved"),
        (COUPON_REJECTED, "Coupon rejected"),
        (LUCKY_NUMBER, "Lucky number issued"),
        (DRAW_WINNER, "Draw winner"),
        (CAMPAIGN_NEW, "New campaign"),
        (GENERAL, "General"),
    ]

    CHANNEL_IN_APP = "in_app"
    CHANNEL_EMAIL = "email"
    CHANNEL_BOTH = "both"

    CHANNELS = [
        (CHANNEL_IN_APP, "In app"),
        (CHANNEL_EMAIL, "E-mail"),
        (CHANNEL_BOTH, "In app and e-mail"),
    ]

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="notifications")
    type = models.CharField(max_length=20, choices=TYPES, default=GENERAL)
    title = models.CharField(max_length=255)
    body = models.TextField(blank=True)

    # Reference to the triggering entity, e.g. {"coupon_id": "...", "points": 10}
    data = models.JSONField(default=dict, blank=True, encoder=DjangoJSONEncoder)

    is_read = models.BooleanField(default=False)
    channel = models.CharField(max_length=10, choices=CHANNELS, default=CHANNEL_IN_APP)

    class Meta:
        ordering = ["-created_at"]
        indexes = [models.Index(fields=["user", "is_read", "created_at"], name="notification_inbox_idx")]

    def __str__(self):
        return f"{self.user} - {self.title}"

    @property
    def wants_email(self):
        return self.channel in (self.CHANNEL_EMAIL, self.CHANNEL_BOTH)
