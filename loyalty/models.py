"""
Models for the Loyalty application.
"""

from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone

from core.models import UUIDModel


class Campaign(UUIDModel):
    """
    Represents an incentive campaign.

    Only `settings` and the date window matter to the settlement engine;
    the rest is presentation data edited by admins.
    """

    DRAW_MANUAL = "manual"
    DRAW_RANDOM = "random"

    DRAW_TYPES = [
        (DRAW_MANUAL, "Manual draw"),
        (DRAW_RANDOM, "Random draw"),
    ]

    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    start_date = models.DateField()
    end_date = models.DateField()
    is_active = models.BooleanField(default=True)
    banner_url = models.URLField(blank=True)

    # Product keywords handed to the receipt extraction service.
    keywords = models.JSONField(default=list, blank=True)

    # JSON field for settlement rules.
    # EXAMPLE: {"points_per_coupon": 10, "has_draws": true, "draw_type": "random",
    #           "goals": [{"id": "w5", "label": "5 a week", "period": "weekly",
    #                      "metric": "approved_coupons", "target": 5,
    #                      "bonus_points": 20, "lucky_numbers": 2}]}
    settings = models.JSONField(default=dict, blank=True)

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [models.Index(fields=["is_active", "start_date", "end_date"], name="campaign_active_window_idx")]

    def __str__(self):
        return self.title

    def is_open(self, on_date):
        """
        True when the campaign accepts submissions on the given date.
        """
        return self.is_active and self.start_date <= on_date <= self.end_date

    @property
    def points_per_coupon(self):
        value = (self.settings or {}).get("points_per_coupon")
        if isinstance(value, int) and value > 0:
            return value
        return settings.LOYALTY_DEFAULT_POINTS_PER_COUPON


class CouponSubmission(UUIDModel):
    """
    The Ledger entry.
    One photographed receipt and its (single) review outcome.
    """

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    STATUSES = [
        (PENDING, "Pending review"),
        (APPROVED, "Approved"),
        (REJECTED, "Rejected"),
    ]

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="coupons")
    campaign = models.ForeignKey(Campaign, on_delete=models.CASCADE, related_name="coupons")
    image_reference = models.URLField(max_length=1024)
    status = models.CharField(max_length=10, choices=STATUSES, default=PENDING)

    # Payload returned by the receipt extraction service, stored as-is.
    extracted_data = models.JSONField(null=True, blank=True)

    points_awarded = models.PositiveIntegerField(default=0)
    reviewed_at = models.DateTimeField(null=True, blank=True)
    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="reviewed_coupons",
    )

    class Meta:
        ordering = ["-created_at"]
        indexes = [models.Index(fields=["user", "campaign", "status", "created_at"], name="coupon_user_campaign_idx")]
        constraints = [
            models.CheckConstraint(
                condition=Q(points_awarded=0) | Q(status="approved"),
                name="coupon_points_only_when_approved",
            ),
        ]

    def __str__(self):
        return f"{self.user} - {self.campaign} ({self.get_status_display()})"


class GoalCompletion(UUIDModel):
    """
    A goal reached by a user within one period.
    Never mutated; (user, campaign, goal_id, period_start) is the idempotency key
    for rewards. Goal ids are only unique inside one campaign.
    """

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="goal_completions")
    campaign = models.ForeignKey(Campaign, on_delete=models.CASCADE, related_name="goal_completions")
    goal_id = models.CharField(max_length=64)
    period_start = models.DateField()
    period_end = models.DateField()
    coupons_count = models.PositiveIntegerField()
    bonus_points_awarded = models.PositiveIntegerField(default=0)
    completed_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-completed_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["user", "campaign", "goal_id", "period_start"],
                name="unique_goal_completion_per_period",
            ),
        ]

    def __str__(self):
        return f"{self.user} - {self.goal_id} [{self.period_start} .. {self.period_end}]"


class LuckyNumber(UUIDModel):
    """
    A numbered draw ticket issued as a goal reward.
    Numbers are never reused within a campaign; winners never re-enter the pool.
    """

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="lucky_numbers")
    campaign = models.ForeignKey(Campaign, on_delete=models.CASCADE, related_name="lucky_numbers")
    goal_completion = models.ForeignKey(
        GoalCompletion,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="lucky_numbers",
    )
    number = models.PositiveIntegerField()
    is_winner = models.BooleanField(default=False)
    drawn_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["number"]
        indexes = [models.Index(fields=["campaign", "is_winner"], name="lucky_campaign_winner_idx")]
        constraints = [
            models.UniqueConstraint(fields=["campaign", "number"], name="unique_lucky_number_per_campaign"),
        ]

    def __str__(self):
        return f"#{self.number} ({self.campaign})"
