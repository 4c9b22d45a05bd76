"""
Service layer for the coupon Ledger.
Handles submission, review and the settlement chain an approval triggers:
status -> points -> goal check -> lucky numbers -> notifications.
"""

import logging

from django.core.cache import cache
from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from loyalty.exceptions import ConflictError
from loyalty.goals import GoalEvaluator, utc_date
from loyalty.models import Campaign, CouponSubmission
from loyalty.points import PointsAccumulator
from notifications import services as notifications
from notifications.models import Notification

logger = logging.getLogger(__name__)

ACTIVE_CAMPAIGNS_CACHE_KEY = "active_campaigns"
ACTIVE_CAMPAIGNS_CACHE_TIMEOUT = 60 * 5

REVIEW_DECISIONS = (CouponSubmission.APPROVED, CouponSubmission.REJECTED)


class CouponService:
    """
    Encapsulates the rules for submitting and reviewing coupons.
    """

    def __init__(self, points=None, goals=None):
        self.points = points or PointsAccumulator()
        self.goals = goals or GoalEvaluator(points=self.points)

    def submit(self, user_id, campaign_id, image_reference: str, extracted_data=None, now=None) -> CouponSubmission:
        """
        Records a new receipt for review.

        Args:
            user_id: The submitting user.
            campaign_id: Campaign the receipt is entered into.
            image_reference: URL returned by the image storage.
            extracted_data: Payload of the receipt extraction service (stored as-is).

        Raises:
            ValidationError: unknown campaign, or campaign not accepting coupons today.
        """
        now = now or timezone.now()

        try:
            campaign = Campaign.objects.get(pk=campaign_id)
        except Campaign.DoesNotExist:
            raise ValidationError("Campaign not found.") from None

        if not campaign.is_open(utc_date(now)):
            raise ValidationError("This campaign is not accepting coupons.")

        if not image_reference:
            raise ValidationError("An image reference is required.")

        submission = CouponSubmission.objects.create(
            user_id=user_id,
            campaign=campaign,
            image_reference=image_reference,
            extracted_data=extracted_data,
            status=CouponSubmission.PENDING,
            points_awarded=0,
        )

        logger.info("Coupon %s submitted by user %s to campaign %s", submission.id, user_id, campaign.id)
        return submission

    @transaction.atomic
    def review(self, submission_id, decision: str, reviewer_id, awarded_points=None, now=None) -> CouponSubmission:
        """
        Approves or rejects a pending coupon, exactly once.

        Points: explicit `awarded_points` if given, otherwise the campaign's
        settings.points_per_coupon (falling back to the project default).
        Rejections always award 0.

        Raises:
            ValidationError: invalid decision or points.
            ConflictError: the coupon was already reviewed.
        """
        if decision not in REVIEW_DECISIONS:
            raise ValidationError('Invalid status. Must be "approved" or "rejected".')

        now = now or timezone.now()

        # Lock the ledger entry: two admins clicking at once must not both succeed.
        submission = CouponSubmission.objects.select_for_update().get(pk=submission_id)

        if submission.status != CouponSubmission.PENDING:
            raise ConflictError("This coupon has already been reviewed.")

        campaign = submission.campaign
        points = 0
        if decision == CouponSubmission.APPROVED:
            points = self._resolve_points(campaign, awarded_points)

        submission.status = decision
        submission.points_awarded = points
        submission.reviewed_at = now
        submission.reviewed_by_id = reviewer_id
        submission.save(update_fields=["status", "points_awarded", "reviewed_at", "reviewed_by"])

        self.points.credit(submission.user_id, points)

        logger.info(
            "Coupon %s %s by %s (+%s points for user %s)",
            submission.id,
            decision,
            reviewer_id,
            points,
            submission.user_id,
        )

        self._notify_review(submission, campaign)

        # Lazily settles any goal reached by this (or an earlier) approval.
        self.goals.evaluate(submission.user_id, campaign, now=now)

        return submission

    @staticmethod
    def _resolve_points(campaign, awarded_points):
        if awarded_points is None:
            return campaign.points_per_coupon

        if isinstance(awarded_points, bool) or not isinstance(awarded_points, int) or awarded_points <= 0:
            raise ValidationError("Awarded points must be a positive integer.")

        return awarded_points

    @staticmethod
    def _notify_review(submission, campaign):
        data = {
            "coupon_id": str(submission.id),
            "campaign_id": str(campaign.id),
            "points": submission.points_awarded,
        }

        if submission.status == CouponSubmission.APPROVED:
            notifications.emit(
                submission.user_id,
                Notification.COUPON_APPROVED,
                title="Coupon approved",
                body=f"Your coupon for {campaign.title} was approved: +{submission.points_awarded} points.",
                data=data,
            )
        else:
            notifications.emit(
                submission.user_id,
                Notification.COUPON_REJECTED,
                title="Coupon rejected",
                body=f"Your coupon for {campaign.title} was not approved.",
                data=data,
            )


def get_active_campaigns():
    """
    Campaigns accepting coupons today.

    The active set is cached (see loyalty.signals for invalidation); the
    date window is checked on every call so the cache never outlives a
    campaign's end date.
    """
    campaigns = cache.get(ACTIVE_CAMPAIGNS_CACHE_KEY)

    if campaigns is None:
        campaigns = list(Campaign.objects.filter(is_active=True).order_by("start_date", "title"))
        cache.set(ACTIVE_CAMPAIGNS_CACHE_KEY, campaigns, ACTIVE_CAMPAIGNS_CACHE_TIMEOUT)

    today = utc_date(timezone.now())
    return [campaign for campaign in campaigns if campaign.is_open(today)]
