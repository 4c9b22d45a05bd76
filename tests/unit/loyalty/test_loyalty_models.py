"""
Unit tests for Loyalty models (Campaign, CouponSubmission, GoalCompletion, LuckyNumber).
"""

from datetime import date

import pytest
from django.db import IntegrityError, transaction

from core.models import UUIDModel
from loyalty.models import Campaign, CouponSubmission, GoalCompletion, LuckyNumber
from tests.factories.loyalty import CampaignFactory, CouponSubmissionFactory, GoalCompletionFactory, LuckyNumberFactory


class TestCampaignModel:
    """
    Tests for the Campaign model which holds the settlement rules.
    """

    def test_campaign_inheritance(self):
        """
        Records exposed through the API use UUID primary keys.
        """
        assert issubclass(Campaign, UUIDModel)

    def test_create_campaign_defaults(self):
        campaign = Campaign.objects.create(title="Simple", start_date=date(2024, 1, 1), end_date=date(2024, 12, 31))

        assert campaign.is_active is True
        assert campaign.settings == {}
        assert campaign.keywords == []
        assert str(campaign) == "Simple"

    def test_is_open_checks_flag_and_window(self):
        campaign = CampaignFactory(start_date=date(2024, 5, 1), end_date=date(2024, 5, 31))

        assert campaign.is_open(date(2024, 5, 1)) is True
        assert campaign.is_open(date(2024, 5, 31)) is True
        assert campaign.is_open(date(2024, 6, 1)) is False
        assert campaign.is_open(date(2024, 4, 30)) is False

        campaign.is_active = False
        assert campaign.is_open(date(2024, 5, 15)) is False

    @pytest.mark.parametrize(
        "campaign_settings, expected",
        [
            ({"points_per_coupon": 25}, 25),
            ({}, 10),
            ({"points_per_coupon": 0}, 10),
            ({"points_per_coupon": "15"}, 10),
        ],
    )
    def test_points_per_coupon(self, settings, campaign_settings, expected):
        settings.LOYALTY_DEFAULT_POINTS_PER_COUPON = 10

        assert CampaignFactory(settings=campaign_settings).points_per_coupon == expected


class TestCouponSubmissionModel:
    def test_defaults(self):
        coupon = CouponSubmissionFactory()

        assert coupon.status == CouponSubmission.PENDING
        assert coupon.points_awarded == 0
        assert coupon.extracted_data is None

    @pytest.mark.parametrize("status", [CouponSubmission.PENDING, CouponSubmission.REJECTED])
    def test_points_require_approved_status(self, status):
        """
        The database refuses points on a coupon that is not approved.
        """
        with pytest.raises(IntegrityError), transaction.atomic():
            CouponSubmissionFactory(status=status, points_awarded=10)

    def test_approved_coupon_with_points_is_allowed(self):
        coupon = CouponSubmissionFactory(approved=True)

        assert coupon.points_awarded == 10


class TestGoalCompletionModel:
    def test_one_completion_per_user_goal_and_period(self):
        completion = GoalCompletionFactory(period_start=date(2024, 5, 13))

        with pytest.raises(IntegrityError), transaction.atomic():
            GoalCompletion.objects.create(
                user=completion.user,
                campaign=completion.campaign,
                goal_id=completion.goal_id,
                period_start=date(2024, 5, 13),
                period_end=date(2024, 5, 19),
                coupons_count=5,
            )

    def test_next_period_is_a_new_completion(self):
        completion = GoalCompletionFactory(period_start=date(2024, 5, 13))

        GoalCompletionFactory(user=completion.user, campaign=completion.campaign, period_start=date(2024, 5, 20))

        assert GoalCompletion.objects.filter(user=completion.user).count() == 2

    def test_same_goal_id_in_another_campaign_is_a_new_completion(self):
        completion = GoalCompletionFactory(period_start=date(2024, 5, 13))

        GoalCompletionFactory(user=completion.user, campaign=CampaignFactory(), period_start=date(2024, 5, 13))

        assert GoalCompletion.objects.filter(user=completion.user, goal_id=completion.goal_id).count() == 2


class TestLuckyNumberModel:
    def test_numbers_are_unique_per_campaign(self):
        ticket = LuckyNumberFactory(number=7)

        with pytest.raises(IntegrityError), transaction.atomic():
            LuckyNumber.objects.create(user=ticket.user, campaign=ticket.campaign, number=7)

    def test_same_number_in_another_campaign(self):
        LuckyNumberFactory(number=7)
        other = LuckyNumberFactory(number=7)

        assert other.is_winner is False
        assert other.drawn_at is None
        assert str(other).startswith("#7")
