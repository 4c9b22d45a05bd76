"""
Unit tests for the Leaderboard Projector and the store performance report.
"""

from datetime import datetime, timedelta, timezone

from loyalty.leaderboard import LeaderboardProjector, store_performance
from loyalty.models import CouponSubmission
from tests.factories.loyalty import (
    CampaignFactory,
    CouponSubmissionFactory,
    GoalCompletionFactory,
    LuckyNumberFactory,
)
from tests.factories.users import StoreFactory, UserFactory
from users.models import Profile

BASE_TIME = datetime(2024, 5, 15, 12, 0, tzinfo=timezone.utc)


def approved_at(user, campaign, created_at, points=10):
    coupon = CouponSubmissionFactory(user=user, campaign=campaign, approved=True, points_awarded=points)
    CouponSubmission.objects.filter(id=coupon.id).update(created_at=created_at)
    return coupon


class TestLeaderboardProjector:
    def test_ranks_by_campaign_points_including_goal_bonuses(self):
        campaign = CampaignFactory()
        alice = UserFactory(full_name="Alice")
        bob = UserFactory(full_name="Bob")

        approved_at(alice, campaign, BASE_TIME, points=30)
        approved_at(bob, campaign, BASE_TIME, points=20)
        GoalCompletionFactory(user=bob, campaign=campaign, bonus_points_awarded=15)

        rows = LeaderboardProjector().rows(campaign.id)

        assert [(row.full_name, row.campaign_points, row.rank) for row in rows] == [("Bob", 35, 1), ("Alice", 30, 2)]

    def test_ties_go_to_the_earliest_first_approval(self):
        """
        Same points: whoever got their first coupon approved earlier ranks higher.
        """
        campaign = CampaignFactory()
        early = UserFactory()
        late = UserFactory()

        approved_at(late, campaign, BASE_TIME, points=20)
        approved_at(early, campaign, BASE_TIME - timedelta(days=2), points=10)
        approved_at(early, campaign, BASE_TIME + timedelta(days=1), points=10)

        rows = LeaderboardProjector().rows(campaign.id)

        assert [row.user_id for row in rows] == [early.id, late.id]
        assert [row.rank for row in rows] == [1, 2]

    def test_full_tie_falls_back_to_user_id(self):
        campaign = CampaignFactory()
        first, second = UserFactory(), UserFactory()

        approved_at(second, campaign, BASE_TIME)
        approved_at(first, campaign, BASE_TIME)

        rows = LeaderboardProjector().rows(campaign.id)

        assert [row.user_id for row in rows] == sorted([first.id, second.id])

    def test_ordering_is_repeatable(self):
        campaign = CampaignFactory()
        for _ in range(6):
            approved_at(UserFactory(), campaign, BASE_TIME)

        projector = LeaderboardProjector()

        assert projector.rows(campaign.id) == projector.rows(campaign.id)

    def test_only_users_with_approved_coupons_in_the_campaign_appear(self):
        campaign = CampaignFactory()
        other = CampaignFactory()
        ranked = UserFactory()
        pending_only = UserFactory()
        elsewhere = UserFactory()

        approved_at(ranked, campaign, BASE_TIME)
        CouponSubmissionFactory(user=pending_only, campaign=campaign)
        CouponSubmissionFactory(user=pending_only, campaign=campaign, rejected=True)
        approved_at(elsewhere, other, BASE_TIME)

        rows = LeaderboardProjector().rows(campaign.id)

        assert [row.user_id for row in rows] == [ranked.id]

    def test_row_contents(self):
        campaign = CampaignFactory()
        store = StoreFactory(name="Loja Centro")
        user = UserFactory(full_name="Ana Souza", store=store)

        approved_at(user, campaign, BASE_TIME)
        approved_at(user, campaign, BASE_TIME + timedelta(hours=1))
        CouponSubmissionFactory(user=user, campaign=campaign)
        LuckyNumberFactory(user=user, campaign=campaign)
        LuckyNumberFactory(user=user, campaign=campaign)
        LuckyNumberFactory(user=user, campaign=CampaignFactory())

        [row] = LeaderboardProjector().rows(campaign.id)

        assert row.full_name == "Ana Souza"
        assert row.store_id == str(store.id)
        assert row.store_name == "Loja Centro"
        assert row.campaign_points == 20
        assert row.approved_coupons_count == 2
        assert row.lucky_numbers_count == 2
        assert row.rank == 1

    def test_full_name_falls_back_to_email(self):
        campaign = CampaignFactory()
        user = UserFactory(email="nameless@example.com")
        Profile.objects.filter(user=user).update(full_name="")
        approved_at(user, campaign, BASE_TIME)

        [row] = LeaderboardProjector().rows(campaign.id)

        assert row.full_name == "nameless@example.com"
        assert row.store_id is None
        assert row.store_name is None

    def test_store_filter(self):
        campaign = CampaignFactory()
        store = StoreFactory()
        inside = UserFactory(store=store)
        outside = UserFactory(store=StoreFactory())

        approved_at(inside, campaign, BASE_TIME)
        approved_at(outside, campaign, BASE_TIME, points=50)

        rows = LeaderboardProjector().rows(campaign.id, store_id=store.id)

        assert [(row.user_id, row.rank) for row in rows] == [(inside.id, 1)]

    def test_empty_campaign(self):
        assert LeaderboardProjector().rows(CampaignFactory().id) == []


class TestStorePerformance:
    def test_aggregates_per_store(self):
        # BASE_TIME is a Wednesday; its week starts on 2024-05-13.
        campaign = CampaignFactory()
        big = StoreFactory(name="Big Store")
        small = StoreFactory(name="Small Store")
        StoreFactory(name="Empty Store")

        seller_1 = UserFactory(store=big)
        seller_2 = UserFactory(store=big)
        seller_3 = UserFactory(store=small)
        UserFactory()  # no store

        approved_at(seller_1, campaign, BASE_TIME)
        approved_at(seller_2, campaign, BASE_TIME - timedelta(days=7))
        approved_at(seller_2, campaign, BASE_TIME - timedelta(days=30))
        CouponSubmissionFactory(user=seller_1, campaign=campaign)
        approved_at(seller_3, campaign, BASE_TIME - timedelta(days=1))
        GoalCompletionFactory(user=seller_1, campaign=campaign)

        Profile.objects.filter(user__in=[seller_1, seller_2]).update(total_points=40)
        Profile.objects.filter(user=seller_3).update(total_points=10)

        rows = store_performance(now=BASE_TIME)

        assert [row.store_name for row in rows] == ["Big Store", "Small Store", "Empty Store"]

        big_row = rows[0]
        assert big_row.salesperson_count == 2
        assert big_row.total_coupons == 4
        assert big_row.approved_coupons == 3
        assert big_row.total_points == 80
        assert big_row.goals_completed == 1
        assert big_row.current_week_approved == 1
        assert big_row.previous_week_approved == 1

        small_row = rows[1]
        assert small_row.current_week_approved == 1
        assert small_row.previous_week_approved == 0

        empty_row = rows[2]
        assert empty_row.salesperson_count == 0
        assert empty_row.total_coupons == 0
        assert empty_row.total_points == 0
