"""
Leaderboard Projector and store performance report.
Read models only: nothing here writes to the database.
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import List, Optional

from django.db.models import Count, Min, Q, Sum
from django.utils import timezone

from loyalty.goals import WEEKLY, get_period_bounds, period_window
from loyalty.models import CouponSubmission, GoalCompletion, LuckyNumber
from users.models import Profile, Store


@dataclass(frozen=True)
class LeaderboardRow:
    user_id: int
    full_name: str
    store_id: Optional[str]
    store_name: Optional[str]
    campaign_points: int
    approved_coupons_count: int
    lucky_numbers_count: int
    rank: int


@dataclass(frozen=True)
class StorePerformanceRow:
    store_id: str
    store_name: str
    cnpj: str
    location: str
    salesperson_count: int
    total_coupons: int
    approved_coupons: int
    total_points: int
    goals_completed: int
    current_week_approved: int
    previous_week_approved: int


class LeaderboardProjector:
    """
    Ranks users of a campaign by the points they earned in it.
    """

    def rows(self, campaign_id, store_id=None) -> List[LeaderboardRow]:
        """
        Users with at least one approved coupon in the campaign, ranked by
        campaign points (coupon points + goal bonuses), descending.

        Ties go to whoever got their first approved coupon earlier, then to
        the lower user id, so the order is total and repeatable.
        """
        approved = CouponSubmission.objects.filter(campaign_id=campaign_id, status=CouponSubmission.APPROVED)
        if store_id:
            approved = approved.filter(user__profile__store_id=store_id)

        stats = list(
            approved.order_by()
            .values("user_id")
            .annotate(
                coupon_points=Sum("points_awarded"),
                approved_count=Count("id"),
                first_approved_at=Min("created_at"),
            )
        )
        if not stats:
            return []

        user_ids = [row["user_id"] for row in stats]

        bonus_points = dict(
            GoalCompletion.objects.filter(campaign_id=campaign_id, user_id__in=user_ids)
            .order_by()
            .values("user_id")
            .annotate(total=Sum("bonus_points_awarded"))
            .values_list("user_id", "total")
        )
        ticket_counts = dict(
            LuckyNumber.objects.filter(campaign_id=campaign_id, user_id__in=user_ids)
            .order_by()
            .values("user_id")
            .annotate(total=Count("id"))
            .values_list("user_id", "total")
        )
        profiles = {
            profile.user_id: profile
            for profile in Profile.objects.filter(user_id__in=user_ids).select_related("user", "store")
        }

        for row in stats:
            row["campaign_points"] = (row["coupon_points"] or 0) + (bonus_points.get(row["user_id"]) or 0)

        stats.sort(key=lambda row: (-row["campaign_points"], row["first_approved_at"], row["user_id"]))

        result = []
        for position, row in enumerate(stats, start=1):
            profile = profiles.get(row["user_id"])
            store = profile.store if profile else None
            result.append(
                LeaderboardRow(
                    user_id=row["user_id"],
                    full_name=(profile.full_name or profile.user.email) if profile else "",
                    store_id=str(store.id) if store else None,
                    store_name=store.name if store else None,
                    campaign_points=row["campaign_points"],
                    approved_coupons_count=row["approved_count"],
                    lucky_numbers_count=ticket_counts.get(row["user_id"], 0),
                    rank=position,
                )
            )

        return result


def store_performance(now=None) -> List[StorePerformanceRow]:
    """
    Per-store totals for the admin dashboard, best stores first.
    The week columns compare this Monday..Sunday with the previous one.
    """
    now = now or timezone.now()
    week_start, week_end = get_period_bounds(WEEKLY, now)
    current_week = period_window(week_start, week_end)
    previous_week = period_window(week_start - timedelta(days=7), week_end - timedelta(days=7))

    approved = Q(status=CouponSubmission.APPROVED)
    coupon_stats = {
        row["user__profile__store_id"]: row
        for row in CouponSubmission.objects.filter(user__profile__store__isnull=False)
        .order_by()
        .values("user__profile__store_id")
        .annotate(
            total=Count("id"),
            approved=Count("id", filter=approved),
            current_week=Count("id", filter=approved & Q(created_at__range=current_week)),
            previous_week=Count("id", filter=approved & Q(created_at__range=previous_week)),
        )
    }
    goal_counts = dict(
        GoalCompletion.objects.filter(user__profile__store__isnull=False)
        .order_by()
        .values("user__profile__store_id")
        .annotate(total=Count("id"))
        .values_list("user__profile__store_id", "total")
    )

    stores = Store.objects.annotate(
        salesperson_count=Count("profiles", distinct=True),
        points=Sum("profiles__total_points"),
    )

    rows = []
    for store in stores:
        stats = coupon_stats.get(store.id, {})
        rows.append(
            StorePerformanceRow(
                store_id=str(store.id),
                store_name=store.name,
                cnpj=store.cnpj,
                location=store.location,
                salesperson_count=store.salesperson_count,
                total_coupons=stats.get("total", 0),
                approved_coupons=stats.get("approved", 0),
                total_points=store.points or 0,
                goals_completed=goal_counts.get(store.id, 0),
                current_week_approved=stats.get("current_week", 0),
                previous_week_approved=stats.get("previous_week", 0),
            )
        )

    rows.sort(key=lambda row: (-row.total_points, row.store_name))
    return rows
