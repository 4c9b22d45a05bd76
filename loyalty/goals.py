"""
Goal Evaluator.

A campaign may define periodic goals ("5 approved coupons a week").
Progress is the number of approved coupons submitted inside the current
period; the first time it reaches the target, the user gets a
GoalCompletion, bonus points and lucky numbers, exactly once per period.
"""

import calendar
import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from datetime import timezone as dt_timezone
from typing import List, Optional, Tuple

from django.db import IntegrityError, transaction
from django.utils import timezone

from loyalty.draws import LuckyNumberPool
from loyalty.models import CouponSubmission, GoalCompletion
from loyalty.points import PointsAccumulator
from notifications import services as notifications
from notifications.models import Notification
from users.models import Profile

logger = logging.getLogger(__name__)

WEEKLY = "weekly"
MONTHLY = "monthly"
PERIODS = (WEEKLY, MONTHLY)

METRIC_APPROVED_COUPONS = "approved_coupons"


@dataclass(frozen=True)
class GoalConfig:
    """
    One entry of campaign.settings["goals"].
    """

    id: str
    label: str
    period: str
    target: int
    bonus_points: int = 0
    lucky_numbers: int = 0
    metric: str = METRIC_APPROVED_COUPONS

    @classmethod
    def from_dict(cls, raw: dict) -> "GoalConfig":
        return cls(
            id=str(raw["id"]),
            label=raw.get("label", ""),
            period=raw["period"],
            target=int(raw["target"]),
            bonus_points=int(raw.get("bonus_points", 0)),
            lucky_numbers=int(raw.get("lucky_numbers", 0)),
            metric=raw.get("metric", METRIC_APPROVED_COUPONS),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "label": self.label,
            "period": self.period,
            "metric": self.metric,
            "target": self.target,
            "bonus_points": self.bonus_points,
            "lucky_numbers": self.lucky_numbers,
        }


@dataclass
class GoalProgress:
    goal: GoalConfig
    current_count: int
    target: int
    percentage: int
    is_completed: bool
    period_start: date
    period_end: date
    completion: Optional[GoalCompletion] = None


def goals_for(campaign) -> List[GoalConfig]:
    """
    Parses the campaign's goal list. Config is validated when the campaign
    is saved, so malformed entries are not expected here.
    """
    return [GoalConfig.from_dict(raw) for raw in (campaign.settings or {}).get("goals", [])]


def utc_date(now) -> date:
    """
    The UTC calendar date of `now` (a datetime or a date).
    """
    if isinstance(now, datetime):
        if timezone.is_aware(now):
            now = now.astimezone(dt_timezone.utc)
        return now.date()
    return now


def get_period_bounds(period: str, now) -> Tuple[date, date]:
    """
    Closed [start, end] date range of the period containing `now`.

    weekly:  Monday .. Sunday
    monthly: first .. last calendar day of the month
    """
    today = utc_date(now)

    if period == WEEKLY:
        start = today - timedelta(days=today.weekday())
        return start, start + timedelta(days=6)

    if period == MONTHLY:
        last_day = calendar.monthrange(today.year, today.month)[1]
        return today.replace(day=1), today.replace(day=last_day)

    raise ValueError(f"Unknown goal period: {period!r}")


def period_window(period_start: date, period_end: date) -> Tuple[datetime, datetime]:
    """
    Timestamps bounding a period: start-of-day of the first day up to the
    very last microsecond of the last day (UTC).
    """
    return (
        datetime.combine(period_start, time.min, tzinfo=dt_timezone.utc),
        datetime.combine(period_end, time.max, tzinfo=dt_timezone.utc),
    )


def completion_percentage(current_count: int, target: int) -> int:
    # Half-up rounding of 100 * count / target, capped at 100.
    return min(100, (200 * current_count + target) // (2 * target))


class GoalEvaluator:
    """
    Computes goal progress and settles newly reached goals.
    """

    def __init__(self, points=None, pool=None):
        self.points = points or PointsAccumulator()
        self.pool = pool or LuckyNumberPool()

    def count_approved(self, user_id, campaign_id, period_start: date, period_end: date) -> int:
        # Counted by submission time (created_at), not by review time.
        return CouponSubmission.objects.filter(
            user_id=user_id,
            campaign_id=campaign_id,
            status=CouponSubmission.APPROVED,
            created_at__range=period_window(period_start, period_end),
        ).count()

    def progress(self, user_id, campaign, now=None) -> List[GoalProgress]:
        """
        Current-period progress for every goal of the campaign.
        """
        now = now or timezone.now()
        goals = goals_for(campaign)
        if not goals:
            return []

        completions = {
            (completion.goal_id, completion.period_start): completion
            for completion in GoalCompletion.objects.filter(user_id=user_id, campaign=campaign)
        }

        result = []
        for goal in goals:
            period_start, period_end = get_period_bounds(goal.period, now)
            current_count = self.count_approved(user_id, campaign.id, period_start, period_end)
            completion = completions.get((goal.id, period_start))

            result.append(
                GoalProgress(
                    goal=goal,
                    current_count=current_count,
                    target=goal.target,
                    percentage=completion_percentage(current_count, goal.target),
                    is_completed=completion is not None or current_count >= goal.target,
                    period_start=period_start,
                    period_end=period_end,
                    completion=completion,
                )
            )

        return result

    @transaction.atomic
    def evaluate(self, user_id, campaign, now=None) -> List[GoalCompletion]:
        """
        Creates the completions (and rewards) for every goal whose target is
        reached in the current period and that was not completed yet.

        The user's profile row stays locked until the transaction ends, so
        concurrent evaluations for the same user run one after the other.

        Returns:
            The completions created by this call.
        """
        now = now or timezone.now()
        goals = goals_for(campaign)
        if not goals:
            return []

        Profile.objects.select_for_update().get(user_id=user_id)

        created = []
        for goal in goals:
            period_start, period_end = get_period_bounds(goal.period, now)

            # Shortcut only; the unique constraint is what prevents double payment.
            already_completed = GoalCompletion.objects.filter(
                user_id=user_id, campaign=campaign, goal_id=goal.id, period_start=period_start
            ).exists()
            if already_completed:
                continue

            current_count = self.count_approved(user_id, campaign.id, period_start, period_end)
            if current_count < goal.target:
                continue

            completion = self._record_completion(user_id, campaign, goal, period_start, period_end, current_count, now)
            if completion is None:
                continue

            self._reward(user_id, campaign, goal, completion)
            created.append(completion)

        return created

    def _record_completion(self, user_id, campaign, goal, period_start, period_end, current_count, now):
        """
        Insert-if-absent on (user, campaign, goal_id, period_start).
        """
        try:
            with transaction.atomic():
                return GoalCompletion.objects.create(
                    user_id=user_id,
                    campaign=campaign,
                    goal_id=goal.id,
                    period_start=period_start,
                    period_end=period_end,
                    coupons_count=current_count,
                    bonus_points_awarded=goal.bonus_points,
                    completed_at=now,
                )
        except IntegrityError:
            logger.info(
                "Goal %s of campaign %s already completed by user %s for period %s",
                goal.id,
                campaign.id,
                user_id,
                period_start,
            )
            return None

    def _reward(self, user_id, campaign, goal, completion):
        self.points.credit(user_id, goal.bonus_points)
        tickets = self.pool.issue(user_id, campaign.id, goal.lucky_numbers, goal_completion=completion)

        logger.info(
            "User %s completed goal %s (%s) in campaign %s: +%s points, %s lucky number(s)",
            user_id,
            goal.id,
            completion.period_start,
            campaign.id,
            goal.bonus_points,
            len(tickets),
        )

        notifications.emit(
            user_id,
            Notification.GOAL_COMPLETED,
            title="Goal completed!",
            body=f"You completed '{goal.label}' and earned {goal.bonus_points} bonus points.",
            data={
                "campaign_id": str(campaign.id),
                "goal_id": goal.id,
                "goal_completion_id": str(completion.id),
                "bonus_points": goal.bonus_points,
                "lucky_numbers": [ticket.number for ticket in tickets],
            },
        )
