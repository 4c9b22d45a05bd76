"""
Points Accumulator.

A user's running total lives on Profile.total_points. It is only ever
incremented (coupon approvals and goal bonuses) and must always equal the
sum of what the ledger says was awarded.
"""

import logging

from django.db.models import F, Sum

from loyalty.models import CouponSubmission, GoalCompletion
from users.models import Profile

logger = logging.getLogger(__name__)


class PointsAccumulator:
    """
    Encapsulates every write to Profile.total_points.
    """

    def credit(self, user_id, amount: int) -> int:
        """
        Adds `amount` to the user's total with a single UPDATE ... SET x = x + n,
        which row-locks the profile until the surrounding transaction ends.

        Returns:
            The amount actually credited (0 for non-positive amounts).
        """
        if amount <= 0:
            return 0

        updated = Profile.objects.filter(user_id=user_id).update(total_points=F("total_points") + amount)
        if not updated:
            raise Profile.DoesNotExist(f"No profile for user {user_id}")

        return amount

    def expected_total(self, user_id) -> int:
        """
        Recomputes the total from the ledger:
        approved coupon points + goal bonus points, across all campaigns.
        """
        coupon_points = (
            CouponSubmission.objects.filter(user_id=user_id, status=CouponSubmission.APPROVED).aggregate(
                total=Sum("points_awarded")
            )["total"]
            or 0
        )
        bonus_points = (
            GoalCompletion.objects.filter(user_id=user_id).aggregate(total=Sum("bonus_points_awarded"))["total"] or 0
        )
        return coupon_points + bonus_points

    def reconcile(self, user_id) -> int:
        """
        Compares the stored total with the recomputed one.

        The stored value is not rewritten: a drift means a bug or a manual
        edit, and is reported for someone to look at.

        Returns:
            stored - expected (0 when consistent).
        """
        stored = Profile.objects.values_list("total_points", flat=True).get(user_id=user_id)
        drift = stored - self.expected_total(user_id)

        if drift:
            logger.warning("Points drift for user %s: stored=%s drift=%s", user_id, stored, drift)

        return drift
