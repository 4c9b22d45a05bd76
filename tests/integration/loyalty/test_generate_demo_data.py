"""
Integration tests for the 'generate_demo_data' management command.
"""

from io import StringIO

from django.core.management import call_command
from django.utils import timezone

from loyalty.models import Campaign, CouponSubmission
from loyalty.points import PointsAccumulator
from users.models import Profile, Store


def run_command(**options):
    call_command("generate_demo_data", stdout=StringIO(), **options)


class TestGenerateDemoDataCommand:
    def test_creates_campaign_stores_and_users(self):
        run_command(stores=2, users=5, coupons=10)

        assert Campaign.objects.filter(title="Demo Campaign").count() == 1
        assert Store.objects.count() == 2
        # 5 participants + the demo admin
        assert Profile.objects.count() == 6
        assert Profile.objects.filter(role=Profile.ROLE_ADMIN).count() == 1

    def test_reuses_existing_campaign_and_admin(self):
        run_command(stores=1, users=2, coupons=2)
        run_command(stores=1, users=2, coupons=2)

        assert Campaign.objects.count() == 1
        assert Store.objects.count() == 1
        assert Profile.objects.filter(role=Profile.ROLE_ADMIN).count() == 1

    def test_every_coupon_is_reviewed_and_points_add_up(self):
        run_command(stores=2, users=3, coupons=12)

        assert CouponSubmission.objects.count() == 12
        assert not CouponSubmission.objects.filter(status=CouponSubmission.PENDING).exists()

        accumulator = PointsAccumulator()
        for user_id in Profile.objects.values_list("user_id", flat=True):
            assert accumulator.reconcile(user_id) == 0

    def test_coupons_are_backdated(self):
        """
        If backdating did not work, all coupons would carry the same timestamp (now).
        """
        run_command(stores=1, users=3, coupons=20)

        dates = set(CouponSubmission.objects.values_list("created_at", flat=True))
        assert len(dates) > 1

        recent_cutoff = timezone.now() - timezone.timedelta(minutes=1)
        assert CouponSubmission.objects.filter(created_at__lt=recent_cutoff).count() > 10
