"""
Custom management command to generate demo data.
"""

import random
from datetime import timedelta

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.utils import timezone

from loyalty.models import Campaign, CouponSubmission
from loyalty.services import CouponService
from users.models import Store

User = get_user_model()

DEMO_ADMIN_EMAIL = "admin@demo.local"
DEMO_CAMPAIGN_TITLE = "Demo Campaign"

DEMO_SETTINGS = {
    "points_per_coupon": 10,
    "has_draws": True,
    "draw_type": "random",
    "goals": [
        {
            "id": "weekly-3",
            "label": "3 approved coupons a week",
            "period": "weekly",
            "metric": "approved_coupons",
            "target": 3,
            "bonus_points": 15,
            "lucky_numbers": 1,
        },
        {
            "id": "monthly-10",
            "label": "10 approved coupons a month",
            "period": "monthly",
            "metric": "approved_coupons",
            "target": 10,
            "bonus_points": 50,
            "lucky_numbers": 3,
        },
    ],
}


class Command(BaseCommand):
    help = "Generates demo data for the Receipt Rewards platform"

    def add_arguments(self, parser):
        parser.add_argument("--stores", type=int, default=3, help="Number of stores to generate")
        parser.add_argument("--users", type=int, default=20, help="Number of participants to generate")
        parser.add_argument("--coupons", type=int, default=200, help="Number of coupons to generate")

    def handle(self, *args, **options):
        num_stores = options["stores"]
        num_users = options["users"]
        num_coupons = options["coupons"]

        self.stdout.write(
            f" Starting demo data generation (Stores: {num_stores}, Users: {num_users}, Coupons: {num_coupons})..."
        )

        admin = User.objects.filter(email=DEMO_ADMIN_EMAIL).first()
        if not admin:
            admin = User.objects.create_superuser(email=DEMO_ADMIN_EMAIL, password="admin")

        today = timezone.now().date()
        campaign, _ = Campaign.objects.get_or_create(
            title=DEMO_CAMPAIGN_TITLE,
            defaults={
                "description": "Auto-generated campaign",
                "start_date": today - timedelta(days=60),
                "end_date": today + timedelta(days=60),
                "keywords": ["coffee", "chocolate"],
                "settings": DEMO_SETTINGS,
            },
        )

        stores = []
        for i in range(1, num_stores + 1):
            store, _ = Store.objects.get_or_create(
                cnpj=f"DEMO-{i:04d}",
                defaults={"name": f"Demo Store {i}", "location": "Demo City"},
            )
            stores.append(store)

        users = []
        for i in range(1, num_users + 1):
            unique_id = f"{i}_{random.randint(1000, 9999)}"
            user, created = User.objects.get_or_create(email=f"demo_user_{unique_id}@example.com")
            if created:
                user.set_password("demo")
                user.save(update_fields=["password"])
                profile = user.profile
                profile.full_name = f"Demo User {unique_id}"
                profile.store = random.choice(stores) if stores else None
                profile.save(update_fields=["full_name", "store"])
            users.append(user)

        now = timezone.now()
        coupons_to_create = []
        for _ in range(num_coupons):
            coupon = CouponSubmission(
                user=random.choice(users),
                campaign=campaign,
                image_reference="https://example.com/receipts/demo.jpg",
                extracted_data={"store": "Demo Market", "total": "42.90", "items": []},
            )
            coupon._temp_created_at = now - timedelta(days=random.randint(0, 30))
            coupons_to_create.append(coupon)

        created_coupons = CouponSubmission.objects.bulk_create(coupons_to_create)

        self.stdout.write(" Backdating coupon timestamps...")
        for coupon in created_coupons:
            CouponSubmission.objects.filter(id=coupon.id).update(created_at=coupon._temp_created_at)

        # Reviews go through the service so points, goals and tickets stay consistent.
        service = CouponService()
        for coupon in created_coupons:
            decision = random.choices([CouponSubmission.APPROVED, CouponSubmission.REJECTED], weights=[80, 20], k=1)[0]
            service.review(coupon.id, decision, reviewer_id=admin.id)

        self.stdout.write(
            self.style.SUCCESS(
                f" Done! Created {len(stores)} stores, {len(users)} users and {len(created_coupons)} reviewed coupons."
            )
        )
