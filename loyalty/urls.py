"""
URL routing for the loyalty application API.
"""

from django.urls import path
from rest_framework.routers import DefaultRouter

from loyalty.views import (
    CampaignViewSet,
    CouponViewSet,
    DrawView,
    GoalProgressView,
    LeaderboardView,
    LuckyNumberViewSet,
    StorePerformanceView,
)

router = DefaultRouter()
router.register(r"campaigns", CampaignViewSet, basename="campaigns")
router.register(r"coupons", CouponViewSet, basename="coupons")
router.register(r"lucky-numbers", LuckyNumberViewSet, basename="lucky-numbers")  # Read Only

urlpatterns = [
    path("goals/progress/", GoalProgressView.as_view(), name="goal-progress"),
    path("draws/", DrawView.as_view(), name="draws"),
    path("leaderboard/", LeaderboardView.as_view(), name="leaderboard"),
    path("store-performance/", StorePerformanceView.as_view(), name="store-performance"),
] + router.urls
