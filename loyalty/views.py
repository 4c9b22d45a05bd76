"""
API Views for the Loyalty application.
"""

from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from loyalty.draws import DrawEngine
from loyalty.goals import GoalEvaluator
from loyalty.leaderboard import LeaderboardProjector, store_performance
from loyalty.models import Campaign, CouponSubmission, LuckyNumber
from loyalty.serializers import (
    CampaignSerializer,
    CouponSubmissionSerializer,
    CouponSubmitSerializer,
    DrawRequestSerializer,
    GoalProgressSerializer,
    LeaderboardRowSerializer,
    LuckyNumberSerializer,
    ReviewSerializer,
    StorePerformanceSerializer,
)
from loyalty.services import CouponService, get_active_campaigns
from users.permissions import IsAdminRole, IsAdminRoleOrReadOnly, is_admin


def _required_param(request, name):
    value = request.query_params.get(name)
    if not value:
        raise ValidationError({name: "This query parameter is required."})
    return value


class CampaignViewSet(viewsets.ModelViewSet):
    """
    API endpoint for Campaigns.
    Participants can read, only admins can create or change them.
    """

    permission_classes = [IsAdminRoleOrReadOnly]
    serializer_class = CampaignSerializer
    queryset = Campaign.objects.all()

    @action(detail=False, methods=["get"])
    def active(self, request):
        """
        GET /api/loyalty/campaigns/active/
        Campaigns accepting coupons today.
        """
        serializer = self.get_serializer(get_active_campaigns(), many=True)
        return Response(serializer.data)


class CouponViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, mixins.CreateModelMixin, viewsets.GenericViewSet):
    """
    GET  /api/loyalty/coupons/?status=&campaign_id=
    POST /api/loyalty/coupons/
    POST /api/loyalty/coupons/{id}/review/

    Participants see their own coupons, admins see everything.
    """

    permission_classes = [IsAuthenticated]

    def get_serializer_class(self):
        if self.action == "create":
            return CouponSubmitSerializer
        if self.action == "review":
            return ReviewSerializer
        return CouponSubmissionSerializer

    def get_queryset(self):
        queryset = CouponSubmission.objects.all()
        if not is_admin(self.request.user):
            queryset = queryset.filter(user=self.request.user)

        status_filter = self.request.query_params.get("status")
        if status_filter:
            queryset = queryset.filter(status=status_filter)

        campaign_id = self.request.query_params.get("campaign_id")
        if campaign_id:
            queryset = queryset.filter(campaign_id=campaign_id)

        return queryset.order_by("-created_at")

    @action(detail=True, methods=["post"], permission_classes=[IsAdminRole])
    def review(self, request, pk=None):
        serializer = ReviewSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        submission = CouponService().review(
            submission_id=pk,
            decision=serializer.validated_data["status"],
            reviewer_id=request.user.id,
            awarded_points=serializer.validated_data.get("points_awarded"),
        )

        return Response({"coupon": CouponSubmissionSerializer(submission).data})


class GoalProgressView(APIView):
    """
    GET /api/loyalty/goals/progress/?campaign_id=
    Current-period progress of the logged-in user.
    """

    permission_classes = [IsAuthenticated]

    def get(self, request):
        campaign = Campaign.objects.get(pk=_required_param(request, "campaign_id"))
        progress = GoalEvaluator().progress(request.user.id, campaign)
        return Response({"goals": GoalProgressSerializer(progress, many=True).data})


class LuckyNumberViewSet(viewsets.ReadOnlyModelViewSet):
    """
    GET /api/loyalty/lucky-numbers/?campaign_id=&is_winner=
    """

    permission_classes = [IsAuthenticated]
    serializer_class = LuckyNumberSerializer

    def get_queryset(self):
        queryset = LuckyNumber.objects.all()
        if not is_admin(self.request.user):
            queryset = queryset.filter(user=self.request.user)

        campaign_id = self.request.query_params.get("campaign_id")
        if campaign_id:
            queryset = queryset.filter(campaign_id=campaign_id)

        if self.request.query_params.get("is_winner") == "true":
            queryset = queryset.filter(is_winner=True)

        return queryset.order_by("campaign_id", "number")


class DrawView(APIView):
    """
    POST /api/loyalty/draws/
    Draws winners among the undrawn lucky numbers of a campaign.
    """

    permission_classes = [IsAdminRole]

    def post(self, request):
        serializer = DrawRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        requested = serializer.validated_data["draw_count"]
        winners = DrawEngine().draw(serializer.validated_data["campaign_id"], requested)

        return Response(
            {
                "requested": requested,
                "drawn": len(winners),
                "winners": LuckyNumberSerializer(winners, many=True).data,
            },
            status=status.HTTP_200_OK,
        )


class LeaderboardView(APIView):
    """
    GET /api/loyalty/leaderboard/?campaign_id=&store_id=
    """

    permission_classes = [IsAuthenticated]

    def get(self, request):
        campaign = Campaign.objects.get(pk=_required_param(request, "campaign_id"))
        rows = LeaderboardProjector().rows(campaign.id, store_id=request.query_params.get("store_id"))
        return Response(
            {
                "campaign_id": str(campaign.id),
                "leaderboard": LeaderboardRowSerializer(rows, many=True).data,
            }
        )


class StorePerformanceView(APIView):
    """
    GET /api/loyalty/store-performance/
    Admin dashboard: totals per store, best first.
    """

    permission_classes = [IsAdminRole]

    def get(self, request):
        return Response({"stores": StorePerformanceSerializer(store_performance(), many=True).data})
