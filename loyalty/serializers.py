"""
Serializers for the Loyalty application.
"""

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers

from loyalty.goals import METRIC_APPROVED_COUPONS, PERIODS
from loyalty.models import Campaign, CouponSubmission, LuckyNumber
from loyalty.services import REVIEW_DECISIONS, CouponService


class GoalConfigSerializer(serializers.Serializer):
    """
    One goal of a campaign. Validated here so the evaluator can trust it.
    """

    id = serializers.CharField(max_length=64)
    label = serializers.CharField(max_length=255, allow_blank=True, required=False, default="")
    period = serializers.ChoiceField(choices=PERIODS)
    metric = serializers.ChoiceField(choices=[METRIC_APPROVED_COUPONS], default=METRIC_APPROVED_COUPONS)
    target = serializers.IntegerField(min_value=1)
    bonus_points = serializers.IntegerField(min_value=0, default=0)
    lucky_numbers = serializers.IntegerField(min_value=0, default=0)


class CampaignSettingsSerializer(serializers.Serializer):
    points_per_coupon = serializers.IntegerField(min_value=1, required=False)
    has_draws = serializers.BooleanField(default=False)
    draw_type = serializers.ChoiceField(choices=Campaign.DRAW_TYPES, allow_null=True, required=False, default=None)
    goals = GoalConfigSerializer(many=True, required=False, default=list)

    def validate_goals(self, goals):
        ids = [goal["id"] for goal in goals]
        if len(ids) != len(set(ids)):
            raise serializers.ValidationError("Goal ids must be unique within a campaign.")
        return goals


class CampaignSerializer(serializers.ModelSerializer):
    """
    Serializer for the Campaign model.
    """

    class Meta:
        model = Campaign
        fields = [
            "id",
            "title",
            "description",
            "start_date",
            "end_date",
            "is_active",
            "banner_url",
            "keywords",
            "settings",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]

    def validate_keywords(self, value):
        if not isinstance(value, list) or not all(isinstance(keyword, str) for keyword in value):
            raise serializers.ValidationError("Keywords must be a list of strings.")
        return value

    def validate_settings(self, value):
        settings_serializer = CampaignSettingsSerializer(data=value or {})
        settings_serializer.is_valid(raise_exception=True)
        return dict(settings_serializer.validated_data)

    def validate(self, data):
        start_date = data.get("start_date", getattr(self.instance, "start_date", None))
        end_date = data.get("end_date", getattr(self.instance, "end_date", None))
        if start_date and end_date and start_date > end_date:
            raise serializers.ValidationError({"end_date": "End date must not be before the start date."})
        return data


class ExtractedItemSerializer(serializers.Serializer):
    name = serializers.CharField()
    quantity = serializers.DecimalField(max_digits=10, decimal_places=3, required=False, allow_null=True)
    price = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True)
    unit_price = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True)
    matched_keyword = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class ExtractedDataSerializer(serializers.Serializer):
    """
    Shape of the receipt extraction result the client forwards with a coupon.
    """

    customer_name = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    date = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    store = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    total = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True)
    items = ExtractedItemSerializer(many=True, required=False, default=list)
    matched_keywords = serializers.ListField(child=serializers.CharField(), required=False, default=list)
    has_matching_products = serializers.BooleanField(required=False, default=False)


class CouponSubmissionSerializer(serializers.ModelSerializer):
    campaign_id = serializers.UUIDField(read_only=True)
    user_id = serializers.IntegerField(read_only=True)
    reviewed_by_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = CouponSubmission
        fields = [
            "id",
            "user_id",
            "campaign_id",
            "image_reference",
            "status",
            "extracted_data",
            "points_awarded",
            "created_at",
            "reviewed_at",
            "reviewed_by_id",
        ]
        read_only_fields = fields


class CouponSubmitSerializer(serializers.Serializer):
    """
    Serializer for submitting a photographed receipt.
    """

    campaign_id = serializers.UUIDField()
    image_reference = serializers.URLField(max_length=1024)
    extracted_data = ExtractedDataSerializer(required=False, allow_null=True)

    def create(self, validated_data):
        request = self.context.get("request")
        # Stored as sent; the nested serializer only checks its shape.
        extracted_data = self.initial_data.get("extracted_data")

        service = CouponService()

        try:
            return service.submit(
                user_id=request.user.id,
                campaign_id=validated_data["campaign_id"],
                image_reference=validated_data["image_reference"],
                extracted_data=extracted_data,
            )
        except DjangoValidationError as e:
            raise serializers.ValidationError({"detail": e.messages if hasattr(e, "messages") else str(e)}) from e

    def to_representation(self, instance):
        return CouponSubmissionSerializer(instance).data


class ReviewSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=REVIEW_DECISIONS)
    points_awarded = serializers.IntegerField(min_value=1, required=False, allow_null=True)


class LuckyNumberSerializer(serializers.ModelSerializer):
    campaign_id = serializers.UUIDField(read_only=True)
    user_id = serializers.IntegerField(read_only=True)
    goal_completion_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = LuckyNumber
        fields = ["id", "number", "user_id", "campaign_id", "goal_completion_id", "is_winner", "drawn_at", "created_at"]
        read_only_fields = fields


class GoalProgressSerializer(serializers.Serializer):
    goal_id = serializers.CharField(source="goal.id")
    label = serializers.CharField(source="goal.label")
    period = serializers.CharField(source="goal.period")
    bonus_points = serializers.IntegerField(source="goal.bonus_points")
    lucky_numbers = serializers.IntegerField(source="goal.lucky_numbers")
    current_count = serializers.IntegerField()
    target = serializers.IntegerField()
    percentage = serializers.IntegerField()
    is_completed = serializers.BooleanField()
    period_start = serializers.DateField()
    period_end = serializers.DateField()
    completed_at = serializers.SerializerMethodField()

    def get_completed_at(self, obj):
        if obj.completion is None:
            return None
        return serializers.DateTimeField().to_representation(obj.completion.completed_at)


class DrawRequestSerializer(serializers.Serializer):
    campaign_id = serializers.UUIDField()
    draw_count = serializers.IntegerField(min_value=1, default=1)


class LeaderboardRowSerializer(serializers.Serializer):
    rank = serializers.IntegerField()
    user_id = serializers.IntegerField()
    full_name = serializers.CharField()
    store_id = serializers.CharField(allow_null=True)
    store_name = serializers.CharField(allow_null=True)
    campaign_points = serializers.IntegerField()
    approved_coupons_count = serializers.IntegerField()
    lucky_numbers_count = serializers.IntegerField()


class StorePerformanceSerializer(serializers.Serializer):
    store_id = serializers.CharField()
    store_name = serializers.CharField()
    cnpj = serializers.CharField()
    location = serializers.CharField()
    salesperson_count = serializers.IntegerField()
    total_coupons = serializers.IntegerField()
    approved_coupons = serializers.IntegerField()
    total_points = serializers.IntegerField()
    goals_completed = serializers.IntegerField()
    current_week_approved = serializers.IntegerField()
    previous_week_approved = serializers.IntegerField()
