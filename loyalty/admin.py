from django.contrib import admin

from loyalty.models import Campaign, CouponSubmission, GoalCompletion, LuckyNumber


@admin.register(Campaign)
class CampaignAdmin(admin.ModelAdmin):
    list_display = ["title", "start_date", "end_date", "is_active"]
    list_filter = ["is_active"]
    search_fields = ["title"]


@admin.register(CouponSubmission)
class CouponSubmissionAdmin(admin.ModelAdmin):
    list_display = ["id", "user", "campaign", "status", "points_awarded", "created_at", "reviewed_at"]
    list_filter = ["status", "campaign"]
    search_fields = ["user__email"]
    # Reviews go through the API so points, goals and notifications stay in sync.
    readonly_fields = ["status", "points_awarded", "reviewed_at", "reviewed_by"]


@admin.register(GoalCompletion)
class GoalCompletionAdmin(admin.ModelAdmin):
    list_display = ["user", "campaign", "goal_id", "period_start", "period_end", "bonus_points_awarded"]
    list_filter = ["campaign", "goal_id"]


@admin.register(LuckyNumber)
class LuckyNumberAdmin(admin.ModelAdmin):
    list_display = ["number", "campaign", "user", "is_winner", "drawn_at"]
    list_filter = ["campaign", "is_winner"]
