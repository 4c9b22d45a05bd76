from django.contrib import admin

from notifications.models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ["user", "type", "title", "channel", "is_read", "created_at"]
    list_filter = ["type", "channel", "is_read"]
    search_fields = ["title", "user__email"]
