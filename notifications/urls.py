"""
URL routing for the notifications API.
"""

from django.urls import path

from notifications.views import NotificationListView, NotificationMarkAllReadView, NotificationReadView

urlpatterns = [
    path("", NotificationListView.as_view(), name="notifications-list"),
    path("mark-all-read/", NotificationMarkAllReadView.as_view(), name="notifications-mark-all-read"),
    path("<uuid:pk>/read/", NotificationReadView.as_view(), name="notifications-read"),
]
