"""
API Views for the user's notification inbox.
"""

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from notifications import services
from notifications.serializers import NotificationSerializer


class NotificationListView(APIView):
    """
    GET /api/notifications/?unread_only=true
    Latest notifications of the current user.
    """

    permission_classes = [IsAuthenticated]

    def get(self, request):
        unread_only = request.query_params.get("unread_only") == "true"
        notifications = services.list_for_user(request.user, unread_only=unread_only)
        return Response({"notifications": NotificationSerializer(notifications, many=True).data})


class NotificationReadView(APIView):
    """
    POST /api/notifications/{id}/read/
    """

    permission_classes = [IsAuthenticated]

    def post(self, request, pk):
        notification = services.mark_read(request.user, pk)
        return Response({"notification": NotificationSerializer(notification).data})


class NotificationMarkAllReadView(APIView):
    """
    POST /api/notifications/mark-all-read/
    """

    permission_classes = [IsAuthenticated]

    def post(self, request):
        updated = services.mark_all_read(request.user)
        return Response({"message": "All notifications marked as read", "updated": updated}, status=status.HTTP_200_OK)
