"""
Authentication and store views.
"""

from rest_framework import generics, viewsets
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from users.models import Store
from users.permissions import IsAdminRoleOrReadOnly
from users.serializers import RegistrationSerializer, StoreSerializer, UserDetailSerializer


class RegisterView(generics.CreateAPIView):
    """
    POST /api/auth/register/
    Public endpoint to register a new participant.
    """

    permission_classes = [AllowAny]
    serializer_class = RegistrationSerializer


class UserProfileView(APIView):
    """
    GET /api/auth/me/
    Returns details about the currently logged-in user.
    """

    permission_classes = [IsAuthenticated]

    def get(self, request):
        serializer = UserDetailSerializer(request.user)
        return Response(serializer.data)


class StoreViewSet(viewsets.ModelViewSet):
    """
    API endpoint for Stores. Everyone can list them (registration form),
    only admins can change them.
    """

    permission_classes = [IsAdminRoleOrReadOnly]
    serializer_class = StoreSerializer
    queryset = Store.objects.all()
