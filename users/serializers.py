"""
Serializers for User authentication, profiles and stores.
"""

from django.contrib.auth import get_user_model
from django.db import transaction
from rest_framework import serializers
from rest_framework_simplejwt.tokens import RefreshToken

from users.models import Profile, Store

User = get_user_model()


class StoreSerializer(serializers.ModelSerializer):
    class Meta:
        model = Store
        fields = ["id", "name", "cnpj", "location", "logo_url", "is_active", "created_at", "updated_at"]
        read_only_fields = ["id", "created_at", "updated_at"]


class ProfileSerializer(serializers.ModelSerializer):
    """
    Serializer to display the Profile nested inside the User details.
    """

    store = StoreSerializer(read_only=True)

    class Meta:
        model = Profile
        fields = ["full_name", "role", "store", "total_points"]
        read_only_fields = fields


class UserDetailSerializer(serializers.ModelSerializer):
    """
    Serializer for viewing the current user's profile (/me/).
    """

    profile = ProfileSerializer(read_only=True)

    class Meta:
        model = User
        fields = ["id", "email", "first_name", "last_name", "profile"]


class RegistrationSerializer(serializers.ModelSerializer):
    """
    Serializer for registering a new participant (User + Profile).
    """

    full_name = serializers.CharField(write_only=True)
    password = serializers.CharField(write_only=True, style={"input_type": "password"})
    store_id = serializers.PrimaryKeyRelatedField(
        queryset=Store.objects.filter(is_active=True), write_only=True, required=False, allow_null=True
    )

    class Meta:
        model = User
        fields = ["email", "password", "full_name", "store_id"]

    def create(self, validated_data):
        """
        Creates the user and fills the Profile created by the post_save signal.
        """
        full_name = validated_data.pop("full_name")
        store = validated_data.pop("store_id", None)

        with transaction.atomic():
            user = User.objects.create_user(email=validated_data["email"], password=validated_data["password"])
            profile = user.profile
            profile.full_name = full_name
            profile.store = store
            profile.save(update_fields=["full_name", "store"])

        return user

    def to_representation(self, instance):
        """
        Customize response to include JWT tokens immediately after registration.
        """
        data = super().to_representation(instance)

        refresh = RefreshToken.for_user(instance)

        data["profile"] = ProfileSerializer(instance.profile).data
        data["access"] = str(refresh.access_token)
        data["refresh"] = str(refresh)

        return data
