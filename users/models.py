"""
Models for the users application (Auth, Stores and Profiles)
"""

import uuid

from django.contrib.auth.models import AbstractUser
from django.db import models

from users.managers import CustomUserManager


class Store(models.Model):
    """
    A physical shop whose salespeople take part in campaigns.
    Used to group the leaderboard and the store performance report.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    # Company tax id, one store per registration number
    cnpj = models.CharField(max_length=32, unique=True)
    location = models.CharField(max_length=255, blank=True)
    logo_url = models.URLField(blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name


class User(AbstractUser):
    """
    Custom User model supporting Email login.
    """

    username = None
    email = models.EmailField("email address", unique=True)

    objects = CustomUserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    def __str__(self):
        return self.email


class Profile(models.Model):
    """
    Campaign-facing data of a user.

    total_points is a running total: it only grows, by coupon approvals
    and goal bonuses (see loyalty.points.PointsAccumulator).
    """

    ROLE_ADMIN = "admin"
    ROLE_USER = "user"

    ROLES = [
        (ROLE_ADMIN, "Administrator"),
        (ROLE_USER, "Participant"),
    ]

    user = models.OneToOneField(User, on_delete=models.CASCADE, primary_key=True, related_name="profile")
    full_name = models.CharField(max_length=255, blank=True)
    role = models.CharField(max_length=10, choices=ROLES, default=ROLE_USER)
    store = models.ForeignKey(Store, on_delete=models.SET_NULL, null=True, blank=True, related_name="profiles")
    total_points = models.PositiveIntegerField(default=0)

    def __str__(self):
        return f"{self.full_name or self.user.email} ({self.total_points} pts)"

    @property
    def is_admin(self):
        return self.role == self.ROLE_ADMIN
