"""
Signals for the users application.
Every user gets a Profile the moment it is created.
"""

from django.db.models.signals import post_save
from django.dispatch import receiver

from users.models import Profile, User


@receiver(post_save, sender=User)
def create_profile(sender, instance, created, **kwargs):
    """
    Creates the Profile row for new users. Superusers are campaign admins.
    """
    if not created:
        return

    role = Profile.ROLE_ADMIN if instance.is_superuser else Profile.ROLE_USER
    full_name = f"{instance.first_name} {instance.last_name}".strip()
    Profile.objects.get_or_create(user=instance, defaults={"role": role, "full_name": full_name})
