"""
Signals for the Loyalty application.
Handles cache invalidation when campaigns change.
"""

from django.core.cache import cache
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from loyalty.models import Campaign
from loyalty.services import ACTIVE_CAMPAIGNS_CACHE_KEY


@receiver([post_save, post_delete], sender=Campaign)
def clear_campaign_cache(sender, instance, **kwargs):
    """
    Clears the active campaigns cache whenever a campaign is saved or deleted,
    so get_active_campaigns() never serves a stale list.
    """
    cache.delete(ACTIVE_CAMPAIGNS_CACHE_KEY)
