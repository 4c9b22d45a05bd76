"""
Tests for Django Signals and Cache Invalidation.
"""

from datetime import timedelta

from django.core.cache import cache
from django.utils import timezone

from loyalty.services import ACTIVE_CAMPAIGNS_CACHE_KEY, get_active_campaigns
from tests.factories.loyalty import CampaignFactory


class TestCampaignCacheInvalidation:
    """
    Verifies that modifying a Campaign correctly clears the active campaigns cache.
    """

    def setup_method(self):
        cache.clear()

    def teardown_method(self):
        cache.clear()

    def test_cache_is_populated_on_access(self):
        """
        Scenario: Calling get_active_campaigns should store data in cache.
        """
        CampaignFactory(is_active=True)
        cache.delete(ACTIVE_CAMPAIGNS_CACHE_KEY)
        assert cache.get(ACTIVE_CAMPAIGNS_CACHE_KEY) is None

        campaigns = get_active_campaigns()

        assert len(campaigns) == 1
        assert len(cache.get(ACTIVE_CAMPAIGNS_CACHE_KEY)) == 1

    def test_signal_clears_cache_on_save(self):
        """
        Scenario: Updating a campaign (via save()) should delete the cache key.
        """
        campaign = CampaignFactory(is_active=True)
        get_active_campaigns()
        assert cache.get(ACTIVE_CAMPAIGNS_CACHE_KEY) is not None

        campaign.title = "Updated Title"
        campaign.save()

        assert cache.get(ACTIVE_CAMPAIGNS_CACHE_KEY) is None
        assert get_active_campaigns()[0].title == "Updated Title"

    def test_signal_clears_cache_on_delete(self):
        campaign = CampaignFactory(is_active=True)
        get_active_campaigns()

        campaign.delete()

        assert cache.get(ACTIVE_CAMPAIGNS_CACHE_KEY) is None
        assert get_active_campaigns() == []

    def test_cached_list_still_honours_the_date_window(self):
        """
        Scenario: a campaign ended after the list was cached.
        Expected: it is filtered out without a signal firing.
        """
        campaign = CampaignFactory(is_active=True)
        get_active_campaigns()

        cached = cache.get(ACTIVE_CAMPAIGNS_CACHE_KEY)
        cached[0].end_date = timezone.now().date() - timedelta(days=1)
        cache.set(ACTIVE_CAMPAIGNS_CACHE_KEY, cached)

        assert get_active_campaigns() == []
        assert campaign.is_active is True

    def test_inactive_campaigns_are_not_listed(self):
        CampaignFactory(is_active=False)
        CampaignFactory(closed=True)

        assert get_active_campaigns() == []
