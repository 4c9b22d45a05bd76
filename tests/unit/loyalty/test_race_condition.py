"""
Concurrency tests for the serialization points of the settlement engine.
"""

import threading

import pytest
from django.db import connection
from django.test import TransactionTestCase

from loyalty.draws import DrawEngine, LuckyNumberPool
from loyalty.exceptions import ConflictError
from loyalty.goals import GoalEvaluator
from loyalty.models import CouponSubmission, GoalCompletion, LuckyNumber
from loyalty.services import CouponService
from tests.factories.loyalty import CampaignFactory, CouponSubmissionFactory, LuckyNumberFactory
from tests.factories.users import AdminUserFactory, UserFactory


def run_concurrently(target, count=2):
    """
    Starts `count` threads on `target` at the same time and collects what each returned or raised.
    """
    results = []
    barrier = threading.Barrier(count)

    def worker():
        try:
            barrier.wait()
            results.append(target())
        except Exception as e:
            results.append(e)
        finally:
            # Each thread has its own connection
            connection.close()

    threads = [threading.Thread(target=worker) for _ in range(count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    return results


@pytest.mark.row_locks
class TestRaceCondition(TransactionTestCase):
    """
    Uses threads to simulate concurrent requests.
    Using TransactionTestCase is crucial here because standard TestCase
    wraps everything in a transaction that rolls back, which hides concurrency issues.
    """

    def test_double_review_pays_once(self):
        """
        Scenario: two admins approve the same coupon at the same exact time.
        Expected: one succeeds, the other gets ConflictError; points are credited once.
        """
        reviewer = AdminUserFactory()
        coupon = CouponSubmissionFactory()

        results = run_concurrently(
            lambda: CouponService().review(coupon.id, CouponSubmission.APPROVED, reviewer_id=reviewer.id)
        )

        assert sum(isinstance(r, CouponSubmission) for r in results) == 1
        assert sum(isinstance(r, ConflictError) for r in results) == 1

        coupon.user.profile.refresh_from_db()
        self.assertEqual(coupon.user.profile.total_points, 10)

    def test_concurrent_draws_never_share_a_winner(self):
        campaign = CampaignFactory(with_draws=True)
        for number in range(1, 4):
            LuckyNumberFactory(campaign=campaign, number=number)

        results = run_concurrently(lambda: DrawEngine().draw(campaign.id, 2))

        winners = [ticket.number for result in results if isinstance(result, list) for ticket in result]
        assert len(winners) == len(set(winners)) == 3
        assert sorted(len(result) for result in results) == [1, 2]
        self.assertEqual(LuckyNumber.objects.filter(campaign=campaign, is_winner=True).count(), 3)

    def test_concurrent_issuance_never_repeats_a_number(self):
        """
        Scenario: two goal completions issue 3 tickets each in the same campaign at once.
        Expected: numbers 1..6, each request gets a consecutive block.
        """
        campaign = CampaignFactory()
        user = UserFactory()

        results = run_concurrently(lambda: LuckyNumberPool().issue(user.id, campaign.id, 3))

        blocks = [sorted(ticket.number for ticket in result) for result in results]
        assert sorted(number for block in blocks for number in block) == [1, 2, 3, 4, 5, 6]
        assert sorted(blocks) == [[1, 2, 3], [4, 5, 6]]
        self.assertEqual(LuckyNumber.objects.filter(campaign=campaign).count(), 6)

    def test_concurrent_evaluations_pay_the_goal_once(self):
        """
        Scenario: two approvals of the same user trigger goal evaluation at the same time.
        Expected: exactly one completion, one bonus and one lucky number.
        """
        user = UserFactory()
        campaign = CampaignFactory(monthly_goal=True)
        CouponSubmissionFactory.create_batch(2, user=user, campaign=campaign, approved=True)

        results = run_concurrently(lambda: GoalEvaluator().evaluate(user.id, campaign))

        assert sorted(len(result) for result in results) == [0, 1]
        self.assertEqual(GoalCompletion.objects.filter(user=user, campaign=campaign).count(), 1)
        self.assertEqual(LuckyNumber.objects.filter(user=user, campaign=campaign).count(), 1)

        user.profile.refresh_from_db()
        self.assertEqual(user.profile.total_points, 15)
