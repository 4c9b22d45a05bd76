"""
Lucky-Number Pool and Draw Engine.

Tickets are numbered per campaign and never reused. A draw picks winners
uniformly at random among the tickets that have not won yet; winners are
flagged once and never re-enter the pool.
"""

import logging
import random

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Max
from django.utils import timezone

from loyalty.exceptions import InsufficientPoolError
from loyalty.models import Campaign, LuckyNumber
from notifications import services as notifications
from notifications.models import Notification

logger = logging.getLogger(__name__)


def fisher_yates_shuffle(items, rng=None):
    """
    Returns a shuffled copy of `items` (Durstenfeld's in-place variant of
    Fisher-Yates). Every permutation is equally likely as long as `rng`
    is uniform.

    Args:
        items: Any iterable.
        rng: Object exposing randrange(); defaults to the OS entropy source.
    """
    rng = rng or random.SystemRandom()
    shuffled = list(items)

    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randrange(i + 1)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]

    return shuffled


class LuckyNumberPool:
    """
    Issues numbered tickets to users.
    """

    @transaction.atomic
    def issue(self, user_id, campaign_id, count: int, goal_completion=None) -> list:
        """
        Issues `count` consecutive numbers starting right after the highest
        number ever issued for the campaign (1 for the first ticket).

        The campaign row is locked for the duration of the transaction,
        which serializes concurrent issuance for the same campaign.
        """
        if count <= 0:
            return []

        campaign = Campaign.objects.select_for_update().get(pk=campaign_id)
        last_number = LuckyNumber.objects.filter(campaign=campaign).aggregate(last=Max("number"))["last"] or 0

        tickets = LuckyNumber.objects.bulk_create(
            [
                LuckyNumber(
                    user_id=user_id,
                    campaign=campaign,
                    goal_completion=goal_completion,
                    number=last_number + offset,
                )
                for offset in range(1, count + 1)
            ]
        )

        numbers = [ticket.number for ticket in tickets]
        logger.info("Issued lucky numbers %s to user %s in campaign %s", numbers, user_id, campaign.id)

        notifications.emit(
            user_id,
            Notification.LUCKY_NUMBER,
            title="New lucky numbers!",
            body=f"You received lucky number(s) {', '.join(str(n) for n in numbers)} for {campaign.title}.",
            data={"campaign_id": str(campaign.id), "numbers": numbers},
        )

        return tickets


class DrawEngine:
    """
    Performs prize draws over a campaign's undrawn tickets.
    """

    def __init__(self, rng=None):
        self.rng = rng or random.SystemRandom()

    @transaction.atomic
    def draw(self, campaign_id, winner_count: int, now=None) -> list:
        """
        Draws up to `winner_count` winners.

        The whole read-pool / shuffle / mark-winners sequence runs under a lock
        on the campaign row, so two concurrent draws cannot pick the same ticket.

        Raises:
            ValidationError: winner_count is not a positive integer.
            InsufficientPoolError: no undrawn tickets remain.

        Returns:
            The winning LuckyNumber rows, min(winner_count, pool size) of them.
        """
        if isinstance(winner_count, bool) or not isinstance(winner_count, int) or winner_count < 1:
            raise ValidationError("winner_count must be a positive integer.")

        campaign = Campaign.objects.select_for_update().get(pk=campaign_id)
        pool = list(LuckyNumber.objects.filter(campaign=campaign, is_winner=False).order_by("number"))

        if not pool:
            raise InsufficientPoolError()

        actual_count = min(winner_count, len(pool))
        winners = fisher_yates_shuffle(pool, self.rng)[:actual_count]

        drawn_at = now or timezone.now()
        for ticket in winners:
            ticket.is_winner = True
            ticket.drawn_at = drawn_at
        LuckyNumber.objects.bulk_update(winners, ["is_winner", "drawn_at"])

        logger.info(
            "Draw for campaign %s: %s of %s requested winner(s) from a pool of %s -> %s",
            campaign.id,
            actual_count,
            winner_count,
            len(pool),
            [ticket.number for ticket in winners],
        )

        for ticket in winners:
            notifications.emit(
                ticket.user_id,
                Notification.DRAW_WINNER,
                title="You won the draw!",
                body=f"Your lucky number {ticket.number} was drawn in {campaign.title}. Congratulations!",
                data={"campaign_id": str(campaign.id), "lucky_number_id": str(ticket.id), "number": ticket.number},
            )

        return winners
