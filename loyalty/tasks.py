import logging

from celery import shared_task

from loyalty.points import PointsAccumulator
from users.models import Profile

logger = logging.getLogger(__name__)


@shared_task
def audit_points_totals():
    """
    Periodic task comparing every stored points total with the ledger.
    Scheduled daily by Celery beat; drifts are logged, never rewritten.
    """
    batch_size = 1000
    accumulator = PointsAccumulator()

    checked_count = 0
    drifted_count = 0

    # Using iterator() to reduce memory usage
    user_ids = Profile.objects.values_list("user_id", flat=True).iterator(chunk_size=batch_size)

    for user_id in user_ids:
        try:
            if accumulator.reconcile(user_id):
                drifted_count += 1
            checked_count += 1
        except Exception:
            logger.exception("Error auditing points for user %s", user_id)

    logger.info("Points audit done: %s profiles checked, %s drifted", checked_count, drifted_count)
    return f"Finished. Checked {checked_count} profiles. Drifted: {drifted_count}"
