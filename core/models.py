"""
Abstract base models shared across the applications.
"""

import uuid

from django.db import models


class UUIDModel(models.Model):
    """
    Abstract base class for records exposed through the API.

    Public identifiers are UUIDs so they can be handed to the client
    without leaking row counts.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        abstract = True
