"""
Domain errors raised by the settlement services.

Input errors use django.core.exceptions.ValidationError, like the rest of
the code base; the classes below cover state conflicts.
"""


class ConflictError(Exception):
    """
    The requested transition is not allowed from the current state,
    e.g. reviewing a coupon that was already reviewed.
    """

    default_message = "This item has already been processed."

    def __init__(self, message=None):
        super().__init__(message or self.default_message)


class InsufficientPoolError(Exception):
    """
    A draw was requested for a campaign without undrawn lucky numbers.
    """

    default_message = "No eligible lucky numbers in the pool."

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
