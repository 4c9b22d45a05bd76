"""
Translation of domain errors into REST responses.
"""

import logging

from django.core.exceptions import ObjectDoesNotExist
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from loyalty.exceptions import ConflictError, InsufficientPoolError

logger = logging.getLogger(__name__)


def _messages(exc):
    if hasattr(exc, "message_dict"):
        return exc.message_dict
    if hasattr(exc, "messages"):
        return exc.messages
    return [str(exc)]


def api_exception_handler(exc, context):
    """
    DRF exception handler that also understands service-layer errors.

    - django ValidationError -> 400
    - ConflictError -> 409
    - InsufficientPoolError -> 400
    - ObjectDoesNotExist -> 404
    Everything else falls back to the DRF default.
    """
    response = exception_handler(exc, context)
    if response is not None:
        return response

    if isinstance(exc, DjangoValidationError):
        return Response({"detail": _messages(exc)}, status=status.HTTP_400_BAD_REQUEST)

    if isinstance(exc, ConflictError):
        return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)

    if isinstance(exc, InsufficientPoolError):
        return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

    if isinstance(exc, ObjectDoesNotExist):
        return Response({"detail": "Not found."}, status=status.HTTP_404_NOT_FOUND)

    logger.exception("Unhandled API error in %s", context.get("view").__class__.__name__)
    return None
