# apps/api/exceptions.py
"""
REST framework exception handler for service-layer errors.

Consolidated order services raise ConsolidationError subclasses; this maps
them to HTTP responses so views do not need their own try/except blocks.
Everything else is left to the default REST framework handler.
"""
import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from apps.consolidation.exceptions import (
    ConsolidationError,
    Conflict,
    Forbidden,
    InvalidArgument,
    InvalidState,
    NotFound,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR = {
    InvalidArgument: status.HTTP_400_BAD_REQUEST,
    Forbidden: status.HTTP_403_FORBIDDEN,
    NotFound: status.HTTP_404_NOT_FOUND,
    InvalidState: status.HTTP_409_CONFLICT,
    Conflict: status.HTTP_409_CONFLICT,
}


def consolidation_exception_handler(exc, context):
    if isinstance(exc, ConsolidationError):
        http_status = STATUS_BY_ERROR.get(type(exc), status.HTTP_400_BAD_REQUEST)
        logger.info(
            '%s rejected: %s (%s)',
            context['view'].__class__.__name__, exc.code, exc.message,
        )
        return Response(exc.to_dict(), status=http_status)

    return exception_handler(exc, context)
