# accounting/api/errors.py

"""
Service error -> HTTP response mapping shared by accounting, sales and
purchases views.

- ValidationError (all line/entry rules), DuplicateCodeError,
  MissingAccountError                          -> 400
- IdempotencyError, ReversalError              -> 409
- DatabaseError / EntryNumberingError          -> 503 (retryable)
"""

from __future__ import annotations

import logging

from django.db import DatabaseError
from rest_framework import status
from rest_framework.response import Response

from accounting.services.exceptions import (
    AccountingServiceError,
    DuplicateCodeError,
    EntryNumberingError,
    IdempotencyError,
    MissingAccountError,
    ReversalError,
    ValidationError,
)

logger = logging.getLogger(__name__)

UNAVAILABLE_DETAIL = "The service is temporarily unavailable. Please retry."

HANDLED_ERRORS = (AccountingServiceError, DatabaseError)


def error_response(exc: Exception) -> Response:
    if isinstance(exc, (IdempotencyError, ReversalError)):
        return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)

    if isinstance(exc, (ValidationError, DuplicateCodeError, MissingAccountError)):
        body = {"detail": str(exc)}
        line_number = getattr(exc, "line_number", None)
        if line_number is not None:
            body["line_number"] = line_number
        return Response(body, status=status.HTTP_400_BAD_REQUEST)

    if isinstance(exc, (DatabaseError, EntryNumberingError)):
        logger.exception("Store failure while handling request")
        return Response(
            {"detail": UNAVAILABLE_DETAIL},
            status=status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
