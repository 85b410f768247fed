# accounting/api/responses.py

"""
PATH: accounting/api/responses.py

Domain error -> HTTP response.

- LedgerValidationError    -> 400
- LedgerNotFoundError      -> 404
- JournalCodeConflictError -> 409
"""

from rest_framework import status
from rest_framework.response import Response

from accounting.services.exceptions import (
    AccountingServiceError,
    JournalCodeConflictError,
    LedgerNotFoundError,
)


def ledger_error_response(exc: AccountingServiceError) -> Response:
    if isinstance(exc, LedgerNotFoundError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, JournalCodeConflictError):
        code = status.HTTP_409_CONFLICT
    else:
        code = status.HTTP_400_BAD_REQUEST
    return Response({"detail": str(exc)}, status=code)
