# accounting/services/exceptions.py

"""
ACCOUNTING SERVICE ERRORS

Centralized domain errors for ledger services.

API mapping (see accounting/api/responses.py):
- LedgerValidationError    -> 400
- LedgerNotFoundError      -> 404
- JournalCodeConflictError -> 409

Database errors (connection loss, lock timeouts) are NOT wrapped: the
transaction rolls back and they propagate unchanged.
"""


class AccountingServiceError(Exception):
    """Base exception for all accounting service failures."""


class LedgerValidationError(AccountingServiceError):
    """Raised when caller input breaks a ledger rule."""


class LedgerNotFoundError(AccountingServiceError):
    """Raised when a referenced account, journal or config does not exist."""


class JournalCodeConflictError(AccountingServiceError):
    """Raised when a unique journal code cannot be allocated."""
