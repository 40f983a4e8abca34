"""Exception types raised by the budget tracker."""

from __future__ import annotations


class BudgetTrackerError(Exception):
    """Base class for budget tracker errors."""


class ValidationError(BudgetTrackerError, ValueError):
    """Raised when user input cannot be normalised into a record."""


class TransactionImportError(BudgetTrackerError):
    """Raised while reading a bulk import; reported as a failed ImportResult."""


class IdentityServiceError(BudgetTrackerError):
    """Raised when the hosted identity service rejects a request.

    The message is the service's own message so the UI can display it as-is.
    """
