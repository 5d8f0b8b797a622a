# accounting/services/exceptions.py

"""
ACCOUNTING SERVICE ERRORS

Centralized domain errors for accounting services.

Line-level validation errors carry the 1-based position of the offending
line in the caller's input, and their message reads "line N: <rule>".
"""

from __future__ import annotations


class AccountingServiceError(Exception):
    """Base exception for all accounting service failures."""


class ValidationError(AccountingServiceError):
    """Malformed input. Never reaches the ledger."""

    def __init__(self, message: str, *, line_number: int | None = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class MixedLineError(ValidationError):
    """A line carries both a debit and a credit."""


class EmptyLineError(ValidationError):
    """A line carries neither a debit nor a credit."""


class InsufficientLinesError(ValidationError):
    """Fewer than two qualifying lines."""


class ZeroAmountError(ValidationError):
    """The entry carries no value."""


class UnbalancedEntryError(ValidationError):
    """Total debits and total credits differ beyond tolerance."""

    def __init__(self, total_debit, total_credit):
        self.total_debit = total_debit
        self.total_credit = total_credit
        super().__init__(
            f"Journal entry not balanced: debits={total_debit} credits={total_credit}"
        )


class UnknownAccountError(ValidationError):
    """A line references an account that does not exist in the company."""


class InactiveAccountError(ValidationError):
    """A line references a deactivated account."""


class HierarchyCycleError(ValidationError):
    """A parent assignment would make an account its own ancestor."""


class DuplicateCodeError(AccountingServiceError):
    """Chart-of-accounts code collision within a company."""


class MissingAccountError(AccountingServiceError):
    """An entry generator cannot resolve a required account."""


class IdempotencyError(AccountingServiceError):
    """An idempotency key was reused for a different entry."""


class ReversalError(AccountingServiceError):
    """The entry cannot be reversed (already reversed, or is a reversal)."""


class EntryNumberingError(AccountingServiceError):
    """The entry-number sequence could not allocate a number."""


class NumberingFallbackWarning(UserWarning):
    """
    Non-fatal: the sequence failed and a timestamp-derived entry number was
    used instead. Uniqueness is not guaranteed on this path.
    """
