"""
Ledger exceptions.

Every failure is surfaced to the caller as one of these.
They all derive from ValueError so callers that only care
about "the request was rejected" can catch a single type.
"""


class LedgerError(ValueError):
    """Base class for every error raised by the library."""


# --- Structural ---

class EmptyTransactionError(LedgerError):
    pass


class NoDebitError(LedgerError):
    pass


class NoCreditError(LedgerError):
    pass


class NonPositiveAmountError(LedgerError):
    pass


class UnbalancedError(LedgerError):
    pass


class InvalidNameError(LedgerError):
    pass


class InvalidPeriodError(LedgerError):
    pass


class CyclicParentError(LedgerError):
    pass


# --- Referential ---

class NotFoundError(LedgerError):
    pass


class UnknownAccountError(NotFoundError):
    pass


class UnknownParentError(LedgerError):
    pass


class DuplicateIdError(LedgerError):
    pass


class DuplicateTransactionIdError(LedgerError):
    pass


# --- Tax ---

class GstError(LedgerError):
    pass


class InvalidRateError(GstError):
    pass


class InvalidCategoryError(GstError):
    pass


# --- Storage and consistency ---

class StorageError(LedgerError):
    """A storage backend reported a failure. Never retried by the core."""


class LedgerIntegrityError(LedgerError):
    """
    A derived report violated an accounting identity.

    Raised instead of returning a statement that is silently wrong.
    """
