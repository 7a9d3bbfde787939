"""
Database models package.

All models must be imported here so that Base.metadata knows
every table when the schema is created.
"""

from accounting_core.models.base import Base
from accounting_core.models.enums import (
    AccountType,
    EntryType,
    GstCategory,
)
from accounting_core.models.ledger_account import LedgerAccount
from accounting_core.models.ledger_entry import LedgerEntry
from accounting_core.models.transaction import LedgerTransaction

__all__ = [
    "Base",
    "AccountType",
    "EntryType",
    "GstCategory",
    "LedgerAccount",
    "LedgerEntry",
    "LedgerTransaction",
]
