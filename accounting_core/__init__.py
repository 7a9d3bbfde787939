"""
Accounting Core: a double-entry bookkeeping engine.

Records balanced transactions against a chart of accounts,
computes as-of balances, derives trial balance, balance sheet
and income statement, and calculates Indian GST splits.
Persistence is supplied by the caller through LedgerStorage.
"""

from accounting_core.errors import LedgerError
from accounting_core.models.enums import AccountType, EntryType, GstCategory
from accounting_core.schemas.gst import GstCalculation, GstInvoice, InvoiceLine, round_money
from accounting_core.schemas.ledger import Account, Entry, Transaction
from accounting_core.services.account_service import AccountRegistry
from accounting_core.services.gst_service import GstCalculator
from accounting_core.services.ledger_service import Ledger
from accounting_core.services.transaction_service import TransactionBuilder
from accounting_core.storage.base import LedgerStorage
from accounting_core.storage.memory import MemoryStorage

__all__ = [
    "Account",
    "AccountRegistry",
    "AccountType",
    "Entry",
    "EntryType",
    "GstCalculation",
    "GstCalculator",
    "GstCategory",
    "GstInvoice",
    "InvoiceLine",
    "Ledger",
    "LedgerError",
    "LedgerStorage",
    "MemoryStorage",
    "Transaction",
    "TransactionBuilder",
    "round_money",
]
