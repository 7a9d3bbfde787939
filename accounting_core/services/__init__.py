"""Business logic services."""

from accounting_core.services.account_service import AccountRegistry
from accounting_core.services.gst_service import GstCalculator
from accounting_core.services.ledger_service import Ledger
from accounting_core.services.transaction_service import TransactionBuilder

__all__ = ["AccountRegistry", "GstCalculator", "Ledger", "TransactionBuilder"]
