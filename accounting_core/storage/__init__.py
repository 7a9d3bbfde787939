"""Storage backends for the ledger."""

from accounting_core.storage.base import LedgerStorage
from accounting_core.storage.memory import MemoryStorage
from accounting_core.storage.sql import SqlStorage

__all__ = ["LedgerStorage", "MemoryStorage", "SqlStorage"]
