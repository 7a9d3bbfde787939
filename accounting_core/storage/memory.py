"""
In-memory storage backend.

Useful for tests and for short-lived ledgers that are built,
reported on, and thrown away. Accounts and transactions are
frozen pydantic values, so handing out the stored objects
directly is safe.
"""

import datetime

from accounting_core.errors import StorageError
from accounting_core.schemas.ledger import Account, Transaction
from accounting_core.storage.base import LedgerStorage


class MemoryStorage(LedgerStorage):

    def __init__(self):
        # dicts keep insertion order, which list_accounts relies on
        self._accounts: dict[str, Account] = {}
        self._transactions: dict[str, Transaction] = {}

    def save_account(self, account: Account) -> None:
        if account.id in self._accounts:
            raise StorageError(f"Account '{account.id}' is already stored")
        self._accounts[account.id] = account

    def update_account(self, account: Account) -> None:
        if account.id not in self._accounts:
            raise StorageError(f"Account '{account.id}' is not stored")
        self._accounts[account.id] = account

    def load_account(self, account_id: str) -> Account | None:
        return self._accounts.get(account_id)

    def list_accounts(self) -> list[Account]:
        return list(self._accounts.values())

    def save_transaction(self, transaction: Transaction) -> None:
        if transaction.id in self._transactions:
            raise StorageError(
                f"Transaction '{transaction.id}' is already stored"
            )
        self._transactions[transaction.id] = transaction

    def load_transaction(self, transaction_id: str) -> Transaction | None:
        return self._transactions.get(transaction_id)

    def list_transactions(
        self,
        start_date: datetime.date | None = None,
        end_date: datetime.date | None = None,
    ) -> list[Transaction]:
        selected = [
            txn for txn in self._transactions.values()
            if (start_date is None or txn.date >= start_date)
            and (end_date is None or txn.date <= end_date)
        ]
        # sorted() is stable, so same-day transactions keep save order
        return sorted(selected, key=lambda txn: txn.date)
