"""
Storage capability consumed by the ledger.

The core reads and writes accounts and transactions only
through this interface, so it can run against an in-memory
store in tests and a relational database in production
without changing a line of ledger code.

Implementations report failure by raising StorageError. The
core never retries; retry policy belongs to the backend or the
caller.
"""

import abc
import datetime
from contextlib import contextmanager

from accounting_core.schemas.ledger import Account, Transaction


class LedgerStorage(abc.ABC):

    @abc.abstractmethod
    def save_account(self, account: Account) -> None:
        """Persist a new account. Fails if the id is already stored."""

    @abc.abstractmethod
    def update_account(self, account: Account) -> None:
        """Replace the metadata (name, parent) of a stored account."""

    @abc.abstractmethod
    def load_account(self, account_id: str) -> Account | None:
        """Return the account, or None if it does not exist."""

    @abc.abstractmethod
    def list_accounts(self) -> list[Account]:
        """Return every account in insertion order."""

    @abc.abstractmethod
    def save_transaction(self, transaction: Transaction) -> None:
        """
        Persist a transaction with all of its entries.

        Either the whole transaction is stored or none of it is.
        """

    @abc.abstractmethod
    def load_transaction(self, transaction_id: str) -> Transaction | None:
        """Return the transaction, or None if it does not exist."""

    @abc.abstractmethod
    def list_transactions(
        self,
        start_date: datetime.date | None = None,
        end_date: datetime.date | None = None,
    ) -> list[Transaction]:
        """
        Return transactions dated within [start_date, end_date].

        Both bounds are inclusive and optional. Results are ordered
        by date, then by the order they were saved.
        """

    @contextmanager
    def atomic(self):
        """
        Group several calls into one unit of work.

        Backends without transactions can keep this default, as
        long as each individual save is all-or-nothing.
        """
        yield
