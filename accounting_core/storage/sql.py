"""
SQLAlchemy storage backend.

Maps the ledger's frozen values onto the ORM models in
accounting_core.models. The storage takes a session as a
constructor argument; atomic() decides when it is committed,
so a transaction header and all of its entries land in the
database together or not at all.
"""

import datetime
import logging
from contextlib import contextmanager

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from accounting_core.errors import StorageError
from accounting_core.models.ledger_account import LedgerAccount
from accounting_core.models.ledger_entry import LedgerEntry
from accounting_core.models.transaction import LedgerTransaction
from accounting_core.schemas.ledger import Account, Entry, Transaction
from accounting_core.storage.base import LedgerStorage

logger = logging.getLogger(__name__)


@contextmanager
def _translate_errors(action: str):
    """Re-raise database failures as StorageError."""
    try:
        yield
    except SQLAlchemyError as e:
        raise StorageError(f"Failed to {action}: {e}") from e


def _to_account(row: LedgerAccount) -> Account:
    return Account(
        id=row.code,
        name=row.name,
        account_type=row.account_type,
        parent_id=row.parent_code,
        created_at=row.created_at,
    )


def _to_transaction(row: LedgerTransaction) -> Transaction:
    return Transaction(
        id=row.external_id,
        date=row.date,
        description=row.description,
        reference=row.reference,
        entries=tuple(
            Entry(
                account_id=e.account_code,
                entry_type=e.entry_type,
                amount=e.amount,
                memo=e.memo,
            )
            for e in row.entries
        ),
    )


class SqlStorage(LedgerStorage):

    def __init__(self, db: Session):
        self.db = db
        self._depth = 0

    @contextmanager
    def atomic(self):
        """
        Commit on success, roll back on any failure.

        Nested calls join the outermost unit; only the outermost
        one commits.
        """
        self._depth += 1
        try:
            yield
            if self._depth == 1:
                with _translate_errors("commit"):
                    self.db.commit()
        except Exception:
            if self._depth == 1:
                logger.debug("Rolling back ledger unit of work")
                self.db.rollback()
            raise
        finally:
            self._depth -= 1

    def _account_row(self, account_id: str) -> LedgerAccount | None:
        return self.db.execute(
            select(LedgerAccount).where(LedgerAccount.code == account_id)
        ).scalar_one_or_none()

    def _transaction_row(self, transaction_id: str) -> LedgerTransaction | None:
        return self.db.execute(
            select(LedgerTransaction)
            .where(LedgerTransaction.external_id == transaction_id)
            .options(selectinload(LedgerTransaction.entries))
        ).scalar_one_or_none()

    def save_account(self, account: Account) -> None:
        with _translate_errors(f"save account '{account.id}'"):
            self.db.add(LedgerAccount(
                code=account.id,
                name=account.name,
                account_type=account.account_type,
                parent_code=account.parent_id,
                created_at=account.created_at,
            ))
            self.db.flush()

    def update_account(self, account: Account) -> None:
        with _translate_errors(f"update account '{account.id}'"):
            row = self._account_row(account.id)
            if row is None:
                raise StorageError(f"Account '{account.id}' is not stored")
            row.name = account.name
            row.parent_code = account.parent_id
            self.db.flush()

    def load_account(self, account_id: str) -> Account | None:
        with _translate_errors(f"load account '{account_id}'"):
            row = self._account_row(account_id)
        return _to_account(row) if row else None

    def list_accounts(self) -> list[Account]:
        with _translate_errors("list accounts"):
            rows = self.db.execute(
                select(LedgerAccount).order_by(LedgerAccount.id)
            ).scalars().all()
        return [_to_account(row) for row in rows]

    def save_transaction(self, transaction: Transaction) -> None:
        with _translate_errors(f"save transaction '{transaction.id}'"):
            row = LedgerTransaction(
                external_id=transaction.id,
                date=transaction.date,
                description=transaction.description,
                reference=transaction.reference,
            )
            for position, entry in enumerate(transaction.entries):
                row.entries.append(LedgerEntry(
                    position=position,
                    account_code=entry.account_id,
                    entry_type=entry.entry_type,
                    amount=entry.amount,
                    memo=entry.memo,
                ))
            self.db.add(row)
            self.db.flush()

    def load_transaction(self, transaction_id: str) -> Transaction | None:
        with _translate_errors(f"load transaction '{transaction_id}'"):
            row = self._transaction_row(transaction_id)
        return _to_transaction(row) if row else None

    def list_transactions(
        self,
        start_date: datetime.date | None = None,
        end_date: datetime.date | None = None,
    ) -> list[Transaction]:
        query = (
            select(LedgerTransaction)
            .options(selectinload(LedgerTransaction.entries))
            .order_by(LedgerTransaction.date, LedgerTransaction.id)
        )
        if start_date is not None:
            query = query.where(LedgerTransaction.date >= start_date)
        if end_date is not None:
            query = query.where(LedgerTransaction.date <= end_date)

        with _translate_errors("list transactions"):
            rows = self.db.execute(query).scalars().all()
        return [_to_transaction(row) for row in rows]
