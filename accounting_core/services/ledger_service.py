"""
Ledger: the core of the accounting system.

This service enforces the fundamental rules:
1. Every transaction must balance (debits = credits)
2. Posted transactions are immutable (append-only)
3. Every referenced account must exist
4. Transaction ids are never reused

Balances are never stored. They are replayed from the
transaction log on every query, so a balance is always
consistent with the entries that produced it.

One Ledger owns one logical ledger. Every public method holds
the instance lock for its whole duration, and writes run inside
the storage's atomic() unit, so two concurrent calls can never
both validate against the same state and then both write.
"""

import datetime
import logging
import threading
from decimal import Decimal

from accounting_core.errors import (
    DuplicateTransactionIdError,
    InvalidPeriodError,
    LedgerIntegrityError,
    NotFoundError,
    UnknownAccountError,
)
from accounting_core.models.enums import AccountType
from accounting_core.schemas.ledger import Account, Transaction
from accounting_core.schemas.reports import (
    BalanceSheet,
    CashFlowStatement,
    IncomeStatement,
    LedgerIntegrityReport,
    TrialBalance,
)
from accounting_core.services import reporting
from accounting_core.services.account_service import AccountRegistry
from accounting_core.services.transaction_service import (
    reversal_of,
    validate_transaction,
)
from accounting_core.storage.base import LedgerStorage

logger = logging.getLogger(__name__)


class Ledger:
    """
    All ledger operations pass through this class.

    The ledger takes a storage backend as a constructor
    argument and never assumes anything about it beyond the
    LedgerStorage interface.
    """

    def __init__(self, storage: LedgerStorage):
        self.storage = storage
        self.registry = AccountRegistry(storage)
        self._lock = threading.RLock()

    # --- Accounts ---

    def create_account(
        self,
        account_id: str,
        name: str,
        account_type: AccountType,
        parent_id: str | None = None,
    ) -> Account:
        with self._lock, self.storage.atomic():
            return self.registry.create_account(
                account_id, name, account_type, parent_id
            )

    def update_account(self, account_id: str, **changes) -> Account:
        with self._lock, self.storage.atomic():
            return self.registry.update_account(account_id, **changes)

    def get_account(self, account_id: str) -> Account:
        with self._lock:
            return self.registry.get_account(account_id)

    def list_accounts(
        self, account_type: AccountType | None = None
    ) -> list[Account]:
        with self._lock:
            return self.registry.list_accounts(account_type)

    def setup_standard_chart(self) -> dict[str, Account]:
        with self._lock, self.storage.atomic():
            return self.registry.setup_standard_chart()

    # --- Transactions ---

    def record_transaction(self, transaction: Transaction) -> None:
        """
        Validate and persist a transaction.

        The balance rules are checked again here even though
        TransactionBuilder already checked them; a Transaction can
        be constructed without the builder. If any check fails,
        nothing is written.
        """
        with self._lock, self.storage.atomic():
            validate_transaction(transaction)

            for account_id in dict.fromkeys(e.account_id for e in transaction.entries):
                if self.storage.load_account(account_id) is None:
                    raise UnknownAccountError(
                        f"Account '{account_id}' not found"
                    )

            if self.storage.load_transaction(transaction.id) is not None:
                raise DuplicateTransactionIdError(
                    f"Transaction '{transaction.id}' has already been recorded"
                )

            self.storage.save_transaction(transaction)

        logger.info(
            "Recorded transaction %s on %s (%s)",
            transaction.id, transaction.date, transaction.total_debits,
        )

    def get_transaction(self, transaction_id: str) -> Transaction:
        with self._lock:
            transaction = self.storage.load_transaction(transaction_id)
        if transaction is None:
            raise NotFoundError(f"Transaction '{transaction_id}' not found")
        return transaction

    def list_transactions(
        self,
        start_date: datetime.date | None = None,
        end_date: datetime.date | None = None,
    ) -> list[Transaction]:
        with self._lock:
            return self.storage.list_transactions(start_date, end_date)

    def account_transactions(
        self,
        account_id: str,
        start_date: datetime.date | None = None,
        end_date: datetime.date | None = None,
    ) -> list[Transaction]:
        """Transactions with at least one entry against account_id."""
        with self._lock:
            self._require_account(account_id)
            return [
                txn for txn in self.storage.list_transactions(start_date, end_date)
                if account_id in txn.account_ids
            ]

    def reverse_transaction(
        self,
        transaction_id: str,
        reversal_id: str,
        date: datetime.date | None = None,
    ) -> Transaction:
        """
        Record the offsetting transaction for a posted one.

        The original transaction is not modified. The reversal
        carries the original's id as its reference.
        """
        with self._lock:
            original = self.get_transaction(transaction_id)
            reversal = reversal_of(original, reversal_id, date)
            self.record_transaction(reversal)
        return reversal

    # --- Balances ---

    def _require_account(self, account_id: str) -> Account:
        account = self.storage.load_account(account_id)
        if account is None:
            raise UnknownAccountError(f"Account '{account_id}' not found")
        return account

    def account_balance(
        self, account_id: str, as_of_date: datetime.date
    ) -> Decimal:
        """
        Balance of an account including every transaction dated
        on or before as_of_date.

        For ASSET and EXPENSE accounts: balance = debits - credits
        For LIABILITY, EQUITY, and INCOME: balance = credits - debits
        """
        with self._lock:
            account = self._require_account(account_id)
            transactions = self.storage.list_transactions(end_date=as_of_date)

        balance = Decimal("0")
        for txn in transactions:
            for entry in txn.entries:
                if entry.account_id == account_id:
                    balance += reporting.signed_amount(
                        account, entry.entry_type, entry.amount
                    )
        return balance

    def account_balances(
        self,
        as_of_date: datetime.date,
        start_date: datetime.date | None = None,
    ) -> dict[str, Decimal]:
        """Balances of every account, from one pass over the log."""
        with self._lock:
            accounts = self.storage.list_accounts()
            transactions = self.storage.list_transactions(start_date, as_of_date)
        return reporting.compute_balances(accounts, transactions)

    # --- Reports ---

    def _trial_balance(self, as_of_date: datetime.date) -> TrialBalance:
        with self._lock:
            accounts = self.storage.list_accounts()
            balances = self.account_balances(as_of_date)
        return reporting.trial_balance(accounts, balances, as_of_date)

    def _balance_sheet(self, as_of_date: datetime.date) -> BalanceSheet:
        with self._lock:
            accounts = self.storage.list_accounts()
            balances = self.account_balances(as_of_date)
        return reporting.balance_sheet(accounts, balances, as_of_date)

    def generate_trial_balance(self, as_of_date: datetime.date) -> TrialBalance:
        """
        Trial balance as of a date.

        Raises LedgerIntegrityError rather than returning a trial
        balance whose columns do not agree.
        """
        report = self._trial_balance(as_of_date)
        if not report.is_balanced:
            logger.warning(
                "Trial balance on %s does not balance: debits=%s credits=%s",
                as_of_date, report.total_debits, report.total_credits,
            )
            raise LedgerIntegrityError(
                f"Trial balance is not balanced: "
                f"debits={report.total_debits}, "
                f"credits={report.total_credits}"
            )
        return report

    def generate_balance_sheet(self, as_of_date: datetime.date) -> BalanceSheet:
        """
        Balance sheet as of a date.

        Raises LedgerIntegrityError if
        assets != liabilities + equity.
        """
        report = self._balance_sheet(as_of_date)
        if not report.is_balanced:
            logger.warning(
                "Balance sheet on %s does not balance: assets=%s "
                "liabilities=%s equity=%s",
                as_of_date, report.total_assets,
                report.total_liabilities, report.total_equity,
            )
            raise LedgerIntegrityError(
                f"Balance sheet is not balanced: "
                f"assets={report.total_assets}, "
                f"liabilities + equity="
                f"{report.total_liabilities + report.total_equity}"
            )
        return report

    def generate_income_statement(
        self,
        start_date: datetime.date,
        end_date: datetime.date,
    ) -> IncomeStatement:
        """Revenue and expenses from entries dated start..end inclusive."""
        if start_date > end_date:
            raise InvalidPeriodError(
                f"Period start {start_date} is after its end {end_date}"
            )
        with self._lock:
            accounts = self.storage.list_accounts()
            period_balances = self.account_balances(end_date, start_date)
        return reporting.income_statement(
            accounts, period_balances, start_date, end_date
        )

    def generate_cash_flow(
        self,
        start_date: datetime.date,
        end_date: datetime.date,
    ) -> CashFlowStatement:
        """Operating, investing and financing activity for start..end inclusive."""
        if start_date > end_date:
            raise InvalidPeriodError(
                f"Period start {start_date} is after its end {end_date}"
            )
        with self._lock:
            accounts = self.storage.list_accounts()
            transactions = self.storage.list_transactions(start_date, end_date)
        return reporting.cash_flow(accounts, transactions, start_date, end_date)

    def validate_integrity(
        self, as_of_date: datetime.date
    ) -> LedgerIntegrityReport:
        """
        Check both accounting identities and report, without raising.
        """
        trial = self._trial_balance(as_of_date)
        sheet = self._balance_sheet(as_of_date)
        liabilities_equity = sheet.total_liabilities + sheet.total_equity

        issues = []
        if not trial.is_balanced:
            issues.append(
                f"Trial balance is not balanced: debits = "
                f"{trial.total_debits}, credits = {trial.total_credits}"
            )
        if not sheet.is_balanced:
            issues.append(
                f"Balance sheet is not balanced: assets = "
                f"{sheet.total_assets}, liabilities + equity = "
                f"{liabilities_equity}"
            )
        for issue in issues:
            logger.warning("Ledger integrity issue on %s: %s", as_of_date, issue)

        return LedgerIntegrityReport(
            as_of_date=as_of_date,
            is_valid=not issues,
            issues=issues,
            trial_balance_total_debits=trial.total_debits,
            trial_balance_total_credits=trial.total_credits,
            balance_sheet_total_assets=sheet.total_assets,
            balance_sheet_total_liabilities_equity=liabilities_equity,
        )
