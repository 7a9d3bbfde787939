"""
Tests for the Ledger.

Tests cover:
- Recording balanced transactions
- Rejection of unknown accounts and reused ids
- Nothing persisted when recording fails
- As-of balance replay and reversals
- Trial balance, balance sheet and income statement
- Integrity checking over corrupted storage
- Concurrent recording
"""

import threading
from datetime import date
from decimal import Decimal

import pytest

from accounting_core.errors import (
    DuplicateTransactionIdError,
    InvalidPeriodError,
    LedgerIntegrityError,
    NotFoundError,
    StorageError,
    UnbalancedError,
    UnknownAccountError,
)
from accounting_core.models.enums import AccountType, EntryType
from accounting_core.schemas.ledger import Entry, Transaction
from accounting_core.services.ledger_service import Ledger
from accounting_core.services.transaction_service import (
    TransactionBuilder,
    expense_payment,
    owner_investment,
    sales_transaction,
)
from accounting_core.storage.memory import MemoryStorage


JAN_1 = date(2024, 1, 1)
JAN_31 = date(2024, 1, 31)


# --- Helpers to reduce repetition ---

def make_chart(ledger):
    """Create a small chart of accounts used by most tests."""
    ledger.create_account("cash", "Cash", AccountType.ASSET)
    ledger.create_account("loan", "Bank Loan", AccountType.LIABILITY)
    ledger.create_account("capital", "Owner Capital", AccountType.EQUITY)
    ledger.create_account("revenue", "Sales Revenue", AccountType.INCOME)
    ledger.create_account("rent", "Rent Expense", AccountType.EXPENSE)


def record_sale(ledger, txn_id="s1", on=JAN_1, amount="1000.00"):
    txn = sales_transaction(
        txn_id, on, "Cash sale", "cash", "revenue", Decimal(amount)
    )
    ledger.record_transaction(txn)
    return txn


class FailingStorage(MemoryStorage):
    """Memory storage whose transaction writes always fail."""

    def save_transaction(self, transaction):
        raise StorageError("disk full")


# --- Recording ---

class TestRecordTransaction:

    def test_cash_sale_updates_both_balances(self, ledger):
        make_chart(ledger)
        record_sale(ledger)

        assert ledger.account_balance("cash", JAN_31) == Decimal("1000.00")
        assert ledger.account_balance("revenue", JAN_31) == Decimal("1000.00")

    def test_recorded_transaction_can_be_fetched(self, ledger):
        make_chart(ledger)
        txn = record_sale(ledger)

        assert ledger.get_transaction("s1") == txn
        assert ledger.list_transactions() == [txn]

    def test_unknown_account_rejected(self, ledger):
        make_chart(ledger)
        txn = sales_transaction("s1", JAN_1, "Sale", "cash", "nope", Decimal("10"))

        with pytest.raises(UnknownAccountError, match="nope"):
            ledger.record_transaction(txn)
        assert ledger.list_transactions() == []

    def test_duplicate_id_rejected(self, ledger):
        make_chart(ledger)
        record_sale(ledger)

        with pytest.raises(DuplicateTransactionIdError):
            record_sale(ledger, amount="5.00")
        assert ledger.account_balance("cash", JAN_31) == Decimal("1000.00")

    def test_hand_built_unbalanced_transaction_rejected(self, ledger):
        make_chart(ledger)
        txn = Transaction(
            id="bad",
            date=JAN_1,
            description="Bypasses the builder",
            entries=(
                Entry(account_id="cash", entry_type=EntryType.DEBIT, amount=Decimal("10")),
                Entry(account_id="revenue", entry_type=EntryType.CREDIT, amount=Decimal("7")),
            ),
        )

        with pytest.raises(UnbalancedError):
            ledger.record_transaction(txn)
        assert ledger.list_transactions() == []

    def test_storage_failure_leaves_no_state(self):
        ledger = Ledger(FailingStorage())
        make_chart(ledger)

        with pytest.raises(StorageError):
            record_sale(ledger)
        assert ledger.list_transactions() == []
        assert ledger.account_balance("cash", JAN_31) == Decimal("0")

    def test_missing_transaction_not_found(self, ledger):
        with pytest.raises(NotFoundError):
            ledger.get_transaction("nope")


# --- Balances ---

class TestBalances:

    def test_balance_respects_as_of_date(self, ledger):
        make_chart(ledger)
        record_sale(ledger, "s1", date(2024, 1, 10), "100")
        record_sale(ledger, "s2", date(2024, 1, 20), "50")

        assert ledger.account_balance("cash", date(2024, 1, 9)) == Decimal("0")
        assert ledger.account_balance("cash", date(2024, 1, 10)) == Decimal("100")
        assert ledger.account_balance("cash", date(2024, 1, 20)) == Decimal("150")

    def test_expense_reduces_cash(self, ledger):
        make_chart(ledger)
        record_sale(ledger, amount="1000")
        ledger.record_transaction(
            expense_payment("e1", JAN_1, "Rent", "rent", "cash", Decimal("300"))
        )

        assert ledger.account_balance("cash", JAN_31) == Decimal("700")
        assert ledger.account_balance("rent", JAN_31) == Decimal("300")

    def test_unknown_account_balance(self, ledger):
        with pytest.raises(UnknownAccountError):
            ledger.account_balance("nope", JAN_31)

    def test_account_balances_include_idle_accounts(self, ledger):
        make_chart(ledger)
        record_sale(ledger)

        balances = ledger.account_balances(JAN_31)
        assert balances["cash"] == Decimal("1000.00")
        assert balances["loan"] == Decimal("0")

    def test_account_transactions(self, ledger):
        make_chart(ledger)
        record_sale(ledger)
        ledger.record_transaction(
            expense_payment("e1", JAN_1, "Rent", "rent", "cash", Decimal("300"))
        )

        assert [t.id for t in ledger.account_transactions("cash")] == ["s1", "e1"]
        assert [t.id for t in ledger.account_transactions("rent")] == ["e1"]


class TestReverseTransaction:

    def test_reversal_cancels_original(self, ledger):
        make_chart(ledger)
        record_sale(ledger)

        reversal = ledger.reverse_transaction("s1", "r1", date(2024, 1, 15))

        assert reversal.reference == "s1"
        assert ledger.account_balance("cash", date(2024, 1, 14)) == Decimal("1000.00")
        assert ledger.account_balance("cash", JAN_31) == Decimal("0")
        assert ledger.account_balance("revenue", JAN_31) == Decimal("0")
        # the original stays in the log untouched
        assert len(ledger.get_transaction("s1").entries) == 2

    def test_reversing_unknown_transaction(self, ledger):
        with pytest.raises(NotFoundError):
            ledger.reverse_transaction("nope", "r1")

    def test_reversal_id_must_be_unused(self, ledger):
        make_chart(ledger)
        record_sale(ledger)

        with pytest.raises(DuplicateTransactionIdError):
            ledger.reverse_transaction("s1", "s1")


# --- Reports ---

class TestReports:

    def test_balance_sheet_after_sale(self, ledger):
        make_chart(ledger)
        record_sale(ledger)

        sheet = ledger.generate_balance_sheet(JAN_31)

        assert sheet.total_assets == Decimal("1000.00")
        assert sheet.total_liabilities == Decimal("0")
        assert sheet.total_equity == Decimal("1000.00")
        assert sheet.net_income == Decimal("1000.00")
        assert sheet.equity[-1].account_id == "net_income"
        assert sheet.is_balanced

    def test_trial_balance_columns_agree(self, ledger):
        make_chart(ledger)
        record_sale(ledger)
        ledger.record_transaction(
            TransactionBuilder("l1", JAN_1, "Loan")
            .debit("cash", 5000)
            .credit("loan", 5000)
            .build()
        )

        trial = ledger.generate_trial_balance(JAN_31)

        assert trial.total_debits == Decimal("6000.00")
        assert trial.total_credits == Decimal("6000.00")
        assert trial.is_balanced
        assert [line.account_id for line in trial.lines] == [
            "cash", "loan", "capital", "revenue", "rent",
        ]

    def test_negative_balance_shown_in_opposite_column(self, ledger):
        make_chart(ledger)
        # overdraw cash: it goes negative on its debit side
        ledger.record_transaction(
            expense_payment("e1", JAN_1, "Rent", "rent", "cash", Decimal("200"))
        )

        trial = ledger.generate_trial_balance(JAN_31)
        cash = next(line for line in trial.lines if line.account_id == "cash")

        assert cash.debit_balance is None
        assert cash.credit_balance == Decimal("200")
        assert trial.is_balanced

    def test_empty_ledger_reports(self, ledger):
        make_chart(ledger)

        trial = ledger.generate_trial_balance(JAN_31)
        sheet = ledger.generate_balance_sheet(JAN_31)

        assert trial.total_debits == trial.total_credits == Decimal("0")
        assert sheet.net_income == Decimal("0")
        assert [line.account_id for line in sheet.equity] == ["capital"]

    def test_income_statement_only_counts_the_period(self, ledger):
        make_chart(ledger)
        record_sale(ledger, "s1", date(2023, 12, 31), "400")
        record_sale(ledger, "s2", date(2024, 1, 5), "1000")
        ledger.record_transaction(
            expense_payment("e1", date(2024, 1, 6), "Rent", "rent", "cash", Decimal("300"))
        )
        record_sale(ledger, "s3", date(2024, 2, 1), "50")

        statement = ledger.generate_income_statement(JAN_1, JAN_31)

        assert statement.total_revenue == Decimal("1000")
        assert statement.total_expenses == Decimal("300")
        assert statement.net_income == Decimal("700")

    def test_single_day_period_is_valid(self, ledger):
        make_chart(ledger)
        record_sale(ledger)

        statement = ledger.generate_income_statement(JAN_1, JAN_1)
        assert statement.total_revenue == Decimal("1000.00")

    def test_reversed_period_rejected(self, ledger):
        with pytest.raises(InvalidPeriodError):
            ledger.generate_income_statement(JAN_31, JAN_1)

    def test_cash_flow_buckets_the_period(self, ledger):
        make_chart(ledger)
        ledger.record_transaction(
            owner_investment("o1", JAN_1, "Capital", "cash", "capital", Decimal("5000"))
        )
        record_sale(ledger, "s1", date(2023, 12, 31), "400")
        record_sale(ledger, "s2", date(2024, 1, 5), "1000")
        ledger.record_transaction(
            expense_payment("e1", date(2024, 1, 6), "Rent", "rent", "cash", Decimal("300"))
        )
        record_sale(ledger, "s3", date(2024, 2, 1), "50")

        flow = ledger.generate_cash_flow(JAN_1, JAN_31)

        assert [i.transaction_id for i in flow.operating_activities] == ["s2", "e1"]
        assert [i.transaction_id for i in flow.financing_activities] == ["o1"]
        assert flow.investing_activities == []
        assert flow.net_operating_cash_flow == Decimal("1300")
        assert flow.net_financing_cash_flow == Decimal("5000")
        assert flow.net_cash_flow == Decimal("6300")

    def test_cash_flow_reversed_period_rejected(self, ledger):
        with pytest.raises(InvalidPeriodError):
            ledger.generate_cash_flow(JAN_31, JAN_1)


class TestIntegrity:

    def _corrupt(self, ledger):
        """Write an unbalanced transaction straight into storage."""
        ledger.storage.save_transaction(Transaction(
            id="corrupt",
            date=JAN_1,
            description="Written around the ledger",
            entries=(
                Entry(account_id="cash", entry_type=EntryType.DEBIT, amount=Decimal("100")),
                Entry(account_id="revenue", entry_type=EntryType.CREDIT, amount=Decimal("60")),
            ),
        ))

    def test_valid_ledger_reports_no_issues(self, ledger):
        make_chart(ledger)
        record_sale(ledger)

        report = ledger.validate_integrity(JAN_31)

        assert report.is_valid
        assert report.issues == []

    def test_corrupt_storage_detected(self, ledger):
        make_chart(ledger)
        self._corrupt(ledger)

        with pytest.raises(LedgerIntegrityError):
            ledger.generate_trial_balance(JAN_31)
        with pytest.raises(LedgerIntegrityError):
            ledger.generate_balance_sheet(JAN_31)

        report = ledger.validate_integrity(JAN_31)
        assert not report.is_valid
        assert len(report.issues) == 2
        assert report.trial_balance_total_debits == Decimal("100")
        assert report.trial_balance_total_credits == Decimal("60")


class TestConcurrency:

    def test_concurrent_records_all_land(self, ledger):
        make_chart(ledger)

        def worker(n):
            record_sale(ledger, f"s{n}", JAN_1, "10")

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(20)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(ledger.list_transactions()) == 20
        assert ledger.account_balance("cash", JAN_31) == Decimal("200")
        assert ledger.validate_integrity(JAN_31).is_valid

    def test_duplicate_id_race_has_one_winner(self, ledger):
        make_chart(ledger)
        errors = []

        def worker():
            try:
                record_sale(ledger, "same", JAN_1, "10")
            except DuplicateTransactionIdError as e:
                errors.append(e)

        threads = [threading.Thread(target=worker) for _ in range(10)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(errors) == 9
        assert ledger.account_balance("cash", JAN_31) == Decimal("10")
