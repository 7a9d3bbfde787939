"""
Tests for the pure statement functions in services.reporting.
"""

from datetime import date
from decimal import Decimal

import pytest

from accounting_core.errors import LedgerIntegrityError
from accounting_core.models.enums import AccountType, EntryType
from accounting_core.schemas.ledger import Account
from accounting_core.services import reporting
from accounting_core.services.transaction_service import (
    TransactionBuilder,
    asset_purchase,
    expense_payment,
    loan_received,
    owner_investment,
    sales_transaction,
)


AS_OF = date(2024, 3, 31)

ACCOUNTS = [
    Account(id="cash", name="Cash", account_type=AccountType.ASSET),
    Account(id="loan", name="Loan", account_type=AccountType.LIABILITY),
    Account(id="capital", name="Capital", account_type=AccountType.EQUITY),
    Account(id="sales", name="Sales", account_type=AccountType.INCOME),
    Account(id="wages", name="Wages", account_type=AccountType.EXPENSE),
]


def test_signed_amount_follows_normal_side():
    cash, loan = ACCOUNTS[0], ACCOUNTS[1]

    assert reporting.signed_amount(cash, EntryType.DEBIT, Decimal("5")) == Decimal("5")
    assert reporting.signed_amount(cash, EntryType.CREDIT, Decimal("5")) == Decimal("-5")
    assert reporting.signed_amount(loan, EntryType.CREDIT, Decimal("5")) == Decimal("5")


def test_compute_balances_replays_from_zero():
    transactions = [
        owner_investment("o1", AS_OF, "Capital", "cash", "capital", Decimal("500")),
        loan_received("l1", AS_OF, "Loan", "cash", "loan", Decimal("200")),
    ]

    balances = reporting.compute_balances(ACCOUNTS, transactions)

    assert balances == {
        "cash": Decimal("700"),
        "loan": Decimal("200"),
        "capital": Decimal("500"),
        "sales": Decimal("0"),
        "wages": Decimal("0"),
    }


def test_compute_balances_unknown_account():
    txn = (
        TransactionBuilder("t1", AS_OF, "Orphan")
        .debit("cash", 1)
        .credit("ghost", 1)
        .build()
    )
    with pytest.raises(LedgerIntegrityError, match="ghost"):
        reporting.compute_balances(ACCOUNTS, [txn])


def test_trial_balance_places_each_account_on_its_side():
    balances = {
        "cash": Decimal("900"),
        "loan": Decimal("200"),
        "capital": Decimal("500"),
        "sales": Decimal("300"),
        "wages": Decimal("100"),
    }

    trial = reporting.trial_balance(ACCOUNTS, balances, AS_OF)

    by_id = {line.account_id: line for line in trial.lines}
    assert by_id["cash"].debit_balance == Decimal("900")
    assert by_id["wages"].debit_balance == Decimal("100")
    assert by_id["sales"].credit_balance == Decimal("300")
    assert by_id["loan"].amount == Decimal("200")
    assert trial.total_debits == trial.total_credits == Decimal("1000")
    assert trial.is_balanced


def test_trial_balance_flags_disagreement():
    balances = {"cash": Decimal("10"), "sales": Decimal("9")}
    trial = reporting.trial_balance(ACCOUNTS, balances, AS_OF)
    assert not trial.is_balanced


def test_balance_sheet_folds_net_income_into_equity():
    balances = {
        "cash": Decimal("900"),
        "loan": Decimal("200"),
        "capital": Decimal("500"),
        "sales": Decimal("300"),
        "wages": Decimal("100"),
    }

    sheet = reporting.balance_sheet(ACCOUNTS, balances, AS_OF)

    assert sheet.net_income == Decimal("200")
    assert sheet.equity[-1].name == "Net Income"
    assert sheet.total_equity == Decimal("700")
    assert sheet.total_assets == sheet.total_liabilities + sheet.total_equity
    assert sheet.is_balanced


def test_income_statement_net_loss():
    balances = {"sales": Decimal("100"), "wages": Decimal("250")}

    statement = reporting.income_statement(
        ACCOUNTS, balances, date(2024, 1, 1), AS_OF
    )

    assert statement.total_revenue == Decimal("100")
    assert statement.total_expenses == Decimal("250")
    assert statement.net_income == Decimal("-150")
    assert [line.account_id for line in statement.expenses] == ["wages"]


def test_cash_flow_buckets_by_account_type():
    accounts = ACCOUNTS + [
        Account(id="equipment", name="Equipment", account_type=AccountType.ASSET),
    ]
    start = date(2024, 1, 1)
    transactions = [
        owner_investment("o1", start, "Capital", "cash", "capital", Decimal("5000")),
        loan_received("l1", start, "Loan", "cash", "loan", Decimal("2000")),
        asset_purchase("a1", start, "Laptop", "equipment", "cash", Decimal("1200")),
        sales_transaction("s1", AS_OF, "Sale", "cash", "sales", Decimal("800")),
        expense_payment("e1", AS_OF, "Payroll", "wages", "cash", Decimal("300")),
    ]

    flow = reporting.cash_flow(accounts, transactions, start, AS_OF)

    assert [i.transaction_id for i in flow.operating_activities] == ["s1", "e1"]
    assert [i.transaction_id for i in flow.investing_activities] == ["a1"]
    assert [i.transaction_id for i in flow.financing_activities] == ["o1", "l1"]
    assert flow.net_operating_cash_flow == Decimal("1100")
    assert flow.net_investing_cash_flow == Decimal("1200")
    assert flow.net_financing_cash_flow == Decimal("7000")
    assert flow.net_cash_flow == Decimal("9300")
    assert flow.start_date == start and flow.end_date == AS_OF


def test_cash_flow_income_wins_over_liability():
    # Revenue collected straight into a liability is still operating
    txn = (
        TransactionBuilder("t1", AS_OF, "Advance billing")
        .debit("loan", 50)
        .credit("sales", 50)
        .build()
    )

    flow = reporting.cash_flow(ACCOUNTS, [txn], AS_OF, AS_OF)

    assert [i.transaction_id for i in flow.operating_activities] == ["t1"]
    assert flow.financing_activities == []


def test_cash_flow_empty_period():
    flow = reporting.cash_flow(ACCOUNTS, [], AS_OF, AS_OF)

    assert flow.operating_activities == []
    assert flow.net_cash_flow == Decimal("0")


def test_cash_flow_unknown_account():
    txn = (
        TransactionBuilder("t1", AS_OF, "Orphan")
        .debit("cash", 1)
        .credit("ghost", 1)
        .build()
    )
    with pytest.raises(LedgerIntegrityError, match="ghost"):
        reporting.cash_flow(ACCOUNTS, [txn], AS_OF, AS_OF)
