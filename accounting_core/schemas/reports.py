"""
Pydantic schemas for financial statements.

Reports are structured values, not strings. Formatting amounts
with currency symbols is left to the caller.
"""

import datetime
from decimal import Decimal

from pydantic import BaseModel

from accounting_core.models.enums import AccountType


class AccountBalance(BaseModel):
    """
    One trial balance line.

    Exactly one of debit_balance / credit_balance is set. A balance
    that has gone negative on its normal side is shown in the
    opposite column.
    """
    account_id: str
    name: str
    account_type: AccountType
    debit_balance: Decimal | None = None
    credit_balance: Decimal | None = None

    @property
    def amount(self) -> Decimal:
        if self.debit_balance is not None:
            return self.debit_balance
        if self.credit_balance is not None:
            return self.credit_balance
        return Decimal("0")


class TrialBalance(BaseModel):
    as_of_date: datetime.date
    lines: list[AccountBalance]
    total_debits: Decimal
    total_credits: Decimal
    is_balanced: bool


class StatementLine(BaseModel):
    """An account and its signed balance on its normal side."""
    account_id: str
    name: str
    amount: Decimal


class BalanceSheet(BaseModel):
    as_of_date: datetime.date
    assets: list[StatementLine]
    liabilities: list[StatementLine]
    equity: list[StatementLine]
    net_income: Decimal
    total_assets: Decimal
    total_liabilities: Decimal
    total_equity: Decimal
    is_balanced: bool


class IncomeStatement(BaseModel):
    start_date: datetime.date
    end_date: datetime.date
    revenue: list[StatementLine]
    expenses: list[StatementLine]
    total_revenue: Decimal
    total_expenses: Decimal
    net_income: Decimal


class LedgerIntegrityReport(BaseModel):
    """Outcome of checking both accounting identities on a date."""
    as_of_date: datetime.date
    is_valid: bool
    issues: list[str]
    trial_balance_total_debits: Decimal
    trial_balance_total_credits: Decimal
    balance_sheet_total_assets: Decimal
    balance_sheet_total_liabilities_equity: Decimal


class CashFlowItem(BaseModel):
    """One transaction's contribution to a cash flow bucket."""
    transaction_id: str
    date: datetime.date
    description: str
    amount: Decimal


class CashFlowStatement(BaseModel):
    """
    Transactions in a period bucketed into operating, investing
    and financing activities.
    """
    start_date: datetime.date
    end_date: datetime.date
    operating_activities: list[CashFlowItem]
    investing_activities: list[CashFlowItem]
    financing_activities: list[CashFlowItem]
    net_operating_cash_flow: Decimal
    net_investing_cash_flow: Decimal
    net_financing_cash_flow: Decimal
    net_cash_flow: Decimal
