"""
Financial statements as pure functions over balances.

Nothing here touches storage. The Ledger replays its
transaction log into per-account balances and passes them in;
these functions only bucket and total them. Each statement
carries an is_balanced flag; deciding whether an unbalanced
statement is an error is left to the caller.
"""

import datetime
from decimal import Decimal
from typing import Iterable

from accounting_core.errors import LedgerIntegrityError
from accounting_core.models.enums import AccountType, EntryType
from accounting_core.schemas.ledger import Account, Transaction
from accounting_core.schemas.reports import (
    AccountBalance,
    BalanceSheet,
    CashFlowItem,
    CashFlowStatement,
    IncomeStatement,
    StatementLine,
    TrialBalance,
)

ZERO = Decimal("0")

NET_INCOME_LINE_ID = "net_income"

# Cash flow buckets, checked in this order
OPERATING_TYPES = {AccountType.INCOME, AccountType.EXPENSE}
FINANCING_TYPES = {AccountType.LIABILITY, AccountType.EQUITY}


def signed_amount(account: Account, entry_type: EntryType, amount: Decimal) -> Decimal:
    """
    An entry's effect on an account's balance.

    Entries on the account's normal side increase its balance,
    entries on the other side decrease it.
    """
    if entry_type == account.normal_balance:
        return amount
    return -amount


def compute_balances(
    accounts: Iterable[Account],
    transactions: Iterable[Transaction],
) -> dict[str, Decimal]:
    """
    Replay transactions from zero into a balance per account.

    Every account appears in the result, including those with
    no activity.
    """
    by_id = {a.id: a for a in accounts}
    balances = {account_id: ZERO for account_id in by_id}

    for txn in transactions:
        for entry in txn.entries:
            account = by_id.get(entry.account_id)
            if account is None:
                raise LedgerIntegrityError(
                    f"Transaction {txn.id} references unknown "
                    f"account '{entry.account_id}'"
                )
            balances[account.id] += signed_amount(
                account, entry.entry_type, entry.amount
            )
    return balances


def trial_balance(
    accounts: Iterable[Account],
    balances: dict[str, Decimal],
    as_of_date: datetime.date,
) -> TrialBalance:
    """
    List every account's balance on its normal side.

    A negative balance belongs in the opposite column, so a
    valid ledger always produces equal column totals.
    """
    lines = []
    total_debits = ZERO
    total_credits = ZERO

    for account in accounts:
        balance = balances.get(account.id, ZERO)
        side = account.normal_balance
        if balance < 0:
            side = side.opposite
            balance = -balance

        if side == EntryType.DEBIT:
            total_debits += balance
            line = AccountBalance(
                account_id=account.id,
                name=account.name,
                account_type=account.account_type,
                debit_balance=balance,
            )
        else:
            total_credits += balance
            line = AccountBalance(
                account_id=account.id,
                name=account.name,
                account_type=account.account_type,
                credit_balance=balance,
            )
        lines.append(line)

    return TrialBalance(
        as_of_date=as_of_date,
        lines=lines,
        total_debits=total_debits,
        total_credits=total_credits,
        is_balanced=total_debits == total_credits,
    )


def _lines(
    accounts: Iterable[Account],
    balances: dict[str, Decimal],
    account_type: AccountType,
) -> list[StatementLine]:
    return [
        StatementLine(
            account_id=a.id,
            name=a.name,
            amount=balances.get(a.id, ZERO),
        )
        for a in accounts
        if a.account_type == account_type
    ]


def _total(lines: list[StatementLine]) -> Decimal:
    return sum((line.amount for line in lines), ZERO)


def balance_sheet(
    accounts: Iterable[Account],
    balances: dict[str, Decimal],
    as_of_date: datetime.date,
) -> BalanceSheet:
    """
    Assets, liabilities and equity as of a date.

    Income and expense accounts are not closed out anywhere, so
    their net (income - expenses) to date is added to equity as
    a "Net Income" line. That is what makes
    assets == liabilities + equity hold.
    """
    accounts = list(accounts)
    assets = _lines(accounts, balances, AccountType.ASSET)
    liabilities = _lines(accounts, balances, AccountType.LIABILITY)
    equity = _lines(accounts, balances, AccountType.EQUITY)

    net_income = (
        _total(_lines(accounts, balances, AccountType.INCOME))
        - _total(_lines(accounts, balances, AccountType.EXPENSE))
    )
    if net_income != 0:
        equity.append(StatementLine(
            account_id=NET_INCOME_LINE_ID,
            name="Net Income",
            amount=net_income,
        ))

    total_assets = _total(assets)
    total_liabilities = _total(liabilities)
    total_equity = _total(equity)

    return BalanceSheet(
        as_of_date=as_of_date,
        assets=assets,
        liabilities=liabilities,
        equity=equity,
        net_income=net_income,
        total_assets=total_assets,
        total_liabilities=total_liabilities,
        total_equity=total_equity,
        is_balanced=total_assets == total_liabilities + total_equity,
    )


def income_statement(
    accounts: Iterable[Account],
    period_balances: dict[str, Decimal],
    start_date: datetime.date,
    end_date: datetime.date,
) -> IncomeStatement:
    """Revenue and expenses from activity within the period only."""
    accounts = list(accounts)
    revenue = _lines(accounts, period_balances, AccountType.INCOME)
    expenses = _lines(accounts, period_balances, AccountType.EXPENSE)
    total_revenue = _total(revenue)
    total_expenses = _total(expenses)

    return IncomeStatement(
        start_date=start_date,
        end_date=end_date,
        revenue=revenue,
        expenses=expenses,
        total_revenue=total_revenue,
        total_expenses=total_expenses,
        net_income=total_revenue - total_expenses,
    )


def cash_flow(
    accounts: Iterable[Account],
    transactions: Iterable[Transaction],
    start_date: datetime.date,
    end_date: datetime.date,
) -> CashFlowStatement:
    """
    Bucket each transaction of the period by the account types it touches.

    A transaction with any income or expense entry is operating.
    Otherwise one touching a liability or equity account is
    financing. What is left moves value between assets only
    (buying equipment for cash) and is investing. Each item counts
    the transaction's total debits.
    """
    types = {a.id: a.account_type for a in accounts}
    operating: list[CashFlowItem] = []
    investing: list[CashFlowItem] = []
    financing: list[CashFlowItem] = []

    for txn in transactions:
        touched = set()
        for account_id in txn.account_ids:
            if account_id not in types:
                raise LedgerIntegrityError(
                    f"Transaction {txn.id} references unknown "
                    f"account '{account_id}'"
                )
            touched.add(types[account_id])

        item = CashFlowItem(
            transaction_id=txn.id,
            date=txn.date,
            description=txn.description,
            amount=txn.total_debits,
        )
        if touched & OPERATING_TYPES:
            operating.append(item)
        elif touched & FINANCING_TYPES:
            financing.append(item)
        else:
            investing.append(item)

    net_operating = sum((i.amount for i in operating), ZERO)
    net_investing = sum((i.amount for i in investing), ZERO)
    net_financing = sum((i.amount for i in financing), ZERO)

    return CashFlowStatement(
        start_date=start_date,
        end_date=end_date,
        operating_activities=operating,
        investing_activities=investing,
        financing_activities=financing,
        net_operating_cash_flow=net_operating,
        net_investing_cash_flow=net_investing,
        net_financing_cash_flow=net_financing,
        net_cash_flow=net_operating + net_investing + net_financing,
    )
