"""
Ledger API endpoints.

The API layer is thin: it handles HTTP concerns (status codes,
response formatting) and delegates all bookkeeping to the
Ledger. Every write commits through the ledger's storage, so
there is no commit or rollback here.
"""

import datetime

from fastapi import APIRouter, Depends

from accounting_core.api.dependencies import get_ledger, http_error
from accounting_core.errors import LedgerError
from accounting_core.models.enums import AccountType
from accounting_core.schemas.ledger import (
    AccountBalanceResponse,
    AccountResponse,
    LedgerAccountCreate,
    PostTransactionRequest,
    ReverseTransactionRequest,
    Transaction,
    TransactionResponse,
)
from accounting_core.schemas.reports import (
    BalanceSheet,
    CashFlowStatement,
    IncomeStatement,
    TrialBalance,
)
from accounting_core.services.ledger_service import Ledger
from accounting_core.services.transaction_service import TransactionBuilder

router = APIRouter(prefix="/ledger", tags=["Ledger"])


def _transaction_response(txn: Transaction) -> TransactionResponse:
    return TransactionResponse(
        id=txn.id,
        date=txn.date,
        description=txn.description,
        reference=txn.reference,
        entries=list(txn.entries),
        total_amount=txn.total_debits,
    )


# --- Accounts ---

@router.post("/accounts", response_model=AccountResponse, status_code=201)
def create_account(
    request: LedgerAccountCreate,
    ledger: Ledger = Depends(get_ledger),
):
    """
    Create a new ledger account.

    Every account in the chart of accounts must be created
    before transactions can be posted to it.
    """
    try:
        account = ledger.create_account(
            request.id, request.name, request.account_type, request.parent_id
        )
    except LedgerError as e:
        raise http_error(e)
    return AccountResponse.model_validate(account)


@router.get("/accounts", response_model=list[AccountResponse])
def list_accounts(
    account_type: AccountType | None = None,
    ledger: Ledger = Depends(get_ledger),
):
    """List accounts in the order they were created."""
    return [
        AccountResponse.model_validate(a)
        for a in ledger.list_accounts(account_type)
    ]


@router.get("/accounts/{account_id}", response_model=AccountResponse)
def get_account(account_id: str, ledger: Ledger = Depends(get_ledger)):
    try:
        return AccountResponse.model_validate(ledger.get_account(account_id))
    except LedgerError as e:
        raise http_error(e)


@router.get(
    "/accounts/{account_id}/balance",
    response_model=AccountBalanceResponse,
)
def get_account_balance(
    account_id: str,
    as_of: datetime.date | None = None,
    ledger: Ledger = Depends(get_ledger),
):
    """
    Balance of an account as of a date (today if omitted).

    Balance is calculated from entries, not stored.
    """
    as_of = as_of or datetime.date.today()
    try:
        account = ledger.get_account(account_id)
        balance = ledger.account_balance(account_id, as_of)
    except LedgerError as e:
        raise http_error(e)

    return AccountBalanceResponse(
        account_id=account.id,
        account_type=account.account_type,
        as_of_date=as_of,
        balance=balance,
    )


# --- Transactions ---

@router.post(
    "/transactions", response_model=TransactionResponse, status_code=201
)
def post_transaction(
    request: PostTransactionRequest,
    ledger: Ledger = Depends(get_ledger),
):
    """
    Post a balanced transaction.

    The entries must contain at least one debit and one credit,
    and total debits must equal total credits.
    """
    builder = TransactionBuilder(
        request.id, request.date, request.description, request.reference
    )
    for entry in request.entries:
        builder.entry(entry.account_id, entry.entry_type, entry.amount, entry.memo)

    try:
        txn = builder.build()
        ledger.record_transaction(txn)
    except LedgerError as e:
        raise http_error(e)
    return _transaction_response(txn)


@router.get(
    "/transactions/{transaction_id}", response_model=TransactionResponse
)
def get_transaction(transaction_id: str, ledger: Ledger = Depends(get_ledger)):
    try:
        return _transaction_response(ledger.get_transaction(transaction_id))
    except LedgerError as e:
        raise http_error(e)


@router.post(
    "/transactions/{transaction_id}/reverse",
    response_model=TransactionResponse,
    status_code=201,
)
def reverse_transaction(
    transaction_id: str,
    request: ReverseTransactionRequest,
    ledger: Ledger = Depends(get_ledger),
):
    """Post the offsetting transaction. The original is not modified."""
    try:
        reversal = ledger.reverse_transaction(
            transaction_id, request.reversal_id, request.date
        )
    except LedgerError as e:
        raise http_error(e)
    return _transaction_response(reversal)


# --- Reports ---

@router.get("/reports/trial-balance", response_model=TrialBalance)
def trial_balance(
    as_of: datetime.date | None = None,
    ledger: Ledger = Depends(get_ledger),
):
    try:
        return ledger.generate_trial_balance(as_of or datetime.date.today())
    except LedgerError as e:
        raise http_error(e)


@router.get("/reports/balance-sheet", response_model=BalanceSheet)
def balance_sheet(
    as_of: datetime.date | None = None,
    ledger: Ledger = Depends(get_ledger),
):
    try:
        return ledger.generate_balance_sheet(as_of or datetime.date.today())
    except LedgerError as e:
        raise http_error(e)


@router.get("/reports/income-statement", response_model=IncomeStatement)
def income_statement(
    start: datetime.date,
    end: datetime.date,
    ledger: Ledger = Depends(get_ledger),
):
    try:
        return ledger.generate_income_statement(start, end)
    except LedgerError as e:
        raise http_error(e)


@router.get("/reports/cash-flow", response_model=CashFlowStatement)
def cash_flow(
    start: datetime.date,
    end: datetime.date,
    ledger: Ledger = Depends(get_ledger),
):
    try:
        return ledger.generate_cash_flow(start, end)
    except LedgerError as e:
        raise http_error(e)
