"""
Pydantic schemas for ledger values and ledger requests.

Account, Entry and Transaction are the frozen values the core
passes around and hands to storage. They are separate from the
database models because the storage shape and the domain shape
are often different.
"""

import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from accounting_core.models.enums import AccountType, EntryType


# --- Domain Values ---

class Account(BaseModel):
    """A single account in the chart of accounts."""
    id: str
    name: str
    account_type: AccountType
    parent_id: str | None = None
    created_at: datetime.datetime = Field(
        default_factory=datetime.datetime.utcnow
    )

    model_config = {"frozen": True, "from_attributes": True}

    @property
    def normal_balance(self) -> EntryType:
        return self.account_type.normal_balance


class Entry(BaseModel):
    """One debit or credit line inside a transaction."""
    account_id: str
    entry_type: EntryType
    amount: Decimal
    memo: str | None = None

    model_config = {"frozen": True, "from_attributes": True}


class Transaction(BaseModel):
    """
    A balanced group of entries posted on a single date.

    Build one through TransactionBuilder, which checks the
    double-entry rules before handing back a value. Once built
    the transaction cannot be modified; corrections are made by
    posting a reversal.
    """
    id: str
    date: datetime.date
    description: str
    entries: tuple[Entry, ...]
    reference: str | None = None

    model_config = {"frozen": True, "from_attributes": True}

    @property
    def total_debits(self) -> Decimal:
        return sum(
            (e.amount for e in self.entries if e.entry_type == EntryType.DEBIT),
            Decimal("0"),
        )

    @property
    def total_credits(self) -> Decimal:
        return sum(
            (e.amount for e in self.entries if e.entry_type == EntryType.CREDIT),
            Decimal("0"),
        )

    @property
    def is_balanced(self) -> bool:
        return self.total_debits == self.total_credits

    @property
    def account_ids(self) -> set[str]:
        return {e.account_id for e in self.entries}


# --- Request Schemas ---

class LedgerAccountCreate(BaseModel):
    """Request to create a new ledger account."""
    id: str = Field(min_length=1, max_length=50)
    name: str = Field(min_length=1, max_length=100)
    account_type: AccountType
    parent_id: str | None = None


class EntryCreate(BaseModel):
    """A single debit or credit in a transaction request."""
    account_id: str = Field(min_length=1, max_length=50)
    entry_type: EntryType
    amount: Decimal
    memo: str | None = Field(default=None, max_length=255)


class PostTransactionRequest(BaseModel):
    """
    A complete transaction as submitted over HTTP.

    The double-entry rules are checked by TransactionBuilder,
    not here, so the caller gets the same error kinds whether
    it talks to the library directly or through the API.
    """
    id: str = Field(min_length=1, max_length=50)
    date: datetime.date
    description: str = Field(max_length=500)
    reference: str | None = Field(default=None, max_length=100)
    entries: list[EntryCreate]


class ReverseTransactionRequest(BaseModel):
    """Request to post the offsetting transaction for an existing one."""
    reversal_id: str = Field(min_length=1, max_length=50)
    date: datetime.date | None = None


# --- Response Schemas ---

class AccountResponse(BaseModel):
    """Ledger account in API responses."""
    id: str
    name: str
    account_type: AccountType
    normal_balance: EntryType
    parent_id: str | None
    created_at: datetime.datetime

    model_config = {"from_attributes": True}


class TransactionResponse(BaseModel):
    """Posted transaction in API responses."""
    id: str
    date: datetime.date
    description: str
    reference: str | None
    entries: list[Entry]
    total_amount: Decimal


class AccountBalanceResponse(BaseModel):
    """Response for an account balance query."""
    account_id: str
    account_type: AccountType
    as_of_date: datetime.date
    balance: Decimal
