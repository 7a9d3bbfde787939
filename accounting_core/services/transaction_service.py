"""
Transaction building and common posting patterns.

TransactionBuilder is a mutable staging area: entries are
added one at a time, and build() checks the double-entry rules
once and hands back a frozen Transaction. The builder never
looks at storage; whether the accounts exist is the Ledger's
concern.

Checks run in this order, and the first failure wins:
1. At least two entries
2. At least one debit and one credit
3. Every amount strictly positive
4. Total debits equal total credits, compared exactly
"""

import datetime
from decimal import Decimal, InvalidOperation

from accounting_core.errors import (
    EmptyTransactionError,
    InvalidNameError,
    NoCreditError,
    NoDebitError,
    NonPositiveAmountError,
    UnbalancedError,
)
from accounting_core.models.enums import EntryType
from accounting_core.schemas.ledger import Entry, Transaction


def to_decimal(value) -> Decimal:
    """
    Coerce a number to a finite Decimal.

    Floats are refused outright with TypeError. Strings that do not
    parse, NaN and the infinities raise ValueError.
    """
    if isinstance(value, float):
        raise TypeError(
            f"Monetary amounts must be Decimal, int or str, not float ({value!r})"
        )
    if not isinstance(value, Decimal):
        try:
            value = Decimal(value)
        except InvalidOperation:
            raise ValueError(f"Not a number: {value!r}") from None
    if not value.is_finite():
        raise ValueError(f"Not a finite number: {value!r}")
    return value


def to_amount(value) -> Decimal:
    """Coerce an amount to Decimal; see to_decimal."""
    try:
        return to_decimal(value)
    except ValueError as e:
        raise NonPositiveAmountError(
            f"Amount must be a finite number: {value!r}"
        ) from e


def validate_transaction(transaction: Transaction) -> None:
    """Check a transaction against the double-entry rules."""
    if not transaction.description or not transaction.description.strip():
        raise InvalidNameError("Transaction description cannot be empty")

    entries = transaction.entries
    if len(entries) < 2:
        raise EmptyTransactionError(
            "Transaction must have at least two entries for "
            "double-entry bookkeeping"
        )

    types = {e.entry_type for e in entries}
    if EntryType.DEBIT not in types:
        raise NoDebitError("Transaction must contain at least one debit")
    if EntryType.CREDIT not in types:
        raise NoCreditError("Transaction must contain at least one credit")

    for entry in entries:
        if entry.amount <= 0:
            raise NonPositiveAmountError(
                f"Entry amounts must be positive "
                f"(account {entry.account_id}: {entry.amount})"
            )

    if not transaction.is_balanced:
        raise UnbalancedError(
            f"Transaction does not balance: "
            f"debits={transaction.total_debits}, "
            f"credits={transaction.total_credits}"
        )


class TransactionBuilder:
    """
    Accumulates entries, then validates once in build().

        txn = (
            TransactionBuilder("t1", date(2024, 1, 1), "Sale")
            .debit("cash", Decimal("1000.00"))
            .credit("revenue", Decimal("1000.00"))
            .build()
        )
    """

    def __init__(
        self,
        transaction_id: str,
        date: datetime.date,
        description: str,
        reference: str | None = None,
    ):
        self.transaction_id = transaction_id
        self.date = date
        self.description = description
        self.reference = reference
        self._entries: list[Entry] = []

    def entry(
        self,
        account_id: str,
        entry_type: EntryType,
        amount,
        memo: str | None = None,
    ) -> "TransactionBuilder":
        self._entries.append(Entry(
            account_id=account_id,
            entry_type=entry_type,
            amount=to_amount(amount),
            memo=memo,
        ))
        return self

    def debit(self, account_id: str, amount, memo: str | None = None):
        return self.entry(account_id, EntryType.DEBIT, amount, memo)

    def credit(self, account_id: str, amount, memo: str | None = None):
        return self.entry(account_id, EntryType.CREDIT, amount, memo)

    def build(self) -> Transaction:
        transaction = Transaction(
            id=self.transaction_id,
            date=self.date,
            description=self.description,
            reference=self.reference,
            entries=tuple(self._entries),
        )
        validate_transaction(transaction)
        return transaction


# --- Common Patterns ---

def sales_transaction(
    transaction_id, date, description,
    cash_or_receivables_id, revenue_id, amount,
) -> Transaction:
    """DEBIT cash/receivables, CREDIT revenue."""
    return (
        TransactionBuilder(transaction_id, date, description)
        .debit(cash_or_receivables_id, amount)
        .credit(revenue_id, amount)
        .build()
    )


def expense_payment(
    transaction_id, date, description,
    expense_id, cash_id, amount,
) -> Transaction:
    """DEBIT expense, CREDIT cash."""
    return (
        TransactionBuilder(transaction_id, date, description)
        .debit(expense_id, amount)
        .credit(cash_id, amount)
        .build()
    )


def asset_purchase(
    transaction_id, date, description,
    asset_id, cash_or_payables_id, amount,
) -> Transaction:
    """DEBIT asset, CREDIT cash/payables."""
    return (
        TransactionBuilder(transaction_id, date, description)
        .debit(asset_id, amount)
        .credit(cash_or_payables_id, amount)
        .build()
    )


def loan_received(
    transaction_id, date, description,
    cash_id, loan_payable_id, amount,
) -> Transaction:
    return (
        TransactionBuilder(transaction_id, date, description)
        .debit(cash_id, amount, "Cash received from loan")
        .credit(loan_payable_id, amount, "Loan payable")
        .build()
    )


def owner_investment(
    transaction_id, date, description,
    cash_id, equity_id, amount,
) -> Transaction:
    return (
        TransactionBuilder(transaction_id, date, description)
        .debit(cash_id, amount, "Cash invested by owner")
        .credit(equity_id, amount, "Owner's equity contribution")
        .build()
    )


def invoice_with_gst(
    transaction_id, date, description,
    receivables_id, revenue_id, gst_payable_id,
    base_amount, gst_amount,
) -> Transaction:
    """
    A sale that collects GST on behalf of the government.

    Accounting:
        DEBIT  Receivables  (base + GST, what the customer owes)
        CREDIT Revenue      (base, what the business earned)
        CREDIT GST Payable  (GST, owed onward to the government)
    """
    base_amount = to_amount(base_amount)
    gst_amount = to_amount(gst_amount)
    return (
        TransactionBuilder(transaction_id, date, description)
        .debit(receivables_id, base_amount + gst_amount, "Total including GST")
        .credit(revenue_id, base_amount, "Revenue amount")
        .credit(gst_payable_id, gst_amount, "GST payable")
        .build()
    )


def bill_payment_with_gst(
    transaction_id, date, description,
    expense_id, gst_recoverable_id, cash_or_payables_id,
    base_amount, gst_amount,
) -> Transaction:
    """
    A purchase on which input GST can be claimed back.

    Accounting:
        DEBIT  Expense         (base)
        DEBIT  GST Recoverable (GST, input tax credit)
        CREDIT Cash/Payables   (base + GST)
    """
    base_amount = to_amount(base_amount)
    gst_amount = to_amount(gst_amount)
    return (
        TransactionBuilder(transaction_id, date, description)
        .debit(expense_id, base_amount, "Expense amount")
        .debit(gst_recoverable_id, gst_amount, "GST recoverable")
        .credit(cash_or_payables_id, base_amount + gst_amount, "Total payment")
        .build()
    )


def reversal_of(
    original: Transaction,
    transaction_id: str,
    date: datetime.date | None = None,
) -> Transaction:
    """
    Build the offsetting transaction for `original`.

    Every entry is mirrored with its side swapped. The original
    is left untouched.
    """
    builder = TransactionBuilder(
        transaction_id,
        date or original.date,
        f"Reversal: {original.description}",
        reference=original.id,
    )
    for entry in original.entries:
        builder.entry(
            entry.account_id,
            entry.entry_type.opposite,
            entry.amount,
            f"Reversal: {entry.memo}" if entry.memo else None,
        )
    return builder.build()
