"""
Shared enumerations.

Using Python enums mapped to database enums ensures that
only valid values can be stored. An invalid account_type
or entry_type is caught at the database level, not just
in Python validation.
"""

import enum
from decimal import Decimal


class EntryType(str, enum.Enum):
    """Direction of a ledger entry."""
    DEBIT = "DEBIT"
    CREDIT = "CREDIT"

    @property
    def opposite(self) -> "EntryType":
        if self is EntryType.DEBIT:
            return EntryType.CREDIT
        return EntryType.DEBIT


class AccountType(str, enum.Enum):
    """The five fundamental accounting categories."""
    ASSET = "ASSET"
    LIABILITY = "LIABILITY"
    EQUITY = "EQUITY"
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"

    @property
    def normal_balance(self) -> EntryType:
        """
        The side on which this account type's balance is positive.

        Assets and expenses grow with debits; liabilities, equity
        and income grow with credits.
        """
        return NORMAL_BALANCE[self]


NORMAL_BALANCE: dict[AccountType, EntryType] = {
    AccountType.ASSET: EntryType.DEBIT,
    AccountType.EXPENSE: EntryType.DEBIT,
    AccountType.LIABILITY: EntryType.CREDIT,
    AccountType.EQUITY: EntryType.CREDIT,
    AccountType.INCOME: EntryType.CREDIT,
}


class GstCategory(str, enum.Enum):
    """Standard GST slabs for goods and services."""
    NIL = "NIL"
    LOWER = "LOWER"
    STANDARD = "STANDARD"
    HIGHER = "HIGHER"
    LUXURY = "LUXURY"

    @property
    def rate(self) -> Decimal:
        return GST_CATEGORY_RATES[self]


# Rates are fractions of the base amount (0.18 == 18%)
GST_CATEGORY_RATES: dict[GstCategory, Decimal] = {
    GstCategory.NIL: Decimal("0"),
    GstCategory.LOWER: Decimal("0.05"),
    GstCategory.STANDARD: Decimal("0.12"),
    GstCategory.HIGHER: Decimal("0.18"),
    GstCategory.LUXURY: Decimal("0.28"),
}
