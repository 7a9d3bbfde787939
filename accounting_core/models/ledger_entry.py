"""
Ledger entry model.

Each entry is one line of a posted transaction. Entries are
immutable; once posted, they are never modified or deleted.
"""

from decimal import Decimal

from sqlalchemy import String, Integer, Numeric, ForeignKey, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from accounting_core.models.base import Base
from accounting_core.models.enums import EntryType


class LedgerEntry(Base):
    """
    An immutable debit or credit entry in the ledger.

    Within one transaction the sum of DEBIT amounts equals the
    sum of CREDIT amounts. This invariant is enforced by the
    Ledger before anything is written, not by the model.
    """

    __tablename__ = "ledger_entries"

    id: Mapped[int] = mapped_column(primary_key=True)
    transaction_id: Mapped[int] = mapped_column(
        ForeignKey("ledger_transactions.id"), nullable=False, index=True
    )
    # Order of the entry within its transaction
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    account_code: Mapped[str] = mapped_column(
        ForeignKey("ledger_accounts.code"), nullable=False, index=True
    )
    entry_type: Mapped[EntryType] = mapped_column(
        SAEnum(EntryType, name="entry_type_enum"),
        nullable=False,
    )
    amount: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False
    )
    memo: Mapped[str | None] = mapped_column(String(255), nullable=True)

    transaction: Mapped["LedgerTransaction"] = relationship(
        back_populates="entries"
    )

    def __repr__(self) -> str:
        return (
            f"<LedgerEntry {self.entry_type.value} "
            f"{self.amount} {self.account_code}>"
        )
