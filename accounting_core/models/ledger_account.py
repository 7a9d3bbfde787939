"""
Ledger account model (chart of accounts).

The caller-assigned account id is stored as `code`; the
integer primary key only records insertion order.
"""

from datetime import datetime

from sqlalchemy import String, DateTime, ForeignKey, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from accounting_core.models.base import Base
from accounting_core.models.enums import AccountType


class LedgerAccount(Base):
    """
    A single account in the chart of accounts.

    Accounts are never deleted, and account_type never changes
    once the row exists.
    """

    __tablename__ = "ledger_accounts"

    id: Mapped[int] = mapped_column(primary_key=True)
    code: Mapped[str] = mapped_column(
        String(50), unique=True, nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    account_type: Mapped[AccountType] = mapped_column(
        SAEnum(AccountType, name="account_type_enum"),
        nullable=False,
    )
    parent_code: Mapped[str | None] = mapped_column(
        ForeignKey("ledger_accounts.code"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    def __repr__(self) -> str:
        return f"<LedgerAccount {self.code} ({self.account_type.value})>"
