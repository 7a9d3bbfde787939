"""
Posted transaction model.

Holds the header of a transaction (date, description,
reference); its lines live in ledger_entries. The
caller-assigned id is stored as `external_id` and is unique.
"""

import datetime

from sqlalchemy import String, Date, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship

from accounting_core.models.base import Base


class LedgerTransaction(Base):
    __tablename__ = "ledger_transactions"

    id: Mapped[int] = mapped_column(primary_key=True)
    external_id: Mapped[str] = mapped_column(
        String(50), unique=True, nullable=False, index=True
    )
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False, index=True)
    description: Mapped[str] = mapped_column(String(500), nullable=False)
    reference: Mapped[str | None] = mapped_column(
        String(100), nullable=True
    )
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.datetime.utcnow
    )

    entries: Mapped[list["LedgerEntry"]] = relationship(
        back_populates="transaction",
        order_by="LedgerEntry.position",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<LedgerTransaction {self.external_id} {self.date}>"
