"""
Shared FastAPI dependencies and error mapping.
"""

from fastapi import Depends, HTTPException
from sqlalchemy.orm import Session

from accounting_core.errors import (
    LedgerError,
    LedgerIntegrityError,
    NotFoundError,
    StorageError,
)
from accounting_core.models.base import get_db
from accounting_core.services.gst_service import GstCalculator
from accounting_core.services.ledger_service import Ledger
from accounting_core.storage.sql import SqlStorage


def get_ledger(db: Session = Depends(get_db)) -> Ledger:
    """A ledger over the request's database session."""
    return Ledger(SqlStorage(db))


def get_gst_calculator() -> GstCalculator:
    return GstCalculator()


def http_error(error: LedgerError) -> HTTPException:
    """Translate a ledger error into the matching HTTP status."""
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, (LedgerIntegrityError, StorageError)):
        return HTTPException(status_code=500, detail=str(error))
    return HTTPException(status_code=400, detail=str(error))
