"""
Database engine, session management, and base model.

Only the SQL storage backend and the HTTP surface use this
module. The ledger core itself never touches a session; it
talks to whatever LedgerStorage it was given.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from accounting_core.config import get_settings

settings = get_settings()


def _connect_args(url: str) -> dict:
    # SQLite connections are bound to their creating thread unless
    # told otherwise; FastAPI runs sync endpoints in a thread pool.
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


# --- Engine ---
# pool_pre_ping=True tests connections before using them,
# which handles cases where the database restarted or a
# connection went stale.
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    connect_args=_connect_args(settings.DATABASE_URL),
)

# --- Session Factory ---
# autocommit=False means the storage layer explicitly controls
# when changes are saved, so a transaction and its entries are
# written all-or-nothing.
SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


# --- Base Model Class ---
class Base(DeclarativeBase):
    pass


def init_db(bind=None) -> None:
    """Create every ledger table that does not exist yet."""
    Base.metadata.create_all(bind=bind or engine)


# --- Dependency for FastAPI ---
def get_db():
    """
    Provide a database session for a single request.

    The try/finally pattern ensures the session is always
    closed, preventing connection leaks.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
