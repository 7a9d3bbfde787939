"""
Accounting Core: FastAPI application.

An optional HTTP surface over the library. All routers are
registered here.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from accounting_core.config import get_settings
from accounting_core.api.health import router as health_router
from accounting_core.api.ledger import router as ledger_router
from accounting_core.api.gst import router as gst_router
from accounting_core.models.base import init_db

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create any missing ledger tables on startup."""
    init_db()
    yield


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Double-entry bookkeeping and GST calculations",
    lifespan=lifespan,
)


# Register routers
app.include_router(health_router)
app.include_router(ledger_router)
app.include_router(gst_router)
