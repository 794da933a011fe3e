"""FastAPI application setup for the Tripz deal service."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from .api import HOLIDAY_SOURCE, router as api_router
from .config import settings
from utils.logging_utils import get_tagged_logger, setup_logging

setup_logging(level=settings.log_level, job_name="tripz_api")
logger = get_tagged_logger(__name__, tag="app/main")


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Make sure the holiday table exists before serving."""
    HOLIDAY_SOURCE.ensure_schema()
    logger.info("Tripz API ready")
    yield


app = FastAPI(title="Tripz Deals", lifespan=lifespan)

# API routes
app.include_router(api_router, prefix="/api")
