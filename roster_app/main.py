"""
Main FastAPI Application for Roster Cost App.
Serves the REST API over the roster cost engine.
"""
import logging

from fastapi import FastAPI

from roster_app.config import configure_logging
from roster_app.models import init_db, ensure_default_shift_types
from roster_app.api.v1 import api_router as v1_router

logger = logging.getLogger(__name__)

configure_logging()

# Initialize FastAPI app
app = FastAPI(
    title="Roster Cost App",
    description="Staff rosters and labor cost allocation with cost sharing across projects",
    version="1.0.0"
)

app.include_router(v1_router)


@app.on_event("startup")
def startup():
    """Create tables and seed default shift types."""
    init_db()
    ensure_default_shift_types()
    logger.info("Roster Cost App started")


@app.get("/health")
def health():
    return {"status": "ok"}
