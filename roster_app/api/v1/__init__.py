"""
API v1 - REST endpoints for roster costing.

Implements the API contracts:
- Report endpoints (cost sharing breakdowns, overview, attendance)
- Project endpoints (cost-sharing configuration, soft delete)
- Roster endpoints (entry upsert/delete, monthly import)
"""
from fastapi import APIRouter

from .reports import router as reports_router
from .projects import router as projects_router
from .rosters import router as rosters_router

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(reports_router, prefix="/reports", tags=["Reports"])
api_router.include_router(projects_router, prefix="/projects", tags=["Projects"])
api_router.include_router(rosters_router, prefix="/rosters", tags=["Rosters"])
