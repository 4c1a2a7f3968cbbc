"""
Roster API Endpoints - shift entry writes.

Implements:
- PUT /api/v1/rosters/{roster_id}/entries - Set one staff/day shift
- DELETE /api/v1/rosters/{roster_id}/entries - Clear one staff/day shift
- POST /api/v1/rosters/import - Replace a whole month of entries
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from roster_app.models import get_db
from roster_app.infrastructure import SqlCostDataStore
from roster_app.domain.entities import RosterEntryLine
from roster_app.domain.services import RosterService
from roster_app.domain.exceptions import (
    DomainError,
    NotFoundError,
    EditWindowClosedError,
    ValidationError,
    StoreUnavailableError,
)

router = APIRouter()


# =============================================================================
# Pydantic Models
# =============================================================================

class RosterEntryUpdate(BaseModel):
    staff_id: int
    day: int = Field(..., ge=1, le=31)
    shift_code: str = Field(..., min_length=1, max_length=20)
    notes: Optional[str] = Field(None, max_length=500)


class RosterEntryResponse(BaseModel):
    staff_id: int
    staff_name: str
    day: int
    shift_code: str
    notes: Optional[str]


class RosterImportEntry(BaseModel):
    staff_id: int
    day: int
    shift_code: str
    notes: Optional[str] = None


class RosterImportRequest(BaseModel):
    project_id: int
    year: int = Field(..., ge=1)
    month: int = Field(..., ge=1, le=12)
    entries: List[RosterImportEntry]


class RosterImportResponse(BaseModel):
    success: bool
    roster_id: int
    count: int


def _to_http(e: DomainError) -> HTTPException:
    """Map roster write errors onto HTTP status codes."""
    if isinstance(e, NotFoundError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(e, EditWindowClosedError):
        code = status.HTTP_403_FORBIDDEN
    elif isinstance(e, ValidationError):
        code = status.HTTP_400_BAD_REQUEST
    elif isinstance(e, StoreUnavailableError):
        code = status.HTTP_503_SERVICE_UNAVAILABLE
    else:
        code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return HTTPException(status_code=code, detail=e.message)


# =============================================================================
# Endpoints
# =============================================================================

@router.put(
    "/{roster_id}/entries",
    response_model=RosterEntryResponse,
    summary="Set the shift of one staff member on one day"
)
def upsert_roster_entry(
    roster_id: int,
    entry: RosterEntryUpdate,
    db: Session = Depends(get_db)
):
    service = RosterService(SqlCostDataStore(db))

    try:
        line = service.upsert_entry(
            roster_id, entry.staff_id, entry.day, entry.shift_code, entry.notes
        )
    except DomainError as e:
        raise _to_http(e)

    return {
        'staff_id': line.staff_id,
        'staff_name': line.staff_name,
        'day': line.day,
        'shift_code': line.shift_code,
        'notes': line.notes,
    }


@router.delete(
    "/{roster_id}/entries",
    summary="Clear the shift of one staff member on one day"
)
def delete_roster_entry(
    roster_id: int,
    staff_id: int = Query(...),
    day: int = Query(..., ge=1, le=31),
    db: Session = Depends(get_db)
):
    service = RosterService(SqlCostDataStore(db))

    try:
        deleted = service.delete_entry(roster_id, staff_id, day)
    except DomainError as e:
        raise _to_http(e)

    return {'success': True, 'deleted': deleted}


@router.post(
    "/import",
    response_model=RosterImportResponse,
    summary="Import a full month of roster entries",
    description="Validates every entry, then atomically replaces the roster's entries."
)
def import_roster(
    request: RosterImportRequest,
    db: Session = Depends(get_db)
):
    service = RosterService(SqlCostDataStore(db))
    entries = [
        RosterEntryLine(
            staff_id=e.staff_id,
            day=e.day,
            shift_code=e.shift_code,
            notes=e.notes,
        )
        for e in request.entries
    ]

    try:
        roster_id, count = service.import_roster(
            request.project_id, request.year, request.month, entries
        )
    except DomainError as e:
        raise _to_http(e)

    return {'success': True, 'roster_id': roster_id, 'count': count}
