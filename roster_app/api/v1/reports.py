"""
Report API Endpoints - labor cost and attendance reports per period.

Implements:
- GET /api/v1/reports/cost-sharing - Net cost of every active project
- GET /api/v1/reports/cost-sharing/{project_id} - Net cost of one project
- GET /api/v1/reports/overview - Financial overview with grand totals
- GET /api/v1/reports/attendance/{project_id} - Monthly attendance report
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session

from roster_app.models import get_db
from roster_app.infrastructure import SqlCostDataStore
from roster_app.domain.services import CostReportService, AttendanceService
from roster_app.domain.exceptions import (
    ProjectNotFoundError,
    RosterNotFoundError,
    StoreUnavailableError,
)

router = APIRouter()


# =============================================================================
# Pydantic Models
# =============================================================================

class CostSharingCalculationResponse(BaseModel):
    """Net cost of one project; money converted to plain numbers."""
    project_id: int
    project_name: str
    original_cost: float
    shared_out: float
    shared_in: float
    net_cost: float


class ProjectOverviewRow(BaseModel):
    project_id: int
    project_name: str
    staff_count: int
    original_cost: float
    net_cost: float


class FinancialOverviewResponse(BaseModel):
    year: int
    month: int
    projects: List[ProjectOverviewRow]
    project_count: int
    grand_total_original: float
    grand_total_net: float


class StaffAttendanceResponse(BaseModel):
    staff_id: int
    staff_name: str
    position: Optional[str]
    wage_per_day: float
    total_work_days: int
    total_absent: int
    total_sick_leave: int
    total_personal_leave: int
    total_vacation: int
    deduction_amount: float
    expected_salary: float
    net_salary: float


class AttendanceReportResponse(BaseModel):
    project_id: int
    project_name: str
    year: int
    month: int
    staff: List[StaffAttendanceResponse]
    total_work_days: int
    total_absent: int
    total_deduction: float
    total_expected_salary: float
    total_net_salary: float


# =============================================================================
# Endpoints
# =============================================================================

@router.get(
    "/cost-sharing",
    response_model=List[CostSharingCalculationResponse],
    summary="Cost breakdown of all active projects"
)
def get_all_projects_cost(
    year: int = Query(..., ge=1, description="Roster year"),
    month: int = Query(..., ge=1, le=12, description="Roster month"),
    sort_by_name: bool = Query(False, description="Sort rows by project name"),
    db: Session = Depends(get_db)
):
    """
    Net cost of every active project after cost sharing.

    Rows come back in store order unless sort_by_name is set.
    """
    service = CostReportService(SqlCostDataStore(db))

    try:
        results = service.get_all_projects_cost_breakdown(year, month)
    except StoreUnavailableError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.message)

    if sort_by_name:
        results = sorted(results, key=lambda r: r.project_name)
    return [r.to_dict() for r in results]


@router.get(
    "/cost-sharing/{project_id}",
    response_model=CostSharingCalculationResponse,
    summary="Cost breakdown of one project"
)
def get_project_cost(
    project_id: int,
    year: int = Query(..., ge=1),
    month: int = Query(..., ge=1, le=12),
    db: Session = Depends(get_db)
):
    service = CostReportService(SqlCostDataStore(db))

    try:
        return service.get_project_cost_breakdown(project_id, year, month).to_dict()
    except ProjectNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except StoreUnavailableError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.message)


@router.get(
    "/overview",
    response_model=FinancialOverviewResponse,
    summary="Financial overview of all active projects"
)
def get_financial_overview(
    year: int = Query(..., ge=1),
    month: int = Query(..., ge=1, le=12),
    db: Session = Depends(get_db)
):
    service = CostReportService(SqlCostDataStore(db))

    try:
        overview = service.financial_overview(year, month)
    except StoreUnavailableError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.message)

    return {
        **overview,
        'projects': [
            {**row, 'original_cost': float(row['original_cost']), 'net_cost': float(row['net_cost'])}
            for row in overview['projects']
        ],
        'grand_total_original': float(overview['grand_total_original']),
        'grand_total_net': float(overview['grand_total_net']),
    }


@router.get(
    "/attendance/{project_id}",
    response_model=AttendanceReportResponse,
    summary="Monthly attendance report"
)
def get_attendance_report(
    project_id: int,
    year: int = Query(..., ge=1),
    month: int = Query(..., ge=1, le=12),
    db: Session = Depends(get_db)
):
    """Worked, absent and leave days per staff member with salary totals."""
    try:
        report = AttendanceService(SqlCostDataStore(db)).monthly_attendance_report(
            project_id, year, month
        )
    except (ProjectNotFoundError, RosterNotFoundError) as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except StoreUnavailableError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.message)

    return {
        'project_id': report.project_id,
        'project_name': report.project_name,
        'year': report.year,
        'month': report.month,
        'staff': [
            {
                'staff_id': s.staff_id,
                'staff_name': s.staff_name,
                'position': s.position,
                'wage_per_day': float(s.wage_per_day),
                'total_work_days': s.total_work_days,
                'total_absent': s.total_absent,
                'total_sick_leave': s.total_sick_leave,
                'total_personal_leave': s.total_personal_leave,
                'total_vacation': s.total_vacation,
                'deduction_amount': float(s.deduction_amount),
                'expected_salary': float(s.expected_salary),
                'net_salary': float(s.net_salary),
            }
            for s in report.staff
        ],
        'total_work_days': report.total_work_days,
        'total_absent': report.total_absent,
        'total_deduction': float(report.total_deduction),
        'total_expected_salary': float(report.total_expected_salary),
        'total_net_salary': float(report.total_net_salary),
    }
