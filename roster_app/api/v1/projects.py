"""
Project API Endpoints - cost-sharing configuration and soft delete.

Implements:
- GET /api/v1/projects/{project_id}/cost-sharing - Outgoing and incoming edges
- PUT /api/v1/projects/{project_id}/cost-sharing - Replace outgoing edges
- POST /api/v1/projects/cost-sharing/validate - Check one edge for cycles
- DELETE /api/v1/projects/{project_id} - Deactivate (soft delete)
"""
from decimal import Decimal
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from roster_app.models import get_db
from roster_app.infrastructure import SqlCostDataStore
from roster_app.domain.entities import CostSharingEdge
from roster_app.domain.services import CostSharingService
from roster_app.domain.exceptions import (
    ProjectNotFoundError,
    CostSharingCycleError,
    InvalidPercentageError,
    ValidationError,
    StoreUnavailableError,
)

router = APIRouter()


# =============================================================================
# Pydantic Models
# =============================================================================

class CostSharingShare(BaseModel):
    """One outgoing share of the project's cost."""
    destination_project_id: int = Field(..., description="Project receiving the cost")
    percentage: Decimal = Field(..., description="Share of the source cost, in (0, 100]")


class CostSharingUpdate(BaseModel):
    """Full replacement set of outgoing shares (empty list clears sharing)."""
    shares: List[CostSharingShare] = Field(default_factory=list)


class CostSharingEdgeResponse(BaseModel):
    source_project_id: int
    destination_project_id: int
    percentage: float


class ProjectCostSharingResponse(BaseModel):
    project_id: int
    outgoing: List[CostSharingEdgeResponse]
    incoming: List[CostSharingEdgeResponse]


class EdgeValidationRequest(BaseModel):
    source_project_id: int
    destination_project_id: int


class EdgeValidationResponse(BaseModel):
    valid: bool
    detail: str = ""


def _edge_dict(edge: CostSharingEdge) -> dict:
    return {
        'source_project_id': edge.source_project_id,
        'destination_project_id': edge.destination_project_id,
        'percentage': float(edge.percentage),
    }


# =============================================================================
# Endpoints
# =============================================================================

@router.post(
    "/cost-sharing/validate",
    response_model=EdgeValidationResponse,
    summary="Validate a new cost-sharing edge"
)
def validate_cost_sharing_edge(
    request: EdgeValidationRequest,
    db: Session = Depends(get_db)
):
    """Returns valid=True, or 409 when the edge would close a cycle."""
    service = CostSharingService(SqlCostDataStore(db))

    try:
        service.validate_new_edge(request.source_project_id, request.destination_project_id)
    except CostSharingCycleError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except StoreUnavailableError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.message)

    return {'valid': True}


@router.get(
    "/{project_id}/cost-sharing",
    response_model=ProjectCostSharingResponse,
    summary="Get cost-sharing edges of a project"
)
def get_project_cost_sharing(
    project_id: int,
    db: Session = Depends(get_db)
):
    store = SqlCostDataStore(db)

    try:
        if store.find_project_by_id(project_id) is None:
            raise ProjectNotFoundError(project_id)
        return {
            'project_id': project_id,
            'outgoing': [_edge_dict(e) for e in store.find_outgoing_edges(project_id)],
            'incoming': [_edge_dict(e) for e in store.find_incoming_edges(project_id)],
        }
    except ProjectNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except StoreUnavailableError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.message)


@router.put(
    "/{project_id}/cost-sharing",
    response_model=ProjectCostSharingResponse,
    summary="Replace outgoing cost-sharing edges",
    description="Deletes every outgoing edge of the project and stores the given set. "
                "Nothing changes when any share is rejected."
)
def replace_project_cost_sharing(
    project_id: int,
    update: CostSharingUpdate,
    db: Session = Depends(get_db)
):
    store = SqlCostDataStore(db)
    service = CostSharingService(store)

    edges = [
        CostSharingEdge(
            source_project_id=project_id,
            destination_project_id=share.destination_project_id,
            percentage=share.percentage,
        )
        for share in update.shares
    ]

    try:
        service.replace_outgoing_edges(project_id, edges)
        return {
            'project_id': project_id,
            'outgoing': [_edge_dict(e) for e in store.find_outgoing_edges(project_id)],
            'incoming': [_edge_dict(e) for e in store.find_incoming_edges(project_id)],
        }
    except ProjectNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except CostSharingCycleError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message)
    except InvalidPercentageError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.message)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except StoreUnavailableError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.message)


@router.delete(
    "/{project_id}",
    summary="Deactivate a project",
    description="Soft delete; cost history keeps referencing the project."
)
def deactivate_project(
    project_id: int,
    db: Session = Depends(get_db)
):
    try:
        if not SqlCostDataStore(db).deactivate_project(project_id):
            raise ProjectNotFoundError(project_id)
    except ProjectNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except StoreUnavailableError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.message)

    return {'success': True, 'project_id': project_id}
