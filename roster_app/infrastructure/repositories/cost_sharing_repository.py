"""
Cost Sharing Repository - Data access for directed sharing edges.
"""
from decimal import Decimal
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from roster_app.models import CostSharing
from roster_app.domain.entities import CostSharingEdge
from .base_repository import BaseRepository


class CostSharingRepository(BaseRepository[CostSharing]):
    """
    Repository for cost-sharing edges.

    Outgoing edges are only ever replaced as a whole set.
    """

    def __init__(self, session: Session):
        super().__init__(session, CostSharing)

    def to_entity(self, model: CostSharing) -> CostSharingEdge:
        return CostSharingEdge(
            source_project_id=model.source_project_id,
            destination_project_id=model.destination_project_id,
            percentage=Decimal(model.percentage),
        )

    def get_outgoing(self, project_id: int) -> List[CostSharing]:
        return self.session.query(CostSharing).filter(
            CostSharing.source_project_id == project_id
        ).order_by(CostSharing.id).all()

    def get_incoming(self, project_id: int) -> List[CostSharing]:
        return self.session.query(CostSharing).filter(
            CostSharing.destination_project_id == project_id
        ).order_by(CostSharing.id).all()

    def get_pair(self, source_id: int, destination_id: int) -> Optional[CostSharing]:
        return self.session.query(CostSharing).filter(
            CostSharing.source_project_id == source_id,
            CostSharing.destination_project_id == destination_id
        ).first()

    def replace_outgoing(self, project_id: int, edges: Iterable[CostSharingEdge]) -> List[CostSharing]:
        """
        Delete all outgoing edges of a project and stage the new ones.

        Caller owns the transaction; nothing is committed here.
        """
        self.session.query(CostSharing).filter(
            CostSharing.source_project_id == project_id
        ).delete(synchronize_session="fetch")
        rows = [
            CostSharing(
                source_project_id=project_id,
                destination_project_id=edge.destination_project_id,
                percentage=edge.percentage,
            )
            for edge in edges
        ]
        return self.add_all(rows)
