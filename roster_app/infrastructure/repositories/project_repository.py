"""
Project Repository - Data access for projects, staff and shift types.
"""
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from roster_app.models import Project, Staff, ShiftType
from roster_app.domain.entities import ProjectInfo, StaffMember, ShiftDefinition
from .base_repository import BaseRepository


class ProjectRepository(BaseRepository[Project]):
    """Repository for projects. Projects are soft-deleted, never removed."""

    def __init__(self, session: Session):
        super().__init__(session, Project)

    def to_entity(self, model: Project) -> ProjectInfo:
        return ProjectInfo(
            id=model.id,
            name=model.name,
            is_active=bool(model.is_active),
            edit_cutoff_day=model.edit_cutoff_day,
            edit_cutoff_next_month=bool(model.edit_cutoff_next_month),
        )

    def get_active(self) -> List[Project]:
        """Active projects in primary key order."""
        return self.session.query(Project).filter(
            Project.is_active.is_(True)
        ).order_by(Project.id).all()

    def lock_all(self) -> None:
        """SELECT ... FOR UPDATE over every project row; ignored by SQLite."""
        self.session.query(Project.id).with_for_update().all()

    def deactivate(self, project_id: int) -> Optional[Project]:
        """Soft delete: flip is_active, keep cost history intact."""
        project = self.get_by_id(project_id)
        if project is not None:
            project.is_active = False
        return project


class StaffRepository(BaseRepository[Staff]):
    """Repository for staff members."""

    def __init__(self, session: Session):
        super().__init__(session, Staff)

    def to_entity(self, model: Staff) -> StaffMember:
        return StaffMember(
            id=model.id,
            name=model.name,
            project_id=model.project_id,
            wage_per_day=Decimal(model.wage_per_day),
            position=model.position,
            is_active=bool(model.is_active),
        )

    def get_by_project(self, project_id: int) -> List[Staff]:
        return self.session.query(Staff).filter(
            Staff.project_id == project_id
        ).order_by(Staff.id).all()


class ShiftTypeRepository(BaseRepository[ShiftType]):
    """Repository for shift type definitions."""

    def __init__(self, session: Session):
        super().__init__(session, ShiftType)

    def to_entity(self, model: ShiftType) -> ShiftDefinition:
        return ShiftDefinition(
            code=model.code,
            name=model.name,
            is_work_shift=bool(model.is_work_shift),
        )
