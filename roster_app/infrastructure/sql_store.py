"""
SQLAlchemy Cost Data Store - CostDataStore backed by a database session.

Reads return domain entities, never ORM rows. Each write runs in its own
transaction: committed on success, rolled back on any error. Database
failures surface as StoreUnavailableError with the driver error chained.
"""
import logging
from contextlib import contextmanager
from typing import Iterable, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from roster_app.domain.entities import (
    ProjectInfo,
    StaffMember,
    ShiftDefinition,
    RosterEntryLine,
    RosterSnapshot,
    CostSharingEdge,
)
from roster_app.domain.exceptions import StoreUnavailableError
from roster_app.domain.store import CostDataStore
from .repositories import (
    ProjectRepository,
    StaffRepository,
    ShiftTypeRepository,
    RosterRepository,
    CostSharingRepository,
)

logger = logging.getLogger(__name__)


class SqlCostDataStore(CostDataStore):
    """CostDataStore implementation over a SQLAlchemy session."""

    def __init__(self, session: Session):
        self.session = session
        self.project_repo = ProjectRepository(session)
        self.staff_repo = StaffRepository(session)
        self.shift_repo = ShiftTypeRepository(session)
        self.roster_repo = RosterRepository(session)
        self.sharing_repo = CostSharingRepository(session)

    @contextmanager
    def _reading(self, operation: str):
        try:
            yield
        except SQLAlchemyError as e:
            logger.error(f"Store read '{operation}' failed: {e}")
            raise StoreUnavailableError(operation, str(e)) from e

    @contextmanager
    def _writing(self, operation: str):
        try:
            yield
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Store write '{operation}' failed, rolled back: {e}")
            raise StoreUnavailableError(operation, str(e)) from e
        except Exception:
            self.session.rollback()
            raise

    # =========================================================================
    # Projects and Staff
    # =========================================================================

    def find_project_by_id(self, project_id: int) -> Optional[ProjectInfo]:
        with self._reading("find_project_by_id"):
            project = self.project_repo.get_by_id(project_id)
            return self.project_repo.to_entity(project) if project else None

    def find_active_projects(self) -> List[ProjectInfo]:
        with self._reading("find_active_projects"):
            return self.project_repo.to_entities(self.project_repo.get_active())

    def deactivate_project(self, project_id: int) -> bool:
        with self._writing("deactivate_project"):
            project = self.project_repo.deactivate(project_id)
        return project is not None

    def find_staff_by_id(self, staff_id: int) -> Optional[StaffMember]:
        with self._reading("find_staff_by_id"):
            staff = self.staff_repo.get_by_id(staff_id)
            return self.staff_repo.to_entity(staff) if staff else None

    def find_staff_by_project(self, project_id: int) -> List[StaffMember]:
        with self._reading("find_staff_by_project"):
            return self.staff_repo.to_entities(self.staff_repo.get_by_project(project_id))

    def find_shift_types(self) -> List[ShiftDefinition]:
        with self._reading("find_shift_types"):
            return self.shift_repo.to_entities(self.shift_repo.get_all())

    # =========================================================================
    # Cost Sharing Edges
    # =========================================================================

    def find_outgoing_edges(self, project_id: int) -> List[CostSharingEdge]:
        with self._reading("find_outgoing_edges"):
            return self.sharing_repo.to_entities(self.sharing_repo.get_outgoing(project_id))

    def find_incoming_edges(self, project_id: int) -> List[CostSharingEdge]:
        with self._reading("find_incoming_edges"):
            return self.sharing_repo.to_entities(self.sharing_repo.get_incoming(project_id))

    def find_edge(self, source_id: int, destination_id: int) -> Optional[CostSharingEdge]:
        with self._reading("find_edge"):
            edge = self.sharing_repo.get_pair(source_id, destination_id)
            return self.sharing_repo.to_entity(edge) if edge else None

    def find_all_edges(self) -> List[CostSharingEdge]:
        with self._reading("find_all_edges"):
            return self.sharing_repo.to_entities(self.sharing_repo.get_all())

    def replace_outgoing_edges(self, project_id: int, edges: Iterable[CostSharingEdge]) -> None:
        with self._writing("replace_outgoing_edges"):
            self.sharing_repo.replace_outgoing(project_id, list(edges))

    def lock_sharing_graph(self) -> None:
        with self._reading("lock_sharing_graph"):
            self.project_repo.lock_all()

    # =========================================================================
    # Rosters
    # =========================================================================

    def find_roster(self, project_id: int, year: int, month: int) -> Optional[RosterSnapshot]:
        with self._reading("find_roster"):
            roster = self.roster_repo.get_for_period(project_id, year, month)
            return self.roster_repo.to_entity(roster) if roster else None

    def find_roster_by_id(self, roster_id: int) -> Optional[RosterSnapshot]:
        with self._reading("find_roster_by_id"):
            roster = self.roster_repo.get_with_entries(roster_id)
            return self.roster_repo.to_entity(roster) if roster else None

    def upsert_roster_entry(
        self,
        roster_id: int,
        staff_id: int,
        day: int,
        shift_code: str,
        notes: Optional[str] = None
    ) -> RosterEntryLine:
        with self._writing("upsert_roster_entry"):
            entry = self.roster_repo.upsert_entry(roster_id, staff_id, day, shift_code, notes)
            line = self.roster_repo.entry_to_line(entry)
        return line

    def delete_roster_entry(self, roster_id: int, staff_id: int, day: int) -> bool:
        with self._writing("delete_roster_entry"):
            entry = self.roster_repo.get_entry(roster_id, staff_id, day)
            if entry is not None:
                self.roster_repo.delete(entry)
        return entry is not None

    def replace_roster(
        self,
        project_id: int,
        year: int,
        month: int,
        entries: Iterable[RosterEntryLine]
    ) -> Tuple[int, int]:
        with self._writing("replace_roster"):
            roster = self.roster_repo.get_for_period(project_id, year, month)
            if roster is None:
                roster = self.roster_repo.create(project_id, year, month)
            roster_id = roster.id
            count = self.roster_repo.replace_entries(roster_id, list(entries))
        return roster_id, count
