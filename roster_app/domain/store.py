"""
Cost Data Store - data access contract consumed by the domain services.

Services receive a store instance instead of reaching for a global
database client, so tests can hand in an in-memory implementation.
Implementations raise StoreUnavailableError when persistence fails.
"""
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Tuple

from .entities import (
    ProjectInfo,
    StaffMember,
    ShiftDefinition,
    RosterEntryLine,
    RosterSnapshot,
    CostSharingEdge,
)


class CostDataStore(ABC):
    """Abstract store over projects, staff, rosters and sharing edges."""

    # =========================================================================
    # Projects and Staff
    # =========================================================================

    @abstractmethod
    def find_project_by_id(self, project_id: int) -> Optional[ProjectInfo]:
        pass

    @abstractmethod
    def find_active_projects(self) -> List[ProjectInfo]:
        pass

    @abstractmethod
    def deactivate_project(self, project_id: int) -> bool:
        """Soft delete; False when the project does not exist."""
        pass

    @abstractmethod
    def find_staff_by_id(self, staff_id: int) -> Optional[StaffMember]:
        pass

    @abstractmethod
    def find_staff_by_project(self, project_id: int) -> List[StaffMember]:
        """All staff of a project, inactive included."""
        pass

    @abstractmethod
    def find_shift_types(self) -> List[ShiftDefinition]:
        pass

    # =========================================================================
    # Cost Sharing Edges
    # =========================================================================

    @abstractmethod
    def find_outgoing_edges(self, project_id: int) -> List[CostSharingEdge]:
        pass

    @abstractmethod
    def find_incoming_edges(self, project_id: int) -> List[CostSharingEdge]:
        pass

    @abstractmethod
    def find_edge(self, source_id: int, destination_id: int) -> Optional[CostSharingEdge]:
        pass

    @abstractmethod
    def find_all_edges(self) -> List[CostSharingEdge]:
        pass

    @abstractmethod
    def replace_outgoing_edges(self, project_id: int, edges: Iterable[CostSharingEdge]) -> None:
        """Atomically delete every outgoing edge of project_id and insert edges."""
        pass

    @abstractmethod
    def lock_sharing_graph(self) -> None:
        """Hold writers of sharing edges off until the current transaction ends."""
        pass

    # =========================================================================
    # Rosters
    # =========================================================================

    @abstractmethod
    def find_roster(self, project_id: int, year: int, month: int) -> Optional[RosterSnapshot]:
        """Roster for the period with entries joined to staff wage, or None."""
        pass

    @abstractmethod
    def find_roster_by_id(self, roster_id: int) -> Optional[RosterSnapshot]:
        pass

    @abstractmethod
    def upsert_roster_entry(
        self,
        roster_id: int,
        staff_id: int,
        day: int,
        shift_code: str,
        notes: Optional[str] = None
    ) -> RosterEntryLine:
        pass

    @abstractmethod
    def delete_roster_entry(self, roster_id: int, staff_id: int, day: int) -> bool:
        """Delete one entry; False when nothing matched."""
        pass

    @abstractmethod
    def replace_roster(
        self,
        project_id: int,
        year: int,
        month: int,
        entries: Iterable[RosterEntryLine]
    ) -> Tuple[int, int]:
        """
        Create the period's roster if missing and replace all its entries,
        in one transaction. Returns (roster_id, entry count).
        """
        pass
