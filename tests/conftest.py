"""
Shared fixtures: in-memory fake store and SQLite-backed sessions.
"""
import os

# Point the module-level engine at a throwaway database before any import
os.environ.setdefault("ROSTER_DATABASE_URL", "sqlite:///:memory:")

from dataclasses import replace
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Set, Tuple

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from roster_app.models import Base, Project, Staff, ShiftType
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


WORK_SHIFTS = [
    ShiftDefinition(code="1", name="Morning", is_work_shift=True),
    ShiftDefinition(code="2", name="Afternoon", is_work_shift=True),
    ShiftDefinition(code="ดึก", name="Night", is_work_shift=True),
    ShiftDefinition(code="OFF", name="Day off", is_work_shift=False),
    ShiftDefinition(code="ขาด", name="Absent", is_work_shift=False),
    ShiftDefinition(code="ลา", name="Vacation", is_work_shift=False),
    ShiftDefinition(code="ป่วย", name="Sick", is_work_shift=False),
    ShiftDefinition(code="กิจ", name="Personal", is_work_shift=False),
]


class InMemoryCostDataStore(CostDataStore):
    """Dict-backed store for exercising the services without a database."""

    def __init__(self, shift_types: Optional[List[ShiftDefinition]] = None):
        self.projects: Dict[int, ProjectInfo] = {}
        self.staff: Dict[int, StaffMember] = {}
        self.shift_types: List[ShiftDefinition] = list(WORK_SHIFTS if shift_types is None else shift_types)
        self.edges: List[CostSharingEdge] = []
        self.rosters: Dict[int, dict] = {}
        self.failing_rosters: Set[int] = set()
        self.roster_reads: List[int] = []
        self.events: List[str] = []

    # Builders

    def add_project(self, project_id: int, name: str = None, **kwargs) -> ProjectInfo:
        project = ProjectInfo(id=project_id, name=name or f"Project {project_id}", **kwargs)
        self.projects[project_id] = project
        return project

    def add_staff(self, staff_id: int, project_id: int, wage, name: str = None, **kwargs) -> StaffMember:
        member = StaffMember(
            id=staff_id,
            name=name or f"Staff {staff_id}",
            project_id=project_id,
            wage_per_day=Decimal(str(wage)),
            **kwargs
        )
        self.staff[staff_id] = member
        return member

    def add_roster(self, project_id: int, year: int, month: int, cells: Iterable[Tuple[int, int, str]] = ()) -> int:
        roster_id = len(self.rosters) + 1
        self.rosters[roster_id] = {
            'project_id': project_id,
            'year': year,
            'month': month,
            'cells': {(staff_id, day): (code, None) for staff_id, day, code in cells},
        }
        return roster_id

    def add_edge(self, source_id: int, destination_id: int, percentage) -> None:
        self.edges.append(CostSharingEdge(source_id, destination_id, Decimal(str(percentage))))

    def _snapshot(self, roster_id: int) -> RosterSnapshot:
        roster = self.rosters[roster_id]
        entries = []
        for (staff_id, day), (code, notes) in sorted(roster['cells'].items()):
            member = self.staff[staff_id]
            entries.append(RosterEntryLine(
                staff_id=staff_id,
                day=day,
                shift_code=code,
                wage_per_day=member.wage_per_day,
                staff_name=member.name,
                notes=notes,
            ))
        return RosterSnapshot(
            id=roster_id,
            project_id=roster['project_id'],
            year=roster['year'],
            month=roster['month'],
            entries=tuple(entries),
        )

    # CostDataStore

    def find_project_by_id(self, project_id):
        return self.projects.get(project_id)

    def find_active_projects(self):
        return [p for p in self.projects.values() if p.is_active]

    def deactivate_project(self, project_id):
        if project_id not in self.projects:
            return False
        self.projects[project_id] = replace(self.projects[project_id], is_active=False)
        return True

    def find_staff_by_id(self, staff_id):
        return self.staff.get(staff_id)

    def find_staff_by_project(self, project_id):
        return [s for s in self.staff.values() if s.project_id == project_id]

    def find_shift_types(self):
        return list(self.shift_types)

    def find_outgoing_edges(self, project_id):
        return [e for e in self.edges if e.source_project_id == project_id]

    def find_incoming_edges(self, project_id):
        return [e for e in self.edges if e.destination_project_id == project_id]

    def find_edge(self, source_id, destination_id):
        for edge in self.edges:
            if edge.source_project_id == source_id and edge.destination_project_id == destination_id:
                return edge
        return None

    def find_all_edges(self):
        self.events.append("read_edges")
        return list(self.edges)

    def lock_sharing_graph(self):
        self.events.append("lock")

    def replace_outgoing_edges(self, project_id, edges):
        kept = [e for e in self.edges if e.source_project_id != project_id]
        self.edges = kept + list(edges)

    def find_roster(self, project_id, year, month):
        self.roster_reads.append(project_id)
        if project_id in self.failing_rosters:
            raise StoreUnavailableError("find_roster", "connection reset")
        for roster_id, roster in self.rosters.items():
            if (roster['project_id'], roster['year'], roster['month']) == (project_id, year, month):
                return self._snapshot(roster_id)
        return None

    def find_roster_by_id(self, roster_id):
        if roster_id not in self.rosters:
            return None
        return self._snapshot(roster_id)

    def upsert_roster_entry(self, roster_id, staff_id, day, shift_code, notes=None):
        self.rosters[roster_id]['cells'][(staff_id, day)] = (shift_code, notes)
        member = self.staff[staff_id]
        return RosterEntryLine(staff_id, day, shift_code, member.wage_per_day, member.name, notes)

    def delete_roster_entry(self, roster_id, staff_id, day):
        return self.rosters[roster_id]['cells'].pop((staff_id, day), None) is not None

    def replace_roster(self, project_id, year, month, entries):
        existing = self.find_roster(project_id, year, month)
        roster_id = existing.id if existing else self.add_roster(project_id, year, month)
        cells = {(e.staff_id, e.day): (e.shift_code, e.notes) for e in entries}
        self.rosters[roster_id]['cells'] = cells
        return roster_id, len(cells)


def month_cells(staff_id: int, work_days: int, days: int = 31, work_code: str = "1", off_code: str = "OFF"):
    """Roster cells for one staff: work_days working shifts then days off."""
    return [
        (staff_id, day, work_code if day <= work_days else off_code)
        for day in range(1, days + 1)
    ]


@pytest.fixture
def store():
    return InMemoryCostDataStore()


# =============================================================================
# SQLite fixtures
# =============================================================================

@pytest.fixture(scope="function")
def sql_engine():
    """Fresh in-memory database shared across sessions of one test."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(sql_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=sql_engine)


@pytest.fixture(scope="function")
def test_db(session_factory):
    """Session with two projects, three staff and the work shift types."""
    session = session_factory()

    for shift in WORK_SHIFTS:
        session.add(ShiftType(code=shift.code, name=shift.name, is_work_shift=shift.is_work_shift))

    alpha = Project(name="Alpha Site", edit_cutoff_day=5, edit_cutoff_next_month=True)
    beta = Project(name="Beta Site", edit_cutoff_day=5, edit_cutoff_next_month=True)
    session.add_all([alpha, beta])
    session.flush()

    session.add_all([
        Staff(name="Somchai", wage_per_day=Decimal("450.00"), project_id=alpha.id),
        Staff(name="Malee", wage_per_day=Decimal("400.00"), project_id=alpha.id),
        Staff(name="Niran", wage_per_day=Decimal("500.00"), project_id=beta.id),
    ])
    session.commit()

    yield session

    session.close()
