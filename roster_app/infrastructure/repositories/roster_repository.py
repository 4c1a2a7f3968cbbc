"""
Roster Repository - Data access for monthly rosters and their entries.
"""
from decimal import Decimal
from typing import Iterable, Optional

from sqlalchemy.orm import Session, joinedload

from roster_app.models import Roster, RosterEntry
from roster_app.domain.entities import RosterEntryLine, RosterSnapshot
from .base_repository import BaseRepository


class RosterRepository(BaseRepository[Roster]):
    """
    Repository for rosters.

    INVARIANT: one roster per (project, year, month),
    one entry per (roster, staff, day)
    """

    def __init__(self, session: Session):
        super().__init__(session, Roster)

    @staticmethod
    def entry_to_line(entry: RosterEntry) -> RosterEntryLine:
        return RosterEntryLine(
            staff_id=entry.staff_id,
            day=entry.day,
            shift_code=entry.shift_code,
            wage_per_day=Decimal(entry.staff.wage_per_day),
            staff_name=entry.staff.name,
            notes=entry.notes,
        )

    def to_entity(self, model: Roster) -> RosterSnapshot:
        entries = sorted(model.entries, key=lambda e: (e.staff_id, e.day))
        return RosterSnapshot(
            id=model.id,
            project_id=model.project_id,
            year=model.year,
            month=model.month,
            entries=tuple(self.entry_to_line(e) for e in entries),
        )

    def _with_entries(self):
        return self.session.query(Roster).options(
            joinedload(Roster.entries).joinedload(RosterEntry.staff)
        )

    def get_for_period(self, project_id: int, year: int, month: int) -> Optional[Roster]:
        """Roster for a project and period with entries and staff eagerly loaded."""
        return self._with_entries().filter(
            Roster.project_id == project_id,
            Roster.year == year,
            Roster.month == month
        ).first()

    def get_with_entries(self, roster_id: int) -> Optional[Roster]:
        return self._with_entries().filter(Roster.id == roster_id).first()

    def create(self, project_id: int, year: int, month: int) -> Roster:
        roster = Roster(project_id=project_id, year=year, month=month)
        self.add(roster)
        self.flush()
        return roster

    def get_entry(self, roster_id: int, staff_id: int, day: int) -> Optional[RosterEntry]:
        return self.session.query(RosterEntry).filter(
            RosterEntry.roster_id == roster_id,
            RosterEntry.staff_id == staff_id,
            RosterEntry.day == day
        ).first()

    def upsert_entry(
        self,
        roster_id: int,
        staff_id: int,
        day: int,
        shift_code: str,
        notes: Optional[str] = None
    ) -> RosterEntry:
        """Update the (staff, day) cell if present, otherwise insert it."""
        entry = self.get_entry(roster_id, staff_id, day)
        if entry is None:
            entry = RosterEntry(roster_id=roster_id, staff_id=staff_id, day=day)
            self.session.add(entry)
        entry.shift_code = shift_code
        entry.notes = notes
        self.flush()
        return entry

    def replace_entries(self, roster_id: int, entries: Iterable[RosterEntryLine]) -> int:
        """Delete all entries of a roster and stage the new set."""
        self.session.query(RosterEntry).filter(
            RosterEntry.roster_id == roster_id
        ).delete(synchronize_session="fetch")
        rows = [
            RosterEntry(
                roster_id=roster_id,
                staff_id=line.staff_id,
                day=line.day,
                shift_code=line.shift_code,
                notes=line.notes,
            )
            for line in entries
        ]
        self.session.add_all(rows)
        return len(rows)
