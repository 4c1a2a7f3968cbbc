"""
Roster Service - validated writes to roster entries.

Enforces the roster editing rules:
- Edits only while the project's edit window is open
- Day within the roster month, shift code known, staff on the project
- At most one entry per staff per day (upsert / atomic full import)
"""
import logging
from datetime import datetime
from typing import Iterable, List, Optional, Set, Tuple

from roster_app.domain.entities import ProjectInfo, RosterEntryLine, RosterSnapshot, days_in_month
from roster_app.domain.exceptions import (
    ProjectNotFoundError,
    RosterNotFoundError,
    StaffNotFoundError,
    EditWindowClosedError,
    ValidationError,
)
from roster_app.domain.store import CostDataStore
from .edit_window import get_edit_deadline, is_edit_window_open

logger = logging.getLogger(__name__)


class RosterService:
    """Service for creating, updating and importing roster entries."""

    def __init__(self, store: CostDataStore):
        self.store = store

    # =========================================================================
    # Helpers
    # =========================================================================

    def _require_project(self, project_id: int) -> ProjectInfo:
        project = self.store.find_project_by_id(project_id)
        if project is None:
            raise ProjectNotFoundError(project_id)
        return project

    def _require_roster(self, roster_id: int) -> RosterSnapshot:
        roster = self.store.find_roster_by_id(roster_id)
        if roster is None:
            raise RosterNotFoundError(roster_id)
        return roster

    def _check_edit_window(self, project: ProjectInfo, year: int, month: int, now: Optional[datetime]) -> None:
        if not is_edit_window_open(
            year, month, project.edit_cutoff_day, project.edit_cutoff_next_month, now
        ):
            deadline = get_edit_deadline(
                year, month, project.edit_cutoff_day, project.edit_cutoff_next_month
            )
            raise EditWindowClosedError(year, month, deadline)

    def _valid_shift_codes(self) -> Optional[Set[str]]:
        """Known codes, or None when no shift types are defined yet."""
        codes = {s.code for s in self.store.find_shift_types()}
        return codes or None

    @staticmethod
    def _check_day(day: int, year: int, month: int) -> None:
        limit = days_in_month(year, month)
        if not 1 <= day <= limit:
            raise ValidationError("day", f"day {day} is outside 1-{limit}")

    @staticmethod
    def _check_period(year: int, month: int) -> None:
        if not 1 <= month <= 12:
            raise ValidationError("month", f"month {month} is outside 1-12")
        if year < 1:
            raise ValidationError("year", f"invalid year {year}")

    # =========================================================================
    # Single Entry Writes
    # =========================================================================

    def upsert_entry(
        self,
        roster_id: int,
        staff_id: int,
        day: int,
        shift_code: str,
        notes: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> RosterEntryLine:
        """
        Set the shift of one staff member on one day.

        Raises:
            RosterNotFoundError: If the roster does not exist
            EditWindowClosedError: If the roster is locked
            ValidationError: On an invalid day or unknown shift code
            StaffNotFoundError: If the staff is missing or on another project
        """
        roster = self._require_roster(roster_id)
        project = self._require_project(roster.project_id)
        self._check_edit_window(project, roster.year, roster.month, now)
        self._check_day(day, roster.year, roster.month)

        shift_code = (shift_code or "").strip()
        if not shift_code:
            raise ValidationError("shift_code", "shift code is required")
        valid_codes = self._valid_shift_codes()
        if valid_codes is not None and shift_code not in valid_codes:
            raise ValidationError("shift_code", f"unknown shift code '{shift_code}'")

        staff = self.store.find_staff_by_id(staff_id)
        if staff is None or staff.project_id != roster.project_id:
            raise StaffNotFoundError(staff_id)

        return self.store.upsert_roster_entry(roster_id, staff_id, day, shift_code, notes or None)

    def delete_entry(
        self,
        roster_id: int,
        staff_id: int,
        day: int,
        now: Optional[datetime] = None
    ) -> bool:
        """Remove one entry; False when there was nothing to delete."""
        roster = self._require_roster(roster_id)
        project = self._require_project(roster.project_id)
        self._check_edit_window(project, roster.year, roster.month, now)
        return self.store.delete_roster_entry(roster_id, staff_id, day)

    # =========================================================================
    # Bulk Import
    # =========================================================================

    def import_roster(
        self,
        project_id: int,
        year: int,
        month: int,
        entries: Iterable[RosterEntryLine],
        now: Optional[datetime] = None
    ) -> Tuple[int, int]:
        """
        Replace a whole month of entries for a project.

        Every entry is validated before anything is written; the roster is
        created when missing and its entries swapped in the same transaction.

        Returns:
            Tuple of (roster_id, number of entries stored)
        """
        self._check_period(year, month)
        project = self._require_project(project_id)
        self._check_edit_window(project, year, month, now)

        entries = list(entries)
        if not entries:
            raise ValidationError("entries", "entries must not be empty")

        project_staff = {s.id for s in self.store.find_staff_by_project(project_id)}
        valid_codes = self._valid_shift_codes()

        seen: Set[Tuple[int, int]] = set()
        cleaned: List[RosterEntryLine] = []
        for entry in entries:
            if entry.staff_id not in project_staff:
                raise ValidationError("staff_id", f"staff {entry.staff_id} does not belong to project {project_id}")
            self._check_day(entry.day, year, month)
            shift_code = (entry.shift_code or "").strip()
            if not shift_code or (valid_codes is not None and shift_code not in valid_codes):
                raise ValidationError("shift_code", f"invalid shift code '{entry.shift_code}'")
            key = (entry.staff_id, entry.day)
            if key in seen:
                raise ValidationError(
                    "entries", f"duplicate entry for staff {entry.staff_id} day {entry.day}"
                )
            seen.add(key)
            cleaned.append(RosterEntryLine(
                staff_id=entry.staff_id,
                day=entry.day,
                shift_code=shift_code,
                notes=entry.notes or None,
            ))

        roster_id, count = self.store.replace_roster(project_id, year, month, cleaned)
        logger.info(f"Imported {count} roster entries for project {project_id} {year}-{month:02d}")
        return roster_id, count
