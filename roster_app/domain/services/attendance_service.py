"""
Attendance Service - monthly attendance and salary summary for a project.
"""
import logging
from typing import Optional

from roster_app.config import get_config
from roster_app.domain.entities import AttendanceReport, StaffAttendance
from roster_app.domain.exceptions import ProjectNotFoundError, RosterNotFoundError
from roster_app.domain.store import CostDataStore
from .shift_classifier import ShiftClassifier

logger = logging.getLogger(__name__)


class AttendanceService:
    """
    Service counting worked, absent and leave days per staff member.

    Salary follows the cost engine: one daily wage per working-shift day.
    """

    def __init__(self, store: CostDataStore, classifier: Optional[ShiftClassifier] = None):
        config = get_config()
        self.store = store
        self.classifier = classifier or ShiftClassifier.from_shift_types(
            store.find_shift_types(), fallback_codes=config.fallback_work_codes
        )
        self.absent_codes = set(config.get_attendance_codes("absent"))
        self.sick_codes = set(config.get_attendance_codes("sick_leave"))
        self.personal_codes = set(config.get_attendance_codes("personal_leave"))
        self.vacation_codes = set(config.get_attendance_codes("vacation"))

    def monthly_attendance_report(self, project_id: int, year: int, month: int) -> AttendanceReport:
        """
        Attendance of every staff member of a project, inactive included.

        Raises:
            ProjectNotFoundError: If the project does not exist
            RosterNotFoundError: If the project has no roster for the period
        """
        project = self.store.find_project_by_id(project_id)
        if project is None:
            raise ProjectNotFoundError(project_id)
        roster = self.store.find_roster(project_id, year, month)
        if roster is None:
            raise RosterNotFoundError(f"project {project_id} {year}-{month:02d}")

        rows = {
            s.id: StaffAttendance(
                staff_id=s.id,
                staff_name=s.name,
                position=s.position,
                wage_per_day=s.wage_per_day,
            )
            for s in self.store.find_staff_by_project(project_id)
        }

        for entry in roster.entries:
            row = rows.get(entry.staff_id)
            if row is None:
                continue
            code = entry.shift_code
            if self.classifier.is_working_shift(code):
                row.total_work_days += 1
            elif code in self.absent_codes:
                row.total_absent += 1
            elif code in self.sick_codes:
                row.total_sick_leave += 1
            elif code in self.personal_codes:
                row.total_personal_leave += 1
            elif code in self.vacation_codes:
                row.total_vacation += 1

        report = AttendanceReport(
            project_id=project_id,
            project_name=project.name,
            year=year,
            month=month,
            staff=list(rows.values()),
        )
        logger.debug(
            f"Attendance {project_id} {year}-{month:02d}: "
            f"{report.total_work_days} work day(s), {report.total_absent} absent"
        )
        return report
