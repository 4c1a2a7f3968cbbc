"""
Attendance Entities - monthly attendance and salary summary per staff.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional


@dataclass
class StaffAttendance:
    """Day counts by category and the salary derived from them."""

    staff_id: int
    staff_name: str
    position: Optional[str]
    wage_per_day: Decimal
    total_work_days: int = 0
    total_absent: int = 0
    total_sick_leave: int = 0
    total_personal_leave: int = 0
    total_vacation: int = 0

    @property
    def deduction_amount(self) -> Decimal:
        """Shown for information; absent days are already unpaid."""
        return self.wage_per_day * self.total_absent

    @property
    def expected_salary(self) -> Decimal:
        return self.wage_per_day * self.total_work_days

    @property
    def net_salary(self) -> Decimal:
        return self.expected_salary


@dataclass
class AttendanceReport:
    """Attendance of every staff member of a project for one month."""

    project_id: int
    project_name: str
    year: int
    month: int
    staff: List[StaffAttendance] = field(default_factory=list)

    @property
    def total_work_days(self) -> int:
        return sum(s.total_work_days for s in self.staff)

    @property
    def total_absent(self) -> int:
        return sum(s.total_absent for s in self.staff)

    @property
    def total_deduction(self) -> Decimal:
        return sum((s.deduction_amount for s in self.staff), Decimal("0"))

    @property
    def total_expected_salary(self) -> Decimal:
        return sum((s.expected_salary for s in self.staff), Decimal("0"))

    @property
    def total_net_salary(self) -> Decimal:
        return sum((s.net_salary for s in self.staff), Decimal("0"))
