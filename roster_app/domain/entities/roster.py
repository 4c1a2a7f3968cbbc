"""
Roster Entities - a month of shift assignments for one project.

Entries arrive joined with the staff wage so the aggregator never has
to look staff up one by one.
"""
import calendar
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional, Tuple


def days_in_month(year: int, month: int) -> int:
    """Number of days in the given month."""
    return calendar.monthrange(year, month)[1]


@dataclass(frozen=True)
class ShiftDefinition:
    """Shift code and whether it counts as a worked (paid) day."""

    code: str
    name: str = ""
    is_work_shift: bool = False


@dataclass(frozen=True)
class RosterEntryLine:
    """
    One (staff, day) cell of a roster.

    Attributes:
        staff_id: Staff the shift belongs to
        day: Day of month (1-based)
        shift_code: Shift code, classified by ShiftClassifier
        wage_per_day: Staff wage at read time
        staff_name: Staff display name
        notes: Free-text remark
    """

    staff_id: int
    day: int
    shift_code: str
    wage_per_day: Decimal = Decimal("0")
    staff_name: str = ""
    notes: Optional[str] = None


@dataclass(frozen=True)
class RosterSnapshot:
    """Roster header plus all its entries."""

    id: int
    project_id: int
    year: int
    month: int
    entries: Tuple[RosterEntryLine, ...] = field(default_factory=tuple)
