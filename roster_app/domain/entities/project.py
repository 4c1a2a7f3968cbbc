"""
Project and Staff Entities - read models handed out by the data store.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class ProjectInfo:
    """
    Project as seen by the cost engine.

    Attributes:
        id: Project identifier
        name: Display name
        is_active: False once the project is soft-deleted
        edit_cutoff_day: Day of month after which the roster is locked
        edit_cutoff_next_month: Cutoff falls in the month after the roster
    """

    id: int
    name: str
    is_active: bool = True
    edit_cutoff_day: int = 5
    edit_cutoff_next_month: bool = True


@dataclass(frozen=True)
class StaffMember:
    """Staff member with a flat daily wage, belonging to one project."""

    id: int
    name: str
    project_id: int
    wage_per_day: Decimal
    position: Optional[str] = None
    is_active: bool = True

    def __post_init__(self):
        if self.wage_per_day <= 0:
            raise ValueError("Staff wage per day must be positive")
