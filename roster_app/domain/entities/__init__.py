"""
Domain Entities - Core immutable business objects.
"""

from .project import ProjectInfo, StaffMember
from .roster import ShiftDefinition, RosterEntryLine, RosterSnapshot, days_in_month
from .cost_sharing import CostSharingEdge, CostSharingCalculation
from .attendance import StaffAttendance, AttendanceReport

__all__ = [
    'ProjectInfo', 'StaffMember',
    'ShiftDefinition', 'RosterEntryLine', 'RosterSnapshot', 'days_in_month',
    'CostSharingEdge', 'CostSharingCalculation',
    'StaffAttendance', 'AttendanceReport',
]
