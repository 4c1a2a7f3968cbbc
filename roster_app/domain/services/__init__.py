"""
Domain Services - Business logic for roster costing, sharing and reporting.
"""

from .shift_classifier import ShiftClassifier, is_working_shift, DEFAULT_WORK_SHIFT_CODES
from .cost_aggregation_service import CostAggregationService
from .cost_sharing_service import CostSharingService, find_cycle, find_path
from .cost_report_service import CostReportService
from .attendance_service import AttendanceService
from .roster_service import RosterService
from .edit_window import get_edit_deadline, is_edit_window_open

__all__ = [
    'ShiftClassifier',
    'is_working_shift',
    'DEFAULT_WORK_SHIFT_CODES',
    'CostAggregationService',
    'CostSharingService',
    'find_cycle',
    'find_path',
    'CostReportService',
    'AttendanceService',
    'RosterService',
    'get_edit_deadline',
    'is_edit_window_open',
]
