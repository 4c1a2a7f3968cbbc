"""
Domain Layer - Core business entities and services for roster costing.

This module contains:
- entities/: Immutable domain objects (ProjectInfo, RosterSnapshot, CostSharingEdge)
- services/: Domain services (CostAggregationService, CostSharingService, CostReportService)
- store.py: Data access contract the services depend on
"""

from .entities import (
    ProjectInfo, StaffMember,
    ShiftDefinition, RosterEntryLine, RosterSnapshot,
    CostSharingEdge, CostSharingCalculation,
    StaffAttendance, AttendanceReport,
)
from .store import CostDataStore

__all__ = [
    'ProjectInfo', 'StaffMember',
    'ShiftDefinition', 'RosterEntryLine', 'RosterSnapshot',
    'CostSharingEdge', 'CostSharingCalculation',
    'StaffAttendance', 'AttendanceReport',
    'CostDataStore',
]
