"""
Infrastructure Layer - SQLAlchemy repositories and the database-backed store.
"""

from .repositories import (
    BaseRepository,
    ProjectRepository,
    StaffRepository,
    ShiftTypeRepository,
    RosterRepository,
    CostSharingRepository,
)
from .sql_store import SqlCostDataStore

__all__ = [
    'BaseRepository',
    'ProjectRepository',
    'StaffRepository',
    'ShiftTypeRepository',
    'RosterRepository',
    'CostSharingRepository',
    'SqlCostDataStore',
]
