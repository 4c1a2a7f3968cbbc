"""
Repository implementations for data access layer.
"""
from .base_repository import BaseRepository
from .project_repository import ProjectRepository, StaffRepository, ShiftTypeRepository
from .roster_repository import RosterRepository
from .cost_sharing_repository import CostSharingRepository

__all__ = [
    'BaseRepository',
    'ProjectRepository',
    'StaffRepository',
    'ShiftTypeRepository',
    'RosterRepository',
    'CostSharingRepository',
]
