"""
Database models and SQLAlchemy setup for Roster Cost App.
Wages and sharing percentages stored as exact NUMERIC to avoid float drift.
"""
from datetime import datetime
from sqlalchemy import (
    create_engine, Column, Integer, String, Boolean, Numeric,
    DateTime, Text, ForeignKey, UniqueConstraint, CheckConstraint
)
from sqlalchemy.orm import declarative_base, sessionmaker, relationship

from roster_app.config import get_config

DATABASE_URL = get_config().database_url
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


# =============================================================================
# Project Entity
# =============================================================================

class Project(Base):
    """
    Physical project/site that owns staff and rosters.
    Soft-deleted via is_active; cost history keeps referencing it.
    """
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    location = Column(String(200), nullable=True)
    is_active = Column(Boolean, default=True, index=True)
    edit_cutoff_day = Column(Integer, nullable=False, default=lambda: get_config().default_edit_cutoff_day)  # 1-31
    edit_cutoff_next_month = Column(
        Boolean, nullable=False, default=lambda: get_config().default_edit_cutoff_next_month
    )
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    staff = relationship("Staff", back_populates="project")
    rosters = relationship("Roster", back_populates="project")
    cost_sharing_from = relationship(
        "CostSharing",
        foreign_keys="CostSharing.source_project_id",
        back_populates="source_project",
    )
    cost_sharing_to = relationship(
        "CostSharing",
        foreign_keys="CostSharing.destination_project_id",
        back_populates="destination_project",
    )


class Staff(Base):
    """Employee assigned to exactly one project, paid a flat daily wage."""
    __tablename__ = "staff"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    position = Column(String(100), nullable=True)
    wage_per_day = Column(Numeric(10, 2), nullable=False)
    project_id = Column(Integer, ForeignKey('projects.id'), nullable=False, index=True)
    is_active = Column(Boolean, default=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    project = relationship("Project", back_populates="staff")

    __table_args__ = (
        CheckConstraint('wage_per_day > 0', name='ck_staff_wage_positive'),
    )


class ShiftType(Base):
    """Shift code definition. is_work_shift decides whether a day is paid."""
    __tablename__ = "shift_types"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(20), unique=True, index=True, nullable=False)
    name = Column(String(100), nullable=False)
    start_time = Column(String(5), nullable=True)  # HH:MM
    end_time = Column(String(5), nullable=True)
    color = Column(String(20), nullable=True)
    is_work_shift = Column(Boolean, nullable=False, default=True)
    is_system_default = Column(Boolean, nullable=False, default=False)  # Not deletable


# =============================================================================
# Roster Entities
# =============================================================================

class Roster(Base):
    """One month of shifts for a project."""
    __tablename__ = "rosters"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey('projects.id'), nullable=False, index=True)
    year = Column(Integer, nullable=False)
    month = Column(Integer, nullable=False)  # 1-12
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    project = relationship("Project", back_populates="rosters")
    entries = relationship("RosterEntry", back_populates="roster", cascade="all, delete-orphan")

    __table_args__ = (
        UniqueConstraint('project_id', 'year', 'month', name='uq_roster_project_period'),
    )


class RosterEntry(Base):
    """
    Shift assigned to one staff member on one day.
    INVARIANT: at most one entry per (roster, staff, day)
    """
    __tablename__ = "roster_entries"

    id = Column(Integer, primary_key=True, index=True)
    roster_id = Column(Integer, ForeignKey('rosters.id'), nullable=False, index=True)
    staff_id = Column(Integer, ForeignKey('staff.id'), nullable=False, index=True)
    day = Column(Integer, nullable=False)  # 1-31
    shift_code = Column(String(20), nullable=False)
    notes = Column(Text, nullable=True)

    roster = relationship("Roster", back_populates="entries")
    staff = relationship("Staff")

    __table_args__ = (
        UniqueConstraint('roster_id', 'staff_id', 'day', name='uq_roster_staff_day'),
    )


# =============================================================================
# Cost Sharing Edge
# =============================================================================

class CostSharing(Base):
    """
    Directed cost-sharing edge: percentage of the source project's
    original cost is attributed to the destination project.
    """
    __tablename__ = "cost_sharing"

    id = Column(Integer, primary_key=True, index=True)
    source_project_id = Column(Integer, ForeignKey('projects.id'), nullable=False, index=True)
    destination_project_id = Column(Integer, ForeignKey('projects.id'), nullable=False, index=True)
    percentage = Column(Numeric(5, 2), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    source_project = relationship(
        "Project", foreign_keys=[source_project_id], back_populates="cost_sharing_from"
    )
    destination_project = relationship(
        "Project", foreign_keys=[destination_project_id], back_populates="cost_sharing_to"
    )

    __table_args__ = (
        UniqueConstraint('source_project_id', 'destination_project_id', name='uq_cost_sharing_pair'),
        CheckConstraint('source_project_id <> destination_project_id', name='ck_cost_sharing_not_self'),
        CheckConstraint('percentage > 0 AND percentage <= 100', name='ck_cost_sharing_percentage'),
    )


def init_db():
    """Initialize the database and create all tables."""
    Base.metadata.create_all(bind=engine)


def get_db():
    """Database session dependency for FastAPI."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def ensure_default_shift_types(session=None):
    """Seed the configured default shift types when the table is empty."""
    db = session or SessionLocal()
    try:
        if db.query(ShiftType).first() is None:
            for shift in get_config().default_shift_types:
                db.add(ShiftType(
                    code=str(shift["code"]),
                    name=shift.get("name", str(shift["code"])),
                    start_time=shift.get("start_time"),
                    end_time=shift.get("end_time"),
                    color=shift.get("color"),
                    is_work_shift=bool(shift.get("is_work_shift", False)),
                    is_system_default=bool(shift.get("is_system_default", False)),
                ))
            db.commit()
    finally:
        if session is None:
            db.close()
