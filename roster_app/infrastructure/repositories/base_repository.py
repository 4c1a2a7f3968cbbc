"""
Base Repository - shared session plumbing for the roster repositories.

Repositories hand ORM rows to the store, which converts them to domain
entities through to_entity(). Nothing here commits; the store owns the
transaction.
"""
from abc import ABC, abstractmethod
from typing import Generic, Iterable, List, Optional, Type, TypeVar

from sqlalchemy.orm import Query, Session

from roster_app.models import Base

T = TypeVar('T', bound=Base)


class BaseRepository(ABC, Generic[T]):
    """
    Row access for one mapped table.

    Type Parameters:
        T: Mapped model class (Project, Staff, Roster, ...)
    """

    def __init__(self, session: Session, model_class: Type[T]):
        self.session = session
        self.model_class = model_class

    def _query(self) -> Query:
        return self.session.query(self.model_class)

    def get_by_id(self, row_id: int) -> Optional[T]:
        """Row with the given primary key, or None."""
        return self._query().filter(self.model_class.id == row_id).first()

    def get_all(self) -> List[T]:
        """Every row in primary key order, so store reads are deterministic."""
        return self._query().order_by(self.model_class.id).all()

    def add(self, row: T) -> T:
        self.session.add(row)
        return row

    def add_all(self, rows: List[T]) -> List[T]:
        self.session.add_all(rows)
        return rows

    def delete(self, row: T) -> None:
        self.session.delete(row)

    def flush(self) -> None:
        """Push pending rows so generated ids are available."""
        self.session.flush()

    @abstractmethod
    def to_entity(self, model: T):
        """Convert an ORM row into its domain entity."""
        pass

    def to_entities(self, rows: Iterable[T]) -> list:
        return [self.to_entity(row) for row in rows]
