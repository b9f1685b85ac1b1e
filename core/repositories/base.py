"""Base repository class with common CRUD operations."""

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from core.db import Base

T = TypeVar("T", bound=Base)


class RepositoryError(Exception):
    """Base class for classified persistence errors."""


class NotFoundError(RepositoryError):
    """The row is gone (deleted concurrently or never existed)."""


class DuplicateError(RepositoryError):
    """A unique constraint rejected the write."""


@dataclass
class QueryOptions:
    """
    Sort and pagination options for ``filter_by_query``.

    ``sort`` is a list of ``(column_name, descending)`` pairs.
    """

    sort: list[tuple[str, bool]] = field(default_factory=list)
    skip: int = 0
    limit: int = 0


class BaseRepository(Generic[T]):
    """
    Base repository providing common CRUD operations.

    Writes flush immediately so that constraint violations surface at the
    call site, classified as ``DuplicateError`` / ``NotFoundError``.

    Usage:
        class TargetRepository(BaseRepository[Target]):
            model = Target

        repo = TargetRepository(session)
        target = repo.get_by_id(1)
    """

    model: type[T]

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, id: int) -> T | None:
        """Get a single record by ID."""
        return self.session.get(self.model, id)

    def create(self, instance: T) -> T:
        """Persist a new record."""
        self.session.add(instance)
        self._flush()
        return instance

    def update(self, instance: T) -> T:
        """Flush pending changes of an already loaded record."""
        self._flush()
        return instance

    def delete(self, instance: T) -> None:
        self.session.delete(instance)
        self._flush()

    def filter_by_query(
        self, conditions: list[Any], opts: QueryOptions | None = None
    ) -> tuple[list[T], int]:
        """
        Filtered, sorted and paginated read.

        Args:
            conditions: SQLAlchemy boolean clauses, combined with AND
            opts: Sort and pagination options

        Returns:
            Tuple of (results, total_count) where total_count ignores pagination
        """
        opts = opts or QueryOptions()

        count_stmt = select(func.count()).select_from(self.model).where(*conditions)
        total = self.session.execute(count_stmt).scalar_one()

        stmt = select(self.model).where(*conditions)
        for name, descending in opts.sort:
            column = getattr(self.model, name)
            stmt = stmt.order_by(column.desc() if descending else column.asc())
        stmt = stmt.order_by(self.model.id.asc())  # type: ignore[attr-defined]

        if opts.skip:
            stmt = stmt.offset(opts.skip)
        if opts.limit:
            stmt = stmt.limit(opts.limit)

        results = list(self.session.execute(stmt).scalars().all())
        return results, total

    def _flush(self) -> None:
        try:
            self.session.flush()
        except IntegrityError as exc:
            self.session.rollback()
            raise DuplicateError(str(exc.orig)) from exc
        except StaleDataError as exc:
            self.session.rollback()
            raise NotFoundError(str(exc)) from exc
