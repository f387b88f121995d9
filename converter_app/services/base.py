"""Shared plumbing for owner-scoped record services."""

from collections.abc import Callable
from typing import Any, ClassVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session
from sqlalchemy.orm.exc import StaleDataError

from converter_app.auth.jwt_auth import UserContext
from converter_app.logging_config import get_logger
from converter_app.middleware.metrics import record_database_operation
from converter_app.models.conversion import ListQuery

logger = get_logger(__name__)


class OwnedRecordService:
    """Base class for services whose rows belong to exactly one user."""

    model: ClassVar[Any]

    def __init__(self, db_session: Session):
        """Initialize the service.

        Args:
            db_session: Database session for data operations
        """
        self.db_session = db_session

    @property
    def table(self) -> str:
        """Name of the table this service manages."""
        return self.model.__tablename__

    def _owned(self, user: UserContext) -> Query:
        """Query restricted to rows owned by ``user``."""
        return self.db_session.query(self.model).filter(self.model.user_id == user.user_id)

    def _get_owned(self, user: UserContext, record_id: str) -> Any | None:
        """Fetch a single row by id if it belongs to ``user``."""
        record = self._owned(user).filter(self.model.id == record_id).first()
        record_database_operation(operation="select", table=self.table)
        return record

    def _list_owned(self, user: UserContext, query: ListQuery) -> tuple[list[Any], int]:
        """Return one page of the caller's rows matching the filters, newest first."""
        db_query = self._owned(user)
        if query.conversion_type:
            db_query = db_query.filter(self.model.conversion_type == query.conversion_type)
        if query.category:
            db_query = db_query.filter(self.model.category == query.category)

        total = db_query.count()
        items = (
            # Ids are time-ordered, so they break created_at ties in insertion order
            db_query.order_by(self.model.created_at.desc(), self.model.id.desc())
            .offset(query.offset)
            .limit(query.page_size)
            .all()
        )
        record_database_operation(operation="select", table=self.table)
        return items, total

    def _commit_write(self, operation: str, stage: Callable[[], None]) -> None:
        """Stage a change on the session and commit it, rolling back on failure.

        Args:
            operation: Operation name used for metrics and logs
            stage: Callable that applies the change to the session

        Raises:
            StaleDataError: If the row was removed after it was loaded
            SQLAlchemyError: If the write fails; the session is rolled back first
        """
        try:
            stage()
            self.db_session.commit()
        except StaleDataError:
            self.db_session.rollback()
            record_database_operation(operation=operation, table=self.table, success=False)
            logger.warning(f"Row vanished before {operation}", table=self.table)
            raise
        except SQLAlchemyError:
            self.db_session.rollback()
            record_database_operation(operation=operation, table=self.table, success=False)
            logger.error(f"Database {operation} failed", table=self.table, exc_info=True)
            raise
        record_database_operation(operation=operation, table=self.table)
