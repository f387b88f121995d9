"""Service for storing and browsing a user's conversion history."""

from converter_app.auth.jwt_auth import UserContext
from converter_app.exceptions import NotFoundError
from converter_app.logging_config import get_logger
from converter_app.models.conversion import ConversionHistoryCreate, ConversionHistoryListQuery
from converter_app.models.database import ConversionHistory, generate_record_id, utc_now
from converter_app.services.base import OwnedRecordService
from converter_app.tracing_config import add_span_event, get_tracer

logger = get_logger(__name__)
tracer = get_tracer(__name__)


class ConversionHistoryService(OwnedRecordService):
    """Owner-scoped create, list and delete over conversion history.

    History entries are immutable once written: there is no update path.
    """

    model = ConversionHistory

    def create_conversion(
        self, user: UserContext, data: ConversionHistoryCreate
    ) -> ConversionHistory:
        """Log a conversion for the caller.

        Args:
            user: Authenticated caller
            data: Validated conversion details

        Returns:
            The inserted record
        """
        with tracer.start_as_current_span("create_conversion_history") as span:
            span.set_attribute("user.id", user.user_id)

            record = ConversionHistory(
                id=generate_record_id(),
                user_id=user.user_id,
                created_at=utc_now(),
                **data.model_dump(),
            )
            self._commit_write("insert", lambda: self.db_session.add(record))
            self.db_session.refresh(record)

            span.set_attribute("conversion.id", record.id)
            add_span_event("conversion_history_created", {"conversion.id": record.id})
            logger.info(
                f"Conversion logged: {record.from_value} {record.from_unit} -> "
                f"{record.result_value} {record.to_unit}",
                user_id=user.user_id,
                conversion_id=record.id,
                conversion_type=record.conversion_type,
                category=record.category,
            )
            return record

    def list_conversions(
        self, user: UserContext, query: ConversionHistoryListQuery
    ) -> tuple[list[ConversionHistory], int]:
        """List the caller's conversions, newest first.

        Args:
            user: Authenticated caller
            query: Filters and pagination

        Returns:
            The requested page of records and the total matching count
        """
        with tracer.start_as_current_span("list_conversion_history") as span:
            span.set_attribute("user.id", user.user_id)
            span.set_attribute("pagination.page", query.page)
            span.set_attribute("pagination.page_size", query.page_size)

            items, total = self._list_owned(user, query)

            span.set_attribute("result.total", total)
            span.set_attribute("result.count", len(items))
            return items, total

    def delete_conversion(self, user: UserContext, conversion_id: str) -> None:
        """Delete one of the caller's conversions.

        Args:
            user: Authenticated caller
            conversion_id: Id of the record to delete

        Raises:
            NotFoundError: If the id does not resolve to a record owned by the caller
        """
        with tracer.start_as_current_span("delete_conversion_history") as span:
            span.set_attribute("user.id", user.user_id)
            span.set_attribute("conversion.id", conversion_id)

            existing = self._get_owned(user, conversion_id)
            if existing is None:
                logger.warning(
                    "Conversion not found for delete",
                    user_id=user.user_id,
                    conversion_id=conversion_id,
                )
                raise NotFoundError("Conversion", conversion_id)

            self._commit_write("delete", lambda: self.db_session.delete(existing))
            add_span_event("conversion_history_deleted", {"conversion.id": conversion_id})
            logger.info("Conversion deleted", user_id=user.user_id, conversion_id=conversion_id)
