"""Service for managing a user's favorite conversion pairs."""

from sqlalchemy.orm.exc import StaleDataError

from converter_app.auth.jwt_auth import UserContext
from converter_app.exceptions import NotFoundError
from converter_app.logging_config import get_logger
from converter_app.models.conversion import FavoriteConversionCreate, FavoriteConversionListQuery
from converter_app.models.database import FavoriteConversion, generate_record_id, utc_now
from converter_app.models.patch import Patch
from converter_app.services.base import OwnedRecordService
from converter_app.tracing_config import add_span_event, get_tracer

logger = get_logger(__name__)
tracer = get_tracer(__name__)


class FavoriteConversionService(OwnedRecordService):
    """Owner-scoped CRUD over favorite conversion pairs.

    The same (from_unit, to_unit) pair may be saved more than once, so a user
    can keep several labels for one pair.
    """

    model = FavoriteConversion

    def create_favorite(
        self, user: UserContext, data: FavoriteConversionCreate
    ) -> FavoriteConversion:
        """Save a favorite pair for the caller.

        Args:
            user: Authenticated caller
            data: Validated favorite details

        Returns:
            The inserted record
        """
        with tracer.start_as_current_span("create_favorite_conversion") as span:
            span.set_attribute("user.id", user.user_id)

            favorite = FavoriteConversion(
                id=generate_record_id(),
                user_id=user.user_id,
                created_at=utc_now(),
                **data.model_dump(),
            )
            self._commit_write("insert", lambda: self.db_session.add(favorite))
            self.db_session.refresh(favorite)

            span.set_attribute("favorite.id", favorite.id)
            add_span_event("favorite_created", {"favorite.id": favorite.id})
            logger.info(
                f"Favorite saved: {favorite.from_unit} -> {favorite.to_unit}",
                user_id=user.user_id,
                favorite_id=favorite.id,
                label=favorite.label,
            )
            return favorite

    def update_favorite(
        self, user: UserContext, favorite_id: str, patch: Patch
    ) -> FavoriteConversion:
        """Apply a partial update to one of the caller's favorites.

        Only fields set in ``patch`` change. An empty patch returns the stored
        record without writing.

        Args:
            user: Authenticated caller
            favorite_id: Id of the favorite to update
            patch: Fields to change

        Returns:
            The favorite after the update

        Raises:
            NotFoundError: If the id does not resolve to a favorite owned by the caller
        """
        with tracer.start_as_current_span("update_favorite_conversion") as span:
            span.set_attribute("user.id", user.user_id)
            span.set_attribute("favorite.id", favorite_id)

            favorite = self._get_owned(user, favorite_id)
            if favorite is None:
                logger.warning(
                    "Favorite not found for update", user_id=user.user_id, favorite_id=favorite_id
                )
                raise NotFoundError("Favorite", favorite_id)

            if patch.is_empty:
                span.set_attribute("favorite.update.skipped", True)
                return favorite

            changed: list[str] = []

            def stage() -> None:
                changed.extend(patch.apply_to(favorite))

            try:
                self._commit_write("update", stage)
            except StaleDataError as e:
                # Deleted by a concurrent request after the lookup
                raise NotFoundError("Favorite", favorite_id) from e
            self.db_session.refresh(favorite)

            span.set_attribute("favorite.update.fields", changed)
            add_span_event("favorite_updated", {"favorite.id": favorite_id, "fields": changed})
            logger.info(
                "Favorite updated", user_id=user.user_id, favorite_id=favorite_id, fields=changed
            )
            return favorite

    def delete_favorite(self, user: UserContext, favorite_id: str) -> None:
        """Delete one of the caller's favorites.

        Raises:
            NotFoundError: If the id does not resolve to a favorite owned by the caller
        """
        with tracer.start_as_current_span("delete_favorite_conversion") as span:
            span.set_attribute("user.id", user.user_id)
            span.set_attribute("favorite.id", favorite_id)

            favorite = self._get_owned(user, favorite_id)
            if favorite is None:
                logger.warning(
                    "Favorite not found for delete", user_id=user.user_id, favorite_id=favorite_id
                )
                raise NotFoundError("Favorite", favorite_id)

            self._commit_write("delete", lambda: self.db_session.delete(favorite))
            add_span_event("favorite_deleted", {"favorite.id": favorite_id})
            logger.info("Favorite deleted", user_id=user.user_id, favorite_id=favorite_id)

    def list_favorites(
        self, user: UserContext, query: FavoriteConversionListQuery
    ) -> tuple[list[FavoriteConversion], int]:
        """List the caller's favorites, newest first."""
        with tracer.start_as_current_span("list_favorite_conversions") as span:
            span.set_attribute("user.id", user.user_id)
            span.set_attribute("pagination.page", query.page)
            span.set_attribute("pagination.page_size", query.page_size)

            items, total = self._list_owned(user, query)

            span.set_attribute("result.total", total)
            span.set_attribute("result.count", len(items))
            return items, total
