"""API routes for favorite conversion pairs."""

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from converter_app.auth.jwt_auth import UserContext
from converter_app.config import settings
from converter_app.database import get_db
from converter_app.middleware.auth import get_user_context
from converter_app.middleware.metrics import record_action
from converter_app.models.conversion import (
    ConversionType,
    DeleteResponse,
    FavoriteConversionCreate,
    FavoriteConversionListQuery,
    FavoriteConversionRecord,
    FavoriteConversionUpdate,
    FavoriteData,
    FavoriteListResponse,
    FavoritePage,
    FavoriteResponse,
)
from converter_app.models.patch import Patch
from converter_app.services.favorite_service import FavoriteConversionService

router = APIRouter(prefix="/api/v1/favorites", tags=["favorites"])


def _favorite_response(favorite) -> FavoriteResponse:
    return FavoriteResponse(
        data=FavoriteData(favorite=FavoriteConversionRecord.model_validate(favorite))
    )


@router.post(
    "",
    response_model=FavoriteResponse,
    status_code=201,
    operation_id="createFavoriteConversion",
)
async def create_favorite_conversion(
    favorite: FavoriteConversionCreate,
    user: UserContext = Depends(get_user_context),
    db: Session = Depends(get_db),
) -> FavoriteResponse:
    """Save a conversion pair for quick reuse.

    Args:
        favorite: Favorite pair details
        user: Authenticated caller
        db: Database session

    Returns:
        The stored favorite
    """
    try:
        record = FavoriteConversionService(db).create_favorite(user, favorite)
    except Exception:
        record_action("createFavoriteConversion", success=False)
        raise

    record_action("createFavoriteConversion")
    return _favorite_response(record)


@router.patch(
    "/{favorite_id}", response_model=FavoriteResponse, operation_id="updateFavoriteConversion"
)
async def update_favorite_conversion(
    update: FavoriteConversionUpdate | None = None,
    favorite_id: str = Path(..., min_length=1, description="Favorite id"),
    user: UserContext = Depends(get_user_context),
    db: Session = Depends(get_db),
) -> FavoriteResponse:
    """Change selected fields of one of the caller's favorites.

    Fields left out of the body keep their stored values. A request with no
    body returns the favorite unchanged.

    Raises:
        NotFoundError: If the favorite does not exist or belongs to another user
    """
    patch = (
        update.to_patch()
        if update is not None
        else Patch(FavoriteConversionUpdate.PATCHABLE_FIELDS)
    )
    try:
        record = FavoriteConversionService(db).update_favorite(user, favorite_id, patch)
    except Exception:
        record_action("updateFavoriteConversion", success=False)
        raise

    record_action("updateFavoriteConversion")
    return _favorite_response(record)


@router.delete(
    "/{favorite_id}", response_model=DeleteResponse, operation_id="deleteFavoriteConversion"
)
async def delete_favorite_conversion(
    favorite_id: str = Path(..., min_length=1, description="Favorite id"),
    user: UserContext = Depends(get_user_context),
    db: Session = Depends(get_db),
) -> DeleteResponse:
    """Delete one of the caller's favorites."""
    try:
        FavoriteConversionService(db).delete_favorite(user, favorite_id)
    except Exception:
        record_action("deleteFavoriteConversion", success=False)
        raise

    record_action("deleteFavoriteConversion")
    return DeleteResponse()


@router.get("", response_model=FavoriteListResponse, operation_id="listFavoriteConversions")
async def list_favorite_conversions(
    conversion_type: ConversionType | None = Query(None, description="Filter by type"),
    category: str | None = Query(
        None, min_length=1, max_length=64, description="Filter by category"
    ),
    page: int = Query(1, ge=1, description="Page number, starting at 1"),
    page_size: int = Query(
        settings.favorites_page_size, ge=1, le=settings.max_page_size, description="Items per page"
    ),
    user: UserContext = Depends(get_user_context),
    db: Session = Depends(get_db),
) -> FavoriteListResponse:
    """List the caller's favorites, newest first."""
    query = FavoriteConversionListQuery(
        conversion_type=conversion_type, category=category, page=page, page_size=page_size
    )
    try:
        items, total = FavoriteConversionService(db).list_favorites(user, query)
    except Exception:
        record_action("listFavoriteConversions", success=False)
        raise

    record_action("listFavoriteConversions")
    return FavoriteListResponse(
        data=FavoritePage(
            items=[FavoriteConversionRecord.model_validate(item) for item in items],
            total=total,
            page=query.page,
            page_size=query.page_size,
        )
    )
