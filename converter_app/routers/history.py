"""API routes for conversion history."""

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from converter_app.auth.jwt_auth import UserContext
from converter_app.config import settings
from converter_app.database import get_db
from converter_app.middleware.auth import get_user_context
from converter_app.middleware.metrics import record_action
from converter_app.models.conversion import (
    ConversionData,
    ConversionHistoryCreate,
    ConversionHistoryListQuery,
    ConversionHistoryRecord,
    ConversionListResponse,
    ConversionPage,
    ConversionResponse,
    ConversionType,
    DeleteResponse,
)
from converter_app.services.history_service import ConversionHistoryService

router = APIRouter(prefix="/api/v1/history", tags=["history"])


@router.post(
    "",
    response_model=ConversionResponse,
    status_code=201,
    operation_id="createConversionHistory",
)
async def create_conversion_history(
    conversion: ConversionHistoryCreate,
    user: UserContext = Depends(get_user_context),
    db: Session = Depends(get_db),
) -> ConversionResponse:
    """Log a completed unit or currency conversion for the caller.

    Args:
        conversion: Conversion details
        user: Authenticated caller
        db: Database session

    Returns:
        The stored conversion
    """
    try:
        record = ConversionHistoryService(db).create_conversion(user, conversion)
    except Exception:
        record_action("createConversionHistory", success=False)
        raise

    record_action("createConversionHistory")
    return ConversionResponse(
        data=ConversionData(conversion=ConversionHistoryRecord.model_validate(record))
    )


@router.get("", response_model=ConversionListResponse, operation_id="listConversionHistory")
async def list_conversion_history(
    conversion_type: ConversionType | None = Query(None, description="Filter by type"),
    category: str | None = Query(
        None, min_length=1, max_length=64, description="Filter by category"
    ),
    page: int = Query(1, ge=1, description="Page number, starting at 1"),
    page_size: int = Query(
        settings.history_page_size, ge=1, le=settings.max_page_size, description="Items per page"
    ),
    user: UserContext = Depends(get_user_context),
    db: Session = Depends(get_db),
) -> ConversionListResponse:
    """List the caller's conversion history, newest first.

    Returns:
        One page of conversions and the total matching count
    """
    query = ConversionHistoryListQuery(
        conversion_type=conversion_type, category=category, page=page, page_size=page_size
    )
    try:
        items, total = ConversionHistoryService(db).list_conversions(user, query)
    except Exception:
        record_action("listConversionHistory", success=False)
        raise

    record_action("listConversionHistory")
    return ConversionListResponse(
        data=ConversionPage(
            items=[ConversionHistoryRecord.model_validate(item) for item in items],
            total=total,
            page=query.page,
            page_size=query.page_size,
        )
    )


@router.delete(
    "/{conversion_id}", response_model=DeleteResponse, operation_id="deleteConversionHistory"
)
async def delete_conversion_history(
    conversion_id: str = Path(..., min_length=1, description="Conversion id"),
    user: UserContext = Depends(get_user_context),
    db: Session = Depends(get_db),
) -> DeleteResponse:
    """Delete one of the caller's conversions.

    Raises:
        NotFoundError: If the conversion does not exist or belongs to another user
    """
    try:
        ConversionHistoryService(db).delete_conversion(user, conversion_id)
    except Exception:
        record_action("deleteConversionHistory", success=False)
        raise

    record_action("deleteConversionHistory")
    return DeleteResponse()
