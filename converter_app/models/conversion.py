"""Pydantic models for conversion history and favorite conversions."""

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any, ClassVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from converter_app.config import settings
from converter_app.models.patch import Patch


class ConversionType(StrEnum):
    """Kind of conversion a record describes."""

    UNIT = "unit"
    CURRENCY = "currency"


class ConversionHistoryCreate(BaseModel):
    """Request model for logging a conversion."""

    model_config = ConfigDict(use_enum_values=True)

    conversion_type: ConversionType | None = Field(None, description="unit or currency")
    from_unit: str = Field(..., min_length=1, max_length=64, description="Source unit or code")
    to_unit: str = Field(..., min_length=1, max_length=64, description="Target unit or code")
    from_value: float = Field(..., allow_inf_nan=False, description="Value converted")
    result_value: float = Field(..., allow_inf_nan=False, description="Conversion result")
    category: str | None = Field(None, min_length=1, max_length=64, description="Classifier")
    rate_used: float | None = Field(None, allow_inf_nan=False, description="Exchange rate used")
    rate_timestamp: datetime | None = Field(None, description="When the rate was valid")


class FavoriteConversionCreate(BaseModel):
    """Request model for saving a favorite conversion pair."""

    model_config = ConfigDict(use_enum_values=True)

    conversion_type: ConversionType | None = Field(None, description="unit or currency")
    from_unit: str = Field(..., min_length=1, max_length=64, description="Source unit or code")
    to_unit: str = Field(..., min_length=1, max_length=64, description="Target unit or code")
    category: str | None = Field(None, min_length=1, max_length=64, description="Classifier")
    label: str | None = Field(None, min_length=1, max_length=255, description="Display name")


class FavoriteConversionUpdate(BaseModel):
    """Request model for patching a favorite conversion.

    Only the fields present in the request body are changed. Sending ``null``
    is rejected because clearing a field is not supported.
    """

    PATCHABLE_FIELDS: ClassVar[tuple[str, ...]] = (
        "conversion_type",
        "from_unit",
        "to_unit",
        "category",
        "label",
    )

    model_config = ConfigDict(extra="forbid", use_enum_values=True)

    conversion_type: ConversionType | None = Field(None, description="unit or currency")
    from_unit: str | None = Field(None, min_length=1, max_length=64)
    to_unit: str | None = Field(None, min_length=1, max_length=64)
    category: str | None = Field(None, min_length=1, max_length=64)
    label: str | None = Field(None, min_length=1, max_length=255)

    @model_validator(mode="after")
    def reject_explicit_nulls(self) -> "FavoriteConversionUpdate":
        """Reject fields that were sent as null."""
        nulls = sorted(name for name in self.model_fields_set if getattr(self, name) is None)
        if nulls:
            msg = f"Fields cannot be cleared: {', '.join(nulls)}"
            raise ValueError(msg)
        return self

    def to_patch(self) -> Patch:
        """Build a patch holding only the fields the caller provided."""
        return Patch(
            self.PATCHABLE_FIELDS, {name: getattr(self, name) for name in self.model_fields_set}
        )


class ListQuery(BaseModel):
    """Filters and pagination shared by the list actions."""

    model_config = ConfigDict(use_enum_values=True)

    conversion_type: ConversionType | None = None
    category: str | None = Field(None, min_length=1, max_length=64)
    page: int = Field(1, ge=1)
    page_size: int

    @property
    def offset(self) -> int:
        """Number of rows to skip for the requested page."""
        return (self.page - 1) * self.page_size


class ConversionHistoryListQuery(ListQuery):
    """Filters and pagination for listConversionHistory."""

    page_size: int = Field(settings.history_page_size, ge=1, le=settings.max_page_size)


class FavoriteConversionListQuery(ListQuery):
    """Filters and pagination for listFavoriteConversions."""

    page_size: int = Field(settings.favorites_page_size, ge=1, le=settings.max_page_size)


class ConversionHistoryRecord(BaseModel):
    """A stored conversion history entry."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    conversion_type: ConversionType | None = None
    from_unit: str
    to_unit: str
    from_value: float
    result_value: float
    category: str | None = None
    rate_used: float | None = None
    rate_timestamp: datetime | None = None
    created_at: datetime


class FavoriteConversionRecord(BaseModel):
    """A stored favorite conversion pair."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    conversion_type: ConversionType | None = None
    from_unit: str
    to_unit: str
    category: str | None = None
    label: str | None = None
    created_at: datetime


class ConversionData(BaseModel):
    """Payload for a created conversion."""

    conversion: ConversionHistoryRecord


class FavoriteData(BaseModel):
    """Payload for a created or updated favorite."""

    favorite: FavoriteConversionRecord


class ConversionPage(BaseModel):
    """One page of conversion history."""

    items: list[ConversionHistoryRecord]
    total: int = Field(..., description="Total matching records across all pages")
    page: int
    page_size: int


class FavoritePage(BaseModel):
    """One page of favorite conversions."""

    items: list[FavoriteConversionRecord]
    total: int = Field(..., description="Total matching records across all pages")
    page: int
    page_size: int


class ConversionResponse(BaseModel):
    """Response envelope for createConversionHistory."""

    success: bool = True
    data: ConversionData


class ConversionListResponse(BaseModel):
    """Response envelope for listConversionHistory."""

    success: bool = True
    data: ConversionPage


class FavoriteResponse(BaseModel):
    """Response envelope for favorite create and update actions."""

    success: bool = True
    data: FavoriteData


class FavoriteListResponse(BaseModel):
    """Response envelope for listFavoriteConversions."""

    success: bool = True
    data: FavoritePage


class DeleteResponse(BaseModel):
    """Response envelope for delete actions."""

    success: bool = True
    data: dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Error response model."""

    error: dict[str, Any] = Field(..., description="Error details")

    @classmethod
    def create(
        cls,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
        request_id: UUID | str | None = None,
    ) -> "ErrorResponse":
        """Create an error response."""
        error_data: dict[str, Any] = {
            "code": code,
            "message": message,
            "timestamp": datetime.now(UTC).isoformat(),
        }
        if details:
            error_data["details"] = details
        if request_id:
            error_data["request_id"] = str(request_id)

        return cls(error=error_data)
