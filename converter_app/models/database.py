"""SQLAlchemy database models."""

from datetime import UTC, datetime

import uuid_utils.compat as uuid
from sqlalchemy import Column, DateTime, Float, String
from sqlalchemy.orm import declarative_base
from sqlalchemy.types import TypeDecorator

Base = declarative_base()


def generate_record_id() -> str:
    """Return a new time-ordered record identifier."""
    return str(uuid.uuid7())


def utc_now() -> datetime:
    """Return the current UTC time."""
    return datetime.now(UTC)


class UTCDateTime(TypeDecorator):
    """Store datetimes as naive UTC and read them back as aware UTC.

    Aware values are converted to UTC before they are written. Naive values
    are taken to already be UTC.
    """

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(UTC).replace(tzinfo=None)
        return value

    def process_result_value(self, value, dialect):
        if value is not None:
            value = value.replace(tzinfo=UTC)
        return value


class ConversionHistory(Base):
    """Database model for a logged unit or currency conversion."""

    __tablename__ = "conversion_history"

    id = Column(String(36), primary_key=True, default=generate_record_id)
    user_id = Column(String(64), nullable=False, index=True)
    conversion_type = Column(String(16), nullable=True)  # "unit" or "currency"
    from_unit = Column(String(64), nullable=False)  # "meter", "USD", "Celsius"
    to_unit = Column(String(64), nullable=False)  # "feet", "INR", "Fahrenheit"
    from_value = Column(Float, nullable=False)
    result_value = Column(Float, nullable=False)
    category = Column(String(64), nullable=True)  # "length", "weight", "temperature", "money"
    rate_used = Column(Float, nullable=True)
    rate_timestamp = Column(UTCDateTime, nullable=True)
    created_at = Column(UTCDateTime, default=utc_now, nullable=False, index=True)

    def __repr__(self) -> str:
        """Return string representation of ConversionHistory."""
        return (
            f"<ConversionHistory("
            f"id='{self.id}', "
            f"user_id='{self.user_id}', "
            f"from_unit='{self.from_unit}', "
            f"to_unit='{self.to_unit}', "
            f"from_value={self.from_value}, "
            f"result_value={self.result_value}"
            f")>"
        )


class FavoriteConversion(Base):
    """Database model for a saved conversion pair."""

    __tablename__ = "favorite_conversions"

    id = Column(String(36), primary_key=True, default=generate_record_id)
    user_id = Column(String(64), nullable=False, index=True)
    conversion_type = Column(String(16), nullable=True)
    from_unit = Column(String(64), nullable=False)
    to_unit = Column(String(64), nullable=False)
    category = Column(String(64), nullable=True)
    label = Column(String(255), nullable=True)  # e.g. "USD -> AED daily"
    created_at = Column(UTCDateTime, default=utc_now, nullable=False, index=True)

    def __repr__(self) -> str:
        """Return string representation of FavoriteConversion."""
        return (
            f"<FavoriteConversion("
            f"id='{self.id}', "
            f"user_id='{self.user_id}', "
            f"from_unit='{self.from_unit}', "
            f"to_unit='{self.to_unit}', "
            f"label={self.label!r}"
            f")>"
        )
