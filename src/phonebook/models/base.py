"""Base models for Phonebook."""

from datetime import datetime, timezone
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, field_serializer


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


class PhonebookBaseModel(BaseModel):
    """Base model for catalogue records.

    Timestamps are serialized to ISO format so the catalogue file stays
    readable by other tools.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",  # Older catalogue files may carry unknown keys
    )

    @field_serializer("created_at", "updated_at", check_fields=False)
    def serialize_datetime(self, dt: Optional[datetime], _info: Any) -> Optional[str]:
        """Serialize datetime to ISO format."""
        return dt.isoformat() if dt else None
