"""Project model for Phonebook."""

import os
from datetime import datetime, timezone
from pydantic import Field, field_validator, model_validator
from .base import PhonebookBaseModel, utc_now


class Project(PhonebookBaseModel):
    """A catalogue entry pointing at a project directory."""

    name: str = Field(description="Display name")
    path: str = Field(description="Absolute path to the project directory")
    tag: str = Field(default="", description="Short label, e.g. 'python'")
    description: str = Field(default="", description="Free-text description")
    created_at: datetime = Field(
        default_factory=utc_now, description="Creation timestamp"
    )
    updated_at: datetime = Field(
        default_factory=utc_now, description="Last time the project was opened"
    )

    @field_validator("name", "path")
    @classmethod
    def _required(cls, value: str, info) -> str:
        value = value.strip()
        if not value:
            raise ValueError(f"{info.field_name} cannot be empty")
        return value

    @field_validator("tag", "description", mode="before")
    @classmethod
    def _optional_text(cls, value):
        # Catalogue files written by hand may use null for missing values
        return "" if value is None else value

    @field_validator("path")
    @classmethod
    def _absolute(cls, value: str) -> str:
        if value.startswith("~") or not os.path.isabs(value):
            raise ValueError(f"path must be absolute, got '{value}'")
        return value

    @field_validator("created_at", "updated_at")
    @classmethod
    def _aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @model_validator(mode="after")
    def _ordered_timestamps(self) -> "Project":
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at
        return self

    def touch(self) -> "Project":
        """Return a copy with ``updated_at`` set to now."""
        return self.model_copy(update={"updated_at": max(utc_now(), self.created_at)})
