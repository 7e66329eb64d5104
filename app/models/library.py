from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Serializes with camelCase keys, accepts both camelCase and snake_case input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ReadingStatus(str, Enum):
    READING = "Reading"
    COMPLETED = "Completed"
    PLAN_TO_READ = "Plan-to-read"

    @classmethod
    def parse(cls, value):
        """Case-insensitive lookup; non-strings are passed through for normal validation."""
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value.lower() == lowered:
                    return member
        return value


class LibraryEntryCreate(CamelModel):
    kitsu_id: str = Field(min_length=1, description="Kitsu manga ID")
    title: str = Field(min_length=1)
    genres: list[str] = Field(default_factory=list)
    status: ReadingStatus = ReadingStatus.COMPLETED
    rating: int | None = Field(default=None, ge=1, le=10)
    synopsis: str | None = None
    cover_image: str | None = None
    user_id: str | None = Field(default=None, description="Optional per-user scope")

    @field_validator("status", mode="before")
    @classmethod
    def _parse_status(cls, value):
        return ReadingStatus.parse(value)


class LibraryEntryUpdate(CamelModel):
    status: ReadingStatus | None = None
    rating: int | None = Field(default=None, ge=1, le=10)

    @field_validator("status", mode="before")
    @classmethod
    def _parse_status(cls, value):
        return ReadingStatus.parse(value)


class LibraryEntry(LibraryEntryCreate):
    """A stored library entry. ``id`` is assigned by the store, ``kitsu_id`` is the catalog ID."""

    id: str
    created_at: datetime
    updated_at: datetime
