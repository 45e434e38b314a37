# filmsync/schemas/movie.py
from datetime import datetime

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field


class MovieRead(SQLModel):
    """
    Movie as stored locally or synthesized from the film catalog.

    - external_id: catalog episode id, stamped at backfill time
    - deleted: soft-delete flag; None for catalog-only entries
    """

    id: str
    title: str | None = None
    created_at: datetime | None = None
    deleted: bool | None = None
    external_id: str | None = None


class MovieCreate(SQLModel):
    """
    Payload for creating a movie.

    The id is always generated server-side.
    """

    model_config = ConfigDict(extra="forbid")

    title: str = Field(max_length=255)
    external_id: str | None = Field(default=None, max_length=64)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title cannot be empty")
        return v


class MovieUpdate(SQLModel):
    """
    Partial update payload for movies.
    All fields are optional.
    """

    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(default=None, max_length=255)
    external_id: str | None = Field(default=None, max_length=64)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("title cannot be empty")
        return v
