# filmsync/schemas/movie_detail.py
from datetime import datetime

from pydantic import ConfigDict
from sqlmodel import SQLModel, Field


class MovieDetailBase(SQLModel):
    """
    Shared descriptive fields of a movie detail.

    movie_id is a loose reference to a movie; it is not enforced.
    """

    movie_id: str | None = Field(default=None, max_length=64)
    title: str | None = Field(default=None, max_length=255)
    release_date: str | None = Field(default=None, max_length=40)
    director: str | None = Field(default=None, max_length=255)
    producer: str | None = Field(default=None, max_length=255)
    external_id: str | None = Field(default=None, max_length=64)


class MovieDetailRead(MovieDetailBase):
    """Response schema returned to clients."""

    id: str
    created_at: datetime | None = None
    deleted: bool | None = None


class MovieDetailWrite(MovieDetailBase):
    """Create / update payload. Every field is optional."""

    model_config = ConfigDict(extra="forbid")
