# filmsync/models/document.py
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, Column, UniqueConstraint
from sqlmodel import SQLModel, Field


class Document(SQLModel, table=True):
    """
    One schemaless record inside a named collection.

    Identity:
      - (collection, id) is unique; ids are unique per collection.
      - seq is a surrogate key that also gives each collection a stable
        insertion order.

    The record body lives in `data` as JSON. Movies, movie details and
    user roles all share this table, each under its own collection name.
    """

    __tablename__ = "documents"
    __table_args__ = (UniqueConstraint("collection", "id", name="uq_documents_collection_id"),)

    seq: int | None = Field(default=None, primary_key=True)

    collection: str = Field(
        max_length=64,
        index=True,
        description="Collection name, e.g. 'movies'",
    )

    id: str = Field(
        max_length=64,
        description="Record id within the collection",
    )

    data: dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column(JSON, nullable=False),
        description="Record body",
    )

    stored_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="First write timestamp (UTC)",
    )
