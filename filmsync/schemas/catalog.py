# filmsync/schemas/catalog.py
from pydantic import BaseModel, ConfigDict


class Film(BaseModel):
    """
    One film as served by the upstream catalog (SWAPI wire shape).

    Only the fields the backend uses are kept; the rest are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    episode_id: int
    title: str
    director: str | None = None
    producer: str | None = None
    release_date: str | None = None
    created: str | None = None


class FilmPage(BaseModel):
    """Paginated list envelope returned by the catalog."""

    model_config = ConfigDict(extra="ignore")

    count: int | None = None
    next: str | None = None
    results: list[Film] = []
