# filmsync/services/reconciliation.py
"""
Merge locally stored movies with the upstream film catalog.

Output order:
  1. one entry per catalog film, in catalog order: the matching local
     movie if there is one, otherwise a synthetic movie built from the film
  2. local movies not emitted above whose title matches no entry emitted
     in step 1, in store order

A local movie matches a film by external_id (episode id stamped at
backfill) first, then by exact, case-sensitive title. A local movie is
emitted at most once.
"""

from typing import Sequence

from filmsync.schemas.catalog import Film
from filmsync.schemas.movie import MovieRead


def synthesize_movie(film: Film) -> MovieRead:
    """Catalog-only view of a film; it is not persisted."""
    episode_id = str(film.episode_id)
    return MovieRead(
        id=episode_id,
        title=film.title,
        created_at=film.created,
        external_id=episode_id,
    )


def reconcile_movies(local: Sequence[MovieRead], films: Sequence[Film]) -> list[MovieRead]:
    by_external: dict[str, MovieRead] = {}
    by_title: dict[str, MovieRead] = {}
    for movie in local:
        if movie.external_id:
            by_external.setdefault(movie.external_id, movie)
        if movie.title is not None:
            by_title.setdefault(movie.title, movie)

    merged: list[MovieRead] = []
    emitted: set[str] = set()

    for film in films:
        match = by_external.get(str(film.episode_id)) or by_title.get(film.title)
        if match is not None and match.id not in emitted:
            merged.append(match)
            emitted.add(match.id)
        else:
            merged.append(synthesize_movie(film))

    catalog_titles = {movie.title for movie in merged if movie.title is not None}
    extras = [
        movie
        for movie in local
        if movie.id not in emitted and movie.title not in catalog_titles
    ]
    return merged + extras
