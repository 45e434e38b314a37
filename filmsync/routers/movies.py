# filmsync/routers/movies.py
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from filmsync.core.auth import require_admin, require_member
from filmsync.core.catalog_client import CatalogClient, get_catalog_client
from filmsync.core.locks import KeyedLock, get_backfill_locks
from filmsync.database import get_session
from filmsync.repositories.document_repo import MovieDetailRepository, MovieRepository
from filmsync.schemas.movie import MovieCreate, MovieRead, MovieUpdate
from filmsync.services.movie_service import MovieService

router = APIRouter(prefix="/movies", tags=["Movies"])


def get_movie_service(
    catalog: CatalogClient = Depends(get_catalog_client),
    backfill_locks: KeyedLock = Depends(get_backfill_locks),
) -> MovieService:
    return MovieService(
        MovieRepository(),
        MovieDetailRepository(),
        catalog,
        backfill_locks,
    )


# -------- Reader endpoints (user, admin) --------


@router.get(
    "",
    response_model=list[MovieRead],
    dependencies=[Depends(require_member)],
)
def list_movies(
    session: Session = Depends(get_session),
    service: MovieService = Depends(get_movie_service),
):
    """
    List local movies merged with the film catalog.

    - Local records win on a match; catalog-only films are synthesized.
    - 502 if the catalog is unreachable.
    """
    return service.list_movies(session)


@router.get(
    "/{movie_id}",
    response_model=MovieRead,
    dependencies=[Depends(require_member)],
)
def get_movie(
    movie_id: str,
    session: Session = Depends(get_session),
    service: MovieService = Depends(get_movie_service),
):
    """
    Get a movie by local id or catalog episode id.

    A catalog hit is persisted locally (movie + detail) on first access.
    """
    return service.resolve_movie(session, movie_id)


# -------- Admin endpoints --------


@router.post(
    "",
    response_model=MovieRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_movie(
    payload: MovieCreate,
    session: Session = Depends(get_session),
    service: MovieService = Depends(get_movie_service),
):
    """
    Create a new movie (admin only).
    """
    return service.upsert(session, payload.model_dump(exclude_unset=True))


@router.put(
    "/{movie_id}",
    response_model=MovieRead,
    dependencies=[Depends(require_admin)],
)
def update_movie(
    movie_id: str,
    payload: MovieUpdate,
    session: Session = Depends(get_session),
    service: MovieService = Depends(get_movie_service),
):
    """
    Create or update the movie stored at `movie_id` (admin only).
    """
    return service.upsert(session, payload.model_dump(exclude_unset=True), movie_id)


@router.delete(
    "/{movie_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
def delete_movie(
    movie_id: str,
    session: Session = Depends(get_session),
    service: MovieService = Depends(get_movie_service),
):
    """
    Soft-delete a movie (admin only). The record stays readable.
    """
    service.delete_one(session, movie_id)
    return None
