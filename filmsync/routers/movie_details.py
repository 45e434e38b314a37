# filmsync/routers/movie_details.py
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from filmsync.core.auth import require_admin, require_member
from filmsync.database import get_session
from filmsync.repositories.document_repo import MovieDetailRepository
from filmsync.schemas.movie_detail import MovieDetailRead, MovieDetailWrite
from filmsync.services.movie_detail_service import MovieDetailService

router = APIRouter(prefix="/movie-details", tags=["Movie Details"])

repo = MovieDetailRepository()
service = MovieDetailService(repo)


@router.get(
    "",
    response_model=list[MovieDetailRead],
    dependencies=[Depends(require_member)],
)
def list_movie_details(session: Session = Depends(get_session)):
    """List all movie details, soft-deleted ones included."""
    return service.find_all(session)


@router.get(
    "/{detail_id}",
    response_model=MovieDetailRead,
    dependencies=[Depends(require_member)],
)
def get_movie_detail(detail_id: str, session: Session = Depends(get_session)):
    return service.get_one(session, detail_id)


@router.post(
    "",
    response_model=MovieDetailRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_movie_detail(
    payload: MovieDetailWrite,
    session: Session = Depends(get_session),
):
    return service.upsert(session, payload.model_dump(exclude_unset=True))


@router.put(
    "/{detail_id}",
    response_model=MovieDetailRead,
    dependencies=[Depends(require_admin)],
)
def update_movie_detail(
    detail_id: str,
    payload: MovieDetailWrite,
    session: Session = Depends(get_session),
):
    return service.upsert(session, payload.model_dump(exclude_unset=True), detail_id)


@router.delete(
    "/{detail_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
def delete_movie_detail(detail_id: str, session: Session = Depends(get_session)):
    service.delete_one(session, detail_id)
    return None
