# filmsync/services/movie_service.py
import logging

from fastapi import HTTPException, status
from sqlmodel import Session

from filmsync.core.catalog_client import CatalogClient
from filmsync.core.errors import StoreError
from filmsync.core.locks import KeyedLock
from filmsync.repositories.document_repo import MovieDetailRepository, MovieRepository
from filmsync.schemas.catalog import Film
from filmsync.schemas.movie import MovieRead
from filmsync.services.reconciliation import reconcile_movies
from filmsync.services.record_service import RecordService

logger = logging.getLogger(__name__)


class MovieService(RecordService):
    """
    Business logic for movies.

    Responsibilities:
      - CRUD on the local movies collection
      - merged listing of local movies and the film catalog
      - read-through backfill of catalog films on a local miss
    """

    record_model = MovieRead
    not_found_detail = "Movie not found"

    def __init__(
        self,
        repo: MovieRepository,
        detail_repo: MovieDetailRepository,
        catalog: CatalogClient,
        backfill_locks: KeyedLock,
    ):
        super().__init__(repo)
        self.detail_repo = detail_repo
        self.catalog = catalog
        self.backfill_locks = backfill_locks

    # ----- Listing -----

    def list_movies(self, session: Session) -> list[MovieRead]:
        """
        Local movies merged with the catalog, fetched fresh.

        Raises:
            CatalogError: if the catalog cannot be read.
        """
        local = self.find_all(session)
        films = self.catalog.list_films()
        return reconcile_movies(local, films)

    # ----- Single movie -----

    def resolve_movie(self, session: Session, movie_id: str) -> MovieRead:
        """
        Return a movie by local id, falling back to the catalog episode id.

        Flow:
          1. local record with this id => returned as is (even if deleted)
          2. local record backfilled from this episode => returned
          3. catalog film with this episode id => movie + detail persisted,
             new movie returned
          4. otherwise => 404

        Steps 2-3 run under a per-id lock so concurrent misses backfill once.

        Raises:
            HTTPException(404): unknown locally and upstream.
            CatalogError: catalog unreachable.
            StoreError: film found but could not be persisted.
        """
        movie = self.find_one(session, movie_id)
        if movie is not None:
            return movie

        with self.backfill_locks.hold(movie_id):
            backfilled = self.repo.find_by(session, "external_id", movie_id)
            if backfilled is not None:
                return self._to_record(backfilled)

            film = self.catalog.get_film(movie_id)
            if film is None:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Movie not found",
                )
            return self._backfill(session, film)

    def _backfill(self, session: Session, film: Film) -> MovieRead:
        """Persist a movie and its detail from a catalog film in one commit."""
        now = self._now()
        external_id = str(film.episode_id)

        movie_id = self._new_id()
        movie = {
            "id": movie_id,
            "title": film.title,
            "created_at": now,
            "deleted": False,
            "external_id": external_id,
        }
        detail_id = self._new_id()
        detail = {
            "id": detail_id,
            "movie_id": movie_id,
            "title": film.title,
            "release_date": film.release_date,
            "director": film.director,
            "producer": film.producer,
            "created_at": now,
            "deleted": False,
            "external_id": external_id,
        }

        try:
            self.repo.insert_if_absent(session, movie_id, movie, commit=False)
            self.detail_repo.insert_if_absent(session, detail_id, detail, commit=False)
            self.repo.commit(session)
        except StoreError:
            session.rollback()
            logger.error("Backfill of episode %s failed; nothing persisted", external_id)
            raise

        logger.info("Backfilled episode %s as movie %s", external_id, movie_id)
        return self._to_record(movie)
