# filmsync/services/movie_detail_service.py
from filmsync.schemas.movie_detail import MovieDetailRead
from filmsync.services.record_service import RecordService


class MovieDetailService(RecordService):
    """CRUD on movie details. Details live independently of movies."""

    record_model = MovieDetailRead
    not_found_detail = "Movie detail not found"
