"""Movie catalog endpoints which pass service envelopes straight through as JSON."""

import logging

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from app.config import settings
from app.errors import ErrorKind, ServiceResult
from app.models import MovieUpdate
from app.services.movie_service import MovieService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/movies", tags=["movies"])

STATUS_BY_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.DATABASE: 500,
    ErrorKind.CONNECTION: 503,
}

_service: MovieService | None = None


def init_router(service: MovieService) -> None:
    global _service
    _service = service


def _get_service() -> MovieService:
    assert _service is not None, "movies router not initialized"
    return _service


def _respond(result: ServiceResult) -> JSONResponse:
    status = 200 if result.success else STATUS_BY_KIND[result.error.kind]
    if not result.success:
        logger.info("Request failed: code=%s status=%d", result.error.code, status)
    return JSONResponse(status_code=status, content=result.model_dump(mode="json"))


@router.get("/top-rated")
def top_rated_movies(
    limit: int = Query(10, description="Number of movies, 1-100"),
):
    """Highest-rated movies first."""
    return _respond(_get_service().get_top_rated_movies(limit))


@router.get("/sci-fi")
def sci_fi_movies():
    return _respond(_get_service().get_sci_fi_movies())


@router.get("/genre/{genre_name}")
def movies_by_genre(genre_name: str):
    """Movies tagged with the exact (trimmed) genre name."""
    return _respond(_get_service().get_movies_by_genre(genre_name))


@router.get("")
def list_movies(
    page: int = Query(1, description="1-based page number"),
    page_size: int = Query(settings.default_page_size, description="Results per page, 1-100"),
    genre: str | None = Query(None, description="Exact genre name filter"),
):
    """Paginated catalog ordered by vote average, optionally filtered by genre."""
    return _respond(_get_service().get_movies_with_pagination(page, page_size, genre))


@router.get("/{movie_id}")
def get_movie(movie_id: int):
    """Single movie by its TMDB id; ``data`` is null when it does not exist."""
    return _respond(_get_service().get_movie_by_id(movie_id))


@router.patch("/{movie_id}")
def update_movie(movie_id: int, patch: MovieUpdate):
    """Partially update a movie's scalar fields."""
    return _respond(_get_service().update_movie(movie_id, patch))
