"""Movie query service: validated catalog reads and scalar updates over SQLite.

Each operation validates its arguments before touching the store, fetches
movies together with their genres, actors and directors in a single
statement, and wraps the outcome in a ``ServiceResult``.
"""

import json
import logging
import math
from typing import Any

from app.errors import (
    ServiceError,
    ServiceResult,
    connection_error,
    database_error,
    not_found_error,
    validation_error,
)
from app.models import Movie, MoviePage, MovieUpdate
from app.services.database import DatabaseService

logger = logging.getLogger(__name__)

MAX_LIMIT = 100
MAX_PAGE_SIZE = 100
MAX_SQLITE_INTEGER = 2**63 - 1
SCI_FI_GENRE = "Science Fiction"

_RELATIONS = {
    "genres": ("movie_genres", "genres", "genre_id"),
    "actors": ("movie_actors", "actors", "actor_id"),
    "directors": ("movie_directors", "directors", "director_id"),
}


def _relation_column(alias: str, junction: str, table: str, fk: str) -> str:
    return (
        f"(SELECT json_group_array(json_object('id', r.id, 'name', r.name)) "
        f"FROM {junction} j JOIN {table} r ON r.id = j.{fk} "
        f"WHERE j.movie_id = m.id) AS {alias}_json"
    )


_MOVIE_SELECT = (
    "SELECT m.id, m.title, m.overview, m.release_date, m.popularity, "
    "m.vote_average, m.vote_count, m.poster_path, m.backdrop_path, "
    + ", ".join(_relation_column(alias, *tables) for alias, tables in _RELATIONS.items())
    + " FROM movies m"
)

_GENRE_FILTER = (
    "EXISTS (SELECT 1 FROM movie_genres mg JOIN genres g ON g.id = mg.genre_id "
    "WHERE mg.movie_id = m.id AND g.name = ?)"
)

_ORDER_BY = " ORDER BY m.vote_average DESC, m.id ASC"


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_positive_int(value: Any) -> bool:
    return _is_int(value) and value > 0


def _is_blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def _row_to_movie(row) -> Movie:
    data = dict(row)
    for alias in _RELATIONS:
        related = json.loads(data.pop(f"{alias}_json") or "[]")
        data[alias] = sorted(related, key=lambda e: (e["name"], e["id"]))
    return Movie.model_validate(data)


def _select_movies(conn, where: str = "", params: tuple = (), limit: int | None = None,
                   offset: int = 0) -> list[Movie]:
    sql = _MOVIE_SELECT
    if where:
        sql += f" WHERE {where}"
    sql += _ORDER_BY
    if limit is not None:
        sql += " LIMIT ? OFFSET ?"
        params = (*params, limit, offset)
    return [_row_to_movie(r) for r in conn.execute(sql, params).fetchall()]


def _validate_patch(changes: dict[str, Any]) -> ServiceError | None:
    """Return the first problem with a patch, checking fields in a fixed order."""
    if "title" in changes and _is_blank(changes["title"]):
        return validation_error(
            "Movie title cannot be empty", "INVALID_TITLE",
            provided_title=changes["title"],
        )
    if "overview" in changes and _is_blank(changes["overview"]):
        return validation_error(
            "Movie overview cannot be empty", "INVALID_OVERVIEW",
            provided_overview=changes["overview"],
        )
    if "release_date" in changes and changes["release_date"] is None:
        return validation_error(
            "Release date cannot be cleared", "INVALID_RELEASE_DATE",
            provided_release_date=None,
        )
    vote_average = changes.get("vote_average", 0)
    if vote_average is None or not math.isfinite(vote_average) or not 0 <= vote_average <= 10:
        return validation_error(
            "Vote average must be between 0 and 10", "INVALID_VOTE_AVERAGE",
            provided_vote_average=vote_average,
        )
    vote_count = changes.get("vote_count", 0)
    if vote_count is None or not 0 <= vote_count <= MAX_SQLITE_INTEGER:
        return validation_error(
            "Vote count must be a non-negative 64-bit integer", "INVALID_VOTE_COUNT",
            provided_vote_count=vote_count,
        )
    popularity = changes.get("popularity", 0)
    if popularity is None or not math.isfinite(popularity) or popularity < 0:
        return validation_error(
            "Popularity cannot be negative", "INVALID_POPULARITY",
            provided_popularity=popularity,
        )
    return None


def _to_columns(changes: dict[str, Any]) -> dict[str, Any]:
    values = dict(changes)
    for key in ("title", "overview"):
        if key in values:
            values[key] = values[key].strip()
    if "release_date" in values:
        values["release_date"] = values["release_date"].isoformat()
    return values


class MovieService:
    def __init__(self, db: DatabaseService):
        self._db = db

    def _fetch_movies(self, where: str = "", params: tuple = (), limit: int | None = None) -> list[Movie]:
        with self._db.connect() as conn:
            return _select_movies(conn, where, params, limit=limit)

    def get_top_rated_movies(self, limit: int = 10) -> ServiceResult[list[Movie]]:
        if not _is_int(limit) or not 1 <= limit <= MAX_LIMIT:
            return ServiceResult[list[Movie]].fail(validation_error(
                f"Limit must be between 1 and {MAX_LIMIT}", "INVALID_LIMIT",
                provided_limit=limit,
            ))

        try:
            movies = self._fetch_movies(limit=limit)
        except Exception as exc:
            logger.exception("Error fetching top rated movies")
            return ServiceResult[list[Movie]].fail(database_error(
                "Failed to fetch top rated movies", "FETCH_TOP_RATED_MOVIES_ERROR", exc,
                limit=limit,
            ))
        return ServiceResult[list[Movie]].ok(movies)

    def get_movies_by_genre(self, genre_name: str) -> ServiceResult[list[Movie]]:
        if _is_blank(genre_name):
            return ServiceResult[list[Movie]].fail(validation_error(
                "Genre name is required and must be a non-empty string",
                "INVALID_GENRE_NAME",
                provided_genre=genre_name,
            ))

        try:
            movies = self._fetch_movies(_GENRE_FILTER, (genre_name.strip(),))
        except Exception as exc:
            logger.exception("Error fetching movies by genre %r", genre_name)
            return ServiceResult[list[Movie]].fail(database_error(
                "Failed to fetch movies by genre", "FETCH_MOVIES_BY_GENRE_ERROR", exc,
                genre_name=genre_name,
            ))
        return ServiceResult[list[Movie]].ok(movies)

    def get_movies_with_pagination(
        self,
        page: int = 1,
        page_size: int = 20,
        genre_filter: str | None = None,
    ) -> ServiceResult[MoviePage]:
        if (
            not _is_int(page) or page < 1
            or not _is_int(page_size) or not 1 <= page_size <= MAX_PAGE_SIZE
            or (genre_filter is not None and not isinstance(genre_filter, str))
        ):
            return ServiceResult[MoviePage].fail(validation_error(
                f"Page must be >= 1 and page_size must be between 1 and {MAX_PAGE_SIZE}",
                "INVALID_PAGINATION_PARAMS",
                page=page, page_size=page_size, genre_filter=genre_filter,
            ))

        where, params = "", ()
        if genre_filter and genre_filter.strip():
            where, params = _GENRE_FILTER, (genre_filter.strip(),)

        offset = (page - 1) * page_size
        try:
            count_sql = "SELECT COUNT(*) FROM movies m" + (f" WHERE {where}" if where else "")
            with self._db.connect() as conn:
                total = conn.execute(count_sql, params).fetchone()[0]
                movies = []
                # an offset SQLite cannot bind is past the end of any table
                if offset <= MAX_SQLITE_INTEGER:
                    movies = _select_movies(conn, where, params, limit=page_size, offset=offset)
        except Exception as exc:
            logger.exception("Error fetching movies page=%s page_size=%s", page, page_size)
            return ServiceResult[MoviePage].fail(database_error(
                "Failed to fetch movies with pagination", "FETCH_MOVIES_PAGINATION_ERROR", exc,
                page=page, page_size=page_size, genre_filter=genre_filter,
            ))

        return ServiceResult[MoviePage].ok(MoviePage(
            movies=movies,
            total=total,
            page=page,
            total_pages=math.ceil(total / page_size),
        ))

    def get_movie_by_id(self, movie_id: int) -> ServiceResult[Movie]:
        if not _is_positive_int(movie_id):
            return ServiceResult[Movie].fail(validation_error(
                "Movie ID must be a positive integer", "INVALID_MOVIE_ID",
                provided_id=movie_id,
            ))
        if movie_id > MAX_SQLITE_INTEGER:
            return ServiceResult[Movie].ok(None)

        try:
            found = self._fetch_movies("m.id = ?", (movie_id,))
        except Exception as exc:
            logger.exception("Error fetching movie %s", movie_id)
            return ServiceResult[Movie].fail(database_error(
                "Failed to fetch movie by ID", "FETCH_MOVIE_BY_ID_ERROR", exc,
                movie_id=movie_id,
            ))
        return ServiceResult[Movie].ok(found[0] if found else None)

    def get_sci_fi_movies(self) -> ServiceResult[list[Movie]]:
        return self.get_movies_by_genre(SCI_FI_GENRE)

    def update_movie(self, movie_id: int, patch: MovieUpdate) -> ServiceResult[Movie]:
        """Write the fields set on ``patch`` and return the refreshed movie.

        The conditional ``UPDATE`` and the read-back share one immediate
        transaction, so a concurrent delete surfaces as ``MOVIE_NOT_FOUND``.
        """
        if not _is_positive_int(movie_id):
            return ServiceResult[Movie].fail(validation_error(
                "Movie ID must be a positive integer", "INVALID_MOVIE_ID",
                provided_id=movie_id,
            ))

        changes = patch.model_dump(exclude_unset=True)
        problem = _validate_patch(changes)
        if problem is not None:
            return ServiceResult[Movie].fail(problem)
        if movie_id > MAX_SQLITE_INTEGER:
            return ServiceResult[Movie].fail(not_found_error(
                "Movie not found", "MOVIE_NOT_FOUND", movie_id=movie_id,
            ))

        values = _to_columns(changes)
        try:
            with self._db.transaction() as conn:
                if values:
                    assignments = ", ".join(f"{column} = ?" for column in values)
                    cur = conn.execute(
                        f"UPDATE movies SET {assignments} WHERE id = ?",
                        (*values.values(), movie_id),
                    )
                    exists = cur.rowcount > 0
                else:
                    exists = conn.execute(
                        "SELECT 1 FROM movies WHERE id = ?", (movie_id,)
                    ).fetchone() is not None

                refreshed = _select_movies(conn, "m.id = ?", (movie_id,)) if exists else []
            movie = refreshed[0] if refreshed else None
        except Exception as exc:
            logger.exception("Error updating movie %s", movie_id)
            return ServiceResult[Movie].fail(database_error(
                "Failed to update movie", "UPDATE_MOVIE_ERROR", exc,
                movie_id=movie_id, update_data=changes,
            ))

        if movie is None:
            return ServiceResult[Movie].fail(not_found_error(
                "Movie not found", "MOVIE_NOT_FOUND", movie_id=movie_id,
            ))

        logger.info("Updated movie %s fields=%s", movie_id, sorted(values))
        return ServiceResult[Movie].ok(movie)

    def check_connection(self) -> ServiceResult[bool]:
        try:
            with self._db.connect() as conn:
                conn.execute("SELECT 1").fetchone()
        except Exception as exc:
            logger.exception("Database connection check failed")
            return ServiceResult[bool].fail(connection_error(
                "Database connection failed", "DATABASE_CONNECTION_ERROR", exc,
            ))
        return ServiceResult[bool].ok(True)
