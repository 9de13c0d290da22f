"""Pydantic schemas for catalog records, update patches and API responses."""

from datetime import date

from pydantic import BaseModel, Field


# Shared sub-models

class NamedEntity(BaseModel):
    id: int
    name: str


class Movie(BaseModel):
    id: int
    title: str
    overview: str
    release_date: date
    popularity: float
    vote_average: float
    vote_count: int
    poster_path: str | None = None
    backdrop_path: str | None = None
    genres: list[NamedEntity] = Field(default_factory=list)
    actors: list[NamedEntity] = Field(default_factory=list)
    directors: list[NamedEntity] = Field(default_factory=list)


class MoviePage(BaseModel):
    movies: list[Movie]
    total: int
    page: int
    total_pages: int


class MovieUpdate(BaseModel):
    """Partial update of a movie's scalar fields.

    Only fields the caller actually set are written; an explicit ``None`` on
    ``poster_path`` / ``backdrop_path`` clears the column.
    """

    title: str | None = None
    overview: str | None = None
    release_date: date | None = None
    popularity: float | None = None
    vote_average: float | None = None
    vote_count: int | None = None
    poster_path: str | None = None
    backdrop_path: str | None = None


# Responses

class HealthResponse(BaseModel):
    status: str
    database: bool
