"""Shared fixtures: a small seeded SQLite catalog, the services over it, and an API client."""

import pytest
from fastapi.testclient import TestClient

from app.config import settings
from app.main import app
from app.services.database import DatabaseService
from app.services.movie_service import MovieService

MOVIES = [
    # id, title, overview, release_date, poster, backdrop, popularity, vote_average, vote_count
    (1, "Alpha", "A heist goes wrong.", "2010-07-16", "/alpha.jpg", "/alpha_bg.jpg", 50.0, 8.5, 1200),
    (2, "Beta", "Two friends on a road trip.", "2004-03-01", None, None, 12.5, 7.0, 300),
    (3, "Gamma", "A probe reaches a new star.", "2014-11-07", "/gamma.jpg", None, 80.0, 9.1, 5000),
    (4, "Delta", "A family reunion.", "1999-05-21", None, None, 3.0, 6.2, 40),
    (5, "Epsilon", "A rookie cop's first week.", "2019-09-13", None, None, 22.0, 7.0, 150),
]
GENRES = [(10, "Action"), (20, "Drama"), (30, "Science Fiction")]
ACTORS = [(100, "Zoe Actor"), (101, "Adam Actor")]
DIRECTORS = [(200, "Dana Director")]
MOVIE_GENRES = [(1, 10), (1, 30), (2, 10), (3, 20), (3, 30), (4, 20), (5, 10)]
MOVIE_ACTORS = [(1, 100), (1, 101), (3, 100)]
MOVIE_DIRECTORS = [(1, 200), (3, 200)]


def seed(db: DatabaseService) -> None:
    with db.connect() as conn:
        conn.executemany("INSERT INTO movies VALUES (?,?,?,?,?,?,?,?,?)", MOVIES)
        conn.executemany("INSERT INTO genres (id, name) VALUES (?, ?)", GENRES)
        conn.executemany("INSERT INTO actors (id, name) VALUES (?, ?)", ACTORS)
        conn.executemany("INSERT INTO directors (id, name) VALUES (?, ?)", DIRECTORS)
        conn.executemany("INSERT INTO movie_genres VALUES (?, ?)", MOVIE_GENRES)
        conn.executemany("INSERT INTO movie_actors VALUES (?, ?)", MOVIE_ACTORS)
        conn.executemany("INSERT INTO movie_directors VALUES (?, ?)", MOVIE_DIRECTORS)
        conn.commit()


@pytest.fixture()
def db(tmp_path):
    database = DatabaseService(tmp_path / "catalog.db")
    database.init_schema()
    seed(database)
    return database


@pytest.fixture()
def service(db):
    return MovieService(db)


@pytest.fixture()
def client(db, monkeypatch):
    monkeypatch.setattr(settings, "db_path", db.db_path)
    with TestClient(app) as c:
        yield c
