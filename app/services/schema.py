"""SQLite schema for the movie catalog.

Movies, genres, actors and directors are plain entity tables; the three
``movie_*`` tables are junctions keyed on both ids and cascade-deleted with
either endpoint.
"""

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS movies (
    id            INTEGER PRIMARY KEY,
    title         TEXT    NOT NULL CHECK (length(trim(title)) > 0),
    overview      TEXT    NOT NULL CHECK (length(trim(overview)) > 0),
    release_date  TEXT    NOT NULL,
    poster_path   TEXT,
    backdrop_path TEXT,
    popularity    REAL    NOT NULL DEFAULT 0 CHECK (popularity >= 0),
    vote_average  REAL    NOT NULL DEFAULT 0 CHECK (vote_average BETWEEN 0 AND 10),
    vote_count    INTEGER NOT NULL DEFAULT 0 CHECK (vote_count >= 0)
);

CREATE TABLE IF NOT EXISTS genres (
    id   INTEGER PRIMARY KEY,
    name TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS actors (
    id   INTEGER PRIMARY KEY,
    name TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS directors (
    id   INTEGER PRIMARY KEY,
    name TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS movie_genres (
    movie_id INTEGER NOT NULL REFERENCES movies(id) ON DELETE CASCADE,
    genre_id INTEGER NOT NULL REFERENCES genres(id) ON DELETE CASCADE,
    PRIMARY KEY (movie_id, genre_id)
);

CREATE TABLE IF NOT EXISTS movie_actors (
    movie_id INTEGER NOT NULL REFERENCES movies(id) ON DELETE CASCADE,
    actor_id INTEGER NOT NULL REFERENCES actors(id) ON DELETE CASCADE,
    PRIMARY KEY (movie_id, actor_id)
);

CREATE TABLE IF NOT EXISTS movie_directors (
    movie_id    INTEGER NOT NULL REFERENCES movies(id) ON DELETE CASCADE,
    director_id INTEGER NOT NULL REFERENCES directors(id) ON DELETE CASCADE,
    PRIMARY KEY (movie_id, director_id)
);

CREATE INDEX IF NOT EXISTS idx_movies_vote_average    ON movies(vote_average DESC);
CREATE INDEX IF NOT EXISTS idx_movies_release_date    ON movies(release_date DESC);
CREATE INDEX IF NOT EXISTS idx_movies_popularity      ON movies(popularity DESC);
CREATE INDEX IF NOT EXISTS idx_genres_name            ON genres(name);
CREATE INDEX IF NOT EXISTS idx_actors_name            ON actors(name);
CREATE INDEX IF NOT EXISTS idx_directors_name         ON directors(name);
CREATE INDEX IF NOT EXISTS idx_movie_genres_genre     ON movie_genres(genre_id);
CREATE INDEX IF NOT EXISTS idx_movie_actors_actor     ON movie_actors(actor_id);
CREATE INDEX IF NOT EXISTS idx_movie_directors_director ON movie_directors(director_id);
"""
