"""
setup_db.py — Build the movie catalog database from the TMDB 5000 dataset.

Data sources (expected in the workspace):
  tmdb5000/tmdb_5000_movies.csv
  tmdb5000/tmdb_5000_credits.csv

Output: the database at MOVIE_CATALOG_DB_PATH (default movies.db)
"""

import csv
import json
import os
import sqlite3
import sys
import time
from datetime import date
from pathlib import Path

from app.config import settings
from app.services.database import DatabaseService

BASE_DIR = Path(__file__).resolve().parent

TMDB_MOVIES_CSV = BASE_DIR / "tmdb5000" / "tmdb_5000_movies.csv"
TMDB_CREDITS_CSV = BASE_DIR / "tmdb5000" / "tmdb_5000_credits.csv"

MAX_CAST_PER_MOVIE = 10

CATALOG_TABLES = [
    "movies", "genres", "actors", "directors",
    "movie_genres", "movie_actors", "movie_directors",
]


def parse_release_date(text: str | None) -> str | None:
    if not text:
        return None
    try:
        return date.fromisoformat(text.strip()).isoformat()
    except ValueError:
        return None


def parse_number(text: str | None, cast=float):
    if text is None or not text.strip():
        return None
    try:
        return cast(float(text))
    except ValueError:
        return None


def safe_json_loads(text: str) -> list:
    try:
        return json.loads(text)
    except (json.JSONDecodeError, TypeError):
        return []


def movie_row(row: dict) -> tuple | None:
    """Map a CSV row to a movies tuple, or None if it breaks a column constraint."""
    title = (row.get("title") or "").strip()
    overview = (row.get("overview") or "").strip()
    release_date = parse_release_date(row.get("release_date"))
    popularity = parse_number(row.get("popularity")) or 0.0
    vote_average = parse_number(row.get("vote_average")) or 0.0
    vote_count = parse_number(row.get("vote_count"), int) or 0

    if not title or not overview or release_date is None:
        return None
    if popularity < 0 or not 0 <= vote_average <= 10 or vote_count < 0:
        return None

    return (
        int(row["id"]),
        title,
        overview,
        release_date,
        row.get("poster_path") or None,
        row.get("backdrop_path") or None,
        popularity,
        vote_average,
        vote_count,
    )


def load_movies_and_genres(cur: sqlite3.Cursor, csv_path: Path) -> set[int]:
    """Parse tmdb_5000_movies.csv -> movies + genres + movie_genres. Returns set of loaded movie ids."""
    movie_ids = set()

    with open(csv_path, encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            values = movie_row(row)
            if values is None:
                continue
            movie_id = values[0]
            movie_ids.add(movie_id)

            cur.execute(
                """INSERT OR IGNORE INTO movies
                   (id, title, overview, release_date, poster_path, backdrop_path,
                    popularity, vote_average, vote_count)
                   VALUES (?,?,?,?,?,?,?,?,?)""",
                values,
            )

            for g in safe_json_loads(row.get("genres", "[]")):
                cur.execute("INSERT OR IGNORE INTO genres (id, name) VALUES (?, ?)", (g["id"], g["name"]))
                cur.execute(
                    "INSERT OR IGNORE INTO movie_genres (movie_id, genre_id) VALUES (?, ?)",
                    (movie_id, g["id"]),
                )

    return movie_ids


def load_credits(cur: sqlite3.Cursor, csv_path: Path, movie_ids: set[int]) -> None:
    """Parse tmdb_5000_credits.csv -> actors + directors and their junctions."""
    with open(csv_path, encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            movie_id = int(row["movie_id"])
            if movie_id not in movie_ids:
                continue

            cast_list = safe_json_loads(row.get("cast", "[]"))
            cast_list.sort(key=lambda c: c.get("order", 9999))
            for member in cast_list[:MAX_CAST_PER_MOVIE]:
                cur.execute(
                    "INSERT OR IGNORE INTO actors (id, name) VALUES (?, ?)",
                    (member["id"], member["name"]),
                )
                cur.execute(
                    "INSERT OR IGNORE INTO movie_actors (movie_id, actor_id) VALUES (?, ?)",
                    (movie_id, member["id"]),
                )

            for person in safe_json_loads(row.get("crew", "[]")):
                if person.get("job") != "Director":
                    continue
                cur.execute(
                    "INSERT OR IGNORE INTO directors (id, name) VALUES (?, ?)",
                    (person["id"], person["name"]),
                )
                cur.execute(
                    "INSERT OR IGNORE INTO movie_directors (movie_id, director_id) VALUES (?, ?)",
                    (movie_id, person["id"]),
                )


def table_counts(cur: sqlite3.Cursor) -> dict[str, int]:
    counts = {}
    for table in CATALOG_TABLES:
        cur.execute(f"SELECT COUNT(*) FROM {table}")
        counts[table] = cur.fetchone()[0]
    return counts


def print_summary(cur: sqlite3.Cursor) -> None:
    print("\n=== Database Summary ===")
    for table, count in table_counts(cur).items():
        print(f"  {table:20s}: {count:>8,} rows")

    print("\n=== Sample: Top 5 highest-rated movies (min 50 votes) ===")
    cur.execute("""
        SELECT m.title, m.release_date, m.vote_average,
               GROUP_CONCAT(DISTINCT g.name) AS genres,
               GROUP_CONCAT(DISTINCT d.name) AS directors
        FROM movies m
        LEFT JOIN movie_genres mg ON mg.movie_id = m.id
        LEFT JOIN genres g ON g.id = mg.genre_id
        LEFT JOIN movie_directors md ON md.movie_id = m.id
        LEFT JOIN directors d ON d.id = md.director_id
        WHERE m.vote_count >= 50
        GROUP BY m.id
        ORDER BY m.vote_average DESC
        LIMIT 5
    """)
    for row in cur.fetchall():
        title, released, avg, genres, directors = row
        print(f"  {title} ({released[:4]}) {avg}/10 | Genres: {genres} | Director(s): {directors}")


def main() -> None:
    for path in (TMDB_MOVIES_CSV, TMDB_CREDITS_CSV):
        if not path.exists():
            print(f"ERROR: Missing data file: {path}", file=sys.stderr)
            sys.exit(1)

    db_path = settings.db_path
    if db_path.exists():
        os.remove(db_path)
        print(f"Removed existing {db_path.name}")

    t0 = time.perf_counter()
    db = DatabaseService(db_path)
    print("Creating schema...")
    db.init_schema()

    with db.connect() as conn:
        cur = conn.cursor()

        print("Loading movies & genres...")
        movie_ids = load_movies_and_genres(cur, TMDB_MOVIES_CSV)
        conn.commit()
        print(f"  Loaded {len(movie_ids)} movies")

        print("Loading actors & directors...")
        load_credits(cur, TMDB_CREDITS_CSV, movie_ids)
        conn.commit()

        print_summary(cur)

    elapsed = time.perf_counter() - t0
    print(f"\nDone. Database written to {db_path}  ({elapsed:.1f}s)")


if __name__ == "__main__":
    main()
