"""Integration tests for API endpoints using FastAPI TestClient.

The app runs its real lifespan against the seeded temp database from conftest.
"""

import sqlite3
from unittest.mock import patch

from app.services.database import DatabaseService


def movie_ids(body):
    return [m["id"] for m in body["data"]]


class TestHealth:
    def test_health_returns_200(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "healthy", "database": True}

    def test_health_degraded_when_store_down(self, client):
        with patch.object(DatabaseService, "connect", side_effect=sqlite3.OperationalError("gone")):
            resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "degraded", "database": False}


class TestListEndpoints:
    def test_top_rated(self, client):
        resp = client.get("/movies/top-rated?limit=2")
        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["error"] is None
        assert movie_ids(body) == [3, 1]

    def test_top_rated_invalid_limit(self, client):
        resp = client.get("/movies/top-rated?limit=0")
        assert resp.status_code == 400
        body = resp.json()
        assert body["success"] is False
        assert body["data"] is None
        assert body["error"]["code"] == "INVALID_LIMIT"
        assert body["error"]["kind"] == "validation"
        assert body["error"]["context"] == {"provided_limit": 0}

    def test_sci_fi(self, client):
        resp = client.get("/movies/sci-fi")
        assert resp.status_code == 200
        assert movie_ids(resp.json()) == [3, 1]

    def test_by_genre(self, client):
        resp = client.get("/movies/genre/Action")
        assert resp.status_code == 200
        body = resp.json()
        assert movie_ids(body) == [1, 2, 5]
        for m in body["data"]:
            assert "Action" in [g["name"] for g in m["genres"]]

    def test_by_genre_trims(self, client):
        resp = client.get("/movies/genre/%20%20Action%20")
        assert movie_ids(resp.json()) == [1, 2, 5]

    def test_by_genre_blank(self, client):
        resp = client.get("/movies/genre/%20%20")
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "INVALID_GENRE_NAME"

    def test_pagination(self, client):
        resp = client.get("/movies?page=2&page_size=2")
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["total"] == 5
        assert data["page"] == 2
        assert data["total_pages"] == 3
        assert [m["id"] for m in data["movies"]] == [2, 5]

    def test_pagination_genre_filter(self, client):
        data = client.get("/movies?genre=Drama").json()["data"]
        assert data["total"] == 2
        assert [m["id"] for m in data["movies"]] == [3, 4]

    def test_pagination_invalid(self, client):
        resp = client.get("/movies?page=0")
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "INVALID_PAGINATION_PARAMS"

    def test_store_failure_maps_to_500(self, client):
        with patch.object(DatabaseService, "connect", side_effect=sqlite3.OperationalError("boom")):
            resp = client.get("/movies/top-rated")
        assert resp.status_code == 500
        error = resp.json()["error"]
        assert error["code"] == "FETCH_TOP_RATED_MOVIES_ERROR"
        assert error["kind"] == "database"
        assert error["context"]["original_error"] == "boom"


class TestMovieEndpoint:
    def test_get_movie_by_id(self, client):
        resp = client.get("/movies/1")
        assert resp.status_code == 200
        movie = resp.json()["data"]
        assert movie["title"] == "Alpha"
        assert movie["release_date"] == "2010-07-16"
        assert [d["name"] for d in movie["directors"]] == ["Dana Director"]

    def test_get_movie_not_found_is_null_success(self, client):
        resp = client.get("/movies/999999999")
        assert resp.status_code == 200
        assert resp.json() == {"data": None, "error": None, "success": True}

    def test_get_movie_invalid_id(self, client):
        resp = client.get("/movies/-1")
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "INVALID_MOVIE_ID"

    def test_patch_title(self, client):
        resp = client.patch("/movies/1", json={"title": "Alpha Returns"})
        assert resp.status_code == 200
        assert resp.json()["data"]["title"] == "Alpha Returns"
        assert client.get("/movies/1").json()["data"]["title"] == "Alpha Returns"

    def test_patch_null_clears_only_that_path(self, client):
        resp = client.patch("/movies/1", json={"poster_path": None})
        movie = resp.json()["data"]
        assert movie["poster_path"] is None
        assert movie["backdrop_path"] == "/alpha_bg.jpg"

    def test_patch_invalid_vote_average(self, client):
        resp = client.patch("/movies/1", json={"vote_average": 11})
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "INVALID_VOTE_AVERAGE"
        assert client.get("/movies/1").json()["data"]["vote_average"] == 8.5

    def test_patch_missing_movie(self, client):
        resp = client.patch("/movies/999", json={"title": "X"})
        assert resp.status_code == 404
        assert resp.json()["error"]["code"] == "MOVIE_NOT_FOUND"

    def test_patch_malformed_body_rejected(self, client):
        resp = client.patch("/movies/1", json={"vote_count": "many"})
        assert resp.status_code == 422
