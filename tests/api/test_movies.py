"""Tests for the movie catalog endpoints."""

from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

from conftest import NOW, make_movie, make_showtime, make_theater
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from cinebook.database import get_db


def make_db_override(movies: list):
    async def override():
        db = AsyncMock()
        result = MagicMock()
        result.scalars.return_value.all.return_value = movies
        result.scalar_one_or_none.return_value = movies[0] if movies else None
        db.execute = AsyncMock(return_value=result)
        yield db

    return override


def client_for(app: FastAPI) -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


async def test_list_movies_with_upcoming_showtimes(test_app: FastAPI) -> None:
    movie = make_movie()
    theater = make_theater()
    for i in range(7):
        make_showtime(movie, theater, id=i + 1, show_time=NOW + timedelta(hours=6 - i + 1))

    test_app.dependency_overrides[get_db] = make_db_override([movie])
    try:
        async with client_for(test_app) as client:
            response = await client.get("/api/movies?status=streaming_now")
    finally:
        test_app.dependency_overrides.clear()

    body = response.json()
    assert response.status_code == 200
    assert body["count"] == 1
    listed = body["data"]["movies"][0]
    assert listed["title"] == "Glass Harbor"
    assert listed["cast"] == ["Noah Brandt", "Ava Kim"]
    assert len(listed["showtimes"]) == 5
    assert listed["showtimes"] == sorted(listed["showtimes"])
    assert listed["showtimesDetails"][0]["theater"]["name"] == "Grand Cinema Downtown"


async def test_invalid_status_is_400(test_app: FastAPI) -> None:
    test_app.dependency_overrides[get_db] = make_db_override([])
    try:
        async with client_for(test_app) as client:
            response = await client.get("/api/movies/status/now_showing")
    finally:
        test_app.dependency_overrides.clear()

    assert response.status_code == 400
    assert response.json()["success"] is False


async def test_movies_by_status(test_app: FastAPI) -> None:
    movie = make_movie(status="coming_soon")
    test_app.dependency_overrides[get_db] = make_db_override([movie])
    try:
        async with client_for(test_app) as client:
            response = await client.get("/api/movies/status/coming_soon")
    finally:
        test_app.dependency_overrides.clear()

    assert response.status_code == 200
    assert response.json()["data"]["movies"][0]["status"] == "coming_soon"


async def test_get_movie(test_app: FastAPI) -> None:
    test_app.dependency_overrides[get_db] = make_db_override([make_movie()])
    try:
        async with client_for(test_app) as client:
            response = await client.get("/api/movies/1")
    finally:
        test_app.dependency_overrides.clear()

    assert response.status_code == 200
    assert response.json()["data"]["movie"]["id"] == 1


async def test_get_missing_movie_is_404(test_app: FastAPI) -> None:
    test_app.dependency_overrides[get_db] = make_db_override([])
    try:
        async with client_for(test_app) as client:
            response = await client.get("/api/movies/99")
    finally:
        test_app.dependency_overrides.clear()

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Movie not found"}
