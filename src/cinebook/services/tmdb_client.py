"""TMDb API client used to seed the movie catalog."""

import logging
from datetime import datetime, timezone
from typing import Any

import httpx

from cinebook.config import settings

logger = logging.getLogger(__name__)

IMAGE_BASE_URL = "https://image.tmdb.org/t/p/w500"


class TMDbClient:
    """Client for The Movie Database (TMDb) API."""

    BASE_URL = "https://api.themoviedb.org/3"

    def __init__(self, api_key: str | None = None) -> None:
        """
        Initialize TMDb client.

        Args:
            api_key: TMDb API key (uses settings if not provided)
        """
        self.api_key = api_key or settings.tmdb_api_key
        if not self.api_key:
            logger.warning("TMDb API key not configured")

    async def _get(self, path: str, **params: Any) -> dict[str, Any] | None:
        if not self.api_key:
            logger.warning(f"Cannot call TMDb {path} without API key")
            return None

        try:
            async with httpx.AsyncClient(timeout=settings.http_timeout) as client:
                response = await client.get(
                    f"{self.BASE_URL}{path}",
                    params={"api_key": self.api_key, **params},
                )
                response.raise_for_status()
                return response.json()

        except httpx.HTTPError as e:
            logger.error(f"TMDb request error for {path}: {e}")
            return None

    async def now_playing(self, limit: int = 20) -> list[dict[str, Any]]:
        """First page of now-playing movies (at most ``limit``)."""
        data = await self._get("/movie/now_playing", language="en-US", page=1)
        if not data:
            return []
        return data.get("results", [])[:limit]

    async def get_movie_details(self, tmdb_id: int) -> dict[str, Any] | None:
        """Movie details with credits and videos appended."""
        return await self._get(f"/movie/{tmdb_id}", append_to_response="credits,videos")

    @staticmethod
    def extract_director(credits: dict[str, Any]) -> str | None:
        for person in credits.get("crew", []):
            if person.get("job") == "Director":
                return person.get("name")
        return None

    @staticmethod
    def extract_cast(credits: dict[str, Any], n: int = 10) -> list[str]:
        """Top-billed cast member names (up to n)."""
        cast = credits.get("cast", [])
        return [person["name"] for person in cast[:n] if person.get("name")]

    @staticmethod
    def extract_trailer_url(details: dict[str, Any]) -> str | None:
        for video in details.get("videos", {}).get("results", []):
            if video.get("type") == "Trailer" and video.get("site") == "YouTube":
                return f"https://www.youtube.com/watch?v={video['key']}"
        return None

    @staticmethod
    def content_rating(details: dict[str, Any]) -> str:
        """Rough certification; TMDb has no region-independent rating."""
        if details.get("adult"):
            return "R"
        if (details.get("vote_average") or 0) >= 7:
            return "PG-13"
        return "PG"

    def to_movie_fields(self, summary: dict[str, Any], details: dict[str, Any]) -> dict[str, Any]:
        """
        Map TMDb payloads to Movie column values.

        Args:
            summary: Entry from the now-playing list
            details: Result of get_movie_details

        Returns:
            Keyword arguments for ``Movie(...)``
        """
        credits = details.get("credits", {})
        release_date = None
        if summary.get("release_date"):
            try:
                release_date = datetime.strptime(summary["release_date"], "%Y-%m-%d").replace(
                    tzinfo=timezone.utc
                )
            except ValueError:
                logger.debug(f"Unparseable release date {summary['release_date']!r}")

        now = datetime.now(timezone.utc)
        return {
            "title": summary.get("title") or details.get("title"),
            "description": summary.get("overview"),
            "genre": ", ".join(g["name"] for g in details.get("genres", [])) or None,
            "duration": details.get("runtime"),
            "rating": self.content_rating(details),
            "score": summary.get("vote_average"),
            "poster_url": (
                f"{IMAGE_BASE_URL}{summary['poster_path']}" if summary.get("poster_path") else None
            ),
            "backdrop_url": (
                f"{IMAGE_BASE_URL}{summary['backdrop_path']}"
                if summary.get("backdrop_path")
                else None
            ),
            "trailer_url": self.extract_trailer_url(details),
            "language": details.get("original_language"),
            "director": self.extract_director(credits),
            "cast": self.extract_cast(credits),
            "release_date": release_date,
            "status": (
                "streaming_now" if release_date is None or release_date <= now else "coming_soon"
            ),
        }
