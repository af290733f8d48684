"""Seed the database with theaters, seating charts, movies, showtimes and a demo user."""

import asyncio
import logging
import string
from datetime import datetime, timedelta, timezone
from typing import Any

from sqlalchemy import func, select

from cinebook.database import AsyncSessionLocal
from cinebook.models import Movie, Seat, Showtime, Theater, User
from cinebook.security import hash_password
from cinebook.services.tmdb_client import TMDbClient

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
logger = logging.getLogger(__name__)

SEAT_ROWS = 8
SEAT_COLUMNS = 12
PREMIUM_ROWS = ("D", "E", "F")
PREMIUM_COLUMNS = range(4, 10)
REGULAR_PRICE_CENTS = 1000
PREMIUM_PRICE_CENTS = 1500
BASE_PRICE_CENTS = 1200
SHOWTIME_DAYS = 7
SHOWTIME_HOURS = (14, 17, 20)
MOVIES_TO_FETCH = 10
DEMO_EMAIL = "demo@cinebook.dev"
DEMO_PASSWORD = "demo1234"

THEATERS_DATA = [
    {
        "name": "Grand Cinema Downtown",
        "address": "123 Main Street",
        "city": "New York",
        "state": "NY",
        "zip_code": "10001",
        "phone": "(212) 555-0100",
        "screens": 3,
    },
    {
        "name": "Riverside Multiplex",
        "address": "456 River Road",
        "city": "Chicago",
        "state": "IL",
        "zip_code": "60601",
        "phone": "(312) 555-0200",
        "screens": 2,
    },
]

SAMPLE_MOVIES = [
    {
        "title": "The Long Night Shift",
        "description": "A hospital porter uncovers a conspiracy over one sleepless night.",
        "genre": "Thriller",
        "duration": 118,
        "rating": "PG-13",
        "score": 7.4,
        "language": "en",
        "director": "Maya Ortiz",
        "cast": ["Daniel Reyes", "Priya Shah", "Tom Whitfield"],
        "status": "streaming_now",
    },
    {
        "title": "Paper Comets",
        "description": "Two siblings build a rocket from the contents of their grandfather's attic.",
        "genre": "Family, Adventure",
        "duration": 102,
        "rating": "PG",
        "score": 7.9,
        "language": "en",
        "director": "Sam Okafor",
        "cast": ["Lily Chen", "Marcus Hale"],
        "status": "streaming_now",
    },
    {
        "title": "Glass Harbor",
        "description": "A salvage crew finds something that should have stayed on the seabed.",
        "genre": "Science Fiction",
        "duration": 131,
        "rating": "PG-13",
        "score": 6.8,
        "language": "en",
        "director": "Ingrid Solberg",
        "cast": ["Noah Brandt", "Ava Kim", "Jonas Weller"],
        "status": "streaming_now",
    },
    {
        "title": "Quiet Orchard",
        "description": "A widowed farmer and a travelling musician share one harvest season.",
        "genre": "Drama, Romance",
        "duration": 109,
        "rating": "PG",
        "score": 7.1,
        "language": "en",
        "director": "Elena Marsh",
        "cast": ["Clara Boone", "Felix Moreau"],
        "status": "coming_soon",
    },
]


def build_seat_grid(theater_id: int, screen_number: int) -> list[Seat]:
    """Rows A-H by columns 1-12; the centre block of rows D-F is premium."""
    seats = []
    for row_name in string.ascii_uppercase[:SEAT_ROWS]:
        for column in range(1, SEAT_COLUMNS + 1):
            premium = row_name in PREMIUM_ROWS and column in PREMIUM_COLUMNS
            seats.append(
                Seat(
                    theater_id=theater_id,
                    screen_number=screen_number,
                    seat_number=f"{row_name}{column}",
                    row_name=row_name,
                    seat_column=column,
                    seat_type="premium" if premium else "regular",
                    price_cents=PREMIUM_PRICE_CENTS if premium else REGULAR_PRICE_CENTS,
                    is_aisle=column in (1, SEAT_COLUMNS),
                )
            )
    return seats


async def fetch_movies() -> list[dict[str, Any]]:
    """Now-playing movies from TMDb, or the built-in samples without an API key."""
    tmdb = TMDbClient()
    if not tmdb.api_key:
        logger.info("TMDB_API_KEY not set, using sample movies")
        return SAMPLE_MOVIES

    movies = []
    for summary in await tmdb.now_playing(limit=MOVIES_TO_FETCH):
        details = await tmdb.get_movie_details(summary["id"])
        if details is None:
            logger.warning(f"No TMDb details for {summary.get('title')!r}, skipping")
            continue
        movies.append(tmdb.to_movie_fields(summary, details))

    if not movies:
        logger.warning("TMDb returned no movies, using sample movies")
        return SAMPLE_MOVIES
    return movies


async def seed() -> None:
    """Populate an empty database; refuses to run twice."""
    async with AsyncSessionLocal() as db:
        existing = await db.scalar(select(func.count()).select_from(Theater))
        if existing:
            logger.info(f"{existing} theaters already present, skipping seed")
            return

        theaters = [Theater(**data) for data in THEATERS_DATA]
        db.add_all(theaters)
        await db.flush()

        seat_count = 0
        for theater in theaters:
            for screen_number in range(1, theater.screens + 1):
                seats = build_seat_grid(theater.id, screen_number)
                db.add_all(seats)
                seat_count += len(seats)
        logger.info(f"Added {len(theaters)} theaters with {seat_count} seats")

        movies = [Movie(**data) for data in await fetch_movies()]
        db.add_all(movies)
        await db.flush()
        logger.info(f"Added {len(movies)} movies")

        today = datetime.now(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)
        total_seats = SEAT_ROWS * SEAT_COLUMNS
        showtime_count = 0
        playing = [m for m in movies if m.status == "streaming_now"]
        for day in range(SHOWTIME_DAYS):
            for i, movie in enumerate(playing):
                theater = theaters[i % len(theaters)]
                screen_number = i % theater.screens + 1
                for hour in SHOWTIME_HOURS:
                    db.add(
                        Showtime(
                            movie_id=movie.id,
                            theater_id=theater.id,
                            screen_number=screen_number,
                            show_time=today + timedelta(days=day, hours=hour),
                            price_cents=BASE_PRICE_CENTS,
                            total_seats=total_seats,
                            available_seats=total_seats,
                        )
                    )
                    showtime_count += 1
        logger.info(f"Added {showtime_count} showtimes over {SHOWTIME_DAYS} days")

        db.add(
            User(
                email=DEMO_EMAIL,
                name="Demo User",
                phone="2125550100",
                password_hash=hash_password(DEMO_PASSWORD),
            )
        )
        logger.info(f"Demo user {DEMO_EMAIL} / {DEMO_PASSWORD}")

        await db.commit()
        logger.info("Seeding complete")


if __name__ == "__main__":
    asyncio.run(seed())
