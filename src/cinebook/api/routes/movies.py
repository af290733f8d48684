"""Movie catalog endpoints."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload, with_loader_criteria

from cinebook.database import get_db
from cinebook.errors import BookingValidationError, NotFoundError
from cinebook.models import Movie, Showtime
from cinebook.models.movie import MOVIE_STATUSES
from cinebook.schemas import ApiResponse, MovieWithShowtimes
from cinebook.services.booking_ledger import utcnow

router = APIRouter()

UPCOMING_PER_MOVIE = 5


def _movies_with_upcoming():
    now = utcnow()
    return (
        select(Movie)
        .options(
            selectinload(Movie.showtimes).selectinload(Showtime.theater),
            with_loader_criteria(
                Showtime,
                (Showtime.is_active.is_(True)) & (Showtime.show_time >= now),
                include_aliases=True,
            ),
        )
        .where(Movie.is_active.is_(True))
        .order_by(Movie.release_date.desc().nulls_last())
    )


def _to_response(movie: Movie) -> MovieWithShowtimes:
    upcoming = sorted(movie.showtimes, key=lambda s: s.show_time)[:UPCOMING_PER_MOVIE]
    return MovieWithShowtimes.from_movie(movie, upcoming)


@router.get("/movies", response_model=ApiResponse[dict[str, list[MovieWithShowtimes]]])
async def list_movies(
    status: str | None = Query(None, description="streaming_now or coming_soon"),
    genre: str | None = Query(None),
    search: str | None = Query(None, description="Case-insensitive title search"),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[dict[str, list[MovieWithShowtimes]]]:
    """Active movies, newest release first, each with its next few showtimes."""
    stmt = _movies_with_upcoming()
    if status:
        stmt = stmt.where(Movie.status == status)
    if genre:
        stmt = stmt.where(Movie.genre.contains(genre))
    if search:
        stmt = stmt.where(Movie.title.ilike(f"%{search}%"))

    result = await db.execute(stmt)
    movies = [_to_response(m) for m in result.scalars().all()]
    return ApiResponse(count=len(movies), data={"movies": movies})


@router.get(
    "/movies/status/{status}",
    response_model=ApiResponse[dict[str, list[MovieWithShowtimes]]],
)
async def list_movies_by_status(
    status: str,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[dict[str, list[MovieWithShowtimes]]]:
    if status not in MOVIE_STATUSES:
        raise BookingValidationError('Invalid status. Use "streaming_now" or "coming_soon"')

    result = await db.execute(_movies_with_upcoming().where(Movie.status == status))
    movies = [_to_response(m) for m in result.scalars().all()]
    return ApiResponse(count=len(movies), data={"movies": movies})


@router.get("/movies/{movie_id}", response_model=ApiResponse[dict[str, MovieWithShowtimes]])
async def get_movie(
    movie_id: int,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[dict[str, MovieWithShowtimes]]:
    result = await db.execute(_movies_with_upcoming().where(Movie.id == movie_id))
    movie = result.scalar_one_or_none()
    if movie is None:
        raise NotFoundError("Movie not found")
    return ApiResponse(data={"movie": _to_response(movie)})
