"""Pydantic schemas for movies, theaters and showtimes."""

from datetime import datetime

from cinebook.models import Movie, Showtime
from cinebook.schemas.common import CamelModel
from cinebook.services.pricing import cents_to_amount


class MovieSummary(CamelModel):
    """Movie fields embedded in showtimes, bookings and tickets."""

    id: int
    title: str
    poster_url: str | None = None
    backdrop_url: str | None = None
    duration: int | None = None
    rating: str | None = None
    genre: str | None = None


class MovieResponse(MovieSummary):
    """Full movie record."""

    description: str | None = None
    score: float | None = None
    language: str | None = None
    director: str | None = None
    cast: list[str] | None = None
    trailer_url: str | None = None
    release_date: datetime | None = None
    status: str
    is_active: bool


class TheaterSummary(CamelModel):
    id: int
    name: str
    address: str
    city: str
    state: str | None = None
    zip_code: str | None = None
    phone: str | None = None


class ShowtimeBrief(CamelModel):
    """Upcoming showtime listed under a movie."""

    id: int
    show_time: datetime
    price: float
    available_seats: int
    theater: TheaterSummary

    @classmethod
    def from_showtime(cls, showtime: Showtime) -> "ShowtimeBrief":
        return cls(
            id=showtime.id,
            show_time=showtime.show_time,
            price=cents_to_amount(showtime.price_cents),
            available_seats=showtime.available_seats,
            theater=TheaterSummary.model_validate(showtime.theater),
        )


class MovieWithShowtimes(MovieResponse):
    showtimes: list[datetime]
    showtimes_details: list[ShowtimeBrief]

    @classmethod
    def from_movie(cls, movie: Movie, upcoming: list[Showtime]) -> "MovieWithShowtimes":
        base = MovieResponse.model_validate(movie)
        return cls(
            **base.model_dump(),
            showtimes=[s.show_time for s in upcoming],
            showtimes_details=[ShowtimeBrief.from_showtime(s) for s in upcoming],
        )


class ShowtimeResponse(CamelModel):
    """Showtime with its movie and theater."""

    id: int
    show_time: datetime
    screen_number: int
    price: float
    total_seats: int
    available_seats: int
    movie: MovieSummary
    theater: TheaterSummary

    @classmethod
    def from_showtime(cls, showtime: Showtime) -> "ShowtimeResponse":
        return cls(
            id=showtime.id,
            show_time=showtime.show_time,
            screen_number=showtime.screen_number,
            price=cents_to_amount(showtime.price_cents),
            total_seats=showtime.total_seats,
            available_seats=showtime.available_seats,
            movie=MovieSummary.model_validate(showtime.movie),
            theater=TheaterSummary.model_validate(showtime.theater),
        )


class ShowtimeDateGroup(CamelModel):
    date: str
    showtimes: list[ShowtimeResponse]
    count: int
