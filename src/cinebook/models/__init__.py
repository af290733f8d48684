"""SQLAlchemy ORM models."""

from cinebook.models.base import Base
from cinebook.models.booking import Booking, BookingSeat
from cinebook.models.movie import Movie
from cinebook.models.seat import Seat
from cinebook.models.showtime import Showtime
from cinebook.models.theater import Theater
from cinebook.models.user import User

__all__ = ["Base", "Booking", "BookingSeat", "Movie", "Seat", "Showtime", "Theater", "User"]
