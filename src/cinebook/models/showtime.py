"""Showtime model for scheduled screenings."""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cinebook.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from cinebook.models.booking import Booking
    from cinebook.models.movie import Movie
    from cinebook.models.theater import Theater


class Showtime(Base, TimestampMixin):
    """
    Scheduled screening of a movie on one theater screen.

    ``total_seats`` / ``available_seats`` are advisory counters for listings.
    Seat occupancy is always derived from active booking seats.
    """

    __tablename__ = "showtimes"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    # Foreign keys
    movie_id: Mapped[int] = mapped_column(
        ForeignKey("movies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    theater_id: Mapped[int] = mapped_column(
        ForeignKey("theaters.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Screening details
    screen_number: Mapped[int] = mapped_column(Integer, nullable=False)
    show_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
    )
    price_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    total_seats: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    available_seats: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(default=True, nullable=False)

    # Relationships
    movie: Mapped["Movie"] = relationship(back_populates="showtimes")
    theater: Mapped["Theater"] = relationship(back_populates="showtimes")
    bookings: Mapped[list["Booking"]] = relationship(back_populates="showtime")

    def has_started(self, now: datetime) -> bool:
        return self.show_time < now

    def __repr__(self) -> str:
        return (
            f"<Showtime(id={self.id}, movie_id={self.movie_id}, "
            f"theater_id={self.theater_id}, show_time={self.show_time})>"
        )
