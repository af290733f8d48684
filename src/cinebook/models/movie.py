"""Movie model for catalog entries."""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Float, Integer, String, Text
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cinebook.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from cinebook.models.showtime import Showtime

MOVIE_STATUSES = ("streaming_now", "coming_soon")


class Movie(Base, TimestampMixin):
    """
    Movie model.

    Status is either ``streaming_now`` or ``coming_soon``; inactive movies are
    hidden from the public catalog but keep their booking history.
    """

    __tablename__ = "movies"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    genre: Mapped[str | None] = mapped_column(String(200), nullable=True)
    duration: Mapped[int | None] = mapped_column(Integer, nullable=True)
    rating: Mapped[str | None] = mapped_column(String(10), nullable=True)
    score: Mapped[float | None] = mapped_column(Float, nullable=True)
    language: Mapped[str | None] = mapped_column(String(10), nullable=True)
    director: Mapped[str | None] = mapped_column(String(200), nullable=True)
    cast: Mapped[list[str] | None] = mapped_column(ARRAY(String), nullable=True)
    poster_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    backdrop_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    trailer_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    release_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="streaming_now", index=True
    )
    is_active: Mapped[bool] = mapped_column(default=True, nullable=False)

    # Relationships
    showtimes: Mapped[list["Showtime"]] = relationship(
        back_populates="movie",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Movie(id={self.id}, title={self.title!r}, status={self.status!r})>"
