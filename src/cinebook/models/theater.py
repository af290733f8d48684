"""Theater model for cinema venues."""

from typing import TYPE_CHECKING

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cinebook.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from cinebook.models.seat import Seat
    from cinebook.models.showtime import Showtime


class Theater(Base, TimestampMixin):
    """Cinema venue with one or more numbered screens."""

    __tablename__ = "theaters"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    address: Mapped[str] = mapped_column(Text, nullable=False)
    city: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    state: Mapped[str | None] = mapped_column(String(50), nullable=True)
    zip_code: Mapped[str | None] = mapped_column(String(20), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(30), nullable=True)
    screens: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    # Relationships
    seats: Mapped[list["Seat"]] = relationship(
        back_populates="theater",
        cascade="all, delete-orphan",
    )
    showtimes: Mapped[list["Showtime"]] = relationship(
        back_populates="theater",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Theater(id={self.id}, name={self.name!r}, city={self.city!r})>"
