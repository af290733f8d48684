"""Seat model for the physical seating chart of a theater screen."""

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cinebook.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from cinebook.models.booking import BookingSeat
    from cinebook.models.theater import Theater

SEAT_TYPES = ("regular", "premium")


class Seat(Base, TimestampMixin):
    """
    Physical seat scoped to a (theater, screen).

    Seats are generated with the seating chart and never change with
    bookings; occupancy is derived per showtime from active booking seats.
    ``price_cents`` overrides the showtime base price when set.
    """

    __tablename__ = "seats"
    __table_args__ = (
        UniqueConstraint(
            "theater_id",
            "screen_number",
            "seat_number",
            name="uq_theater_screen_seat",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    theater_id: Mapped[int] = mapped_column(
        ForeignKey("theaters.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    screen_number: Mapped[int] = mapped_column(Integer, nullable=False)
    seat_number: Mapped[str] = mapped_column(String(10), nullable=False)
    row_name: Mapped[str] = mapped_column(String(5), nullable=False)
    seat_column: Mapped[int] = mapped_column(Integer, nullable=False)
    seat_type: Mapped[str] = mapped_column(String(20), nullable=False, default="regular")
    price_cents: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_aisle: Mapped[bool] = mapped_column(default=False, nullable=False)
    is_active: Mapped[bool] = mapped_column(default=True, nullable=False)

    # Relationships
    theater: Mapped["Theater"] = relationship(back_populates="seats")
    booking_seats: Mapped[list["BookingSeat"]] = relationship(back_populates="seat")

    def effective_price_cents(self, base_price_cents: int) -> int:
        """Seat override if present, otherwise the showtime base price."""
        if self.price_cents is None:
            return base_price_cents
        return self.price_cents

    def __repr__(self) -> str:
        return (
            f"<Seat(id={self.id}, theater_id={self.theater_id}, "
            f"screen={self.screen_number}, seat={self.seat_number!r})>"
        )
