"""Booking and BookingSeat models for seat reservations."""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cinebook.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from cinebook.models.seat import Seat
    from cinebook.models.showtime import Showtime
    from cinebook.models.user import User

# Booking lifecycle
BOOKING_PENDING = "pending"
BOOKING_CONFIRMED = "confirmed"
BOOKING_CANCELLED = "cancelled"

# A booking in one of these states holds its seats for the showtime.
ACTIVE_BOOKING_STATUSES = (BOOKING_PENDING, BOOKING_CONFIRMED)

PAYMENT_PENDING = "pending"
PAYMENT_COMPLETED = "completed"


class Booking(Base, TimestampMixin):
    """
    Reservation of one or more seats for a single showtime.

    ``total_amount_cents`` is fixed when the booking is created; payment must
    present exactly this amount. Lifecycle is pending -> confirmed | cancelled,
    both terminal.
    """

    __tablename__ = "bookings"
    __table_args__ = (Index("ix_bookings_showtime_status", "showtime_id", "status"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    # Foreign keys
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    showtime_id: Mapped[int] = mapped_column(
        ForeignKey("showtimes.id", ondelete="CASCADE"),
        nullable=False,
    )

    booking_reference: Mapped[str] = mapped_column(String(20), nullable=False, unique=True)
    total_amount_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=BOOKING_PENDING)
    payment_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=PAYMENT_PENDING
    )
    payment_reference: Mapped[str | None] = mapped_column(String(30), nullable=True)
    booking_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    # Relationships
    user: Mapped["User"] = relationship(back_populates="bookings")
    showtime: Mapped["Showtime"] = relationship(back_populates="bookings")
    booking_seats: Mapped[list["BookingSeat"]] = relationship(
        back_populates="booking",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return (
            f"<Booking(id={self.id}, reference={self.booking_reference!r}, "
            f"status={self.status!r})>"
        )


class BookingSeat(Base):
    """
    Links one seat to one booking for the booking's showtime.

    ``showtime_id`` is copied from the parent booking so the active-seat
    query can be answered from this table and an index. Whether the seat is
    held depends on the parent booking's status, not on this row's status.
    """

    __tablename__ = "booking_seats"
    __table_args__ = (
        UniqueConstraint("booking_id", "seat_id", name="uq_booking_seat"),
        Index("ix_booking_seats_showtime_seat", "showtime_id", "seat_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    booking_id: Mapped[int] = mapped_column(
        ForeignKey("bookings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    seat_id: Mapped[int] = mapped_column(
        ForeignKey("seats.id", ondelete="CASCADE"),
        nullable=False,
    )
    showtime_id: Mapped[int] = mapped_column(
        ForeignKey("showtimes.id", ondelete="CASCADE"),
        nullable=False,
    )
    price_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="held")

    # Relationships
    booking: Mapped["Booking"] = relationship(back_populates="booking_seats")
    seat: Mapped["Seat"] = relationship(back_populates="booking_seats")

    def __repr__(self) -> str:
        return f"<BookingSeat(booking_id={self.booking_id}, seat_id={self.seat_id})>"
