"""SQLAdmin model views for the catalog and bookings."""

from sqladmin import ModelView

from cinebook.models import Booking, Movie, Seat, Showtime, Theater, User


class MovieAdmin(ModelView, model=Movie):
    column_list = [
        Movie.id,
        Movie.title,
        Movie.status,
        Movie.genre,
        Movie.release_date,
        Movie.is_active,
    ]
    column_searchable_list = [Movie.title]
    column_sortable_list = [Movie.title, Movie.release_date]
    form_excluded_columns = [Movie.showtimes]


class TheaterAdmin(ModelView, model=Theater):
    column_list = [Theater.id, Theater.name, Theater.city, Theater.screens]
    column_searchable_list = [Theater.name, Theater.city]
    form_excluded_columns = [Theater.seats, Theater.showtimes]


class ShowtimeAdmin(ModelView, model=Showtime):
    column_list = [
        Showtime.id,
        Showtime.movie_id,
        Showtime.theater_id,
        Showtime.screen_number,
        Showtime.show_time,
        Showtime.price_cents,
        Showtime.available_seats,
        Showtime.is_active,
    ]
    column_sortable_list = [Showtime.show_time]
    form_excluded_columns = [Showtime.bookings]


class SeatAdmin(ModelView, model=Seat):
    # Seating charts are generated; only activation and pricing are edited here.
    column_list = [
        Seat.id,
        Seat.theater_id,
        Seat.screen_number,
        Seat.seat_number,
        Seat.seat_type,
        Seat.price_cents,
        Seat.is_active,
    ]
    form_columns = [Seat.seat_type, Seat.price_cents, Seat.is_aisle, Seat.is_active]
    can_create = False
    can_delete = False


class BookingAdmin(ModelView, model=Booking):
    column_list = [
        Booking.id,
        Booking.booking_reference,
        Booking.user_id,
        Booking.showtime_id,
        Booking.status,
        Booking.payment_status,
        Booking.total_amount_cents,
        Booking.booking_date,
    ]
    column_searchable_list = [Booking.booking_reference]
    column_sortable_list = [Booking.booking_date]
    can_create = False
    can_edit = False
    can_delete = False


class UserAdmin(ModelView, model=User):
    column_list = [User.id, User.email, User.name]
    column_searchable_list = [User.email]
    form_excluded_columns = [User.bookings, User.password_hash]
    column_details_exclude_list = [User.password_hash]
