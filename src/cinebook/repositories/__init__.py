"""Store-access interfaces and their SQLAlchemy implementations."""

from cinebook.repositories.bookings import BookingStore, SqlBookingStore
from cinebook.repositories.inventory import InventoryStore, SqlInventoryStore

__all__ = ["BookingStore", "InventoryStore", "SqlBookingStore", "SqlInventoryStore"]
