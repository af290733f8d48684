"""FastAPI dependencies: bearer identities and booking-core wiring."""

import logging
from dataclasses import dataclass

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from cinebook.database import get_db
from cinebook.repositories.bookings import SqlBookingStore
from cinebook.repositories.inventory import SqlInventoryStore
from cinebook.security import InvalidTokenError, decode_access_token
from cinebook.services.booking_ledger import BookingLedger
from cinebook.services.payments import PaymentSimulator

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class CurrentUser:
    user_id: int
    email: str | None = None


def _claims(credentials: HTTPAuthorizationCredentials | None, missing_message: str) -> dict:
    if credentials is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=missing_message)
    try:
        return decode_access_token(credentials.credentials)
    except InvalidTokenError as e:
        logger.debug(f"Rejected bearer token: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token. Please login again.",
        ) from e


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> CurrentUser:
    """User identity from a verified ``{userId, email}`` token."""
    claims = _claims(credentials, "No token provided. Please login first.")
    user_id = claims.get("userId")
    if not isinstance(user_id, int) or isinstance(user_id, bool):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token. Please login again.",
        )
    return CurrentUser(user_id=user_id, email=claims.get("email"))


async def get_current_admin(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> dict:
    """Claims of a verified ``{role: "admin"}`` token."""
    claims = _claims(credentials, "No token provided. Admin access denied.")
    if claims.get("role") != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied. Admin privileges required.",
        )
    return claims


def get_inventory_store(db: AsyncSession = Depends(get_db)) -> SqlInventoryStore:
    return SqlInventoryStore(db)


def get_booking_store(db: AsyncSession = Depends(get_db)) -> SqlBookingStore:
    return SqlBookingStore(db)


def get_booking_ledger(
    inventory: SqlInventoryStore = Depends(get_inventory_store),
    bookings: SqlBookingStore = Depends(get_booking_store),
) -> BookingLedger:
    return BookingLedger(inventory, bookings)


def get_payment_simulator(
    bookings: SqlBookingStore = Depends(get_booking_store),
) -> PaymentSimulator:
    return PaymentSimulator(bookings)
