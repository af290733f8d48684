"""Admin API endpoints: credential issuing and dashboard statistics."""

import logging
import secrets

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from cinebook.api.deps import get_current_admin
from cinebook.config import settings
from cinebook.database import get_db
from cinebook.models import Booking, Movie
from cinebook.models.booking import PAYMENT_COMPLETED
from cinebook.schemas import AdminLoginRequest, AdminToken, ApiResponse, DashboardStats
from cinebook.security import create_access_token
from cinebook.services.pricing import cents_to_amount

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/admin/login", response_model=ApiResponse[AdminToken])
async def admin_login(request: AdminLoginRequest) -> ApiResponse[AdminToken]:
    """Exchange the configured admin credentials for an admin bearer token."""
    username_ok = secrets.compare_digest(request.username, settings.admin_username)
    password_ok = secrets.compare_digest(request.password, settings.admin_password)
    if not (username_ok and password_ok):
        logger.warning(f"Failed admin login for {request.username!r}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid admin credentials",
        )
    return ApiResponse(
        message="Admin login successful",
        data=AdminToken(token=create_access_token({"role": "admin"})),
    )


@router.get("/admin/stats", response_model=ApiResponse[dict[str, DashboardStats]])
async def dashboard_stats(
    _admin: dict = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[dict[str, DashboardStats]]:
    """Catalog counts and revenue from completed payments."""

    async def scalar(stmt) -> int:
        result = await db.execute(stmt)
        return result.scalar_one() or 0

    total_movies = await scalar(select(func.count()).select_from(Movie))
    active_movies = await scalar(
        select(func.count()).select_from(Movie).where(Movie.is_active.is_(True))
    )
    streaming_now = await scalar(
        select(func.count())
        .select_from(Movie)
        .where(Movie.is_active.is_(True), Movie.status == "streaming_now")
    )
    coming_soon = await scalar(
        select(func.count())
        .select_from(Movie)
        .where(Movie.is_active.is_(True), Movie.status == "coming_soon")
    )
    total_bookings = await scalar(select(func.count()).select_from(Booking))
    revenue_cents = await scalar(
        select(func.sum(Booking.total_amount_cents)).where(
            Booking.payment_status == PAYMENT_COMPLETED
        )
    )

    return ApiResponse(
        data={
            "stats": DashboardStats(
                total_movies=total_movies,
                active_movies=active_movies,
                inactive_movies=total_movies - active_movies,
                streaming_now=streaming_now,
                coming_soon=coming_soon,
                total_bookings=total_bookings,
                total_revenue=cents_to_amount(revenue_cents),
            )
        }
    )
