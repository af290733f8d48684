"""Pydantic schemas for admin endpoints."""

from cinebook.schemas.common import CamelModel


class AdminLoginRequest(CamelModel):
    username: str
    password: str


class AdminToken(CamelModel):
    token: str


class DashboardStats(CamelModel):
    total_movies: int
    active_movies: int
    inactive_movies: int
    streaming_now: int
    coming_soon: int
    total_bookings: int
    total_revenue: float
