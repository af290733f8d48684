"""Admin back-office application."""

from fastapi import FastAPI
from sqladmin import Admin

from cinebook.admin.auth import AdminAuth
from cinebook.admin.views import (
    BookingAdmin,
    MovieAdmin,
    SeatAdmin,
    ShowtimeAdmin,
    TheaterAdmin,
    UserAdmin,
)
from cinebook.config import settings
from cinebook.database import engine


def create_admin_app() -> FastAPI:
    app = FastAPI(title="CineBook Admin")
    auth = AdminAuth(secret_key=settings.admin_secret_key)
    admin = Admin(app, engine, base_url="/", authentication_backend=auth, title="CineBook Admin")
    for view in [MovieAdmin, TheaterAdmin, ShowtimeAdmin, SeatAdmin, BookingAdmin, UserAdmin]:
        admin.add_view(view)
    return app


admin_app = create_admin_app()
