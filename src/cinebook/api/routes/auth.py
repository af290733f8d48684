"""User registration, login and profile endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from cinebook.api.deps import CurrentUser, get_current_user
from cinebook.database import get_db
from cinebook.errors import NotFoundError
from cinebook.models import User
from cinebook.schemas import (
    ApiResponse,
    AuthData,
    LoginRequest,
    ProfileData,
    RegisterRequest,
    UserProfile,
)
from cinebook.security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)
router = APIRouter()

DUPLICATE_EMAIL_MESSAGE = "User with this email already exists"


def issue_user_token(user: User) -> str:
    return create_access_token({"userId": user.id, "email": user.email})


@router.post(
    "/auth/register",
    response_model=ApiResponse[AuthData],
    status_code=status.HTTP_201_CREATED,
)
async def register(
    request: RegisterRequest,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[AuthData]:
    """Create a user account and return a bearer token for it."""
    existing = await db.scalar(select(User).where(User.email == request.email))
    if existing is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=DUPLICATE_EMAIL_MESSAGE)

    user = User(
        email=request.email,
        name=request.name,
        phone=request.phone,
        password_hash=hash_password(request.password),
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError as e:
        # Registered concurrently with the same email
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail=DUPLICATE_EMAIL_MESSAGE
        ) from e
    await db.refresh(user)

    logger.info(f"Registered user {user.id} ({user.email})")
    return ApiResponse(
        message="User registered successfully",
        data=AuthData(user=UserProfile.model_validate(user), token=issue_user_token(user)),
    )


@router.post("/auth/login", response_model=ApiResponse[AuthData])
async def login(
    request: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[AuthData]:
    """Exchange email and password for a bearer token."""
    user = await db.scalar(select(User).where(User.email == request.email))
    if user is None or not verify_password(request.password, user.password_hash):
        logger.warning(f"Failed login for {request.email!r}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    return ApiResponse(
        message="Login successful",
        data=AuthData(user=UserProfile.model_validate(user), token=issue_user_token(user)),
    )


@router.get("/auth/me", response_model=ApiResponse[ProfileData])
async def get_profile(
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[ProfileData]:
    user = await db.get(User, current.user_id)
    if user is None:
        raise NotFoundError("User not found")
    return ApiResponse(data=ProfileData(user=UserProfile.model_validate(user)))
