"""Authentication endpoints."""

import logging

from fastapi import APIRouter, status

from clinic_booking.api.deps import CurrentUser, DbSession
from clinic_booking.core.errors import InvalidCredentials
from clinic_booking.schemas.auth import (
    AuthData,
    LoginRequest,
    ProfileData,
    RegisterRequest,
    UserRead,
)
from clinic_booking.schemas.common import Envelope
from clinic_booking.services.auth import AuthService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/register",
    response_model=Envelope[AuthData],
    status_code=status.HTTP_201_CREATED,
    summary="Register patient",
    description="Create a patient account and return a bearer token",
)
async def register(body: RegisterRequest, session: DbSession) -> Envelope[AuthData]:
    """Register a new patient.

    Raises:
        UserExists: If the email is already registered
    """
    auth_service = AuthService(session)
    user = await auth_service.register(
        name=body.name,
        email=body.email,
        password=body.password,
    )

    return Envelope[AuthData](
        message="User registered successfully",
        data=AuthData(
            user=UserRead.model_validate(user),
            token=auth_service.create_token(user),
        ),
    )


@router.post(
    "/login",
    response_model=Envelope[AuthData],
    status_code=status.HTTP_200_OK,
    summary="Login",
    description="Authenticate with email and password",
)
async def login(body: LoginRequest, session: DbSession) -> Envelope[AuthData]:
    """Authenticate a user and return a bearer token."""
    auth_service = AuthService(session)
    try:
        user = await auth_service.authenticate(email=body.email, password=body.password)
    except InvalidCredentials:
        logger.info("Login failed", extra={"action": "login_failed"})
        raise

    return Envelope[AuthData](
        message="Login successful",
        data=AuthData(
            user=UserRead.model_validate(user),
            token=auth_service.create_token(user),
        ),
    )


@router.get(
    "/me",
    response_model=Envelope[ProfileData],
    summary="Current user",
)
async def me(user: CurrentUser) -> Envelope[ProfileData]:
    return Envelope[ProfileData](data=ProfileData(user=UserRead.model_validate(user)))
