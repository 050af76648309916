"""Authentication schemas."""

import re
from typing import Annotated

from pydantic import AfterValidator, Field

from clinic_booking.schemas.common import ApiModel


def validate_email_lenient(v: str) -> str:
    """Validate email with lenient rules that allow .local domains for testing."""
    if not v or "@" not in v:
        raise ValueError("Invalid email address")
    pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
    if not re.match(pattern, v):
        raise ValueError("Invalid email address format")
    return v.lower()


LenientEmail = Annotated[str, AfterValidator(validate_email_lenient)]


class RegisterRequest(ApiModel):
    """Patient self-registration."""

    name: str = Field(min_length=1, max_length=100)
    email: LenientEmail
    password: str = Field(min_length=8, max_length=128)


class LoginRequest(ApiModel):
    """Login with email and password."""

    email: LenientEmail
    password: str = Field(min_length=1, max_length=128)


class UserRead(ApiModel):
    """Public view of an account."""

    id: str
    name: str
    email: str
    role: str


class AuthData(ApiModel):
    user: UserRead
    token: str


class ProfileData(ApiModel):
    user: UserRead
