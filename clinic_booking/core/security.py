"""Password hashing and bearer token handling.

Tokens are HS256 JWTs carrying the user ID (``sub``), the role the user held
when the token was issued and the email used to sign in. Only tokens of
type ``access`` are accepted back.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum

from jose import JWTError, jwt
from passlib.context import CryptContext

from clinic_booking.core.config import settings

ACCESS_TOKEN_TYPE = "access"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


@dataclass(frozen=True)
class TokenClaims:
    """Claims read back from a valid access token."""

    user_id: str
    role: str
    expires_at: datetime
    email: str | None = None


def create_access_token(
    subject: str,
    role: Enum | str,
    email: str | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """Issue an access token for a user.

    Args:
        subject: User ID
        role: ``admin`` or ``patient``; enum members are stored by value
        email: Sign-in email, informational only
        expires_delta: Lifetime, defaults to ``access_token_expire_minutes``
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)

    now = datetime.now(timezone.utc)
    claims = {
        "sub": subject,
        "role": role.value if isinstance(role, Enum) else role,
        "type": ACCESS_TOKEN_TYPE,
        "exp": now + expires_delta,
        "iat": now,
    }
    if email:
        claims["email"] = email

    return jwt.encode(claims, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> TokenClaims | None:
    """Validate ``token`` and return its claims.

    Returns ``None`` for a bad signature, an expired token, a token of
    another type or one without a subject.
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None

    if payload.get("type") != ACCESS_TOKEN_TYPE or not payload.get("sub"):
        return None

    return TokenClaims(
        user_id=payload["sub"],
        role=payload.get("role", ""),
        expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        email=payload.get("email"),
    )
