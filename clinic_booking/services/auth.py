"""Authentication service for patients and administrators."""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_booking.core.errors import InvalidCredentials, UserExists
from clinic_booking.core.logging import audit_logger
from clinic_booking.core.security import create_access_token, hash_password, verify_password
from clinic_booking.models.user import User, UserRole


class AuthService:
    """Service for handling authentication operations."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def register(self, name: str, email: str, password: str) -> User:
        """Register a new patient account.

        Args:
            name: Display name
            email: Email address (stored lower-cased)
            password: Plain text password

        Returns:
            The created User

        Raises:
            UserExists: If the email is already registered
        """
        email = email.lower()
        if await self.get_user_by_email(email):
            raise UserExists()

        user = User(
            name=name,
            email=email,
            hashed_password=hash_password(password),
            role=UserRole.PATIENT.value,
            is_active=True,
        )
        self.session.add(user)
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise UserExists()
        await self.session.refresh(user)

        audit_logger.log(
            action="register",
            actor_role=UserRole.PATIENT.value,
            actor_id=user.id,
            entity_type="user",
            entity_id=user.id,
        )
        return user

    async def authenticate(self, email: str, password: str) -> User:
        """Authenticate a user with email and password.

        Raises:
            InvalidCredentials: If the user is unknown, disabled or the
                password does not match
        """
        user = await self.get_user_by_email(email.lower())

        if not user or not user.is_active:
            raise InvalidCredentials()

        if not verify_password(password, user.hashed_password):
            raise InvalidCredentials()

        return user

    @staticmethod
    def create_token(user: User) -> str:
        """Create a JWT access token for ``user``."""
        return create_access_token(subject=user.id, role=user.role, email=user.email)

    async def get_user_by_id(self, user_id: str) -> User | None:
        result = await self.session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_user_by_email(self, email: str) -> User | None:
        result = await self.session.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()
