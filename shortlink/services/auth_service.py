"""
Account and Session Service

Registration, password login and server-side login sessions.

Sessions are rows in auth_sessions keyed by a random token that the
browser keeps in a cookie; every request looks its token up again, so no
session state lives in the process.
"""

import logging
import secrets
from datetime import timedelta
from typing import Optional

from passlib.context import CryptContext
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from shortlink.core.setting import settings
from shortlink.core.validators import normalize_email
from shortlink.db.models import AuthSession, User, utcnow

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_session_token() -> str:
    return secrets.token_urlsafe(32)


class AuthService:
    """Service for user accounts and login sessions."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_user_by_email(self, email: str) -> Optional[User]:
        email = normalize_email(email)
        if email is None:
            return None
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def register(self, email: str, password: str, name: Optional[str] = None) -> Optional[User]:
        """
        Create a user account.

        Args:
            email: Login email (stored case-folded)
            password: Plain password, hashed with bcrypt
            name: Optional display name

        Returns:
            The new User, or None if the email is already registered

        Raises:
            ValueError: If the email is malformed
        """
        normalized = normalize_email(email)
        if normalized is None:
            raise ValueError(f"Invalid email address: {email!r}")

        if await self.get_user_by_email(normalized) is not None:
            return None

        user = User(email=normalized, password_hash=hash_password(password), name=name)
        self.session.add(user)
        try:
            await self.session.flush()
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            logger.info(f"Concurrent registration for {normalized}")
            return None

        await self.session.refresh(user)
        logger.info(f"Registered user {user.id}")
        return user

    async def authenticate(self, email: str, password: str) -> Optional[User]:
        """Return the user if the credentials match, None otherwise."""
        user = await self.get_user_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            return None
        return user

    async def create_session(self, user: User) -> AuthSession:
        """Open a login session for a user."""
        now = utcnow()
        auth_session = AuthSession(
            user_id=user.id,
            token=create_session_token(),
            created_at=now,
            expires_at=now + timedelta(days=settings.SESSION_TTL_DAYS),
        )
        self.session.add(auth_session)
        await self.session.commit()
        await self.session.refresh(auth_session)
        return auth_session

    async def get_user_for_token(self, token: Optional[str]) -> Optional[User]:
        """Resolve a session token to its user; None if unknown or expired."""
        if not token:
            return None
        statement = (
            select(User)
            .join(AuthSession, AuthSession.user_id == User.id)
            .where(AuthSession.token == token, AuthSession.expires_at > utcnow())
        )
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def revoke_session(self, token: Optional[str]) -> bool:
        """Delete a session row. Returns True if one existed."""
        if not token:
            return False
        result = await self.session.execute(
            delete(AuthSession).where(AuthSession.token == token)
        )
        await self.session.commit()
        return result.rowcount > 0
