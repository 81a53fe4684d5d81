"""User accounts: registration, login and profile lookup."""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from devclimate.auth.passwords import (
    DEFAULT_ROUNDS,
    MAX_PASSWORD_BYTES,
    hash_password,
    verify_password,
)
from devclimate.database.models import User
from devclimate.errors import (
    DuplicateUser,
    InvalidCredentials,
    InvalidInput,
    NotFound,
    WeakPassword,
)

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


class CredentialStore:
    """Reads and writes the `users` table."""

    def __init__(self, session: AsyncSession, bcrypt_rounds: int = DEFAULT_ROUNDS):
        self.session = session
        self.bcrypt_rounds = bcrypt_rounds

    async def find_by_email_or_username(self, email: str, username: str) -> User | None:
        result = await self.session.execute(
            select(User).where(or_(User.email == email, User.username == username)).limit(1)
        )
        return result.scalar_one_or_none()

    async def register_user(self, username: str, email: str, password: str) -> User:
        """Create a new user.

        Raises:
            InvalidInput: If any field is missing
            WeakPassword: If the password is too short or too long for bcrypt
            DuplicateUser: If the email or username is taken
        """
        username = (username or "").strip()
        email = (email or "").strip()

        if not username or not email or not password:
            raise InvalidInput("Username, email, and password are required")

        if len(password) < MIN_PASSWORD_LENGTH:
            raise WeakPassword()
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise WeakPassword(f"Password must be at most {MAX_PASSWORD_BYTES} bytes long")

        if await self.find_by_email_or_username(email, username):
            raise DuplicateUser()

        # bcrypt runs in the threadpool so it does not block the event loop
        user = User(
            username=username,
            email=email,
            password_hash=await run_in_threadpool(hash_password, password, self.bcrypt_rounds),
        )
        self.session.add(user)

        # A concurrent registration can pass the check above; the unique
        # constraints catch it here.
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            logger.info(f"Registration lost race for {email}: {e.orig}")
            raise DuplicateUser() from e

        logger.info(f"Registered user {user.username}")
        return user

    async def authenticate(self, email: str, password: str) -> User:
        """Check an email/password pair.

        Raises:
            InvalidCredentials: If the email is unknown or the password wrong
        """
        email = (email or "").strip()
        result = await self.session.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()

        if user is None or not await run_in_threadpool(
            verify_password, password, user.password_hash
        ):
            logger.info(f"Failed login for {email}")
            raise InvalidCredentials()

        logger.info(f"User {user.username} logged in")
        return user

    async def get_profile(self, user_id: str) -> User:
        """Get a user by id.

        Raises:
            NotFound: If no such user exists
        """
        try:
            key = uuid.UUID(str(user_id))
        except ValueError:
            raise NotFound("User not found") from None

        user = await self.session.get(User, key)
        if user is None:
            raise NotFound("User not found")

        return user
