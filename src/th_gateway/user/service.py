"""User domain service: the credential store.

Owns the users table: registration, authentication, online flag, profile
lookups and partial stats updates. Every write runs under the service's
write lock and commits before the lock is released, so the
check-then-insert in `register` cannot interleave with another
registration in this process. The LOWER() unique indexes catch the rest
(other worker processes) and are translated back into the same errors.
"""

import asyncio
import logging
import uuid

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.th_common.errors import (
    EmailExistsError,
    InvalidCredentialsError,
    InvalidInputError,
    UserNotFoundError,
    UsernameExistsError,
)
from src.th_gateway.auth.password import hash_password, verify_password
from src.th_gateway.user.db_models import UserModel, default_stats

logger = logging.getLogger("tradehub.auth")


def validate_registration(
    username: str,
    display_name: str,
    email: str,
    password: str,
    confirm_password: str,
) -> None:
    """Apply the registration rules in order; the first failure wins."""
    if len(username) < 3:
        raise InvalidInputError("Username must be at least 3 characters long")
    if len(display_name) < 2:
        raise InvalidInputError("Display name must be at least 2 characters long")
    if "@" not in email:
        raise InvalidInputError("Please enter a valid email address")
    if len(password) < 6:
        raise InvalidInputError("Password must be at least 6 characters long")
    if password != confirm_password:
        raise InvalidInputError("Passwords do not match")


class UserService:
    """Instantiate once per process and reuse across requests."""

    def __init__(self) -> None:
        self._write_lock = asyncio.Lock()

    async def _find_by_username(self, db: AsyncSession, username: str) -> UserModel | None:
        result = await db.execute(
            select(UserModel).where(func.lower(UserModel.username) == username.lower())
        )
        return result.scalar_one_or_none()

    async def _find_by_email(self, db: AsyncSession, email: str) -> UserModel | None:
        result = await db.execute(
            select(UserModel).where(func.lower(UserModel.email) == email.lower())
        )
        return result.scalar_one_or_none()

    async def register(
        self,
        username: str,
        display_name: str,
        email: str,
        password: str,
        confirm_password: str,
        db: AsyncSession,
    ) -> UserModel:
        """Create a user. The new account starts online, as if just logged in."""
        username = username.strip()
        display_name = display_name.strip()
        email = email.strip()
        validate_registration(username, display_name, email, password, confirm_password)
        password_hash = hash_password(password)

        async with self._write_lock:
            try:
                if await self._find_by_username(db, username) is not None:
                    raise UsernameExistsError()
                if await self._find_by_email(db, email) is not None:
                    raise EmailExistsError()

                user = UserModel(
                    id=str(uuid.uuid4()),
                    username=username,
                    display_name=display_name,
                    email=email,
                    password_hash=password_hash,
                    avatar=settings.DEFAULT_AVATAR,
                    is_online=True,
                    stats=default_stats(),
                )
                db.add(user)
                await db.commit()
            except IntegrityError:
                await db.rollback()
                # Lost a race with another process; report which field collided
                if await self._find_by_username(db, username) is not None:
                    raise UsernameExistsError() from None
                raise EmailExistsError() from None
            except Exception:
                await db.rollback()
                raise

        logger.info("Registered user %s (%s)", user.username, user.id)
        return user

    async def authenticate(self, username: str, password: str, db: AsyncSession) -> UserModel:
        """Verify credentials and mark the user online.

        Note: "User not found" and "Wrong password" both raise
        InvalidCredentialsError intentionally, to prevent username enumeration.
        """
        if not username or not password:
            raise InvalidInputError("Please enter both username and password")

        user = await self._find_by_username(db, username.strip())
        if user is None or not verify_password(password, user.password_hash):
            logger.info("Failed login for %r", username)
            raise InvalidCredentialsError()

        await self.set_online(user.id, True, db)
        logger.info("User %s logged in", user.username)
        return user

    async def set_online(self, user_id: str, value: bool, db: AsyncSession) -> UserModel:
        async with self._write_lock:
            try:
                user = await db.get(UserModel, user_id)
                if user is None:
                    raise UserNotFoundError(user_id)
                user.is_online = value
                await db.commit()
            except Exception:
                await db.rollback()
                raise
        return user

    async def get_by_id(self, user_id: str, db: AsyncSession) -> UserModel:
        user = await db.get(UserModel, user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    async def list_all(self, db: AsyncSession) -> list[UserModel]:
        result = await db.execute(select(UserModel).order_by(UserModel.join_date))
        return list(result.scalars().all())

    async def update_stats(
        self, user_id: str, changes: dict[str, int | float], db: AsyncSession
    ) -> UserModel:
        """Overwrite only the stats keys present in `changes`."""
        async with self._write_lock:
            try:
                user = await db.get(UserModel, user_id)
                if user is None:
                    raise UserNotFoundError(user_id)
                user.stats = {**default_stats(), **user.stats, **changes}
                await db.commit()
            except Exception:
                await db.rollback()
                raise
        logger.info("Updated stats for user %s: %s", user_id, sorted(changes))
        return user

    async def clear(self, db: AsyncSession) -> int:
        """Delete every user. Only reachable through the DEBUG data-reset endpoint."""
        async with self._write_lock:
            try:
                result = await db.execute(delete(UserModel))
                await db.commit()
            except Exception:
                await db.rollback()
                raise
        return result.rowcount or 0
