"""Tenant (practice account) store: registration, login and passwords."""

from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from smilehub.core.exceptions import (
    AuthenticationError,
    ConflictError,
    InvalidPasswordError,
    NotFoundError,
    StorageError,
)
from smilehub.core.logging import get_logger
from smilehub.core.security import SecurityManager
from smilehub.models.user import User

logger = get_logger(__name__)

EMAIL_TAKEN = "User with this email already exists"


def normalize_email(email: str) -> str:
    return email.strip().lower()


class TenantStore:
    """Account operations backed by the ``users`` table."""

    def __init__(self, db: AsyncSession, security: SecurityManager):
        self.db = db
        self.security = security

    async def _commit(self) -> None:
        try:
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            # Lost a race against a concurrent registration
            raise ConflictError(EMAIL_TAKEN) from exc
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.error("tenant_commit_failed", error=str(exc))
            raise StorageError() from exc

    async def find_by_email(self, email: str) -> User | None:
        try:
            result = await self.db.execute(select(User).where(User.email == normalize_email(email)))
        except SQLAlchemyError as exc:
            raise StorageError() from exc
        return result.scalar_one_or_none()

    async def get(self, tenant_id: int) -> User:
        try:
            result = await self.db.execute(select(User).where(User.id == tenant_id))
        except SQLAlchemyError as exc:
            raise StorageError() from exc
        user = result.scalar_one_or_none()
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def register(self, email: str, password: str) -> User:
        """Create a tenant; fails with ``ConflictError`` if the email is taken."""
        if await self.find_by_email(email) is not None:
            raise ConflictError(EMAIL_TAKEN)

        user = User(
            email=normalize_email(email),
            password_hash=self.security.hash_password(password),
        )
        self.db.add(user)
        await self._commit()
        await self.db.refresh(user)

        logger.info("tenant_registered", tenant_id=user.id)
        return user

    async def authenticate(self, email: str, password: str) -> User:
        """Return the tenant whose credentials match.

        Unknown emails and wrong passwords raise the same error.
        """
        user = await self.find_by_email(email)
        if user is None or not self.security.verify_password(password, user.password_hash):
            raise AuthenticationError("Invalid credentials")
        return user

    async def change_password(self, tenant_id: int, current_password: str, new_password: str) -> User:
        user = await self.get(tenant_id)
        if not self.security.verify_password(current_password, user.password_hash):
            raise InvalidPasswordError()

        user.password_hash = self.security.hash_password(new_password)
        user.password_changed_at = datetime.now(timezone.utc)
        await self._commit()
        return user
