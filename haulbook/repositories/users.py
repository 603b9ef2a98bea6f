"""SQLAlchemy user store."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from haulbook.core.permissions import ADMIN_ROLES
from haulbook.models import User
from haulbook.repositories.interfaces import UserRepository


class SQLUserRepository(UserRepository):
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get(self, user_id: UUID) -> User | None:
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> User | None:
        result = await self.db.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    async def list_admins(self) -> list[User]:
        result = await self.db.execute(
            select(User).where(
                User.role.in_([role.value for role in ADMIN_ROLES]),
                User.is_active.is_(True),
            )
        )
        return list(result.scalars().all())
