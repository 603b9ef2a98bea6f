"""SQLAlchemy notification store."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from haulbook.models import Notification
from haulbook.repositories.interfaces import NotificationRepository


class SQLNotificationRepository(NotificationRepository):
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def create(self, notification: Notification) -> Notification:
        # Savepoint: a failed insert must not poison the caller's transaction
        async with self.db.begin_nested():
            self.db.add(notification)
            await self.db.flush()
        return notification

    async def get(self, notification_id: UUID) -> Notification | None:
        result = await self.db.execute(
            select(Notification).where(Notification.id == notification_id)
        )
        return result.scalar_one_or_none()

    async def list_for_user(
        self,
        user_id: UUID,
        is_read: bool | None = None,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[list[Notification], int]:
        query = select(Notification).where(Notification.user_id == user_id)
        if is_read is not None:
            query = query.where(Notification.is_read.is_(is_read))

        count_result = await self.db.execute(
            select(func.count()).select_from(query.subquery())
        )
        total = count_result.scalar() or 0

        result = await self.db.execute(
            query.order_by(Notification.created_at.desc()).offset(offset).limit(limit)
        )
        return list(result.scalars().all()), total

    async def count_unread(self, user_id: UUID) -> int:
        result = await self.db.execute(
            select(func.count(Notification.id)).where(
                Notification.user_id == user_id,
                Notification.is_read.is_(False),
            )
        )
        return result.scalar() or 0

    async def mark_read(self, notification_id: UUID, at: datetime) -> Notification | None:
        notification = await self.get(notification_id)
        if notification is None:
            return None
        if not notification.is_read:
            notification.is_read = True
            notification.read_at = at
            await self.db.flush()
        return notification

    async def mark_all_read(self, user_id: UUID, at: datetime) -> int:
        result = await self.db.execute(
            update(Notification)
            .where(Notification.user_id == user_id, Notification.is_read.is_(False))
            .values(is_read=True, read_at=at)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def mark_email_sent(self, notification_ids: list[UUID]) -> int:
        if not notification_ids:
            return 0
        result = await self.db.execute(
            update(Notification)
            .where(Notification.id.in_(notification_ids))
            .values(email_sent=True)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def delete(self, notification_id: UUID) -> bool:
        notification = await self.get(notification_id)
        if notification is None:
            return False
        await self.db.delete(notification)
        await self.db.flush()
        return True
