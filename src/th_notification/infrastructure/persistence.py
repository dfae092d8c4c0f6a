"""NotificationRepository: concrete implementation of NotificationRepositoryProtocol.

Read-state changes are single UPDATE statements scoped by user_id, so one
user can never flip another user's notification. They only ever set
is_read to true.

Transaction ownership: the CALLER commits.
"""

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.th_common.datetime_utils import as_utc
from src.th_notification.domain.models import Notification
from src.th_notification.infrastructure.db_models import NotificationORM


def _row_to_notification(row: NotificationORM) -> Notification:
    return Notification(
        id=row.id,
        user_id=row.user_id,
        title=row.title,
        message=row.message,
        type=row.type,
        is_read=row.is_read,
        created_at=as_utc(row.created_at),
        action_url=row.action_url,
    )


class NotificationRepository:
    async def add(self, db: AsyncSession, notification: Notification) -> None:
        db.add(
            NotificationORM(
                id=notification.id,
                user_id=notification.user_id,
                title=notification.title,
                message=notification.message,
                type=notification.type,
                is_read=notification.is_read,
                created_at=notification.created_at,
                action_url=notification.action_url,
            )
        )
        await db.flush()

    async def list_by_user(self, db: AsyncSession, user_id: str) -> list[Notification]:
        result = await db.execute(
            select(NotificationORM)
            .where(NotificationORM.user_id == user_id)
            .order_by(NotificationORM.created_at.desc(), NotificationORM.id.desc())
        )
        return [_row_to_notification(row) for row in result.scalars().all()]

    async def count_unread(self, db: AsyncSession, user_id: str) -> int:
        result = await db.execute(
            select(func.count())
            .select_from(NotificationORM)
            .where(NotificationORM.user_id == user_id, NotificationORM.is_read.is_(False))
        )
        return int(result.scalar_one())

    async def mark_read(self, db: AsyncSession, user_id: str, notification_id: str) -> bool:
        result = await db.execute(
            update(NotificationORM)
            .where(
                NotificationORM.id == notification_id,
                NotificationORM.user_id == user_id,
            )
            .values(is_read=True)
            .execution_options(synchronize_session=False)
        )
        return (result.rowcount or 0) > 0

    async def mark_all_read(self, db: AsyncSession, user_id: str) -> int:
        result = await db.execute(
            update(NotificationORM)
            .where(NotificationORM.user_id == user_id, NotificationORM.is_read.is_(False))
            .values(is_read=True)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0

    async def clear(self, db: AsyncSession) -> int:
        result = await db.execute(delete(NotificationORM))
        return result.rowcount or 0
