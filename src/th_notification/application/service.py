"""NotificationApplicationService: the per-user notification store.

Writes that must not interleave (read-state changes, standalone inserts)
run under the service's write lock and commit before releasing it.
`stage` is for callers that own the transaction, such as trade creation,
which commits the trade and its notification together.
"""

import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.th_common.datetime_utils import utc_now
from src.th_common.enums import NotificationType
from src.th_common.errors import NotificationNotFoundError
from src.th_common.id_generator import generate_id
from src.th_notification.domain.models import Notification
from src.th_notification.domain.repository import NotificationRepositoryProtocol
from src.th_notification.infrastructure.persistence import NotificationRepository

logger = logging.getLogger("tradehub.notification")


class NotificationApplicationService:
    def __init__(self, repo: NotificationRepositoryProtocol | None = None) -> None:
        self._repo: NotificationRepositoryProtocol = repo or NotificationRepository()
        self._write_lock = asyncio.Lock()

    async def stage(
        self,
        db: AsyncSession,
        user_id: str,
        title: str,
        message: str,
        type: NotificationType | str = NotificationType.SYSTEM,
        action_url: str | None = None,
    ) -> Notification:
        """Add a notification to the caller's transaction without committing."""
        notification = Notification(
            id=generate_id(),
            user_id=user_id,
            title=title,
            message=message,
            type=NotificationType(type).value,
            is_read=False,
            created_at=utc_now(),
            action_url=action_url,
        )
        await self._repo.add(db, notification)
        return notification

    async def create(
        self,
        db: AsyncSession,
        user_id: str,
        title: str,
        message: str,
        type: NotificationType | str = NotificationType.SYSTEM,
        action_url: str | None = None,
    ) -> Notification:
        async with self._write_lock:
            try:
                notification = await self.stage(db, user_id, title, message, type, action_url)
                await db.commit()
            except Exception:
                await db.rollback()
                raise
        logger.info("Notification %s created for user %s", notification.id, user_id)
        return notification

    async def list_by_user(self, db: AsyncSession, user_id: str) -> list[Notification]:
        return await self._repo.list_by_user(db, user_id)

    async def unread_count(self, db: AsyncSession, user_id: str) -> int:
        return await self._repo.count_unread(db, user_id)

    async def mark_read(self, db: AsyncSession, user_id: str, notification_id: str) -> None:
        """Mark one of `user_id`'s notifications read; other users' ids are not found."""
        async with self._write_lock:
            try:
                found = await self._repo.mark_read(db, user_id, notification_id)
                if not found:
                    raise NotificationNotFoundError(notification_id)
                await db.commit()
            except Exception:
                await db.rollback()
                raise

    async def mark_all_read(self, db: AsyncSession, user_id: str) -> int:
        async with self._write_lock:
            try:
                changed = await self._repo.mark_all_read(db, user_id)
                await db.commit()
            except Exception:
                await db.rollback()
                raise
        logger.info("Marked %d notifications read for user %s", changed, user_id)
        return changed

    async def clear(self, db: AsyncSession) -> int:
        async with self._write_lock:
            try:
                removed = await self._repo.clear(db)
                await db.commit()
            except Exception:
                await db.rollback()
                raise
        return removed
