"""Repository Protocol: dependency inversion for testability."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.th_notification.domain.models import Notification


class NotificationRepositoryProtocol(Protocol):
    async def add(self, db: AsyncSession, notification: Notification) -> None: ...

    async def list_by_user(self, db: AsyncSession, user_id: str) -> list[Notification]: ...

    async def count_unread(self, db: AsyncSession, user_id: str) -> int: ...

    async def mark_read(self, db: AsyncSession, user_id: str, notification_id: str) -> bool: ...

    async def mark_all_read(self, db: AsyncSession, user_id: str) -> int: ...

    async def clear(self, db: AsyncSession) -> int: ...
