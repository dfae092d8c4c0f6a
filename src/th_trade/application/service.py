"""TradeApplicationService: the trade record store.

Posts are created and read, never edited or deleted. Creating a post
also stages a "your trade is live" notification for the author; both rows
commit in one transaction under the trade write lock.
"""

import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.th_common.datetime_utils import utc_now
from src.th_common.enums import NotificationType, TradeStatus
from src.th_common.errors import InvalidInputError, TradeItemsRequiredError
from src.th_common.id_generator import generate_id
from src.th_gateway.user.db_models import UserModel
from src.th_gateway.user.schemas import PublicUser
from src.th_notification.application.service import NotificationApplicationService
from src.th_trade.application.schemas import (
    CreateTradeRequest,
    compute_expires_at,
    normalize_tags,
)
from src.th_trade.domain.models import TradePost
from src.th_trade.domain.repository import TradeRepositoryProtocol
from src.th_trade.infrastructure.persistence import TradeRepository

logger = logging.getLogger("tradehub.trade")

TRADE_POSTED_TITLE = "Trade Posted Successfully!"


class TradeApplicationService:
    def __init__(
        self,
        notifications: NotificationApplicationService,
        repo: TradeRepositoryProtocol | None = None,
    ) -> None:
        self._repo: TradeRepositoryProtocol = repo or TradeRepository()
        self._notifications = notifications
        self._write_lock = asyncio.Lock()

    async def create(
        self, db: AsyncSession, author: UserModel, req: CreateTradeRequest
    ) -> TradePost:
        title = req.title.strip()
        description = req.description.strip()
        if not title:
            raise InvalidInputError("Please enter a title for your trade")
        if not description:
            raise InvalidInputError("Please enter a description for your trade")
        if not req.giving:
            raise TradeItemsRequiredError("giving")
        if not req.wanting:
            raise TradeItemsRequiredError("wanting")

        now = utc_now()
        trade = TradePost(
            id=generate_id(),
            author_id=author.id,
            author=PublicUser.from_model(author).model_dump(by_alias=True),
            title=title,
            description=description,
            giving=[i.to_domain() for i in req.giving],
            wanting=[i.to_domain() for i in req.wanting],
            status=TradeStatus.ACTIVE.value,
            created_at=now,
            updated_at=now,
            expires_at=compute_expires_at(req.expiry_days, now),
            is_urgent=req.is_urgent,
            tags=normalize_tags(req.tags),
        )

        async with self._write_lock:
            try:
                await self._repo.add(db, trade)
                await self._notifications.stage(
                    db,
                    user_id=author.id,
                    title=TRADE_POSTED_TITLE,
                    message=f'Your trade "{title}" is now live and visible to other traders.',
                    type=NotificationType.SYSTEM,
                    action_url="/my-trades",
                )
                await db.commit()
            except Exception:
                await db.rollback()
                raise

        logger.info("Trade %s created by user %s", trade.id, author.id)
        return trade

    async def list_all(self, db: AsyncSession) -> list[TradePost]:
        """Every post, newest first."""
        return await self._repo.list_all(db)

    async def list_by_author(self, db: AsyncSession, author_id: str) -> list[TradePost]:
        """Posts by one author, in creation order. Callers sort as they need."""
        return await self._repo.list_by_author(db, author_id)

    async def clear(self, db: AsyncSession) -> int:
        async with self._write_lock:
            try:
                removed = await self._repo.clear(db)
                await db.commit()
            except Exception:
                await db.rollback()
                raise
        return removed
