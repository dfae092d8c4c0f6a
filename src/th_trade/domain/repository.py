"""Repository Protocol: dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.th_trade.domain.models import TradePost


class TradeRepositoryProtocol(Protocol):
    async def add(self, db: AsyncSession, trade: TradePost) -> None: ...

    async def list_all(self, db: AsyncSession) -> list[TradePost]: ...

    async def list_by_author(self, db: AsyncSession, author_id: str) -> list[TradePost]: ...

    async def clear(self, db: AsyncSession) -> int: ...
