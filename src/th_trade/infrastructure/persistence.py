"""TradeRepository: concrete implementation of TradeRepositoryProtocol.

Transaction ownership: the CALLER (TradeApplicationService) commits. `add`
only stages the row so the trade and its notification land together.
"""

from dataclasses import asdict
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.th_common.datetime_utils import as_utc
from src.th_trade.domain.models import Item, TradePost
from src.th_trade.infrastructure.db_models import TradeORM

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _item_to_json(item: Item) -> dict[str, Any]:
    return {k: v for k, v in asdict(item).items() if v is not None}


def _item_from_json(data: dict[str, Any]) -> Item:
    return Item(
        id=data["id"],
        name=data["name"],
        rarity=data["rarity"],
        category=data.get("category", ""),
        value=data.get("value"),
        description=data.get("description"),
        image=data.get("image"),
    )


def _row_to_trade(row: TradeORM) -> TradePost:
    return TradePost(
        id=row.id,
        author_id=row.author_id,
        author=dict(row.author),
        title=row.title,
        description=row.description,
        giving=[_item_from_json(i) for i in row.giving],
        wanting=[_item_from_json(i) for i in row.wanting],
        status=row.status,
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
        expires_at=as_utc(row.expires_at) if row.expires_at else None,
        is_urgent=row.is_urgent,
        tags=list(row.tags),
    )


def _trade_to_row(trade: TradePost) -> TradeORM:
    return TradeORM(
        id=trade.id,
        author_id=trade.author_id,
        author=trade.author,
        title=trade.title,
        description=trade.description,
        giving=[_item_to_json(i) for i in trade.giving],
        wanting=[_item_to_json(i) for i in trade.wanting],
        status=trade.status,
        created_at=trade.created_at,
        updated_at=trade.updated_at,
        expires_at=trade.expires_at,
        is_urgent=trade.is_urgent,
        tags=list(trade.tags),
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class TradeRepository:
    async def add(self, db: AsyncSession, trade: TradePost) -> None:
        db.add(_trade_to_row(trade))
        await db.flush()

    async def list_all(self, db: AsyncSession) -> list[TradePost]:
        # IDs are time-ordered, so they break created_at ties by insertion order
        result = await db.execute(
            select(TradeORM).order_by(TradeORM.created_at.desc(), TradeORM.id.desc())
        )
        return [_row_to_trade(row) for row in result.scalars().all()]

    async def list_by_author(self, db: AsyncSession, author_id: str) -> list[TradePost]:
        result = await db.execute(
            select(TradeORM)
            .where(TradeORM.author_id == author_id)
            .order_by(TradeORM.created_at, TradeORM.id)
        )
        return [_row_to_trade(row) for row in result.scalars().all()]

    async def clear(self, db: AsyncSession) -> int:
        result = await db.execute(delete(TradeORM))
        return result.rowcount or 0
