"""Pydantic schemas for th_trade API requests and responses.

expiryDays accepts a number of days (int, float or numeric string, at most
MAX_EXPIRY_DAYS) or the literal "never". Omitting it means the post never expires.
"""

from datetime import datetime, timedelta
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictFloat, StrictInt
from pydantic.alias_generators import to_camel

from src.th_common.datetime_utils import to_iso
from src.th_common.enums import ItemRarity
from src.th_common.errors import InvalidExpiryError
from src.th_trade.domain.models import Item, TradePost

NEVER_EXPIRES = "never"
MAX_EXPIRY_DAYS = 3650


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Field normalisation
# ---------------------------------------------------------------------------


def normalize_tags(tags: list[str]) -> list[str]:
    """Trim and lower-case tags, dropping blanks. Order is preserved."""
    return [t.strip().lower() for t in tags if t and t.strip()]


def compute_expires_at(
    expiry_days: bool | int | float | str | None, now: datetime
) -> datetime | None:
    """`now + expiry_days`, or None when the post never expires.

    Days must be positive and at most MAX_EXPIRY_DAYS; booleans are not days.
    """
    if expiry_days is None or expiry_days == NEVER_EXPIRES:
        return None
    if isinstance(expiry_days, bool):
        raise InvalidExpiryError(expiry_days)
    try:
        if isinstance(expiry_days, str):
            days = float(expiry_days.strip())
        else:
            days = float(expiry_days)
    except (ValueError, OverflowError):
        raise InvalidExpiryError(expiry_days) from None
    # NaN fails both comparisons
    if not 0 < days <= MAX_EXPIRY_DAYS:
        raise InvalidExpiryError(expiry_days)
    return now + timedelta(days=days)


# ---------------------------------------------------------------------------
# Items
# ---------------------------------------------------------------------------


class ItemIn(_CamelModel):
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    rarity: ItemRarity
    category: str = ""
    value: float | None = Field(None, ge=0)
    description: str | None = None
    image: str | None = None

    def to_domain(self) -> Item:
        return Item(
            id=self.id,
            name=self.name,
            rarity=self.rarity.value,
            category=self.category,
            value=self.value,
            description=self.description,
            image=self.image,
        )


class ItemOut(_CamelModel):
    id: str
    name: str
    rarity: str
    category: str
    value: float | None = None
    description: str | None = None
    image: str | None = None

    @classmethod
    def from_domain(cls, item: Item) -> "ItemOut":
        return cls(
            id=item.id,
            name=item.name,
            rarity=item.rarity,
            category=item.category,
            value=item.value,
            description=item.description,
            image=item.image,
        )


# ---------------------------------------------------------------------------
# Trades
# ---------------------------------------------------------------------------


class CreateTradeRequest(_CamelModel):
    title: str = ""
    description: str = ""
    giving: list[ItemIn] = Field(default_factory=list)
    wanting: list[ItemIn] = Field(default_factory=list)
    is_urgent: bool = False
    # Strict members keep JSON true a bool, so it is rejected instead of read as 1 day
    expiry_days: StrictBool | StrictInt | StrictFloat | str | None = None
    tags: list[str] = Field(default_factory=list)


class TradeOut(_CamelModel):
    id: str
    author: dict[str, Any]
    title: str
    description: str
    giving: list[ItemOut]
    wanting: list[ItemOut]
    status: str
    created_at: str
    updated_at: str
    expires_at: str | None
    is_urgent: bool
    tags: list[str]

    @classmethod
    def from_domain(cls, t: TradePost) -> "TradeOut":
        return cls(
            id=t.id,
            author=t.author,
            title=t.title,
            description=t.description,
            giving=[ItemOut.from_domain(i) for i in t.giving],
            wanting=[ItemOut.from_domain(i) for i in t.wanting],
            status=t.status,
            created_at=to_iso(t.created_at) or "",
            updated_at=to_iso(t.updated_at) or "",
            expires_at=to_iso(t.expires_at),
            is_urgent=t.is_urgent,
            tags=list(t.tags),
        )
