"""Domain models for th_trade: pure dataclasses, no business logic."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass
class Item:
    id: str
    name: str
    rarity: str
    category: str
    value: float | None = None
    description: str | None = None
    image: str | None = None


@dataclass
class TradePost:
    """One "I give X, I want Y" offer.

    `author` is the author's public profile as it was when the post was
    created; later profile changes are not copied onto existing posts.
    """

    id: str
    author_id: str
    author: dict[str, Any]
    title: str
    description: str
    giving: list[Item]
    wanting: list[Item]
    status: str
    created_at: datetime
    updated_at: datetime
    expires_at: datetime | None
    is_urgent: bool = False
    tags: list[str] = field(default_factory=list)
