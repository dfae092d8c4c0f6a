"""Client-side trade filtering and sorting.

Works on trades exactly as GET /trades returns them (camelCase dicts).
Every function here is pure: the input list and its dicts are never
modified, so running the same filters twice gives the same result.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from src.th_common.enums import ItemRarity, SortOrder

Trade = dict[str, Any]


@dataclass(frozen=True)
class TradeFilters:
    search_term: str = ""
    selected_rarities: frozenset[str] = field(default_factory=frozenset)
    show_urgent_only: bool = False
    sort_by: SortOrder = SortOrder.NEWEST

    @classmethod
    def build(
        cls,
        search_term: str = "",
        rarities: Iterable[ItemRarity | str] = (),
        show_urgent_only: bool = False,
        sort_by: SortOrder | str = SortOrder.NEWEST,
    ) -> "TradeFilters":
        return cls(
            search_term=search_term,
            selected_rarities=frozenset(ItemRarity(r).value for r in rarities),
            show_urgent_only=show_urgent_only,
            sort_by=SortOrder(sort_by),
        )


def _parse_ts(value: str | None) -> datetime:
    if not value:
        return datetime.min.replace(tzinfo=timezone.utc)
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def matches_search(trade: Trade, term: str) -> bool:
    needle = term.lower()
    if not needle:
        return True
    author = trade.get("author") or {}
    haystacks = (
        trade.get("title") or "",
        trade.get("description") or "",
        author.get("displayName") or "",
    )
    return any(needle in h.lower() for h in haystacks)


def matches_rarity(trade: Trade, rarities: frozenset[str]) -> bool:
    if not rarities:
        return True
    items = [*trade.get("giving", []), *trade.get("wanting", [])]
    return any(item.get("rarity") in rarities for item in items)


def matches(trade: Trade, filters: TradeFilters) -> bool:
    return (
        matches_search(trade, filters.search_term)
        and matches_rarity(trade, filters.selected_rarities)
        and (not filters.show_urgent_only or bool(trade.get("isUrgent")))
    )


def sort_trades(trades: Sequence[Trade], sort_by: SortOrder) -> list[Trade]:
    """Stable sort: equal keys keep their incoming order."""
    if sort_by is SortOrder.NEWEST:
        return sorted(trades, key=lambda t: _parse_ts(t.get("createdAt")), reverse=True)
    if sort_by is SortOrder.OLDEST:
        return sorted(trades, key=lambda t: _parse_ts(t.get("createdAt")))
    # SortOrder.RATING: best-rated authors first
    return sorted(
        trades,
        key=lambda t: float(((t.get("author") or {}).get("stats") or {}).get("rating", 0)),
        reverse=True,
    )


def apply_filters(trades: Sequence[Trade], filters: TradeFilters) -> list[Trade]:
    """The trades to display for `filters`, in display order."""
    return sort_trades([t for t in trades if matches(t, filters)], filters.sort_by)


def parse_tags(raw: str) -> list[str]:
    """Split the create-trade form's comma-separated tag field."""
    return [t.strip().lower() for t in raw.split(",") if t.strip()]


@dataclass(frozen=True)
class TradeSummary:
    """Derived on every read, never stored."""

    active: int
    urgent: int
    total_giving_value: float


def summarize_trades(trades: Iterable[Trade]) -> TradeSummary:
    active = urgent = 0
    total = 0.0
    for trade in trades:
        if trade.get("status") == "active":
            active += 1
        if trade.get("isUrgent"):
            urgent += 1
        total += sum(float(item.get("value") or 0) for item in trade.get("giving", []))
    return TradeSummary(active=active, urgent=urgent, total_giving_value=total)
