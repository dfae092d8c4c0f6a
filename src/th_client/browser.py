"""Fetch-once trade list with local filtering.

The browse page loads every trade once, keeps it, and recomputes the
visible subset locally whenever the filters change. `refresh()` is the
only thing that goes back to the server.
"""

from typing import Any

from src.th_client.api_client import TradeHubClient
from src.th_client.filters import TradeFilters, TradeSummary, apply_filters, summarize_trades


class TradeBrowser:
    def __init__(self, client: TradeHubClient) -> None:
        self._client = client
        self._trades: list[dict[str, Any]] | None = None

    @property
    def loaded(self) -> bool:
        return self._trades is not None

    async def refresh(self) -> list[dict[str, Any]]:
        self._trades = await self._client.list_trades()
        return list(self._trades)

    async def trades(self) -> list[dict[str, Any]]:
        if self._trades is None:
            await self.refresh()
        return list(self._trades or [])

    async def visible(self, filters: TradeFilters | None = None) -> list[dict[str, Any]]:
        return apply_filters(await self.trades(), filters or TradeFilters())

    async def summary(self) -> TradeSummary:
        return summarize_trades(await self.trades())
