"""Async HTTP client for the TradeHub API.

Keeps the bearer token handed out by register/login and attaches it to
every later call. Any `success: false` answer is raised as ApiClientError
carrying the server's message.

    async with TradeHubClient("http://localhost:3001/api") as api:
        await api.login("alice", "secret1")
        trades = await api.list_trades()
"""

import logging
from typing import Any

import httpx

from src.th_common.enums import NotificationType

logger = logging.getLogger("tradehub.client")


class ApiClientError(Exception):
    def __init__(self, status_code: int, message: str, code: int | None = None) -> None:
        self.status_code = status_code
        self.message = message
        self.code = code
        super().__init__(f"{status_code}: {message}")


class TradeHubClient:
    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.token = token
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"), timeout=timeout, transport=transport
        )

    async def __aenter__(self) -> "TradeHubClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------
    # Transport helpers
    # ------------------------------------------------------------------

    def _headers(self) -> dict[str, str]:
        if self.token:
            return {"Authorization": f"Bearer {self.token}"}
        return {}

    async def _request(
        self, method: str, path: str, json_payload: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        response = await self._client.request(
            method, path, json=json_payload, headers=self._headers()
        )
        try:
            body = response.json()
        except ValueError:
            raise ApiClientError(response.status_code, response.text or "Invalid response") from None

        if response.is_error or body.get("success") is False:
            message = body.get("message") or f"HTTP error! status: {response.status_code}"
            logger.warning("API request failed for %s %s: %s", method, path, message)
            raise ApiClientError(response.status_code, message, body.get("code"))
        return body

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    async def register(
        self,
        username: str,
        display_name: str,
        email: str,
        password: str,
        confirm_password: str,
    ) -> dict[str, Any]:
        body = await self._request(
            "POST",
            "/auth/register",
            {
                "username": username,
                "displayName": display_name,
                "email": email,
                "password": password,
                "confirmPassword": confirm_password,
            },
        )
        self.token = body.get("token")
        return body["user"]

    async def login(self, username: str, password: str) -> dict[str, Any]:
        body = await self._request(
            "POST", "/auth/login", {"username": username, "password": password}
        )
        self.token = body.get("token")
        return body["user"]

    async def me(self) -> dict[str, Any]:
        return (await self._request("GET", "/auth/me"))["user"]

    async def logout(self) -> None:
        """Log out server-side; the local token is dropped even if that fails."""
        try:
            await self._request("POST", "/auth/logout")
        finally:
            self.token = None

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    async def list_users(self) -> list[dict[str, Any]]:
        return (await self._request("GET", "/users"))["users"]

    async def get_user(self, user_id: str) -> dict[str, Any]:
        return (await self._request("GET", f"/users/{user_id}"))["user"]

    async def update_user_stats(self, user_id: str, **stats: int | float) -> dict[str, Any]:
        return (await self._request("PATCH", f"/users/{user_id}/stats", stats))["user"]

    # ------------------------------------------------------------------
    # Trades
    # ------------------------------------------------------------------

    async def list_trades(self) -> list[dict[str, Any]]:
        return (await self._request("GET", "/trades"))["trades"]

    async def list_user_trades(self, user_id: str) -> list[dict[str, Any]]:
        return (await self._request("GET", f"/trades/user/{user_id}"))["trades"]

    async def create_trade(
        self,
        title: str,
        description: str,
        giving: list[dict[str, Any]],
        wanting: list[dict[str, Any]],
        is_urgent: bool = False,
        expiry_days: int | str = 7,
        tags: list[str] | None = None,
    ) -> dict[str, Any]:
        body = await self._request(
            "POST",
            "/trades",
            {
                "title": title,
                "description": description,
                "giving": giving,
                "wanting": wanting,
                "isUrgent": is_urgent,
                "expiryDays": expiry_days,
                "tags": tags or [],
            },
        )
        return body["trade"]

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    async def list_notifications(self) -> list[dict[str, Any]]:
        return (await self._request("GET", "/notifications"))["notifications"]

    async def unread_count(self) -> int:
        return int((await self._request("GET", "/notifications/unread-count"))["count"])

    async def mark_notification_read(self, notification_id: str) -> None:
        await self._request("PATCH", f"/notifications/{notification_id}/read")

    async def mark_all_notifications_read(self) -> None:
        await self._request("PATCH", "/notifications/read-all")

    async def send_notification(
        self,
        user_id: str,
        title: str,
        message: str,
        type: NotificationType | str = NotificationType.SYSTEM,
        action_url: str | None = None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "userId": user_id,
            "title": title,
            "message": message,
            "type": NotificationType(type).value,
        }
        if action_url is not None:
            payload["actionUrl"] = action_url
        return (await self._request("POST", "/notifications", payload))["notification"]

    async def health(self) -> dict[str, Any]:
        response = await self._client.get("/health")
        response.raise_for_status()
        return response.json()
