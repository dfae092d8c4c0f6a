"""Shared helpers for the integration tests."""

import uuid
from typing import Any

from httpx import AsyncClient


def unique_user(**overrides: str) -> dict[str, str]:
    """Fresh registration payload; uniqueness avoids cross-test collisions."""
    uid = uuid.uuid4().hex[:8]
    payload = {
        "username": f"trader_{uid}",
        "displayName": f"Trader {uid}",
        "email": f"trader_{uid}@example.com",
        "password": "secret1",
        "confirmPassword": "secret1",
    }
    payload.update(overrides)
    return payload


def item(name: str, rarity: str = "rare", value: float | None = None) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": f"item-{name.lower().replace(' ', '-')}",
        "name": name,
        "rarity": rarity,
        "category": "pets",
    }
    if value is not None:
        data["value"] = value
    return data


def trade_payload(title: str = "Dragon for Unicorn", **overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "title": title,
        "description": "Looking for a quick swap",
        "giving": [item("Shadow Dragon", "legendary", 120)],
        "wanting": [item("Frost Unicorn", "epic")],
    }
    payload.update(overrides)
    return payload


async def register(client: AsyncClient, **overrides: str) -> tuple[dict[str, Any], str]:
    """Register a user and return (user, token)."""
    resp = await client.post("/auth/register", json=unique_user(**overrides))
    body = resp.json()
    assert body["success"] is True, body
    return body["user"], body["token"]


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
