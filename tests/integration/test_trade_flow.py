"""Integration tests for trade posting and listing."""

from typing import Any

import pytest
from httpx import AsyncClient

from tests.integration.helpers import bearer, item, register, trade_payload

pytestmark = pytest.mark.asyncio(loop_scope="session")


class TestCreateTrade:
    async def test_create_requires_token(self, client: AsyncClient) -> None:
        resp = await client.post("/trades", json=trade_payload())
        assert resp.status_code == 401

    async def test_create_with_bad_token(self, client: AsyncClient) -> None:
        resp = await client.post("/trades", json=trade_payload(), headers=bearer("x.y.z"))
        assert resp.status_code == 403

    async def test_create_success(
        self, client: AsyncClient, alice: tuple[dict[str, Any], str]
    ) -> None:
        user, token = alice
        resp = await client.post(
            "/trades",
            json=trade_payload(isUrgent=True, expiryDays=3, tags=[" Pets ", "RARE", ""]),
            headers=bearer(token),
        )
        assert resp.status_code == 201
        body = resp.json()
        assert body["success"] is True
        assert body["message"] == "Trade created successfully"

        trade = body["trade"]
        assert trade["id"]
        assert trade["status"] == "active"
        assert trade["isUrgent"] is True
        assert trade["tags"] == ["pets", "rare"]
        assert trade["createdAt"] == trade["updatedAt"]
        assert trade["expiresAt"] is not None
        assert trade["author"]["id"] == user["id"]
        assert trade["author"]["displayName"] == "Alice A"
        assert "email" not in trade["author"]
        assert trade["giving"][0]["name"] == "Shadow Dragon"
        assert trade["giving"][0]["value"] == 120

    async def test_never_expires(
        self, client: AsyncClient, alice: tuple[dict[str, Any], str]
    ) -> None:
        _, token = alice
        resp = await client.post(
            "/trades", json=trade_payload(expiryDays="never"), headers=bearer(token)
        )
        assert resp.json()["trade"]["expiresAt"] is None

    async def test_invalid_expiry(
        self, client: AsyncClient, alice: tuple[dict[str, Any], str]
    ) -> None:
        _, token = alice
        resp = await client.post(
            "/trades", json=trade_payload(expiryDays="soon"), headers=bearer(token)
        )
        assert resp.status_code == 400
        assert resp.json()["code"] == 3002

    @pytest.mark.parametrize("expiry", [1_000_000, 10**12, "1e9", "3651", True, False])
    async def test_out_of_range_or_boolean_expiry(
        self, client: AsyncClient, alice: tuple[dict[str, Any], str], expiry: object
    ) -> None:
        _, token = alice
        resp = await client.post(
            "/trades", json=trade_payload(expiryDays=expiry), headers=bearer(token)
        )
        assert resp.status_code == 400
        assert resp.json()["code"] == 3002
        assert (await client.get("/trades")).json()["trades"] == []

    async def test_longest_expiry_accepted(
        self, client: AsyncClient, alice: tuple[dict[str, Any], str]
    ) -> None:
        _, token = alice
        resp = await client.post(
            "/trades", json=trade_payload(expiryDays=3650), headers=bearer(token)
        )
        assert resp.status_code == 201
        assert resp.json()["trade"]["expiresAt"] is not None

    @pytest.mark.parametrize("side", ["giving", "wanting"])
    async def test_empty_item_list_rejected(
        self, client: AsyncClient, alice: tuple[dict[str, Any], str], side: str
    ) -> None:
        _, token = alice
        resp = await client.post(
            "/trades", json=trade_payload(**{side: []}), headers=bearer(token)
        )
        assert resp.status_code == 400
        assert resp.json()["code"] == 3001

    async def test_unknown_rarity_rejected(
        self, client: AsyncClient, alice: tuple[dict[str, Any], str]
    ) -> None:
        _, token = alice
        resp = await client.post(
            "/trades",
            json=trade_payload(giving=[item("Odd Thing", "ultra")]),
            headers=bearer(token),
        )
        assert resp.status_code == 400
        assert resp.json()["success"] is False

    async def test_blank_title_rejected(
        self, client: AsyncClient, alice: tuple[dict[str, Any], str]
    ) -> None:
        _, token = alice
        resp = await client.post("/trades", json=trade_payload(title="  "), headers=bearer(token))
        assert resp.status_code == 400


class TestListTrades:
    async def test_round_trip(
        self, client: AsyncClient, alice: tuple[dict[str, Any], str]
    ) -> None:
        user, token = alice
        created = (
            await client.post("/trades", json=trade_payload(), headers=bearer(token))
        ).json()["trade"]

        everyone = (await client.get("/trades")).json()["trades"]
        mine = (await client.get(f"/trades/user/{user['id']}")).json()["trades"]
        assert everyone == [created]
        assert mine == [created]

    async def test_newest_first(
        self, client: AsyncClient, alice: tuple[dict[str, Any], str]
    ) -> None:
        _, token = alice
        for title in ("first", "second", "third"):
            await client.post("/trades", json=trade_payload(title=title), headers=bearer(token))

        trades = (await client.get("/trades")).json()["trades"]
        assert [t["title"] for t in trades] == ["third", "second", "first"]

    async def test_list_by_author_filters(
        self, client: AsyncClient, alice: tuple[dict[str, Any], str]
    ) -> None:
        alice_user, alice_token = alice
        bob_user, bob_token = await register(client, displayName="Bob B")
        await client.post("/trades", json=trade_payload("alice's"), headers=bearer(alice_token))
        await client.post("/trades", json=trade_payload("bob's"), headers=bearer(bob_token))

        bobs = (await client.get(f"/trades/user/{bob_user['id']}")).json()["trades"]
        assert [t["title"] for t in bobs] == ["bob's"]
        assert len((await client.get("/trades")).json()["trades"]) == 2

    async def test_author_snapshot_is_not_refreshed(
        self, client: AsyncClient, alice: tuple[dict[str, Any], str]
    ) -> None:
        user, token = alice
        await client.post("/trades", json=trade_payload(), headers=bearer(token))
        await client.patch(
            f"/users/{user['id']}/stats", json={"rating": 5}, headers=bearer(token)
        )

        trade = (await client.get("/trades")).json()["trades"][0]
        assert trade["author"]["stats"]["rating"] == 0


class TestDevClearData:
    async def test_disabled_outside_debug(self, client: AsyncClient) -> None:
        resp = await client.delete("/dev/clear-data")
        assert resp.status_code == 404

    async def test_clears_everything_in_debug(
        self, client: AsyncClient, alice: tuple[dict[str, Any], str], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        from config.settings import settings

        _, token = alice
        await client.post("/trades", json=trade_payload(), headers=bearer(token))
        monkeypatch.setattr(settings, "DEBUG", True)

        resp = await client.delete("/dev/clear-data")
        assert resp.status_code == 200
        assert (await client.get("/trades")).json()["trades"] == []
        assert (await client.get("/users")).json()["users"] == []
