"""Unit tests for th_gateway Pydantic schemas."""

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from src.th_gateway.user.db_models import UserModel, default_stats
from src.th_gateway.user.schemas import (
    AccountUser,
    PublicUser,
    RegisterRequest,
    StatsUpdateRequest,
)


def _make_user() -> UserModel:
    return UserModel(
        id="u-1",
        username="alice",
        display_name="Alice A",
        email="alice@example.com",
        password_hash="$2b$12$fakehash",
        avatar="/placeholder.svg",
        join_date=datetime(2024, 5, 1, tzinfo=UTC),
        is_online=True,
        stats=default_stats(),
    )


class TestRegisterRequest:
    def test_accepts_camel_case(self) -> None:
        req = RegisterRequest.model_validate(
            {"username": "alice", "displayName": "Alice A", "confirmPassword": "x"}
        )
        assert req.display_name == "Alice A"
        assert req.confirm_password == "x"

    def test_accepts_snake_case(self) -> None:
        req = RegisterRequest(display_name="Alice A")
        assert req.display_name == "Alice A"

    def test_missing_fields_default_to_empty(self) -> None:
        # Rules are applied by the service so that messages come out in order
        req = RegisterRequest()
        assert req.username == ""
        assert req.password == ""


class TestStatsUpdateRequest:
    def test_changes_only_sent_keys(self) -> None:
        req = StatsUpdateRequest.model_validate({"totalTrades": 4})
        assert req.changes() == {"totalTrades": 4}

    def test_changes_use_camel_case_keys(self) -> None:
        req = StatsUpdateRequest(successful_trades=2, rating=3.5)
        assert req.changes() == {"successfulTrades": 2, "rating": 3.5}

    @pytest.mark.parametrize(
        "payload",
        [{"rating": 5.1}, {"rating": -1}, {"totalTrades": -1}, {"totalReviews": -2}],
    )
    def test_out_of_range(self, payload: dict) -> None:
        with pytest.raises(ValidationError):
            StatsUpdateRequest.model_validate(payload)

    def test_unknown_key_rejected(self) -> None:
        with pytest.raises(ValidationError):
            StatsUpdateRequest.model_validate({"karma": 10})


class TestUserViews:
    def test_public_user_hides_email_and_hash(self) -> None:
        data = PublicUser.from_model(_make_user()).model_dump(by_alias=True)
        assert "email" not in data
        assert "passwordHash" not in data
        assert data["displayName"] == "Alice A"
        assert data["joinDate"] == "2024-05-01T00:00:00+00:00"
        assert data["isOnline"] is True
        assert data["stats"]["totalTrades"] == 0

    def test_account_user_includes_email(self) -> None:
        data = AccountUser.from_model(_make_user()).model_dump(by_alias=True)
        assert data["email"] == "alice@example.com"
        assert "passwordHash" not in data
