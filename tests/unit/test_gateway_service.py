"""Unit tests for user service (mocked DB)."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy.exc import IntegrityError

from src.th_common.errors import (
    EmailExistsError,
    InvalidCredentialsError,
    InvalidInputError,
    UserNotFoundError,
    UsernameExistsError,
)
from src.th_gateway.user.db_models import UserModel, default_stats
from src.th_gateway.user.service import UserService, validate_registration


def _make_user() -> UserModel:
    user = UserModel()
    user.id = "u-1"
    user.username = "alice"
    user.display_name = "Alice A"
    user.email = "alice@example.com"
    user.password_hash = "$2b$12$fakehash"
    user.is_online = False
    user.stats = default_stats()
    return user


def _result(value: UserModel | None) -> MagicMock:
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


@pytest.fixture
def mock_db() -> AsyncMock:
    db = AsyncMock()
    db.add = MagicMock()
    return db


@pytest.fixture
def service() -> UserService:
    return UserService()


class TestValidateRegistration:
    def test_valid(self) -> None:
        validate_registration("alice", "Alice A", "a@x.com", "secret1", "secret1")

    def test_first_failure_wins(self) -> None:
        with pytest.raises(InvalidInputError) as exc_info:
            validate_registration("ab", "A", "nope", "1", "2")
        assert exc_info.value.message == "Username must be at least 3 characters long"

    def test_password_mismatch_checked_last(self) -> None:
        with pytest.raises(InvalidInputError) as exc_info:
            validate_registration("alice", "Alice A", "a@x.com", "secret1", "secret2")
        assert exc_info.value.message == "Passwords do not match"

    def test_boundaries_are_inclusive(self) -> None:
        validate_registration("abc", "Al", "@", "123456", "123456")


class TestRegister:
    async def test_duplicate_username_raises_error(
        self, service: UserService, mock_db: AsyncMock
    ) -> None:
        mock_db.execute = AsyncMock(return_value=_result(_make_user()))

        with pytest.raises(UsernameExistsError):
            await service.register("Alice", "Alice", "new@x.com", "secret1", "secret1", mock_db)
        mock_db.add.assert_not_called()
        mock_db.rollback.assert_awaited()

    async def test_duplicate_email_raises_error(
        self, service: UserService, mock_db: AsyncMock
    ) -> None:
        mock_db.execute = AsyncMock(side_effect=[_result(None), _result(_make_user())])

        with pytest.raises(EmailExistsError):
            await service.register("bob", "Bob B", "ALICE@example.com", "secret1", "secret1", mock_db)

    async def test_validation_runs_before_db(
        self, service: UserService, mock_db: AsyncMock
    ) -> None:
        with pytest.raises(InvalidInputError):
            await service.register("ab", "Bob B", "b@x.com", "secret1", "secret1", mock_db)
        mock_db.execute.assert_not_called()

    async def test_success_creates_online_user(
        self, service: UserService, mock_db: AsyncMock
    ) -> None:
        mock_db.execute = AsyncMock(return_value=_result(None))

        with patch("src.th_gateway.user.service.hash_password", return_value="hashed"):
            user = await service.register(
                "  bob ", "Bob B", "b@x.com", "secret1", "secret1", mock_db
            )

        assert user.username == "bob"
        assert user.password_hash == "hashed"
        assert user.is_online is True
        assert user.stats == default_stats()
        assert len(user.id) == 36
        mock_db.add.assert_called_once_with(user)
        mock_db.commit.assert_awaited_once()

    async def test_password_hashed_outside_write_lock(
        self, service: UserService, mock_db: AsyncMock
    ) -> None:
        mock_db.execute = AsyncMock(return_value=_result(None))
        lock_held: list[bool] = []

        def _hash(plain: str) -> str:
            lock_held.append(service._write_lock.locked())
            return "hashed"

        with patch("src.th_gateway.user.service.hash_password", side_effect=_hash):
            await service.register("carol", "Carol C", "c@x.com", "secret1", "secret1", mock_db)

        assert lock_held == [False]

    async def test_integrity_error_maps_to_username_taken(
        self, service: UserService, mock_db: AsyncMock
    ) -> None:
        # both pre-checks pass, the insert loses a race, the re-check finds the winner
        mock_db.execute = AsyncMock(
            side_effect=[_result(None), _result(None), _result(_make_user())]
        )
        mock_db.commit = AsyncMock(side_effect=IntegrityError("INSERT", {}, Exception()))

        with (
            patch("src.th_gateway.user.service.hash_password", return_value="hashed"),
            pytest.raises(UsernameExistsError),
        ):
            await service.register("alice", "Alice A", "a@x.com", "secret1", "secret1", mock_db)
        mock_db.rollback.assert_awaited_once()


class TestAuthenticate:
    async def test_missing_fields(self, service: UserService, mock_db: AsyncMock) -> None:
        with pytest.raises(InvalidInputError):
            await service.authenticate("alice", "", mock_db)

    async def test_wrong_username_raises_credentials_error(
        self, service: UserService, mock_db: AsyncMock
    ) -> None:
        mock_db.execute = AsyncMock(return_value=_result(None))

        with pytest.raises(InvalidCredentialsError):
            await service.authenticate("nobody", "secret1", mock_db)

    async def test_wrong_password_raises_credentials_error(
        self, service: UserService, mock_db: AsyncMock
    ) -> None:
        mock_db.execute = AsyncMock(return_value=_result(_make_user()))

        with (
            patch("src.th_gateway.user.service.verify_password", return_value=False),
            pytest.raises(InvalidCredentialsError),
        ):
            await service.authenticate("alice", "wrong", mock_db)

    async def test_success_marks_online(
        self, service: UserService, mock_db: AsyncMock
    ) -> None:
        user = _make_user()
        mock_db.execute = AsyncMock(return_value=_result(user))
        mock_db.get = AsyncMock(return_value=user)

        with patch("src.th_gateway.user.service.verify_password", return_value=True):
            result = await service.authenticate("alice", "secret1", mock_db)

        assert result is user
        assert user.is_online is True
        mock_db.commit.assert_awaited_once()


class TestStats:
    async def test_update_merges_changes(
        self, service: UserService, mock_db: AsyncMock
    ) -> None:
        user = _make_user()
        mock_db.get = AsyncMock(return_value=user)

        await service.update_stats("u-1", {"rating": 4.5}, mock_db)

        assert user.stats == {
            "totalTrades": 0,
            "successfulTrades": 0,
            "rating": 4.5,
            "totalReviews": 0,
        }

    async def test_update_unknown_user(
        self, service: UserService, mock_db: AsyncMock
    ) -> None:
        mock_db.get = AsyncMock(return_value=None)

        with pytest.raises(UserNotFoundError):
            await service.update_stats("ghost", {"rating": 1}, mock_db)
        mock_db.commit.assert_not_awaited()

    async def test_get_by_id_unknown(self, service: UserService, mock_db: AsyncMock) -> None:
        mock_db.get = AsyncMock(return_value=None)

        with pytest.raises(UserNotFoundError):
            await service.get_by_id("ghost", mock_db)
