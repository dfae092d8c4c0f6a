"""Pydantic request/response schemas for th_gateway.

Wire names are camelCase (displayName, confirmPassword, joinDate, ...);
snake_case names are accepted on input too. Registration rules are
checked in UserService, not here, so that the first failing rule decides
the message the user sees.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.th_common.datetime_utils import to_iso
from src.th_gateway.user.db_models import UserModel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RegisterRequest(CamelModel):
    username: str = ""
    display_name: str = ""
    email: str = ""
    password: str = ""
    confirm_password: str = ""


class LoginRequest(CamelModel):
    username: str = ""
    password: str = ""


class UserStats(CamelModel):
    total_trades: int = Field(0, ge=0)
    successful_trades: int = Field(0, ge=0)
    rating: float = Field(0.0, ge=0.0, le=5.0)
    total_reviews: int = Field(0, ge=0)


class StatsUpdateRequest(CamelModel):
    """Partial stats: only the keys sent are overwritten."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="forbid"
    )

    total_trades: int | None = Field(None, ge=0)
    successful_trades: int | None = Field(None, ge=0)
    rating: float | None = Field(None, ge=0.0, le=5.0)
    total_reviews: int | None = Field(None, ge=0)

    def changes(self) -> dict[str, int | float]:
        """Sent fields keyed by their camelCase storage names."""
        return self.model_dump(by_alias=True, exclude_unset=True, exclude_none=True)


class PublicUser(CamelModel):
    """What other traders may see; also the author snapshot stored on trades."""

    id: str
    username: str
    display_name: str
    avatar: str
    join_date: str
    is_online: bool
    stats: UserStats

    @classmethod
    def from_model(cls, user: UserModel) -> "PublicUser":
        return cls(
            id=user.id,
            username=user.username,
            display_name=user.display_name,
            avatar=user.avatar,
            join_date=to_iso(user.join_date) or "",
            is_online=user.is_online,
            stats=UserStats.model_validate(user.stats),
        )


class AccountUser(PublicUser):
    """The signed-in user's own view: public fields plus email."""

    email: str

    @classmethod
    def from_model(cls, user: UserModel) -> "AccountUser":
        public = PublicUser.from_model(user)
        return cls(**public.model_dump(), email=user.email)
