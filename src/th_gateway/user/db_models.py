"""SQLAlchemy ORM model for the users table.

Uniqueness of username and email is case-insensitive: the unique indexes are
on LOWER(column), so the database rejects "Alice" once "alice" exists even if
two registrations race past the service-level check.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, Index, String, func
from sqlalchemy.orm import Mapped, mapped_column

from src.th_common.database import Base
from src.th_common.datetime_utils import utc_now


def default_stats() -> dict[str, Any]:
    # Rating stays 0 until the first review lands
    return {
        "totalTrades": 0,
        "successfulTrades": 0,
        "rating": 0.0,
        "totalReviews": 0,
    }


class UserModel(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    username: Mapped[str] = mapped_column(String(64), nullable=False)
    display_name: Mapped[str] = mapped_column(String(128), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    avatar: Mapped[str] = mapped_column(String(512), nullable=False)
    join_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )
    is_online: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    # Reassign, never mutate in place: plain JSON columns do not track item changes
    stats: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=default_stats)


Index("uq_users_username_lower", func.lower(UserModel.username), unique=True)
Index("uq_users_email_lower", func.lower(UserModel.email), unique=True)
