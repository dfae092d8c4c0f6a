"""SQLAlchemy ORM model for the trades table.

Item lists, tags and the author snapshot are JSON columns: a trade is
always read and written as a whole record.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.th_common.database import Base


class TradeORM(Base):
    __tablename__ = "trades"
    __table_args__ = (
        Index("idx_trades_created_at", "created_at"),
        Index("idx_trades_author_id", "author_id"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    author_id: Mapped[str] = mapped_column(String(36), nullable=False)
    author: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    giving: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False)
    wanting: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    is_urgent: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False)
