"""Pydantic schemas for th_notification requests and responses."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.th_common.datetime_utils import to_iso
from src.th_common.enums import NotificationType
from src.th_notification.domain.models import Notification


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreateNotificationRequest(_CamelModel):
    user_id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1)
    type: NotificationType = NotificationType.SYSTEM
    action_url: str | None = None


class NotificationOut(_CamelModel):
    id: str
    user_id: str
    title: str
    message: str
    type: str
    is_read: bool
    created_at: str
    action_url: str | None = None

    @classmethod
    def from_domain(cls, n: Notification) -> "NotificationOut":
        return cls(
            id=n.id,
            user_id=n.user_id,
            title=n.title,
            message=n.message,
            type=n.type,
            is_read=n.is_read,
            created_at=to_iso(n.created_at) or "",
            action_url=n.action_url,
        )
