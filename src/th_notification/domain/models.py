"""Domain models for th_notification: pure dataclasses, no business logic."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Notification:
    id: str
    user_id: str
    title: str
    message: str
    type: str
    is_read: bool
    created_at: datetime
    action_url: str | None = None
