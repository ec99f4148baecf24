"""Notification Model — one inbox message for one recipient.

Invariants:
    - id is a uuid4 string, globally unique across recipients
    - created_at is timezone-aware UTC
    - sender_code is a user code or SYSTEM_SENDER / ACADEMIC_ADMIN_SENDER
"""

import uuid
from datetime import datetime, timedelta, timezone

from pydantic import BaseModel, Field, TypeAdapter

from registrar.core.domain_types import (
    NotificationPriority, NotificationType, SYSTEM_SENDER,
)

SHORT_MESSAGE_LENGTH = 80


class Notification(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    recipient_code: str
    sender_code: str = SYSTEM_SENDER
    type: NotificationType
    title: str
    message: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    read: bool = False
    priority: NotificationPriority = NotificationPriority.NORMAL
    related_entity_id: str | None = None

    def mark_read(self) -> None:
        self.read = True

    def is_recent(self, now: datetime, window: timedelta = timedelta(hours=24)) -> bool:
        return self.created_at > now - window

    @property
    def short_message(self) -> str:
        if len(self.message) <= SHORT_MESSAGE_LENGTH:
            return self.message
        return self.message[:SHORT_MESSAGE_LENGTH - 3] + "..."


notifications_adapter: TypeAdapter[dict[str, list[Notification]]] = TypeAdapter(
    dict[str, list[Notification]],
)
