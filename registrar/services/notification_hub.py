"""Notification Hub — durable per-recipient inbox plus live observer fan-out.

Invariants:
    - send() persists the whole inbox map BEFORE calling any observer
    - Observer failures are logged; remaining observers still run; nothing propagates
    - list_for() is newest-first and never None (empty list for unknown recipients)
    - Filters (unread/recent/by_type/counts) never mutate state
    - Persistence failures are logged loudly; the in-memory inbox stays authoritative

Design Decisions:
    - One lock for the inbox map; fan-out happens outside it so an observer may
      call back into the hub (e.g. mark_read) without deadlocking
    - Synchronous fan-out: a blocking observer blocks the sender. Only attach
      trusted, fast observers (UI refresh hooks)
    - Clock injected for deterministic recency / pruning tests
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable, Protocol

from registrar.core import notification_templates as templates
from registrar.core.domain_types import (
    ACADEMIC_ADMIN_SENDER, Collection, DEFAULT_ASSIGNER_LABEL,
    NotificationPriority, NotificationType, SYSTEM_SENDER,
)
from registrar.core.errors import ObserverError, PersistenceError, StorageCorruptedError
from registrar.core.notification_templates import NotificationDraft
from registrar.infrastructure.storage import JsonFileStorage
from registrar.models import Notification, notifications_adapter

logger = logging.getLogger(__name__)

DEFAULT_RETENTION = timedelta(days=30)
DEFAULT_RECENT_WINDOW = timedelta(hours=24)


class NotificationObserver(Protocol):
    """Capability required to receive live notifications."""
    def deliver(self, notification: Notification) -> None: ...


@dataclass(frozen=True)
class NotificationCounts:
    total: int
    unread: int
    recent: int

    def __str__(self) -> str:
        return f"Total: {self.total}, Non lues: {self.unread}, Récentes: {self.recent}"


class NotificationHub:
    """Per-recipient inbox persisted as one document."""

    def __init__(
        self,
        storage: JsonFileStorage,
        *,
        retention: timedelta = DEFAULT_RETENTION,
        recent_window: timedelta = DEFAULT_RECENT_WINDOW,
        now: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.storage = storage
        self.retention = retention
        self.recent_window = recent_window
        self._now = now
        self._lock = threading.RLock()
        self._observers: list[NotificationObserver] = []
        self._inbox: dict[str, list[Notification]] = self._load()

    # --- Observers ------------------------------------------------------------

    def add_observer(self, observer: NotificationObserver) -> None:
        with self._lock:
            if observer not in self._observers:
                self._observers.append(observer)

    def remove_observer(self, observer: NotificationObserver) -> None:
        with self._lock:
            if observer in self._observers:
                self._observers.remove(observer)

    # --- Sending --------------------------------------------------------------

    def send(
        self,
        recipient: str,
        sender: str,
        type: NotificationType,
        title: str,
        message: str,
        priority: NotificationPriority = NotificationPriority.NORMAL,
        related_entity_id: str | None = None,
    ) -> Notification:
        notification = Notification(
            recipient_code=recipient,
            sender_code=sender,
            type=type,
            title=title,
            message=message,
            priority=priority,
            related_entity_id=related_entity_id,
            created_at=self._now(),
        )
        with self._lock:
            self._inbox.setdefault(recipient, []).append(notification)
            self._persist()
            observers = list(self._observers)
        logger.info(
            f"Notification sent: {title}",
            extra={"recipient": recipient, "notification_type": type.value},
        )
        self._fan_out(observers, notification)
        return notification

    def send_bulk(
        self,
        recipients: Iterable[str],
        type: NotificationType,
        title: str,
        message: str,
        priority: NotificationPriority = NotificationPriority.NORMAL,
    ) -> list[Notification]:
        sent: list[Notification] = []
        for recipient in recipients:
            try:
                sent.append(self.send(recipient, SYSTEM_SENDER, type, title, message, priority))
            except Exception:
                logger.exception(
                    "Bulk notification failed for one recipient",
                    extra={"recipient": recipient, "notification_type": type.value},
                )
        return sent

    def send_draft(
        self, recipient: str, draft: NotificationDraft, sender: str = SYSTEM_SENDER,
    ) -> Notification:
        return self.send(
            recipient, sender, draft.type, draft.title, draft.message,
            draft.priority, draft.related_entity_id,
        )

    # --- Event helpers --------------------------------------------------------

    def notify_grade_added(
        self, student_code: str, module_code: str, module_name: str,
        value: float, professor_name: str,
    ) -> Notification:
        return self.send_draft(
            student_code,
            templates.grade_added(module_code, module_name, value, professor_name),
        )

    def notify_grade_modified(
        self, student_code: str, module_code: str, module_name: str, value: float,
    ) -> Notification:
        return self.send_draft(
            student_code, templates.grade_modified(module_code, module_name, value),
        )

    def notify_absence_recorded(
        self, student_code: str, module_code: str, module_name: str, date_label: str,
    ) -> Notification:
        return self.send_draft(
            student_code, templates.absence_recorded(module_code, module_name, date_label),
        )

    def notify_module_assigned(
        self, professor_code: str, module_code: str, module_name: str,
        assigned_by: str = DEFAULT_ASSIGNER_LABEL,
    ) -> Notification:
        return self.send_draft(
            professor_code,
            templates.module_assigned(module_code, module_name, assigned_by),
            sender=ACADEMIC_ADMIN_SENDER,
        )

    def notify_account_created(
        self, user_code: str, account_type: str, temporary_password: str,
    ) -> Notification:
        return self.send_draft(
            user_code, templates.account_created(account_type, temporary_password),
        )

    def notify_account_modified(self, user_code: str, modification: str) -> Notification:
        return self.send_draft(user_code, templates.account_modified(modification))

    def notify_password_reset(
        self, user_code: str, reset_by: str = ACADEMIC_ADMIN_SENDER,
    ) -> Notification:
        return self.send_draft(user_code, templates.password_reset(), sender=reset_by)

    def notify_enrollment_validated(
        self, student_code: str, module_names: list[str],
    ) -> Notification:
        return self.send_draft(student_code, templates.enrollment_validated(module_names))

    def send_system_announcement(
        self, recipients: Iterable[str], title: str, message: str,
        priority: NotificationPriority = NotificationPriority.NORMAL,
    ) -> list[Notification]:
        return self.send_bulk(
            recipients, NotificationType.SYSTEM_ANNOUNCEMENT, title, message, priority,
        )

    # --- Reading --------------------------------------------------------------

    def list_for(self, recipient: str) -> list[Notification]:
        with self._lock:
            items = [n.model_copy() for n in self._inbox.get(recipient, [])]
        items.sort(key=lambda n: n.created_at, reverse=True)
        return items

    def unread_for(self, recipient: str) -> list[Notification]:
        return [n for n in self.list_for(recipient) if not n.read]

    def recent_for(self, recipient: str) -> list[Notification]:
        now = self._now()
        return [n for n in self.list_for(recipient) if n.is_recent(now, self.recent_window)]

    def by_type(self, recipient: str, type: NotificationType) -> list[Notification]:
        return [n for n in self.list_for(recipient) if n.type == type]

    def unread_count(self, recipient: str) -> int:
        return len(self.unread_for(recipient))

    def counts_for(self, recipient: str) -> NotificationCounts:
        items = self.list_for(recipient)
        now = self._now()
        return NotificationCounts(
            total=len(items),
            unread=sum(1 for n in items if not n.read),
            recent=sum(1 for n in items if n.is_recent(now, self.recent_window)),
        )

    def total_count(self) -> int:
        with self._lock:
            return sum(len(items) for items in self._inbox.values())

    # --- Mutations ------------------------------------------------------------

    def mark_read(self, notification_id: str) -> bool:
        with self._lock:
            for items in self._inbox.values():
                for notification in items:
                    if notification.id == notification_id:
                        notification.mark_read()
                        self._persist()
                        return True
        return False

    def mark_all_read(self, recipient: str) -> None:
        with self._lock:
            items = self._inbox.get(recipient)
            if items is None:
                return
            for notification in items:
                notification.mark_read()
            self._persist()

    def delete(self, recipient: str, notification_id: str) -> bool:
        with self._lock:
            items = self._inbox.get(recipient)
            if items is None:
                return False
            kept = [n for n in items if n.id != notification_id]
            removed = len(kept) != len(items)
            items[:] = kept
            self._persist()
            return removed

    def delete_all(self, recipient: str) -> None:
        with self._lock:
            self._inbox.pop(recipient, None)
            self._persist()

    def prune_older_than(self, age: timedelta | None = None) -> int:
        cutoff = self._now() - (age if age is not None else self.retention)
        with self._lock:
            removed = 0
            for items in self._inbox.values():
                kept = [n for n in items if n.created_at >= cutoff]
                removed += len(items) - len(kept)
                items[:] = kept
            self._persist()
        if removed:
            logger.info(f"Pruned {removed} notifications older than {cutoff.isoformat()}")
        return removed

    # --- Internals ------------------------------------------------------------

    def _fan_out(self, observers: list[NotificationObserver], notification: Notification) -> None:
        for observer in observers:
            try:
                observer.deliver(notification)
            except Exception as e:
                err = ObserverError(type(observer).__name__, e)
                logger.warning(err.message, extra=err.to_log_extra(), exc_info=e)

    def _persist(self) -> bool:
        try:
            self.storage.write(Collection.NOTIFICATIONS, notifications_adapter, self._inbox)
            return True
        except PersistenceError as e:
            logger.error(e.message, extra=e.to_log_extra())
            return False

    def _load(self) -> dict[str, list[Notification]]:
        try:
            loaded = self.storage.read(Collection.NOTIFICATIONS, notifications_adapter)
        except StorageCorruptedError as e:
            logger.error(e.message, extra=e.to_log_extra())
            return {}
        if loaded is None:
            return {}
        logger.info(f"Loaded {sum(len(v) for v in loaded.values())} notifications")
        return loaded
