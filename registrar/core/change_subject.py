"""Change Subject — narrow observer channel for grade lifecycle events.

Invariants:
    - Only two events exist: grade added and grade modified
    - attach/detach are idempotent (double attach = one delivery, detach unknown = no-op)
    - Observer failures are logged and never reach the mutating caller

Design Decisions:
    - Separate from NotificationHub: dashboards that only need "grades changed"
      do not consume the full notification stream
    - Protocol over ABC: structural subtyping, observers need no base class
    - Synchronous fan-out: a blocking observer blocks the grade mutation; only
      attach trusted, fast callbacks
"""

import logging
import threading
from typing import Protocol

from registrar.core.errors import ObserverError

logger = logging.getLogger(__name__)


class GradeObserver(Protocol):
    """Capability required to receive grade events."""
    def on_grade_added(self, student_code: str, module_code: str, value: float) -> None: ...
    def on_grade_modified(self, student_code: str, module_code: str, value: float) -> None: ...


class ChangeSubject:
    """Fans grade events out to attached observers, in attach order."""

    def __init__(self):
        self._observers: list[GradeObserver] = []
        self._lock = threading.Lock()

    def attach(self, observer: GradeObserver) -> None:
        with self._lock:
            if observer not in self._observers:
                self._observers.append(observer)

    def detach(self, observer: GradeObserver) -> None:
        with self._lock:
            if observer in self._observers:
                self._observers.remove(observer)

    @property
    def observer_count(self) -> int:
        return len(self._observers)

    def grade_added(self, student_code: str, module_code: str, value: float) -> None:
        for observer in self._snapshot():
            try:
                observer.on_grade_added(student_code, module_code, value)
            except Exception as e:
                _log_observer_failure(observer, e)

    def grade_modified(self, student_code: str, module_code: str, value: float) -> None:
        for observer in self._snapshot():
            try:
                observer.on_grade_modified(student_code, module_code, value)
            except Exception as e:
                _log_observer_failure(observer, e)

    def _snapshot(self) -> list[GradeObserver]:
        with self._lock:
            return list(self._observers)


def _log_observer_failure(observer: object, cause: Exception) -> None:
    err = ObserverError(type(observer).__name__, cause)
    logger.warning(err.message, extra=err.to_log_extra(), exc_info=cause)
