"""Entity Models — pydantic value holders for every registrar collection.

Invariants:
    - Models carry data and small derived helpers only; no IO, no locking
    - Each module exports a TypeAdapter for its whole persisted collection

Design Decisions:
    - One file per entity for locality
    - pydantic over dataclasses: JSON round-trip of enums, dates and the
      User discriminated union comes for free
"""

from registrar.models.user import (  # noqa: F401
    AcademicAdmin, Professor, Student, User, users_adapter,
)
from registrar.models.module import Module, modules_adapter  # noqa: F401
from registrar.models.grade import Grade, grades_adapter  # noqa: F401
from registrar.models.absence import Absence, absences_adapter  # noqa: F401
from registrar.models.enrollment import Enrollment, enrollments_adapter  # noqa: F401
from registrar.models.notification import Notification, notifications_adapter  # noqa: F401
