"""Domain Types — enums and identifiers shared across the registrar core.

Invariants:
    - All valid states encoded as Enums — no raw string matching
    - Enum values are the persisted representation (changing one breaks stored data)
    - NotificationPriority is ordered: LOW < NORMAL < HIGH < URGENT

Design Decisions:
    - str Enums: serialize to JSON without custom encoders
    - NotificationPriority as IntEnum: UI sorts and colors by rank
"""

from enum import Enum, IntEnum


# ─── Constants ───────────────────────────────────────────────────

SYSTEM_SENDER = "SYSTEM"
ACADEMIC_ADMIN_SENDER = "ACADEMIC_ADMIN"
DEFAULT_PROFESSOR_LABEL = "Professeur"
DEFAULT_ASSIGNER_LABEL = "Vice-Doyen"


# ─── Enums ───────────────────────────────────────────────────────

class Role(str, Enum):
    """User variants — discriminant of the User tagged union."""
    STUDENT = "student"
    PROFESSOR = "professor"
    ACADEMIC_ADMIN = "academic_admin"


class GradeType(str, Enum):
    """Assessment kind — part of the grade logical key."""
    EXAM = "EXAM"
    CONTINUOUS = "CONTINUOUS"


class SessionType(str, Enum):
    """Teaching session kind — part of the absence logical key."""
    COURSE = "COURSE"
    TD = "TD"
    TP = "TP"


class NotificationType(str, Enum):
    """Notification categories surfaced in the inbox."""
    GRADE_ADDED = "GRADE_ADDED"
    GRADE_MODIFIED = "GRADE_MODIFIED"
    ABSENCE_RECORDED = "ABSENCE_RECORDED"
    MODULE_ASSIGNED = "MODULE_ASSIGNED"
    ACCOUNT_CREATED = "ACCOUNT_CREATED"
    ACCOUNT_MODIFIED = "ACCOUNT_MODIFIED"
    ENROLLMENT_VALIDATED = "ENROLLMENT_VALIDATED"
    SYSTEM_ANNOUNCEMENT = "SYSTEM_ANNOUNCEMENT"
    PASSWORD_RESET = "PASSWORD_RESET"


class NotificationPriority(IntEnum):
    LOW = 1
    NORMAL = 2
    HIGH = 3
    URGENT = 4


class CacheNamespace(str, Enum):
    """Cache partitions — each has its own size bound."""
    USER = "user"
    MODULE = "module"
    QUERY = "query"


class Collection(str, Enum):
    """Durable collections — value is the file stem under the data directory."""
    USERS = "users"
    MODULES = "modules"
    GRADES = "grades"
    ABSENCES = "absences"
    ENROLLMENTS = "enrollments"
    NOTIFICATIONS = "notifications"


# Canonical lock / flush order for the five Store collections.
STORE_COLLECTIONS: tuple[Collection, ...] = (
    Collection.USERS,
    Collection.MODULES,
    Collection.GRADES,
    Collection.ABSENCES,
    Collection.ENROLLMENTS,
)
