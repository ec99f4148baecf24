"""End-to-end Store scenarios — module assignment, grade entry, cache expiry, student removal."""

import time
from datetime import date

from registrar.core.cache import Cache
from registrar.core.domain_types import (
    CacheNamespace, GradeType, NotificationPriority, NotificationType, SessionType,
)
from registrar.models import Absence, Enrollment
from tests.builders import grade, module, professor, student


def test_module_assigned_only_after_update(store, hub):
    store.add_user(professor("P1"))
    assert store.add_module(module("GL01")) is True
    assert hub.list_for("P1") == []
    assert store.update_module(module("GL01", professor_code="P1")) is True
    assigned = hub.by_type("P1", NotificationType.MODULE_ASSIGNED)
    assert len(assigned) == 1


def test_grade_added_notifies_student_once(store, hub):
    assert store.add_grade(grade("S1", "M1", 14, grade_type=GradeType.EXAM)) is True
    [g] = store.get_student_grades("S1")
    assert g.value == 14
    [n] = hub.list_for("S1")
    assert n.type == NotificationType.GRADE_ADDED
    assert n.priority == NotificationPriority.HIGH


def test_cached_user_expires_after_ttl():
    cache = Cache()
    cache.put(CacheNamespace.USER, "S1", student("S1"), ttl=0.1)
    assert cache.get(CacheNamespace.USER, "S1") is not None
    time.sleep(0.15)
    before = cache.stats().misses
    assert cache.get(CacheNamespace.USER, "S1") is None
    assert cache.stats().misses == before + 1


def test_delete_student_removes_all_records(store):
    store.add_user(student("S1"))
    for code in ("M1", "M2", "M3"):
        store.add_module(module(code, name=f"Module {code}"))
        store.add_enrollment(Enrollment(student_code="S1", module_code=code))
    store.add_grade(grade("S1", "M1"))
    store.add_grade(grade("S1", "M2"))
    store.add_absence(Absence(
        student_code="S1", module_code="M3", occurred_on=date(2024, 2, 1),
        session_type=SessionType.TD,
    ))
    store.add_user(student("S2"))
    store.add_enrollment(Enrollment(student_code="S2", module_code="M1"))

    assert store.delete_user("S1") is True
    assert store.get_student_grades("S1") == []
    assert store.get_student_absences("S1") == []
    assert store.get_student_enrollments("S1") == []
    assert store.get_user("S1") is None
    assert store.is_student_enrolled("S2", "M1")
    assert len(store.list_modules()) == 3
