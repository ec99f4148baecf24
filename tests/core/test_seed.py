"""Seed data tests — deterministic shape of the demo dataset."""

import random
from datetime import date

from registrar.core.credentials import verify_password
from registrar.core.seed import (
    ADMIN_CODE, DEMO_PASSWORD, build_demo_dataset, empty_dataset,
)
from registrar.models import AcademicAdmin, Professor, Student

TODAY = date(2024, 3, 1)


def _dataset(seed=7):
    return build_demo_dataset(random.Random(seed), TODAY)


def test_population_counts():
    data = _dataset()
    roles = [type(u) for u in data.users.values()]
    assert roles.count(Professor) == 4
    assert roles.count(AcademicAdmin) == 1
    assert roles.count(Student) == 20
    assert len(data.modules) == 8
    assert data.modules["WEB8"].professor_code is None


def test_same_rng_seed_same_records():
    first, second = _dataset(3), _dataset(3)
    assert first.modules == second.modules
    assert first.enrollments == second.enrollments
    assert first.grades == second.grades
    assert first.absences == second.absences
    assert [u.model_dump(exclude={"password_hash"}) for u in first.users.values()] == [
        u.model_dump(exclude={"password_hash"}) for u in second.users.values()
    ]


def test_taught_lists_mirror_module_owners():
    data = _dataset()
    for user in data.users.values():
        if isinstance(user, Professor):
            owned = sorted(c for c, m in data.modules.items() if m.professor_code == user.code)
            assert sorted(user.taught_module_codes) == owned


def test_enrollments_grades_absences_are_consistent():
    data = _dataset()
    pairs = {e.key for e in data.enrollments}
    assert len(pairs) == len(data.enrollments)
    per_student: dict[str, int] = {}
    for e in data.enrollments:
        per_student[e.student_code] = per_student.get(e.student_code, 0) + 1
        assert e.validated_by == (ADMIN_CODE if e.validated else None)
    assert all(3 <= n <= 4 for n in per_student.values())
    assert all((g.student_code, g.module_code) in pairs for g in data.grades)
    assert len({g.key for g in data.grades}) == len(data.grades)
    assert all((a.student_code, a.module_code) in pairs for a in data.absences)
    assert len({a.key for a in data.absences}) == len(data.absences)
    assert all(a.occurred_on < TODAY for a in data.absences)


def test_seeded_accounts_verify_demo_password():
    data = _dataset()
    admin = data.users[ADMIN_CODE]
    assert verify_password(DEMO_PASSWORD, admin.password_hash)
    assert not verify_password("wrong", admin.password_hash)


def test_empty_dataset():
    data = empty_dataset()
    assert data.users == {} and data.modules == {}
    assert data.grades == [] and data.absences == [] and data.enrollments == []
