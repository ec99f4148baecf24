"""Aggregate Queries — pure projections over the Store's in-memory collections.

Invariants:
    - Never mutate inputs; results are new lists of deep copies
    - Results are recomputed on every call (no caching): they are cheap and
      would otherwise need fine-grained invalidation

Design Decisions:
    - Deep copies at this seam: callers can edit what they get back without
      bypassing the Store's persist/invalidate/notify path
"""

from typing import Iterable, TypeVar

from pydantic import BaseModel

from registrar.models import (
    Absence, Enrollment, Grade, Module, Professor, Student, User,
)

M = TypeVar("M", bound=BaseModel)


def copies(items: Iterable[M]) -> list[M]:
    return [item.model_copy(deep=True) for item in items]


def grades_for_student(grades: list[Grade], student_code: str) -> list[Grade]:
    return copies(g for g in grades if g.student_code == student_code)


def grades_for_module(grades: list[Grade], module_code: str) -> list[Grade]:
    return copies(g for g in grades if g.module_code == module_code)


def absences_for_student(absences: list[Absence], student_code: str) -> list[Absence]:
    return copies(a for a in absences if a.student_code == student_code)


def enrollments_for_student(
    enrollments: list[Enrollment], student_code: str,
) -> list[Enrollment]:
    return copies(e for e in enrollments if e.student_code == student_code)


def is_enrolled(enrollments: list[Enrollment], student_code: str, module_code: str) -> bool:
    return any(
        e.student_code == student_code and e.module_code == module_code
        for e in enrollments
    )


def available_modules(
    modules: dict[str, Module], enrollments: list[Enrollment], student_code: str,
) -> list[Module]:
    """All modules minus those the student is already enrolled in."""
    enrolled = {e.module_code for e in enrollments if e.student_code == student_code}
    return copies(m for code, m in modules.items() if code not in enrolled)


def modules_for_professor(modules: dict[str, Module], professor_code: str) -> list[Module]:
    return copies(m for m in modules.values() if m.professor_code == professor_code)


def students_for_professor(
    users: dict[str, User],
    modules: dict[str, Module],
    enrollments: list[Enrollment],
    professor_code: str,
) -> list[Student]:
    """Union of students enrolled in any module the professor owns, by code."""
    taught = {code for code, m in modules.items() if m.professor_code == professor_code}
    student_codes = sorted({e.student_code for e in enrollments if e.module_code in taught})
    return copies(
        u for u in (users.get(c) for c in student_codes) if isinstance(u, Student)
    )


def students(users: dict[str, User]) -> list[Student]:
    return copies(u for u in users.values() if isinstance(u, Student))


def professors(users: dict[str, User]) -> list[Professor]:
    return copies(u for u in users.values() if isinstance(u, Professor))


def search_professors(users: dict[str, User], term: str) -> list[Professor]:
    """Case-insensitive substring match over code, first/last name, department."""
    needle = term.lower()

    def matches(p: Professor) -> bool:
        fields = (p.code, p.first_name, p.last_name, p.department or "")
        return any(needle in f.lower() for f in fields)

    return copies(
        u for u in users.values() if isinstance(u, Professor) and matches(u)
    )
