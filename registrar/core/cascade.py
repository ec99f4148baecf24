"""Referential Cascades — pure rewrites of dependent collections on deletion.

Invariants:
    - Functions mutate only the containers passed in and report what changed
    - Removing a student or module never touches records of other students/modules
    - Removing a professor unassigns modules; modules are never deleted
    - taught_module_codes stays the mirror of Module.professor_code

Design Decisions:
    - In-place removal (slice assignment) keeps the Store's list identity stable
      while the collection lock is held
    - Returned counts drive logging and which collections must be persisted
"""

from dataclasses import dataclass, field
from typing import Callable, TypeVar

from registrar.models import Absence, Enrollment, Grade, Module, Professor, User

T = TypeVar("T")


@dataclass
class CascadeResult:
    grades_removed: int = 0
    absences_removed: int = 0
    enrollments_removed: int = 0
    modules_unassigned: list[str] = field(default_factory=list)
    professors_updated: list[str] = field(default_factory=list)

    @property
    def records_removed(self) -> int:
        return self.grades_removed + self.absences_removed + self.enrollments_removed


def remove_where(items: list[T], predicate: Callable[[T], bool]) -> int:
    """Remove matching items in place; returns how many were removed."""
    kept = [item for item in items if not predicate(item)]
    removed = len(items) - len(kept)
    if removed:
        items[:] = kept
    return removed


def remove_student_records(
    code: str,
    grades: list[Grade],
    absences: list[Absence],
    enrollments: list[Enrollment],
) -> CascadeResult:
    return CascadeResult(
        grades_removed=remove_where(grades, lambda g: g.student_code == code),
        absences_removed=remove_where(absences, lambda a: a.student_code == code),
        enrollments_removed=remove_where(enrollments, lambda e: e.student_code == code),
    )


def remove_module_records(
    code: str,
    grades: list[Grade],
    absences: list[Absence],
    enrollments: list[Enrollment],
    users: dict[str, User],
) -> CascadeResult:
    result = CascadeResult(
        grades_removed=remove_where(grades, lambda g: g.module_code == code),
        absences_removed=remove_where(absences, lambda a: a.module_code == code),
        enrollments_removed=remove_where(enrollments, lambda e: e.module_code == code),
    )
    for user in users.values():
        if isinstance(user, Professor) and user.remove_taught_module(code):
            result.professors_updated.append(user.code)
    return result


def unassign_professor(code: str, modules: dict[str, Module]) -> CascadeResult:
    result = CascadeResult()
    for module in modules.values():
        if module.professor_code == code:
            module.professor_code = None
            result.modules_unassigned.append(module.code)
    return result


def reassign_taught_module(
    module_code: str,
    old_professor: str | None,
    new_professor: str | None,
    users: dict[str, User],
) -> list[str]:
    """Move module_code between professors' taught lists; returns changed codes."""
    changed: list[str] = []
    if old_professor and old_professor != new_professor:
        prof = users.get(old_professor)
        if isinstance(prof, Professor) and prof.remove_taught_module(module_code):
            changed.append(prof.code)
    if new_professor:
        prof = users.get(new_professor)
        if isinstance(prof, Professor) and prof.add_taught_module(module_code):
            changed.append(prof.code)
    return changed
