"""Aggregate query tests — projections return detached copies."""

from registrar.core import queries
from registrar.models import Enrollment
from tests.builders import grade, module, professor, student


def _world():
    users = {
        "S1": student("S1"), "S2": student("S2", first_name="Bob"), "S3": student("S3"),
        "P1": professor("P1", last_name="Petit", department="Informatique"),
        "P2": professor("P2", first_name="Marie", last_name="Grand", department="Réseaux"),
    }
    modules = {
        "M1": module("M1", professor_code="P1"),
        "M2": module("M2", professor_code="P1"),
        "M3": module("M3", professor_code="P2"),
        "M4": module("M4"),
    }
    enrollments = [
        Enrollment(student_code="S2", module_code="M1"),
        Enrollment(student_code="S1", module_code="M2"),
        Enrollment(student_code="S2", module_code="M2"),
        Enrollment(student_code="S3", module_code="M3"),
    ]
    return users, modules, enrollments


def test_results_are_deep_copies():
    grades = [grade("S1", "M1", 10)]
    result = queries.grades_for_student(grades, "S1")
    result[0].value = 20
    assert grades[0].value == 10


def test_grades_filters():
    grades = [grade("S1", "M1"), grade("S2", "M1"), grade("S1", "M2")]
    assert len(queries.grades_for_student(grades, "S1")) == 2
    assert len(queries.grades_for_module(grades, "M1")) == 2
    assert queries.grades_for_student(grades, "nobody") == []


def test_available_modules_excludes_enrolled():
    _, modules, enrollments = _world()
    codes = [m.code for m in queries.available_modules(modules, enrollments, "S2")]
    assert codes == ["M3", "M4"]
    assert queries.is_enrolled(enrollments, "S2", "M1")
    assert not queries.is_enrolled(enrollments, "S1", "M1")


def test_students_for_professor_is_sorted_union():
    users, modules, enrollments = _world()
    result = queries.students_for_professor(users, modules, enrollments, "P1")
    assert [s.code for s in result] == ["S1", "S2"]
    assert queries.students_for_professor(users, modules, enrollments, "P9") == []


def test_modules_for_professor_and_role_filters():
    users, modules, _ = _world()
    assert [m.code for m in queries.modules_for_professor(modules, "P1")] == ["M1", "M2"]
    assert len(queries.students(users)) == 3
    assert len(queries.professors(users)) == 2


def test_search_professors_case_insensitive():
    users, _, _ = _world()
    assert [p.code for p in queries.search_professors(users, "grand")] == ["P2"]
    assert [p.code for p in queries.search_professors(users, "INFORMATIQUE")] == ["P1"]
    assert [p.code for p in queries.search_professors(users, "p1")] == ["P1"]
    assert queries.search_professors(users, "zzz") == []
