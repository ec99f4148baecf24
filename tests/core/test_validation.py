"""Validator tests — per-entity rules, warnings vs errors, password and phone checks."""

from datetime import date, timedelta

from registrar.core.validation import ValidationResult, Validator
from registrar.models import Enrollment
from tests.builders import grade, module, professor, student

validator = Validator()


# -- ValidationResult ---------------------------------------------------------

def test_merge_propagates_invalidity_and_warnings():
    result = ValidationResult()
    other = ValidationResult()
    other.add_error("e1")
    other.add_warning("w1")
    result.merge(other)
    assert not result.valid
    assert result.error_message == "e1"
    assert result.has_warnings


# -- Student ------------------------------------------------------------------

def test_valid_student_passes():
    result = validator.validate(student())
    assert result.valid
    assert not result.has_warnings


def test_student_code_must_start_with_one():
    result = validator.validate(student(code="20000001"))
    assert not result.valid
    assert "commencer par 1" in result.error_message


def test_student_short_names_and_bad_year():
    result = validator.validate(student(first_name="A", last_name="B", year=7))
    assert len(result.errors) == 3


def test_student_foreign_email_is_warning_only():
    result = validator.validate(student(email="alice@gmail.com"))
    assert result.valid
    assert result.has_warnings


def test_student_malformed_email_is_error():
    result = validator.validate(student(email="not-an-email"))
    assert not result.valid


# -- Professor / Grade / Module ----------------------------------------------

def test_professor_code_pattern():
    assert validator.validate(professor()).valid
    assert not validator.validate(professor(code="2000")).valid


def test_grade_out_of_range_and_below_average():
    assert not validator.validate(grade(value=21)).valid
    low = validator.validate(grade(value=8))
    assert low.valid and low.warnings == ["Note inférieure à la moyenne"]


def test_grade_in_future_rejected():
    future = grade(recorded_on=date.today() + timedelta(days=1))
    assert not validator.validate(future).valid


def test_module_rules():
    assert validator.validate(module()).valid
    assert not validator.validate(module(code="X")).valid
    assert not validator.validate(module(name="AB")).valid
    assert not validator.validate(module(credits=0)).valid
    heavy = validator.validate(module(credits=12))
    assert heavy.valid and heavy.has_warnings


# -- Dispatch -----------------------------------------------------------------

def test_none_is_error_and_unknown_type_is_warning():
    assert not validator.validate(None).valid
    unknown = validator.validate(Enrollment(student_code="S", module_code="M"))
    assert unknown.valid and unknown.has_warnings


# -- Password / phone ---------------------------------------------------------

def test_password_rules():
    assert not Validator.validate_password("").valid
    assert not Validator.validate_password("Ab1").valid
    weak = Validator.validate_password("abcdefgh")
    assert weak.valid and len(weak.warnings) == 2
    strong = Validator.validate_password("Abcdefg1")
    assert strong.valid and not strong.has_warnings


def test_phone_number_formats():
    assert Validator.validate_phone_number("0550123456").valid
    assert Validator.validate_phone_number("0550 12 34 56").valid
    assert Validator.validate_phone_number(None).valid
    assert not Validator.validate_phone_number("0450123456").valid
