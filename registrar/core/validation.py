"""Validator — field-level business rules checked by callers before Store mutations.

Invariants:
    - validate() never raises for bad data; problems come back as errors/warnings
    - valid is False exactly when at least one error was recorded
    - The Store never calls this module (inputs reaching it may be invalid)

Design Decisions:
    - Rules registered per entity class in a dict: adding a rule is one line
    - Rules are plain functions returning ValidationResult, merged in order
    - Messages are French, shown verbatim in the desktop forms
"""

import re
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable

from registrar.models import Grade, Module, Professor, Student

EMAIL_PATTERN = re.compile(r"^[A-Za-z0-9+_.-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$")
INSTITUTION_EMAIL_DOMAIN = "@usthb.dz"
STUDENT_CODE_PATTERN = re.compile(r"^1\d{7}$")
PROFESSOR_CODE_PATTERN = re.compile(r"^2\d{7}$")
PHONE_PATTERNS = (
    re.compile(r"^0[567]\d{8}$"),
    re.compile(r"^0[567]\d{2}\s?\d{2}\s?\d{2}\s?\d{2}$"),
)
GRADE_MIN, GRADE_MAX, GRADE_PASS = 0.0, 20.0, 10.0


@dataclass
class ValidationResult:
    valid: bool = True
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def add_error(self, error: str) -> None:
        self.valid = False
        self.errors.append(error)

    def add_warning(self, warning: str) -> None:
        self.warnings.append(warning)

    def merge(self, other: "ValidationResult") -> None:
        for error in other.errors:
            self.add_error(error)
        self.warnings.extend(other.warnings)

    @property
    def error_message(self) -> str:
        return "\n".join(self.errors)

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)


Rule = Callable[[Any], ValidationResult]


# --- Student rules ------------------------------------------------------------

def _student_code(student: Student) -> ValidationResult:
    result = ValidationResult()
    if not student.code:
        result.add_error("Le code étudiant est obligatoire")
    elif not STUDENT_CODE_PATTERN.match(student.code):
        result.add_error("Le code étudiant doit commencer par 1 et contenir 8 chiffres")
    return result


def _student_names(student: Student) -> ValidationResult:
    result = ValidationResult()
    if not student.first_name.strip():
        result.add_error("Le prénom de l'étudiant est obligatoire")
    elif len(student.first_name) < 2:
        result.add_error("Le prénom doit contenir au moins 2 caractères")
    if not student.last_name.strip():
        result.add_error("Le nom de l'étudiant est obligatoire")
    elif len(student.last_name) < 2:
        result.add_error("Le nom doit contenir au moins 2 caractères")
    return result


def _student_email(student: Student) -> ValidationResult:
    result = _email_format(student.email)
    if student.email and not student.email.endswith(INSTITUTION_EMAIL_DOMAIN):
        result.add_warning(f"L'email devrait se terminer par {INSTITUTION_EMAIL_DOMAIN}")
    return result


def _student_year(student: Student) -> ValidationResult:
    result = ValidationResult()
    if not 1 <= student.year <= 5:
        result.add_error("L'année doit être entre 1 et 5")
    return result


# --- Professor rules ----------------------------------------------------------

def _professor_code(professor: Professor) -> ValidationResult:
    result = ValidationResult()
    if not professor.code:
        result.add_error("Le code professeur est obligatoire")
    elif not PROFESSOR_CODE_PATTERN.match(professor.code):
        result.add_error("Le code professeur doit commencer par 2 et contenir 8 chiffres")
    return result


def _professor_names(professor: Professor) -> ValidationResult:
    result = ValidationResult()
    if not professor.first_name.strip():
        result.add_error("Le prénom du professeur est obligatoire")
    if not professor.last_name.strip():
        result.add_error("Le nom du professeur est obligatoire")
    return result


def _professor_email(professor: Professor) -> ValidationResult:
    return _email_format(professor.email)


# --- Grade rules --------------------------------------------------------------

def _grade_value(grade: Grade) -> ValidationResult:
    result = ValidationResult()
    if not GRADE_MIN <= grade.value <= GRADE_MAX:
        result.add_error("La note doit être entre 0 et 20")
    if grade.value < GRADE_PASS:
        result.add_warning("Note inférieure à la moyenne")
    return result


def _grade_date(grade: Grade) -> ValidationResult:
    result = ValidationResult()
    if grade.recorded_on > date.today():
        result.add_error("La date de la note ne peut pas être dans le futur")
    return result


# --- Module rules -------------------------------------------------------------

def _module_code(module: Module) -> ValidationResult:
    result = ValidationResult()
    if not module.code:
        result.add_error("Le code du module est obligatoire")
    elif not 2 <= len(module.code) <= 10:
        result.add_error("Le code du module doit contenir entre 2 et 10 caractères")
    return result


def _module_name(module: Module) -> ValidationResult:
    result = ValidationResult()
    if not module.name.strip():
        result.add_error("Le nom du module est obligatoire")
    elif len(module.name) < 3:
        result.add_error("Le nom du module doit contenir au moins 3 caractères")
    return result


def _module_credits(module: Module) -> ValidationResult:
    result = ValidationResult()
    if module.credits <= 0:
        result.add_error("Le nombre de crédits doit être positif")
    elif module.credits > 10:
        result.add_warning("Nombre de crédits inhabituellement élevé")
    return result


def _email_format(email: str | None) -> ValidationResult:
    result = ValidationResult()
    if email and not EMAIL_PATTERN.match(email):
        result.add_error("Format d'email invalide")
    return result


RULES: dict[type, tuple[Rule, ...]] = {
    Student: (_student_code, _student_names, _student_email, _student_year),
    Professor: (_professor_code, _professor_names, _professor_email),
    Grade: (_grade_value, _grade_date),
    Module: (_module_code, _module_name, _module_credits),
}


class Validator:
    """Runs the registered rules for an entity's exact type."""

    def __init__(self, rules: dict[type, tuple[Rule, ...]] | None = None):
        self.rules = rules if rules is not None else RULES

    def validate(self, entity: object) -> ValidationResult:
        result = ValidationResult()
        if entity is None:
            result.add_error("L'entité ne peut pas être nulle")
            return result
        rules = self.rules.get(type(entity))
        if rules is None:
            result.add_warning(
                f"Aucune règle de validation définie pour {type(entity).__name__}"
            )
            return result
        for rule in rules:
            result.merge(rule(entity))
        return result

    @staticmethod
    def validate_password(password: str | None) -> ValidationResult:
        result = ValidationResult()
        if not password:
            result.add_error("Le mot de passe est obligatoire")
            return result
        if len(password) < 8:
            result.add_error("Le mot de passe doit contenir au moins 8 caractères")
        if not re.search(r"[A-Z]", password):
            result.add_warning("Le mot de passe devrait contenir au moins une majuscule")
        if not re.search(r"[a-z]", password):
            result.add_warning("Le mot de passe devrait contenir au moins une minuscule")
        if not re.search(r"\d", password):
            result.add_warning("Le mot de passe devrait contenir au moins un chiffre")
        return result

    @staticmethod
    def validate_phone_number(phone_number: str | None) -> ValidationResult:
        result = ValidationResult()
        if phone_number and not any(p.match(phone_number) for p in PHONE_PATTERNS):
            result.add_error("Format de téléphone invalide (format attendu: 05XX XX XX XX)")
        return result
