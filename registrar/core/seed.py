"""Demo Seed Data — initial collections used when no durable storage exists.

Invariants:
    - Deterministic given (rng, today), except for the salted password hashes
    - Every grade/absence references an enrollment's (student, module) pair
    - Professor.taught_module_codes agrees with Module.professor_code
    - At least one module ships unassigned (WEB8)

Design Decisions:
    - Dataset dataclass is also the Store's load/seed exchange type
    - One bcrypt hash of the demo password is shared by every seeded account;
      login is outside this package
"""

import random
from dataclasses import dataclass, field
from datetime import date, timedelta

from registrar.core.credentials import hash_password
from registrar.core.domain_types import GradeType, SessionType
from registrar.models import (
    AcademicAdmin, Absence, Enrollment, Grade, Module, Professor, Student, User,
)

DEMO_PASSWORD = "password"


@dataclass
class Dataset:
    users: dict[str, User] = field(default_factory=dict)
    modules: dict[str, Module] = field(default_factory=dict)
    grades: list[Grade] = field(default_factory=list)
    absences: list[Absence] = field(default_factory=list)
    enrollments: list[Enrollment] = field(default_factory=list)


def empty_dataset() -> Dataset:
    return Dataset()


_PROFESSORS = (
    ("20000001", "Jean", "Petit", "Informatique", "Professeur"),
    ("20000002", "Marie", "Grand", "Informatique", "Maître de Conférences A"),
    ("20000003", "Sofiane", "Benali", "IA", "Maître Assistant B"),
    ("20000004", "Imane", "Rahmani", "Réseaux", "Maître Assistant A"),
)

_STUDENT_FIRST_NAMES = (
    "Alice", "Bob", "Clara", "David", "Emma", "Farid", "Nadia", "Yassine", "Lina", "Karim",
    "Sara", "Rayan", "Meriem", "Oussama", "Noémie", "Selim", "Ines", "Amine", "Leila", "Hakim",
)
_STUDENT_LAST_NAMES = (
    "Martin", "Durand", "Leroy", "Dubois", "Moreau", "Bernard", "Rousseau", "Petit", "Garcia",
    "Lopez", "Kaci", "Bensalah", "Tahar", "Belkacem", "Yahia", "Saadi", "Mokdad", "Hamdi",
    "Lounis", "Haddad",
)
_STUDENT_YEARS = (1, 1, 1, 2, 2, 2, 3, 3, 3, 3, 2, 3, 1, 2, 3, 1, 2, 3, 2, 3)

# (code, name, credits, professor, coefficient, semester, description)
_MODULES = (
    ("GL01", "Génie Logiciel", 5, "20000001", 1.5, 2, "Conception, UML, tests"),
    ("BD02", "Base de Données", 4, "20000001", 1.5, 2, "SQL, modèle relationnel"),
    ("IA03", "Intelligence Artificielle", 6, "20000003", 2.0, 2, "Apprentissage supervisé"),
    ("RS04", "Réseaux", 4, "20000004", 1.0, 2, "Réseaux & protocoles"),
    ("SE05", "Systèmes d'Exploitation", 5, "20000002", 1.5, 1, "Processus, mémoire, fichiers"),
    ("AL06", "Algorithmique avancée", 4, "20000002", 1.5, 1, "Graphes, complexité"),
    ("IA07", "IA Avancée", 3, "20000003", 1.0, 1, "Réseaux de neurones"),
    ("WEB8", "Développement Web", 3, None, 1.0, 2, "HTML/CSS/JS, Spring"),
)

ADMIN_CODE = "30000001"


def _staff(password_hash: str) -> list[User]:
    staff: list[User] = [
        Professor(
            code=code, password_hash=password_hash, first_name=first, last_name=last,
            email=f"{first}.{last}@usthb.dz".lower(),
            phone_number=f"05501111{i + 11:02d}",
            department=department, academic_rank=rank,
        )
        for i, (code, first, last, department, rank) in enumerate(_PROFESSORS)
    ]
    staff.append(AcademicAdmin(
        code=ADMIN_CODE, password_hash=password_hash,
        first_name="Ahmed", last_name="Benziane",
        email="ahmed.benziane@usthb.dz", phone_number="0550222222",
        department="Faculté d'Informatique", title="Prof.",
    ))
    return staff


def _students(password_hash: str) -> list[Student]:
    return [
        Student(
            code=f"1{i + 1:07d}", password_hash=password_hash,
            first_name=first, last_name=last,
            email=f"{first}.{last}@usthb.dz".lower(),
            phone_number=f"0550{i + 123:06d}",
            speciality="Informatique" if i % 2 == 0 else "IA",
            year=_STUDENT_YEARS[i],
        )
        for i, (first, last) in enumerate(zip(_STUDENT_FIRST_NAMES, _STUDENT_LAST_NAMES))
    ]


def build_demo_dataset(rng: random.Random | None = None, today: date | None = None) -> Dataset:
    """Professors, an academic admin, 20 students, 8 modules and random records."""
    rng = rng or random.Random()
    today = today or date.today()
    password_hash = hash_password(DEMO_PASSWORD)
    data = Dataset()

    for user in [*_staff(password_hash), *_students(password_hash)]:
        data.users[user.code] = user

    for code, name, credits, prof, coefficient, semester, description in _MODULES:
        data.modules[code] = Module(
            code=code, name=name, credits=credits, professor_code=prof,
            coefficient=coefficient, semester=semester, description=description,
        )
        professor = data.users.get(prof) if prof else None
        if isinstance(professor, Professor):
            professor.add_taught_module(code)

    module_codes = list(data.modules)
    for user in list(data.users.values()):
        if not isinstance(user, Student):
            continue
        rng.shuffle(module_codes)
        for module_code in module_codes[:3 + rng.randrange(2)]:
            enrollment = Enrollment(student_code=user.code, module_code=module_code)
            if rng.random() < 0.6:
                enrollment.validate_by(ADMIN_CODE)
            data.enrollments.append(enrollment)

    for enrollment in data.enrollments:
        for k in range(1 + rng.randrange(2)):
            data.grades.append(Grade(
                student_code=enrollment.student_code,
                module_code=enrollment.module_code,
                value=round(6 + rng.random() * 10, 2),
                grade_type=GradeType.EXAM if k == 0 else GradeType.CONTINUOUS,
                recorded_on=today - timedelta(days=rng.randrange(60)),
            ))

    session_types = list(SessionType)
    for enrollment in data.enrollments:
        if rng.random() >= 0.25:
            continue
        seen: set[tuple] = set()
        for _ in range(1 + rng.randrange(3)):
            justified = rng.random() < 0.4
            absence = Absence(
                student_code=enrollment.student_code,
                module_code=enrollment.module_code,
                occurred_on=today - timedelta(days=5 + rng.randrange(40)),
                session_type=rng.choice(session_types),
                justified=justified,
                reason="Certificat médical" if justified else None,
            )
            if absence.key not in seen:
                seen.add(absence.key)
                data.absences.append(absence)

    return data
