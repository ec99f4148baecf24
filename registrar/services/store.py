"""Store — single authoritative holder of users, modules, grades, absences, enrollments.

Invariants:
    - Every write follows: precondition -> mutate -> persist -> invalidate -> notify
    - User and module codes are unique; grade, absence and enrollment logical keys are unique
    - Deleting a student removes their grades, absences and enrollments
    - Deleting a professor unassigns (never deletes) their modules
    - Deleting a module removes its grades, absences, enrollments and taught-list entries
    - Cache entries are snapshots; they are invalidated under the same lock that
      guards the record they mirror, so a reader can never re-cache a stale copy
    - Reads hand out deep copies: callers cannot mutate stored records in place
    - update_user never changes a role; Professor.taught_module_codes is written
      only by module operations, never by a profile update

Design Decisions:
    - One RLock per collection, always acquired in STORE_COLLECTIONS order
    - Persistence runs while the lock is held so the on-disk order matches
      the mutation order; a failed write is logged and the in-memory change kept
      (memory is the primary consistency boundary, no rollback)
    - Notifications are fired after the locks are released: observers may read
      the Store again without deadlocking
    - NotFound / Conflict are routine outcomes: reported as None / False, never raised
    - update_module notifies the resulting professor whenever one is set, even if
      unchanged (acts as a re-confirmation)
"""

import logging
import threading
from contextlib import ExitStack, contextmanager
from typing import Callable, Iterator

from pydantic import TypeAdapter

from registrar.core import cascade, queries
from registrar.core.cache import DEFAULT_TTL_SECONDS, Cache, CacheStats
from registrar.core.change_subject import ChangeSubject
from registrar.core.credentials import hash_password
from registrar.core.domain_types import (
    ACADEMIC_ADMIN_SENDER, CacheNamespace, Collection, DEFAULT_PROFESSOR_LABEL,
    STORE_COLLECTIONS,
)
from registrar.core.errors import PersistenceError, StorageCorruptedError
from registrar.core.seed import Dataset, build_demo_dataset
from registrar.infrastructure.storage import JsonFileStorage
from registrar.models import (
    Absence, Enrollment, Grade, Module, Professor, Student, User,
    absences_adapter, enrollments_adapter, grades_adapter, modules_adapter, users_adapter,
)
from registrar.services.notification_hub import NotificationHub

logger = logging.getLogger(__name__)

ACCOUNT_MODIFIED_MESSAGE = "Informations du compte mises à jour"

_ADAPTERS: dict[Collection, TypeAdapter] = {
    Collection.USERS: users_adapter,
    Collection.MODULES: modules_adapter,
    Collection.GRADES: grades_adapter,
    Collection.ABSENCES: absences_adapter,
    Collection.ENROLLMENTS: enrollments_adapter,
}


class Store:
    """Central repository; the transactional boundary for every mutation."""

    def __init__(
        self,
        storage: JsonFileStorage,
        cache: Cache,
        notifications: NotificationHub,
        grade_events: ChangeSubject,
        *,
        entity_ttl: float = DEFAULT_TTL_SECONDS,
        temporary_password: str = "password123",
        seed: Callable[[], Dataset] = build_demo_dataset,
    ):
        self.storage = storage
        self.cache = cache
        self.notifications = notifications
        self.grade_events = grade_events
        self.entity_ttl = entity_ttl
        self.temporary_password = temporary_password
        self._seed = seed
        self._locks = {c: threading.RLock() for c in STORE_COLLECTIONS}

        self._users: dict[str, User] = {}
        self._modules: dict[str, Module] = {}
        self._grades: list[Grade] = []
        self._absences: list[Absence] = []
        self._enrollments: list[Enrollment] = []
        self._load()

    # =========================================================================
    # Users
    # =========================================================================

    def get_user(self, code: str) -> User | None:
        cached = self.cache.get(CacheNamespace.USER, code)
        if cached is not None:
            return cached.model_copy(deep=True)
        with self._locked(Collection.USERS):
            user = self._users.get(code)
            if user is None:
                return None
            snapshot = user.model_copy(deep=True)
            self.cache.put(CacheNamespace.USER, code, snapshot, self.entity_ttl)
        return snapshot.model_copy(deep=True)

    def add_user(self, user: User) -> bool:
        with self._locked(Collection.USERS):
            if user.code in self._users:
                logger.info("User already exists", extra={"entity_key": user.code})
                return False
            self._users[user.code] = user.model_copy(deep=True)
            self._persist(Collection.USERS)
        logger.info("User added", extra={"entity_key": user.code, "collection": "users"})
        self.notifications.notify_account_created(
            user.code, user.user_role.value, self.temporary_password,
        )
        return True

    def update_user(self, user: User) -> bool:
        """Replace a user's profile; the role is fixed and taught modules stay Store-owned."""
        with self._locked(Collection.USERS):
            existing = self._users.get(user.code)
            if existing is None:
                return False
            if existing.role != user.role:
                logger.info(
                    f"Role change {existing.role} -> {user.role} rejected",
                    extra={"entity_key": user.code, "collection": "users"},
                )
                return False
            stored = user.model_copy(deep=True)
            if isinstance(stored, Professor) and isinstance(existing, Professor):
                stored.taught_module_codes = list(existing.taught_module_codes)
            self._users[user.code] = stored
            self._persist(Collection.USERS)
            self.cache.invalidate_entity(CacheNamespace.USER, user.code)
        self.notifications.notify_account_modified(user.code, ACCOUNT_MODIFIED_MESSAGE)
        return True

    def reset_password(
        self, code: str, new_password: str, reset_by: str = ACADEMIC_ADMIN_SENDER,
    ) -> bool:
        password_hash = hash_password(new_password)
        with self._locked(Collection.USERS):
            user = self._users.get(code)
            if user is None:
                return False
            user.password_hash = password_hash
            self._persist(Collection.USERS)
            self.cache.invalidate_entity(CacheNamespace.USER, code)
        logger.info("Password reset", extra={"entity_key": code, "collection": "users"})
        self.notifications.notify_password_reset(code, reset_by)
        return True

    def delete_user(self, code: str) -> bool:
        with self._locked(*STORE_COLLECTIONS):
            user = self._users.get(code)
            if user is None:
                return False
            touched = [Collection.USERS]
            if isinstance(user, Student):
                result = cascade.remove_student_records(
                    code, self._grades, self._absences, self._enrollments,
                )
                touched += _changed_record_collections(result)
            elif isinstance(user, Professor):
                result = cascade.unassign_professor(code, self._modules)
                if result.modules_unassigned:
                    touched.append(Collection.MODULES)
            else:
                result = cascade.CascadeResult()
            del self._users[code]
            self._persist(*touched)
            self.cache.invalidate_entity(CacheNamespace.USER, code)
            for module_code in result.modules_unassigned:
                self.cache.invalidate_entity(CacheNamespace.MODULE, module_code)
        logger.info(
            f"User deleted ({result.records_removed} records removed, "
            f"{len(result.modules_unassigned)} modules unassigned)",
            extra={"entity_key": code, "collection": "users"},
        )
        return True

    def list_users(self) -> list[User]:
        with self._locked(Collection.USERS):
            return queries.copies(self._users.values())

    def list_students(self) -> list[Student]:
        with self._locked(Collection.USERS):
            return queries.students(self._users)

    def list_professors(self) -> list[Professor]:
        with self._locked(Collection.USERS):
            return queries.professors(self._users)

    def search_professors(self, term: str) -> list[Professor]:
        with self._locked(Collection.USERS):
            return queries.search_professors(self._users, term)

    # =========================================================================
    # Students
    # =========================================================================

    def get_student_grades(self, student_code: str) -> list[Grade]:
        with self._locked(Collection.GRADES):
            return queries.grades_for_student(self._grades, student_code)

    def get_student_absences(self, student_code: str) -> list[Absence]:
        with self._locked(Collection.ABSENCES):
            return queries.absences_for_student(self._absences, student_code)

    def get_student_enrollments(self, student_code: str) -> list[Enrollment]:
        with self._locked(Collection.ENROLLMENTS):
            return queries.enrollments_for_student(self._enrollments, student_code)

    def get_available_modules_for_student(self, student_code: str) -> list[Module]:
        with self._locked(Collection.MODULES, Collection.ENROLLMENTS):
            return queries.available_modules(self._modules, self._enrollments, student_code)

    def is_student_enrolled(self, student_code: str, module_code: str) -> bool:
        with self._locked(Collection.ENROLLMENTS):
            return queries.is_enrolled(self._enrollments, student_code, module_code)

    # =========================================================================
    # Professors
    # =========================================================================

    def get_professor_modules(self, professor_code: str) -> list[Module]:
        with self._locked(Collection.MODULES):
            return queries.modules_for_professor(self._modules, professor_code)

    def get_students_for_professor(self, professor_code: str) -> list[Student]:
        with self._locked(Collection.USERS, Collection.MODULES, Collection.ENROLLMENTS):
            return queries.students_for_professor(
                self._users, self._modules, self._enrollments, professor_code,
            )

    # =========================================================================
    # Modules
    # =========================================================================

    def get_module(self, code: str) -> Module | None:
        cached = self.cache.get(CacheNamespace.MODULE, code)
        if cached is not None:
            return cached.model_copy(deep=True)
        with self._locked(Collection.MODULES):
            module = self._modules.get(code)
            if module is None:
                return None
            snapshot = module.model_copy(deep=True)
            self.cache.put(CacheNamespace.MODULE, code, snapshot, self.entity_ttl)
        return snapshot.model_copy(deep=True)

    def list_modules(self) -> list[Module]:
        with self._locked(Collection.MODULES):
            return queries.copies(self._modules.values())

    def get_module_grades(self, module_code: str) -> list[Grade]:
        with self._locked(Collection.GRADES):
            return queries.grades_for_module(self._grades, module_code)

    def add_module(self, module: Module) -> bool:
        with self._locked(Collection.USERS, Collection.MODULES):
            if module.code in self._modules:
                logger.info("Module already exists", extra={"entity_key": module.code})
                return False
            stored = module.model_copy(deep=True)
            self._modules[stored.code] = stored
            professors = cascade.reassign_taught_module(
                stored.code, None, stored.professor_code, self._users,
            )
            self._persist(Collection.MODULES, *([Collection.USERS] if professors else []))
            self._invalidate_module(stored.code, professors)
            professor_code, name = stored.professor_code, stored.name
        logger.info("Module added", extra={"entity_key": module.code, "collection": "modules"})
        if professor_code:
            self.notifications.notify_module_assigned(professor_code, module.code, name)
        return True

    def update_module(self, module: Module) -> bool:
        """Merge every field of module into the stored record with the same code."""
        with self._locked(Collection.USERS, Collection.MODULES):
            existing = self._modules.get(module.code)
            if existing is None:
                logger.info("Cannot update unknown module", extra={"entity_key": module.code})
                return False
            old_professor = existing.professor_code
            existing.merge_from(module)
            professors = cascade.reassign_taught_module(
                existing.code, old_professor, existing.professor_code, self._users,
            )
            self._persist(Collection.MODULES, *([Collection.USERS] if professors else []))
            self._invalidate_module(existing.code, professors)
            professor_code, name = existing.professor_code, existing.name
        logger.info(
            f"Module updated (professor {old_professor} -> {professor_code})",
            extra={"entity_key": module.code, "collection": "modules"},
        )
        if professor_code:
            self.notifications.notify_module_assigned(professor_code, module.code, name)
        return True

    def delete_module(self, code: str) -> bool:
        with self._locked(*STORE_COLLECTIONS):
            if code not in self._modules:
                return False
            del self._modules[code]
            result = cascade.remove_module_records(
                code, self._grades, self._absences, self._enrollments, self._users,
            )
            touched = [Collection.MODULES, *_changed_record_collections(result)]
            if result.professors_updated:
                touched.append(Collection.USERS)
            self._persist(*touched)
            self._invalidate_module(code, result.professors_updated)
        logger.info(
            f"Module deleted ({result.records_removed} records removed)",
            extra={"entity_key": code, "collection": "modules"},
        )
        return True

    # =========================================================================
    # Grades
    # =========================================================================

    def list_grades(self) -> list[Grade]:
        with self._locked(Collection.GRADES):
            return queries.copies(self._grades)

    def add_grade(self, grade: Grade) -> bool:
        with self._locked(Collection.GRADES):
            if any(g.key == grade.key for g in self._grades):
                logger.info("Grade already recorded", extra={"entity_key": _key_label(grade.key)})
                return False
            self._grades.append(grade.model_copy(deep=True))
            self._persist(Collection.GRADES)
        self.grade_events.grade_added(grade.student_code, grade.module_code, grade.value)
        module = self.get_module(grade.module_code)
        professor = (
            self.get_user(module.professor_code)
            if module is not None and module.professor_code else None
        )
        self.notifications.notify_grade_added(
            grade.student_code,
            grade.module_code,
            module.name if module is not None else grade.module_code,
            grade.value,
            professor.full_name if professor is not None else DEFAULT_PROFESSOR_LABEL,
        )
        return True

    def update_grade(self, grade: Grade) -> bool:
        """Upsert keyed on (student, module, grade type)."""
        with self._locked(Collection.GRADES):
            cascade.remove_where(self._grades, lambda g: g.key == grade.key)
            self._grades.append(grade.model_copy(deep=True))
            self._persist(Collection.GRADES)
        self.grade_events.grade_modified(grade.student_code, grade.module_code, grade.value)
        module = self.get_module(grade.module_code)
        self.notifications.notify_grade_modified(
            grade.student_code,
            grade.module_code,
            module.name if module is not None else grade.module_code,
            grade.value,
        )
        return True

    # =========================================================================
    # Absences
    # =========================================================================

    def list_absences(self) -> list[Absence]:
        with self._locked(Collection.ABSENCES):
            return queries.copies(self._absences)

    def add_absence(self, absence: Absence) -> bool:
        with self._locked(Collection.ABSENCES):
            if any(a.key == absence.key for a in self._absences):
                return False
            self._absences.append(absence.model_copy(deep=True))
            self._persist(Collection.ABSENCES)
        module = self.get_module(absence.module_code)
        self.notifications.notify_absence_recorded(
            absence.student_code,
            absence.module_code,
            module.name if module is not None else absence.module_code,
            absence.formatted_date,
        )
        return True

    def update_absence(self, absence: Absence) -> bool:
        """Replace every absence of the same student, module and date."""
        with self._locked(Collection.ABSENCES):
            cascade.remove_where(self._absences, absence.same_day)
            self._absences.append(absence.model_copy(deep=True))
            self._persist(Collection.ABSENCES)
        return True

    def delete_absence(self, absence: Absence) -> bool:
        with self._locked(Collection.ABSENCES):
            removed = cascade.remove_where(self._absences, lambda a: a.key == absence.key)
            if removed:
                self._persist(Collection.ABSENCES)
        return bool(removed)

    # =========================================================================
    # Enrollments
    # =========================================================================

    def list_enrollments(self) -> list[Enrollment]:
        with self._locked(Collection.ENROLLMENTS):
            return queries.copies(self._enrollments)

    def add_enrollment(self, enrollment: Enrollment) -> bool:
        with self._locked(Collection.ENROLLMENTS):
            if any(e.key == enrollment.key for e in self._enrollments):
                return False
            self._enrollments.append(enrollment.model_copy(deep=True))
            self._persist(Collection.ENROLLMENTS)
        if enrollment.validated:
            module = self.get_module(enrollment.module_code)
            if module is not None:
                self.notifications.notify_enrollment_validated(
                    enrollment.student_code, [module.name],
                )
        return True

    # =========================================================================
    # Persistence & lifecycle
    # =========================================================================

    def save_all(self) -> bool:
        with self._locked(*STORE_COLLECTIONS):
            return self._persist(*STORE_COLLECTIONS)

    def cleanup(self) -> None:
        """Shutdown hook: flush everything, drop the cache, prune old notifications."""
        self.save_all()
        self.cache.clear()
        self.notifications.prune_older_than()

    def reset_to_seed(self) -> None:
        """Replace every collection with a fresh seed dataset and flush."""
        with self._locked(*STORE_COLLECTIONS):
            self._apply(self._seed())
            self._persist(*STORE_COLLECTIONS)
            self.cache.clear()
        logger.warning("Store reset to seed data")

    def totals(self) -> dict[str, int]:
        with self._locked(*STORE_COLLECTIONS):
            return {
                "users": len(self._users),
                "modules": len(self._modules),
                "grades": len(self._grades),
                "absences": len(self._absences),
                "enrollments": len(self._enrollments),
            }

    def cache_stats(self) -> CacheStats:
        return self.cache.stats()

    # --- Internals ------------------------------------------------------------

    @contextmanager
    def _locked(self, *collections: Collection) -> Iterator[None]:
        with ExitStack() as stack:
            for collection in STORE_COLLECTIONS:
                if collection in collections:
                    stack.enter_context(self._locks[collection])
            yield

    def _collection_value(self, collection: Collection) -> object:
        return {
            Collection.USERS: self._users,
            Collection.MODULES: self._modules,
            Collection.GRADES: self._grades,
            Collection.ABSENCES: self._absences,
            Collection.ENROLLMENTS: self._enrollments,
        }[collection]

    def _persist(self, *collections: Collection) -> bool:
        """Write each collection wholesale; failures are logged, not raised."""
        ok = True
        for collection in dict.fromkeys(collections):
            try:
                self.storage.write(
                    collection, _ADAPTERS[collection], self._collection_value(collection),
                )
            except PersistenceError as e:
                ok = False
                logger.error(e.message, extra=e.to_log_extra())
        return ok

    def _invalidate_module(self, code: str, professor_codes: list[str]) -> None:
        self.cache.invalidate_entity(CacheNamespace.MODULE, code)
        for professor_code in professor_codes:
            self.cache.invalidate_entity(CacheNamespace.USER, professor_code)

    def _apply(self, data: Dataset) -> None:
        self._users = data.users
        self._modules = data.modules
        self._grades = data.grades
        self._absences = data.absences
        self._enrollments = data.enrollments

    def _load(self) -> None:
        with self._locked(*STORE_COLLECTIONS):
            if not self.storage.any_exists(STORE_COLLECTIONS):
                logger.info(f"No stored data in {self.storage.data_dir}, seeding")
                self._apply(self._seed())
                self._persist(*STORE_COLLECTIONS)
                return
            try:
                loaded = {
                    c: self.storage.read(c, _ADAPTERS[c]) for c in STORE_COLLECTIONS
                }
            except StorageCorruptedError as e:
                logger.error(
                    f"{e.message}; falling back to seed data", extra=e.to_log_extra(),
                )
                self._apply(self._seed())
                self._persist(*STORE_COLLECTIONS)
                return
            self._apply(Dataset(
                users=loaded[Collection.USERS] or {},
                modules=loaded[Collection.MODULES] or {},
                grades=loaded[Collection.GRADES] or [],
                absences=loaded[Collection.ABSENCES] or [],
                enrollments=loaded[Collection.ENROLLMENTS] or [],
            ))
        logger.info(f"Store loaded: {self.totals()}")


def _changed_record_collections(result: cascade.CascadeResult) -> list[Collection]:
    changed = []
    if result.grades_removed:
        changed.append(Collection.GRADES)
    if result.absences_removed:
        changed.append(Collection.ABSENCES)
    if result.enrollments_removed:
        changed.append(Collection.ENROLLMENTS)
    return changed


def _key_label(key: tuple) -> str:
    return "/".join(str(getattr(part, "value", part)) for part in key)
