"""Enrollment Model — a student registered in a module.

Invariants:
    - Logical key is (student_code, module_code); at most one per key
    - validated_by is set exactly when validated is True
"""

from pydantic import BaseModel, TypeAdapter


class Enrollment(BaseModel):
    student_code: str
    module_code: str
    validated: bool = False
    validated_by: str | None = None

    @property
    def key(self) -> tuple[str, str]:
        return (self.student_code, self.module_code)

    def validate_by(self, admin_code: str) -> None:
        self.validated = True
        self.validated_by = admin_code


enrollments_adapter: TypeAdapter[list[Enrollment]] = TypeAdapter(list[Enrollment])
