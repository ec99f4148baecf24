"""Absence Model — a missed session, optionally justified.

Invariants:
    - Logical key is (student_code, module_code, occurred_on, session_type)
    - update_absence replaces on (student_code, module_code, occurred_on) only
"""

from datetime import date

from pydantic import BaseModel, TypeAdapter

from registrar.core.domain_types import SessionType


class Absence(BaseModel):
    student_code: str
    module_code: str
    occurred_on: date
    session_type: SessionType = SessionType.COURSE
    justified: bool = False
    reason: str | None = None

    @property
    def key(self) -> tuple[str, str, date, SessionType]:
        return (self.student_code, self.module_code, self.occurred_on, self.session_type)

    @property
    def formatted_date(self) -> str:
        return self.occurred_on.strftime("%d/%m/%Y")

    def same_day(self, other: "Absence") -> bool:
        """Same student, module and date, any session type."""
        return (
            self.student_code == other.student_code
            and self.module_code == other.module_code
            and self.occurred_on == other.occurred_on
        )


absences_adapter: TypeAdapter[list[Absence]] = TypeAdapter(list[Absence])
