"""Grade Model — one assessment result of a student in a module.

Invariants:
    - Logical key is (student_code, module_code, grade_type)
    - value is stored as given; the 0-20 range is a Validator concern
"""

from datetime import date

from pydantic import BaseModel, Field, TypeAdapter

from registrar.core.domain_types import GradeType


class Grade(BaseModel):
    student_code: str
    module_code: str
    value: float
    grade_type: GradeType = GradeType.EXAM
    recorded_on: date = Field(default_factory=date.today)

    @property
    def key(self) -> tuple[str, str, GradeType]:
        return (self.student_code, self.module_code, self.grade_type)

    @property
    def formatted_date(self) -> str:
        return self.recorded_on.strftime("%d/%m/%Y")


grades_adapter: TypeAdapter[list[Grade]] = TypeAdapter(list[Grade])
