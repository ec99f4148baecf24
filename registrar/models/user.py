"""User Models — closed tagged variant over Student, Professor, AcademicAdmin.

Invariants:
    - code is the unique key across the users collection
    - role is the discriminant; each variant fixes it with a Literal of its Role value
    - Professor.taught_module_codes mirrors Module.professor_code (kept by the Store)

Design Decisions:
    - Discriminated union over a class hierarchy: pydantic picks the variant
      from "role" when decoding a persisted collection
    - Role-specific fields live on their variant only (no nullable grab-bag)
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter

from registrar.core.domain_types import Role


class _UserBase(BaseModel):
    code: str
    password_hash: str = ""
    first_name: str
    last_name: str
    email: str | None = None
    phone_number: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def user_role(self) -> Role:
        return Role(self.role)  # type: ignore[attr-defined]


class Student(_UserBase):
    role: Literal["student"] = "student"
    year: int = 1
    speciality: str | None = None


class Professor(_UserBase):
    role: Literal["professor"] = "professor"
    department: str | None = None
    academic_rank: str | None = None
    taught_module_codes: list[str] = Field(default_factory=list)

    def add_taught_module(self, module_code: str) -> bool:
        if module_code in self.taught_module_codes:
            return False
        self.taught_module_codes.append(module_code)
        return True

    def remove_taught_module(self, module_code: str) -> bool:
        if module_code not in self.taught_module_codes:
            return False
        self.taught_module_codes.remove(module_code)
        return True


class AcademicAdmin(_UserBase):
    role: Literal["academic_admin"] = "academic_admin"
    department: str | None = None
    title: str | None = None


User = Annotated[Union[Student, Professor, AcademicAdmin], Field(discriminator="role")]

users_adapter: TypeAdapter[dict[str, User]] = TypeAdapter(dict[str, User])
