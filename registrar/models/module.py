"""Module Model — a course module, optionally owned by a professor.

Invariants:
    - code is the unique key across the modules collection
    - professor_code None means "unassigned" (valid state, never a dangling ref)
"""

from pydantic import BaseModel, TypeAdapter

# Fields replaced by Store.update_module (in-place merge); code is the key.
MERGEABLE_FIELDS: tuple[str, ...] = (
    "name", "credits", "coefficient", "semester", "description", "professor_code",
)


class Module(BaseModel):
    code: str
    name: str
    credits: int = 0
    coefficient: float = 1.0
    semester: int = 1
    professor_code: str | None = None
    description: str | None = None

    @property
    def has_professor(self) -> bool:
        return bool(self.professor_code)

    def merge_from(self, other: "Module") -> None:
        """Copy every mergeable field from other onto self."""
        for name in MERGEABLE_FIELDS:
            setattr(self, name, getattr(other, name))


modules_adapter: TypeAdapter[dict[str, Module]] = TypeAdapter(dict[str, Module])
