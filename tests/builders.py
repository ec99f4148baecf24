"""Test builders — fake clocks, recording observers and entity factories."""

from datetime import date, datetime, timedelta, timezone

from registrar.models import Grade, Module, Professor, Student


class FakeClock:
    """Monotonic seconds that only move when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeWallClock:
    """Aware UTC datetimes for the notification hub."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class RecordingGradeObserver:
    def __init__(self):
        self.events: list[tuple] = []

    def on_grade_added(self, student_code, module_code, value):
        self.events.append(("added", student_code, module_code, value))

    def on_grade_modified(self, student_code, module_code, value):
        self.events.append(("modified", student_code, module_code, value))


class RecordingNotificationObserver:
    def __init__(self):
        self.delivered = []

    def deliver(self, notification):
        self.delivered.append(notification)


# -- Entity factories ---------------------------------------------------------

def student(code="10000001", **overrides) -> Student:
    fields = dict(
        code=code, first_name="Alice", last_name="Martin",
        email="alice.martin@usthb.dz", year=2,
    )
    fields.update(overrides)
    return Student(**fields)


def professor(code="20000001", **overrides) -> Professor:
    fields = dict(code=code, first_name="Jean", last_name="Petit", department="Informatique")
    fields.update(overrides)
    return Professor(**fields)


def module(code="GL01", **overrides) -> Module:
    fields = dict(code=code, name="Génie Logiciel", credits=5)
    fields.update(overrides)
    return Module(**fields)


def grade(student_code="10000001", module_code="GL01", value=14.0, **overrides) -> Grade:
    fields = dict(
        student_code=student_code, module_code=module_code, value=value,
        recorded_on=date(2024, 2, 1),
    )
    fields.update(overrides)
    return Grade(**fields)
