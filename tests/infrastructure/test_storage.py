"""JSON storage tests — round-trip fidelity, atomic writes, failure mapping."""

from datetime import date

import pytest

from registrar.core.domain_types import Collection, GradeType
from registrar.core.errors import PersistenceError, StorageCorruptedError
from registrar.infrastructure.storage import JsonFileStorage
from registrar.models import Professor, Student, grades_adapter, users_adapter
from tests.builders import grade, professor, student


def test_missing_file_reads_as_none(storage):
    assert storage.read(Collection.USERS, users_adapter) is None
    assert not storage.any_exists([Collection.USERS, Collection.GRADES])


def test_users_round_trip_keeps_variants(storage):
    users = {
        "10000001": student(),
        "20000001": professor(taught_module_codes=["GL01"]),
    }
    storage.write(Collection.USERS, users_adapter, users)
    loaded = storage.read(Collection.USERS, users_adapter)
    assert isinstance(loaded["10000001"], Student)
    assert isinstance(loaded["20000001"], Professor)
    assert loaded == users


def test_grades_round_trip_enums_and_dates(storage):
    grades = [grade(grade_type=GradeType.CONTINUOUS, recorded_on=date(2024, 1, 31))]
    storage.write(Collection.GRADES, grades_adapter, grades)
    raw = storage.path_for(Collection.GRADES).read_text(encoding="utf-8")
    assert '"CONTINUOUS"' in raw and '"2024-01-31"' in raw
    assert storage.read(Collection.GRADES, grades_adapter) == grades


def test_write_creates_data_dir_and_leaves_no_temp_files(tmp_path):
    storage = JsonFileStorage(tmp_path / "nested" / "data")
    storage.write(Collection.GRADES, grades_adapter, [])
    assert storage.exists(Collection.GRADES)
    assert [p.name for p in storage.data_dir.iterdir()] == ["grades.json"]


def test_invalid_json_raises_storage_corrupted(storage):
    storage.data_dir.mkdir(parents=True)
    storage.path_for(Collection.USERS).write_text("{not json", encoding="utf-8")
    with pytest.raises(StorageCorruptedError) as exc:
        storage.read(Collection.USERS, users_adapter)
    assert exc.value.code == "PERSISTENCE_READ_FAILED"
    assert exc.value.to_log_extra()["collection"] == "users"


def test_wrong_shape_raises_storage_corrupted(storage):
    storage.data_dir.mkdir(parents=True)
    storage.path_for(Collection.GRADES).write_text('[{"value": "x"}]', encoding="utf-8")
    with pytest.raises(StorageCorruptedError):
        storage.read(Collection.GRADES, grades_adapter)


def test_unwritable_location_raises_persistence_error(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory")
    storage = JsonFileStorage(blocker / "data")
    with pytest.raises(PersistenceError) as exc:
        storage.write(Collection.GRADES, grades_adapter, [])
    extra = exc.value.to_log_extra()
    assert extra["error_code"] == "PERSISTENCE_WRITE_FAILED"
    assert extra["path"].endswith("grades.json")
