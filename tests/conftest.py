"""Shared fixtures — isolated data directory, fake clocks, and a Store on empty data.

Invariants:
    - Every test gets its own tmp_path data directory (no shared files)
    - Clocks are injected; only the real-sleep cache expiry tests call time.sleep
"""

import pytest

from registrar.config import Settings
from registrar.core.cache import Cache
from registrar.core.change_subject import ChangeSubject
from registrar.core.seed import empty_dataset
from registrar.infrastructure.storage import JsonFileStorage
from registrar.services.notification_hub import NotificationHub
from registrar.services.store import Store
from tests.builders import FakeClock, FakeWallClock


@pytest.fixture
def settings(tmp_path):
    return Settings(data_dir=tmp_path / "data", seed_demo_data=False, _env_file=None)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def wall_clock():
    return FakeWallClock()


@pytest.fixture
def storage(settings):
    return JsonFileStorage(settings.data_dir)


@pytest.fixture
def cache(clock):
    return Cache(10, clock=clock)


@pytest.fixture
def hub(storage, wall_clock):
    return NotificationHub(storage, now=wall_clock)


@pytest.fixture
def grade_events():
    return ChangeSubject()


@pytest.fixture
def make_store(storage, cache, hub, grade_events):
    def _make(seed=empty_dataset):
        return Store(storage, cache, hub, grade_events, entity_ttl=60.0, seed=seed)
    return _make


@pytest.fixture
def store(make_store):
    return make_store()
