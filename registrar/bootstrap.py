"""Bootstrap — wires settings, storage, cache, hub and store into one Registry.

Invariants:
    - One Registry per process: init_registry() is idempotent and thread-safe
    - The Store is fully loaded before init_registry() returns (eager, not lazy)
    - shutdown_registry() flushes every collection and prunes old notifications

Design Decisions:
    - Explicit construction over import-time singletons: tests build isolated
      registries with build_registry() against a tmp data directory
    - Double-checked locking around the process-wide instance
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Callable

from registrar.config import Settings, get_settings
from registrar.core.cache import Cache
from registrar.core.change_subject import ChangeSubject
from registrar.core.seed import Dataset, build_demo_dataset, empty_dataset
from registrar.core.validation import Validator
from registrar.infrastructure.observability import setup_logging
from registrar.infrastructure.storage import JsonFileStorage
from registrar.services.notification_hub import NotificationHub
from registrar.services.store import Store

logger = logging.getLogger(__name__)


@dataclass
class Registry:
    settings: Settings
    storage: JsonFileStorage
    cache: Cache
    notifications: NotificationHub
    grade_events: ChangeSubject
    store: Store
    validator: Validator = field(default_factory=Validator)

    def shutdown(self) -> None:
        self.store.cleanup()


def build_registry(
    settings: Settings | None = None,
    *,
    seed: Callable[[], Dataset] | None = None,
    clock: Callable[[], float] = time.monotonic,
) -> Registry:
    """Construct every component; the Store loads (or seeds) immediately."""
    settings = settings or get_settings()
    if seed is None:
        seed = build_demo_dataset if settings.seed_demo_data else empty_dataset

    storage = JsonFileStorage(settings.data_dir)
    cache = Cache(settings.cache_max_entries_per_namespace, clock=clock)
    notifications = NotificationHub(
        storage,
        retention=settings.notification_retention,
        recent_window=settings.notification_recent_window,
    )
    grade_events = ChangeSubject()
    store = Store(
        storage, cache, notifications, grade_events,
        entity_ttl=settings.cache_entity_ttl_seconds,
        temporary_password=settings.temporary_password,
        seed=seed,
    )
    return Registry(settings, storage, cache, notifications, grade_events, store)


_registry: Registry | None = None
_registry_lock = threading.Lock()


def init_registry(settings: Settings | None = None) -> Registry:
    """Create the process-wide Registry on first call; later calls return it."""
    global _registry
    if _registry is None:
        with _registry_lock:
            if _registry is None:
                settings = settings or get_settings()
                setup_logging(settings.log_level, settings.log_format)
                _registry = build_registry(settings)
                logger.info(f"Registrar started (data dir: {settings.data_dir})")
    return _registry


def get_registry() -> Registry:
    return init_registry()


def shutdown_registry() -> None:
    global _registry
    with _registry_lock:
        if _registry is None:
            return
        logger.info("Registrar shutting down")
        _registry.shutdown()
        _registry = None
