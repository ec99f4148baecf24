"""Entry point: load (or seed) the data directory, report its state, flush and exit."""

import logging

from registrar.bootstrap import init_registry, shutdown_registry

logger = logging.getLogger("registrar")


def main() -> None:
    registry = init_registry()
    try:
        logger.info(f"Collections: {registry.store.totals()}")
        logger.info(f"Notifications: {registry.notifications.total_count()}")
        logger.info(f"Cache: {registry.store.cache_stats()}")
    finally:
        shutdown_registry()


if __name__ == "__main__":
    main()
