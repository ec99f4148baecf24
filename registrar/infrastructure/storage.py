"""Durable Storage — whole-collection JSON documents under the data directory.

Invariants:
    - One file per collection: <data_dir>/<collection>.json
    - write() replaces the file atomically (temp file + os.replace); readers see
      either the old or the new document, never a torn one
    - A missing file is "no data" (None); an unreadable one is StorageCorruptedError
    - OSError and pydantic failures are mapped to core/errors.py types

Design Decisions:
    - pydantic TypeAdapter per collection: self-describing JSON with full round-trip
      fidelity (enums, dates, the User discriminated union)
    - Writes are synchronous and blocking; they are the core's only latency source
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Iterable

from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from registrar.core.domain_types import Collection
from registrar.core.errors import ErrorContext, PersistenceError, StorageCorruptedError

logger = logging.getLogger(__name__)


class JsonFileStorage:
    """Reads and atomically rewrites collection documents."""

    def __init__(self, data_dir: Path | str):
        self.data_dir = Path(data_dir)

    def path_for(self, collection: Collection) -> Path:
        return self.data_dir / f"{collection.value}.json"

    def exists(self, collection: Collection) -> bool:
        return self.path_for(collection).is_file()

    def any_exists(self, collections: Iterable[Collection]) -> bool:
        return any(self.exists(c) for c in collections)

    def write(self, collection: Collection, adapter: TypeAdapter, value: Any) -> None:
        path = self.path_for(collection)
        ctx = ErrorContext(path=str(path))
        try:
            payload = adapter.dump_json(value, indent=2)
        except PydanticSerializationError as e:
            raise PersistenceError(str(e), collection.value, ctx) from e
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.data_dir, prefix=f".{collection.value}.", suffix=".tmp",
            )
            try:
                with os.fdopen(fd, "wb") as tmp:
                    tmp.write(payload)
                    tmp.flush()
                    os.fsync(tmp.fileno())
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise PersistenceError(str(e), collection.value, ctx) from e
        logger.debug(
            f"Saved {collection.value} ({len(payload)} bytes)",
            extra={"collection": collection.value, "path": str(path)},
        )

    def read(self, collection: Collection, adapter: TypeAdapter) -> Any | None:
        path = self.path_for(collection)
        if not path.is_file():
            return None
        ctx = ErrorContext(path=str(path))
        try:
            payload = path.read_bytes()
        except OSError as e:
            raise StorageCorruptedError(str(e), collection.value, ctx) from e
        try:
            return adapter.validate_json(payload)
        except ValidationError as e:
            raise StorageCorruptedError(
                f"{e.error_count()} validation error(s)", collection.value, ctx,
            ) from e
