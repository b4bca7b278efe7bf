"""
orderdesk.storage.json_file

One JSON document (an array of records) per service, stored on local disk.

Responsibilities:
- Load the collection; a missing file is an empty collection.
- Serialize every load -> mutate -> store cycle behind an in-process lock.
- Store atomically (temp file in the same directory + `os.replace`) so readers
  never observe a partially written document.
"""

from __future__ import annotations

import asyncio
import json
import os
import tempfile
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from orderdesk.errors import StorageError

Record = dict[str, Any]


class JsonCollection:
    def __init__(self, path: Path) -> None:
        self._path = path
        self._lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._path

    async def read_all(self) -> list[Record]:
        # Reads are not locked; atomic replace guarantees a complete document.
        return await asyncio.to_thread(self._load)

    @asynccontextmanager
    async def mutate(self) -> AsyncIterator[list[Record]]:
        """
        Yield the current records for in-place mutation and persist them on exit.
        If the body raises, nothing is written.
        """

        async with self._lock:
            records = await asyncio.to_thread(self._load)
            yield records
            await asyncio.to_thread(self._store, records)

    def _load(self) -> list[Record]:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except OSError as e:
            raise StorageError(f"Cannot read {self._path.name}") from e

        try:
            data = json.loads(raw)
        except ValueError as e:
            raise StorageError(f"Corrupt collection {self._path.name}") from e
        if not isinstance(data, list):
            raise StorageError(f"Corrupt collection {self._path.name}")
        return data

    def _store(self, records: list[Record]) -> None:
        directory = self._path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.", suffix=".tmp", dir=directory
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(records, fh, indent=2, ensure_ascii=False)
                    fh.flush()
                    os.fsync(fh.fileno())
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f"Cannot write {self._path.name}") from e


# --- Module Notes -----------------------------------------------------------
# Single writer per process. The lock does not coordinate across processes;
# running more than one instance against the same file is out of scope.
