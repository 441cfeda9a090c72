"""Record store protocol and the two stores shipped with the service.

The record service only depends on :class:`RecordStore`. ``InMemoryRecordStore``
keeps records in process memory; ``JsonFileRecordStore`` additionally writes
the full record set to a JSON file after every mutation.

Both stores enforce transaction id uniqueness inside ``insert``: the lookup
and the write happen under one lock (a thread lock, plus a file lock for the
JSON store), so two concurrent reports for the same transaction can never
both be stored.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Any, Protocol, runtime_checkable
from uuid import UUID

from filelock import FileLock, Timeout

from .errors import DuplicateTransactionError, StorageError
from .records import FraudRecord

logger = logging.getLogger(__name__)

QUERYABLE_FIELDS = frozenset(
    {"user_id", "transaction_id", "risk_level", "fraud_type", "is_verified"}
)
DATE_FIELDS = frozenset({"created_at", "detected_at"})

# Seconds to wait for another process holding the store file
LOCK_TIMEOUT = 10.0


@runtime_checkable
class RecordStore(Protocol):
    """Storage operations consumed by the record service."""

    def insert(self, record: FraudRecord) -> FraudRecord:
        """Store a new record.

        Raises:
            DuplicateTransactionError: If the transaction id is already stored.
        """
        ...

    def update(self, record: FraudRecord) -> FraudRecord:
        """Replace an existing record with the same id."""
        ...

    def find_by_id(self, record_id: UUID) -> FraudRecord | None:
        ...

    def find_by_field(self, field: str, value: Any) -> list[FraudRecord]:
        ...

    def find_by_date_range(
        self, field: str, start: datetime, end: datetime
    ) -> list[FraudRecord]:
        """Records whose ``field`` lies in ``[start, end]``."""
        ...

    def count(self) -> int:
        ...

    def count_by_field(self, field: str, value: Any) -> int:
        ...


def _check_field(field: str, allowed: frozenset[str]) -> None:
    if field not in allowed:
        raise ValueError(
            f"Cannot query by '{field}'. Available: {', '.join(sorted(allowed))}"
        )


class InMemoryRecordStore:
    """Thread-safe record store backed by a dict.

    Records are copied on the way in and out so callers never share
    mutable state with the store.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._records: dict[UUID, FraudRecord] = {}
        self._by_transaction: dict[str, UUID] = {}

    def insert(self, record: FraudRecord) -> FraudRecord:
        with self._synced():
            if record.transaction_id in self._by_transaction:
                raise DuplicateTransactionError(record.transaction_id)
            if record.id in self._records:
                raise StorageError(f"Record id already exists: {record.id}")
            self._records[record.id] = replace(record)
            self._by_transaction[record.transaction_id] = record.id
            try:
                self._flush()
            except StorageError:
                del self._records[record.id]
                del self._by_transaction[record.transaction_id]
                raise
        return replace(record)

    def update(self, record: FraudRecord) -> FraudRecord:
        with self._synced():
            previous = self._records.get(record.id)
            if previous is None:
                raise StorageError(f"Cannot update unknown record: {record.id}")
            if previous.transaction_id != record.transaction_id:
                raise StorageError("transaction_id is immutable")
            self._records[record.id] = replace(record)
            try:
                self._flush()
            except StorageError:
                self._records[record.id] = previous
                raise
        return replace(record)

    def find_by_id(self, record_id: UUID) -> FraudRecord | None:
        with self._synced():
            record = self._records.get(record_id)
            return replace(record) if record is not None else None

    def find_by_field(self, field: str, value: Any) -> list[FraudRecord]:
        _check_field(field, QUERYABLE_FIELDS)
        with self._synced():
            if field == "transaction_id":
                record_id = self._by_transaction.get(value)
                if record_id is None:
                    return []
                return [replace(self._records[record_id])]
            return [
                replace(r) for r in self._records.values()
                if getattr(r, field) == value
            ]

    def find_by_date_range(
        self, field: str, start: datetime, end: datetime
    ) -> list[FraudRecord]:
        _check_field(field, DATE_FIELDS)
        with self._synced():
            return [
                replace(r) for r in self._records.values()
                if start <= getattr(r, field) <= end
            ]

    def count(self) -> int:
        with self._synced():
            return len(self._records)

    def count_by_field(self, field: str, value: Any) -> int:
        _check_field(field, QUERYABLE_FIELDS)
        with self._synced():
            return sum(1 for r in self._records.values() if getattr(r, field) == value)

    @contextmanager
    def _synced(self) -> Iterator[None]:
        """Hold the store lock for the duration of one operation."""
        with self._lock:
            yield

    def _flush(self) -> None:
        """Persist the current record set. In-memory stores have nothing to do."""


class JsonFileRecordStore(InMemoryRecordStore):
    """Record store persisted to a single JSON file.

    Several processes may share one file (the HTTP server and CLI calls, for
    example). Every operation holds an inter-process lock on
    ``<path>.lock`` and reloads the file first, so uniqueness checks see
    records written by other processes and a flush never drops them. The
    file is rewritten atomically after each insert or update.
    """

    def __init__(self, path: str | Path, lock_timeout: float = LOCK_TIMEOUT) -> None:
        super().__init__()
        self.path = Path(path)
        self.lock_timeout = lock_timeout
        self._file_lock = FileLock(str(self.path.with_name(self.path.name + ".lock")))
        with self._synced():
            logger.debug("Loaded %d fraud records from %s", len(self._records), self.path)

    @contextmanager
    def _synced(self) -> Iterator[None]:
        with self._lock:
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                self._file_lock.acquire(timeout=self.lock_timeout)
            except Timeout as e:
                raise StorageError(f"Timed out waiting for the lock on {self.path}") from e
            except OSError as e:
                raise StorageError(f"Cannot lock record store {self.path}: {e}") from e
            try:
                self._reload()
                yield
            finally:
                self._file_lock.release()

    def _reload(self) -> None:
        records = self._load()
        self._records = {r.id: r for r in records}
        self._by_transaction = {r.transaction_id: r.id for r in records}

    def _load(self) -> list[FraudRecord]:
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text())
            return [FraudRecord.from_dict(item) for item in data.get("records", [])]
        except (OSError, ValueError, KeyError) as e:
            raise StorageError(f"Cannot read record store {self.path}: {e}") from e

    def _flush(self) -> None:
        data = json.dumps(
            {"records": [r.to_dict() for r in self._records.values()]}, indent=2
        )
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            # Atomic write: write to temp file, then rename
            fd, tmp_path = tempfile.mkstemp(
                dir=str(self.path.parent), suffix=".tmp", prefix=".records-"
            )
        except OSError as e:
            raise StorageError(f"Cannot write record store {self.path}: {e}") from e

        closed = False
        try:
            os.write(fd, data.encode())
            os.close(fd)
            closed = True
            os.replace(tmp_path, str(self.path))
        except OSError as e:
            if not closed:
                os.close(fd)
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise StorageError(f"Cannot write record store {self.path}: {e}") from e
